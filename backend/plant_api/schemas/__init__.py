"""
Plant API — Pydantic Request/Response Schemas
==============================================

What:  The API contract: request bodies, response bodies and error format.
How:   FastAPI validates requests against these models, serializes responses
       through them (by alias, so JSON keys match the published contract)
       and generates the OpenAPI document from them.

Schemas are separate from the ORM models so the password hash and other
internal columns can never leak into a response.
"""
