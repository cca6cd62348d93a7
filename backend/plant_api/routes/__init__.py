"""
Plant API — Routes Package
===========================

Route Inventory:
    - auth.py:        POST /auth/register, POST /auth/login, GET /auth/me
    - plants.py:      GET|POST /plants, GET|PUT|DELETE /plants/{id}
    - categories.py:  GET|POST /categories, GET|PUT|DELETE /categories/{id}
    - upload.py:      POST /api/upload-image
    - health.py:      GET /, GET /health

Routes stay thin: pull data out of the request, call a service, pick the
status code. Errors are raised as PlantAPIError subclasses and rendered by
the global handlers in main.py.
"""
