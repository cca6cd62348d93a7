"""
Plant API — Services Package
=============================

Business logic, kept free of HTTP concerns so it can be tested directly.

Service Inventory:
    - password_hasher.py:  bcrypt hashing through passlib
    - token_service.py:    signed, expiring bearer tokens (PyJWT)
    - auth_service.py:     registration and login
    - category_service.py: category CRUD
    - plant_service.py:    plant CRUD with the category join
    - media_base.py:       MediaHost interface + UploadResult
    - cloudinary_host.py:  Cloudinary implementation of MediaHost
    - upload_service.py:   validation and relay of image uploads

Instances are created by `create_app()` and stored on `app.state`.
"""
