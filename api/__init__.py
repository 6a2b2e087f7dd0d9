"""
FastAPI RESTful API for the BookStore service.

This package provides:
- Book CRUD endpoints backed by MongoDB
- A Redis read-through cache with write invalidation
- Health reporting for the database and cache
"""
