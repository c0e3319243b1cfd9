"""
FastAPI RESTful API for the Bookshelf Review service.

This module provides a REST API for:
- Book catalog browsing and search
- User registration and login
- Token-based authentication
- Per-user book reviews
"""
