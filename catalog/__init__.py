"""
Catalog package for the Bookshelf Review API.

This package contains:
- Book and user domain models
- The seed catalog
- In-memory book and user stores
- Password hashing helpers
- Domain error types
"""

__version__ = "1.0.0"
__author__ = "Bookshelf Review API"
