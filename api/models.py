"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from catalog.models import Book


class BookResponse(BaseModel):
    """Book response model for API."""
    isbn: str = Field(..., description="Book ISBN")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    reviews: Dict[str, str] = Field(default_factory=dict, description="Review text keyed by username")

    @classmethod
    def from_book(cls, book: Book) -> "BookResponse":
        return cls(isbn=book.isbn, title=book.title, author=book.author, reviews=dict(book.reviews))


class CredentialsRequest(BaseModel):
    """
    Username and password body for registration and login.

    Both fields are optional at the schema level so a missing field is
    reported as a 400 by the store rather than a schema error.
    """
    username: Optional[str] = Field(None, description="Username")
    password: Optional[str] = Field(None, description="Password")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str = Field(..., description="Outcome message")


class LoginResponse(BaseModel):
    """Successful login response."""
    message: str = Field(..., description="Outcome message")
    token: str = Field(..., description="Signed access token")
    token_type: str = Field("bearer", description="Token type for the Authorization header")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    books: int = Field(..., description="Number of books in the catalog")
    users: int = Field(..., description="Number of registered users")
