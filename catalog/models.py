"""
Pydantic models for catalog data.
Implements the Book and User schemas held by the in-memory stores.
"""

from typing import Dict

from pydantic import BaseModel, Field, validator


class Book(BaseModel):
    """
    Book entry with its embedded reviews.

    Reviews are keyed by username, so a user holds at most one review per book.
    """
    isbn: str = Field(..., min_length=1, description="Catalog identifier of the book")
    title: str = Field(..., description="Title of the book")
    author: str = Field(..., description="Author of the book")
    reviews: Dict[str, str] = Field(default_factory=dict, description="Review text keyed by username")

    @validator('isbn')
    def validate_isbn(cls, v):
        """Ensure the ISBN is not blank."""
        if not v.strip():
            raise ValueError('ISBN cannot be blank')
        return v.strip()

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "isbn": "1",
                "title": "Things Fall Apart",
                "author": "Chinua Achebe",
                "reviews": {"alice": "A classic."}
            }
        }


class User(BaseModel):
    """Registered user. Only the salted password hash is kept."""
    username: str = Field(..., min_length=1, description="Unique username")
    password_hash: str = Field(..., description="Salted PBKDF2 hash of the password")
