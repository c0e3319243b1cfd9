"""
Route definitions for the Bookshelf Review API.

Public endpoints:
- GET  /                 : all books keyed by ISBN
- GET  /isbn/{isbn}      : one book
- GET  /author/{author}  : books by author (exact, case-insensitive)
- GET  /title/{title}    : books by title (substring, case-insensitive)
- GET  /review/{isbn}    : reviews of a book
- POST /register         : create a user
- POST /customer/login   : obtain an access token

Authenticated endpoints (``Authorization: Bearer <token>``):
- PUT    /customer/auth/review/{isbn}?review=... : add or modify own review
- DELETE /customer/auth/review/{isbn}            : delete own review
"""

import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request, status

from api.auth import create_access_token, get_app_config, get_current_username
from api.models import (
    BookResponse, CredentialsRequest, HealthResponse,
    LoginResponse, MessageResponse
)
from catalog.errors import AuthError
from catalog.store import BookStore, UserStore
from utilities.config import AppConfig
from utilities.logger import AuditLogger

logger = structlog.get_logger(__name__)
audit = AuditLogger("api.routes")

router = APIRouter()


def get_book_store(request: Request) -> BookStore:
    return request.app.state.book_store


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


# Health check endpoint
@router.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(
    request: Request,
    books: BookStore = Depends(get_book_store),
    users: UserStore = Depends(get_user_store),
):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=request.app.version,
        books=books.count(),
        users=users.count(),
    )


# Books endpoints
@router.get("/", response_model=Dict[str, BookResponse], tags=["Books"])
def list_books(books: BookStore = Depends(get_book_store)):
    """Get every book in the catalog, keyed by ISBN."""
    return {isbn: BookResponse.from_book(book) for isbn, book in books.list_books().items()}


@router.get("/isbn/{isbn}", response_model=BookResponse, tags=["Books"])
def get_book_by_isbn(isbn: str, books: BookStore = Depends(get_book_store)):
    """
    Get a single book by ISBN.

    - **isbn**: Book ISBN
    """
    return BookResponse.from_book(books.get_book(isbn))


@router.get("/author/{author}", response_model=List[BookResponse], tags=["Books"])
def get_books_by_author(author: str, books: BookStore = Depends(get_book_store)):
    """
    Get books by author.

    - **author**: Full author name, compared without regard to case
    """
    return [BookResponse.from_book(book) for book in books.find_by_author(author)]


@router.get("/title/{title}", response_model=List[BookResponse], tags=["Books"])
def get_books_by_title(title: str, books: BookStore = Depends(get_book_store)):
    """
    Get books whose title contains the given text.

    - **title**: Part of the title, compared without regard to case
    """
    return [BookResponse.from_book(book) for book in books.find_by_title(title)]


@router.get("/review/{isbn}", response_model=Dict[str, str], tags=["Reviews"])
def get_book_reviews(isbn: str, books: BookStore = Depends(get_book_store)):
    """Get the reviews of a book keyed by username."""
    return books.get_reviews(isbn)


# Account endpoints
@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Accounts"],
)
def register(body: CredentialsRequest, users: UserStore = Depends(get_user_store)):
    """Register a new user."""
    user = users.register(body.username, body.password)
    audit.bind_context(username=user.username).log_registration()
    return MessageResponse(message="User registered successfully")


@router.post("/customer/login", response_model=LoginResponse, tags=["Accounts"])
def login(
    body: CredentialsRequest,
    users: UserStore = Depends(get_user_store),
    config: AppConfig = Depends(get_app_config),
):
    """Log in and receive an access token valid for the configured lifetime."""
    try:
        user = users.authenticate(body.username, body.password)
    except AuthError:
        audit.bind_context(username=body.username).log_login(success=False)
        raise

    audit.bind_context(username=user.username).log_login(success=True)
    return LoginResponse(
        message="Login successful",
        token=create_access_token(user.username, config),
    )


# Review endpoints
@router.put("/customer/auth/review/{isbn}", response_model=MessageResponse, tags=["Reviews"])
def put_review(
    isbn: str,
    review: Optional[str] = Query(None, description="Review text"),
    username: str = Depends(get_current_username),
    books: BookStore = Depends(get_book_store),
):
    """
    Add or modify the caller's review of a book.

    - **isbn**: Book ISBN
    - **review**: Review text; replaces any earlier review by the same user
    """
    created = books.upsert_review(isbn, username, review)
    audit.bind_context(username=username, isbn=isbn).log_review_saved(created)
    return MessageResponse(message="Review added/modified successfully")


@router.delete("/customer/auth/review/{isbn}", response_model=MessageResponse, tags=["Reviews"])
def delete_review(
    isbn: str,
    username: str = Depends(get_current_username),
    books: BookStore = Depends(get_book_store),
    config: AppConfig = Depends(get_app_config),
):
    """
    Delete the caller's review of a book.

    Reviews written by other users are never affected.
    """
    books.delete_review(isbn, username)
    audit.bind_context(username=username, isbn=isbn).log_review_deleted()

    if config.review_delete_delay_seconds > 0:
        logger.debug("Applying review delete delay", seconds=config.review_delete_delay_seconds)
        time.sleep(config.review_delete_delay_seconds)

    return MessageResponse(message="Review deleted successfully")
