"""
In-memory stores for books, reviews and users.
Handles catalog lookups, per-user review mutations and credential checks.
"""

import threading
from typing import Dict, Iterable, List, Optional

import structlog

from .errors import (
    DuplicateUserError, InvalidCredentialsError, MissingFieldError,
    NotFoundError, OwnershipError
)
from .models import Book, User
from .passwords import hash_password, verify_password
from .seed import seed_books

logger = structlog.get_logger(__name__)


def _norm(s: Optional[str]) -> str:
    """Lowercase and strip a string for case-insensitive comparison."""
    return (s or "").strip().lower()


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class BookStore:
    """
    Thread-safe catalog of books with embedded reviews.

    Readers always receive deep copies, so callers never hold references to
    the store's mutable state.
    """

    def __init__(self, books: Optional[Iterable[Book]] = None):
        """
        Initialize the book store.

        Args:
            books: Initial catalog; the seed catalog when omitted
        """
        self._lock = threading.RLock()
        self._books: Dict[str, Book] = {}
        for book in (seed_books() if books is None else books):
            self._books[book.isbn] = book.model_copy(deep=True)
        logger.debug("Book store initialized", books=len(self._books))

    def _get(self, isbn: str) -> Book:
        book = self._books.get(isbn)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    def count(self) -> int:
        with self._lock:
            return len(self._books)

    def list_books(self) -> Dict[str, Book]:
        """Return every book keyed by ISBN, in catalog order."""
        with self._lock:
            return {isbn: book.model_copy(deep=True) for isbn, book in self._books.items()}

    def get_book(self, isbn: str) -> Book:
        """
        Get a book by exact ISBN.

        Raises:
            NotFoundError: If no book has this ISBN
        """
        with self._lock:
            return self._get(isbn).model_copy(deep=True)

    def find_by_author(self, author: str) -> List[Book]:
        """
        Get the books whose author matches exactly, ignoring case.

        Raises:
            NotFoundError: If no book matches
        """
        wanted = _norm(author)
        with self._lock:
            matches = [b.model_copy(deep=True) for b in self._books.values() if _norm(b.author) == wanted]
        if not matches:
            raise NotFoundError("No books found for this author")
        return matches

    def find_by_title(self, title: str) -> List[Book]:
        """
        Get the books whose title contains ``title``, ignoring case.

        Raises:
            NotFoundError: If no book matches
        """
        wanted = _norm(title)
        with self._lock:
            matches = [b.model_copy(deep=True) for b in self._books.values() if wanted in _norm(b.title)]
        if not matches:
            raise NotFoundError("No books found with this title")
        return matches

    def get_reviews(self, isbn: str) -> Dict[str, str]:
        """Return the reviews of a book keyed by username."""
        with self._lock:
            return dict(self._get(isbn).reviews)

    def upsert_review(self, isbn: str, username: str, review: Optional[str]) -> bool:
        """
        Add or replace ``username``'s review of a book.

        Args:
            isbn: Book ISBN
            username: Authenticated author of the review
            review: Review text

        Returns:
            True if the review was created, False if an existing one was replaced

        Raises:
            NotFoundError: If the book does not exist
            MissingFieldError: If the review text is blank
        """
        with self._lock:
            book = self._get(isbn)
            if _is_blank(review):
                raise MissingFieldError("Review text is required")
            created = username not in book.reviews
            book.reviews[username] = review
        logger.debug("Review stored", isbn=isbn, username=username, created=created)
        return created

    def delete_review(self, isbn: str, username: str) -> None:
        """
        Remove ``username``'s review of a book.

        Only the caller's own entry is looked up, so reviews written by other
        users are never touched.

        Raises:
            NotFoundError: If the book or the user's review does not exist
        """
        with self._lock:
            book = self._get(isbn)
            if username not in book.reviews:
                raise NotFoundError("No review found for this user")
            del book.reviews[username]
        logger.debug("Review deleted", isbn=isbn, username=username)

    def upsert_review_of(self, isbn: str, owner_username: str, acting_username: str, review: Optional[str]) -> bool:
        """
        Add or replace the review owned by ``owner_username`` on behalf of ``acting_username``.

        Raises:
            OwnershipError: If the acting user is not the owner
        """
        if owner_username != acting_username:
            raise OwnershipError("Review belongs to another user")
        return self.upsert_review(isbn, owner_username, review)

    def delete_review_of(self, isbn: str, owner_username: str, acting_username: str) -> None:
        """
        Delete the review owned by ``owner_username`` on behalf of ``acting_username``.

        Raises:
            OwnershipError: If the acting user is not the owner
        """
        if owner_username != acting_username:
            raise OwnershipError("Review belongs to another user")
        self.delete_review(isbn, owner_username)


class UserStore:
    """Thread-safe registry of users and their password hashes."""

    def __init__(self, password_hash_iterations: int):
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self.password_hash_iterations = password_hash_iterations

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def register(self, username: Optional[str], password: Optional[str]) -> User:
        """
        Register a new user.

        Args:
            username: Requested username; surrounding whitespace is dropped
            password: Clear-text password, stored only as a salted hash

        Returns:
            The created user

        Raises:
            MissingFieldError: If either field is blank
            DuplicateUserError: If the username is taken
        """
        if _is_blank(username) or _is_blank(password):
            raise MissingFieldError("Username and password are required")
        username = username.strip()

        password_hash = hash_password(password, self.password_hash_iterations)
        with self._lock:
            if username in self._users:
                raise DuplicateUserError("Username already exists")
            user = User(username=username, password_hash=password_hash)
            self._users[username] = user
        return user.model_copy()

    def authenticate(self, username: Optional[str], password: Optional[str]) -> User:
        """
        Check a username and password.

        Raises:
            MissingFieldError: If either field is blank
            InvalidCredentialsError: If the user is unknown or the password is wrong
        """
        if _is_blank(username) or _is_blank(password):
            raise MissingFieldError("Username and password are required")
        username = username.strip()

        with self._lock:
            user = self._users.get(username)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials")
        return user.model_copy()
