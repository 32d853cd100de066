"""
Catalog Repository

All reads and writes of catalog records go through ``BookRepository``.

Every operation returns an ``Outcome`` (see ``bookstore.services.outcomes``):
domain conditions such as a missing record or a bad field are values, not
exceptions. Store failures are caught, the session is rolled back, and the
failure comes back as STORE_UNAVAILABLE.

ISBN uniqueness is never checked with a read before the write. The insert
or update is attempted and the database's unique constraint decides, so
two concurrent creates with the same ISBN cannot both succeed.

Usage:
    repository = BookRepository(db)
    outcome = repository.create({"title": "1984", ...})
    if outcome.ok:
        book = outcome.value
"""

import functools
import logging
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookstore.models.book import ISBN_UNIQUE_CONSTRAINT, Book
from bookstore.schemas.book import BookFields, BookRecord
from bookstore.services.outcomes import FieldViolation, Outcome
from bookstore.services.validation import FIELD_NAMES, validate_book

logger = logging.getLogger(__name__)

DUPLICATE_ISBN_MESSAGE = "A book with this ISBN already exists"

# Never settable by callers, whatever spelling they use
PROTECTED_FIELDS = frozenset(
    {"id", "_id", "createdAt", "created_at", "updatedAt", "updated_at"}
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_book_id(book_id: Any) -> str | None:
    """
    Normalize a book identifier.

    Returns the 32-character hex form, or None when ``book_id`` cannot be
    an identifier of this store.
    """
    if not isinstance(book_id, str):
        return None
    try:
        return uuid.UUID(book_id).hex
    except ValueError:
        return None


def _is_isbn_conflict(exc: IntegrityError) -> bool:
    # SQLite names the column, PostgreSQL names the constraint
    message = str(exc.orig).lower()
    return ISBN_UNIQUE_CONSTRAINT in message or "books.isbn" in message


def store_operation(method: Callable[..., Outcome]) -> Callable[..., Outcome]:
    """
    Reclassify store exceptions raised by a repository method.

    IntegrityError on the ISBN constraint becomes DUPLICATE_KEY; any other
    SQLAlchemy error becomes STORE_UNAVAILABLE. The session is rolled back
    either way so it can be reused.
    """

    @functools.wraps(method)
    def wrapper(self: "BookRepository", *args: Any, **kwargs: Any) -> Outcome:
        try:
            return method(self, *args, **kwargs)
        except IntegrityError as exc:
            self.db.rollback()
            if _is_isbn_conflict(exc):
                logger.info(f"{method.__name__}: duplicate ISBN rejected by store")
                return Outcome.duplicate_key("isbn", DUPLICATE_ISBN_MESSAGE, detail=str(exc.orig))
            logger.error(f"{method.__name__}: integrity error: {exc}")
            return Outcome.store_unavailable(str(exc))
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"{method.__name__}: store error: {exc}")
            return Outcome.store_unavailable(str(exc))

    return wrapper


class BookRepository:
    """
    Create, fetch, update, delete and query catalog records.

    Args:
        db: Session of the catalog store; the caller owns its lifetime
        clock: Source of "now" for timestamps
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow) -> None:
        self.db = db
        self.clock = clock

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _find(self, book_id: Any) -> Book | None:
        normalized = parse_book_id(book_id)
        if normalized is None:
            return None
        return self.db.get(Book, normalized)

    def _newest_first(self, stmt: Select) -> list[BookRecord]:
        books = self.db.execute(stmt.order_by(Book.created_at.desc())).scalars().all()
        return [BookRecord.model_validate(book) for book in books]

    @staticmethod
    def _columns(fields: BookFields) -> dict[str, Any]:
        return {
            "title": fields.title,
            "author": fields.author,
            "isbn": fields.isbn,
            "published_year": fields.published_year,
            "genre": fields.genre.value,
            "price": fields.price,
            "in_stock": fields.in_stock,
        }

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    @store_operation
    def create(self, fields: Mapping[str, Any]) -> Outcome[BookRecord]:
        """
        Validate and insert a new book.

        Returns:
            OK with the stored record, VALIDATION_FAILED, DUPLICATE_KEY
            or STORE_UNAVAILABLE
        """
        validated = validate_book(fields)
        if isinstance(validated, list):
            return Outcome.validation_failed(validated)

        now = self.clock()
        book = Book(**self._columns(validated), created_at=now, updated_at=now)
        self.db.add(book)
        self.db.commit()
        self.db.refresh(book)

        logger.info(f"Created book {book.id} (isbn={book.isbn})")
        return Outcome.success(BookRecord.model_validate(book))

    @store_operation
    def update(self, book_id: Any, changes: Mapping[str, Any]) -> Outcome[BookRecord]:
        """
        Merge ``changes`` over an existing book and re-validate the result.

        ``id``, ``createdAt`` and ``updatedAt`` in ``changes`` are dropped;
        unknown keys are ignored. The whole merged record is validated, not
        only the changed fields.

        Returns:
            OK with the new state, NOT_FOUND, VALIDATION_FAILED,
            DUPLICATE_KEY (record left unchanged) or STORE_UNAVAILABLE
        """
        book = self._find(book_id)
        if book is None:
            return Outcome.not_found()

        merged: dict[str, Any] = {name: getattr(book, name) for name in BookFields.model_fields}
        for key, value in changes.items():
            if key in PROTECTED_FIELDS or key not in FIELD_NAMES:
                continue
            merged[FIELD_NAMES[key]] = value

        validated = validate_book(merged)
        if isinstance(validated, list):
            return Outcome.validation_failed(validated)

        for column, value in self._columns(validated).items():
            setattr(book, column, value)
        book.updated_at = self.clock()
        self.db.commit()
        self.db.refresh(book)

        logger.info(f"Updated book {book.id}")
        return Outcome.success(BookRecord.model_validate(book))

    @store_operation
    def delete(self, book_id: Any) -> Outcome[BookRecord]:
        """
        Permanently remove a book.

        Returns:
            OK with the record as it was just before deletion, NOT_FOUND
            or STORE_UNAVAILABLE
        """
        book = self._find(book_id)
        if book is None:
            return Outcome.not_found()

        snapshot = BookRecord.model_validate(book)
        self.db.delete(book)
        self.db.commit()

        logger.info(f"Deleted book {snapshot.id}")
        return Outcome.success(snapshot)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    @store_operation
    def get_by_id(self, book_id: Any) -> Outcome[BookRecord]:
        """Fetch one book. Malformed ids are NOT_FOUND, not errors."""
        book = self._find(book_id)
        if book is None:
            return Outcome.not_found()
        return Outcome.success(BookRecord.model_validate(book))

    @store_operation
    def list_all(self) -> Outcome[list[BookRecord]]:
        """Every book, newest first."""
        return Outcome.success(self._newest_first(select(Book)))

    @store_operation
    def search(self, query: str | None) -> Outcome[list[BookRecord]]:
        """
        Books whose title or author contains ``query``, ignoring case.

        The query is a literal substring: ``%`` and ``_`` match themselves.
        An empty or missing query is VALIDATION_FAILED.
        """
        if not query:
            return Outcome.validation_failed([FieldViolation("q", "Search query is required")])

        needle = query.lower()
        stmt = select(Book).where(
            or_(
                func.lower(Book.title).contains(needle, autoescape=True),
                func.lower(Book.author).contains(needle, autoescape=True),
            )
        )
        return Outcome.success(self._newest_first(stmt))

    @store_operation
    def by_genre(self, genre: str) -> Outcome[list[BookRecord]]:
        """Books of exactly this genre, newest first. Unknown genres match nothing."""
        return Outcome.success(self._newest_first(select(Book).where(Book.genre == genre)))

    @store_operation
    def in_stock(self) -> Outcome[list[BookRecord]]:
        """Books currently in stock, newest first."""
        return Outcome.success(self._newest_first(select(Book).where(Book.in_stock.is_(True))))
