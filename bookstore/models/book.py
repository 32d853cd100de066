"""
Book Model

The only persisted entity of the catalog.

Constraint checking does not live here: the model only describes the
table. Field rules are enforced by ``bookstore.services.validation``
before any write, and ISBN uniqueness is enforced by the database through
the ``uq_books_isbn`` constraint so concurrent writers cannot both win.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, Integer, String, TypeDecorator, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base

ISBN_UNIQUE_CONSTRAINT = "uq_books_isbn"


def generate_book_id() -> str:
    """Random identifier; never reused after a record is deleted."""
    return uuid.uuid4().hex


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp that always comes back in UTC.

    SQLite has no timezone storage and returns naive values; they are
    stored as UTC and read back with the UTC offset attached, so the
    wire format does not depend on the backend.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    @staticmethod
    def _as_utc(value: datetime | None) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_bind_param(self, value, dialect):
        return self._as_utc(value)

    def process_result_value(self, value, dialect):
        return self._as_utc(value)


class Book(Base):
    """
    Book model representing a catalog record.

    Table: books

    Indexes:
    - Primary key on id
    - isbn: Unique constraint
    - title, author: For search
    - genre, in_stock: For filtered listings
    - created_at: For newest-first ordering

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            isbn="9780451524935",
            published_year=1949,
            genre="Fiction",
            price=12.99,
        )
    """

    __tablename__ = "books"
    __table_args__ = (
        UniqueConstraint("isbn", name=ISBN_UNIQUE_CONSTRAINT),
    )

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=generate_book_id,
    )

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(200),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name"
    )

    # Stored without hyphens so differently formatted ISBNs collide
    isbn: Mapped[str] = mapped_column(
        String(13),
        nullable=False,
        comment="ISBN-10 or ISBN-13, digits only"
    )

    published_year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Year of publication"
    )

    genre: Mapped[str] = mapped_column(
        String(32),
        index=True,
        nullable=False,
        comment="Catalog genre"
    )

    price: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Book price"
    )

    in_stock: Mapped[bool] = mapped_column(
        Boolean,
        index=True,
        nullable=False,
        default=True,
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    # Set by the repository from its clock, not by the database
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        index=True,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"Book(id='{self.id}', title='{self.title}', isbn='{self.isbn}')"
