"""
Book Pydantic Schemas

- ``BookFields``: the constraint definition of a valid book. It is the
  single source of truth for field rules and does not depend on the ORM
  or on a database connection.
- ``BookRecord``: a persisted book as returned by the repository.
- Envelopes: the JSON shapes the HTTP layer sends back.

Wire names are camelCase (``publishedYear``, ``inStock``, ``createdAt``);
Python attributes are snake_case. Input accepts either spelling.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

ISBN_PATTERN = re.compile(r"[0-9]{10}|[0-9]{13}")

MIN_PUBLISHED_YEAR = 1000


class Genre(str, Enum):
    """Catalog genres. Matching is exact and case-sensitive."""

    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    SCIENCE = "Science"
    TECHNOLOGY = "Technology"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    FANTASY = "Fantasy"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    THRILLER = "Thriller"
    OTHER = "Other"


def normalize_isbn(value: str) -> str:
    """Strip surrounding whitespace and literal hyphens."""
    return value.strip().replace("-", "")


def is_valid_isbn(value: str) -> bool:
    """
    Check the ISBN shape: 10 or 13 digits once hyphens are removed.

    No checksum is computed, so ``1234567890`` is accepted.
    """
    return ISBN_PATTERN.fullmatch(normalize_isbn(value)) is not None


class BookFields(BaseModel):
    """
    The caller-settable fields of a book, with their constraints.

    Identifiers and timestamps are not part of this model; they are owned
    by the repository and unknown keys are ignored.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",
    )

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Book title",
        examples=["War and Peace"],
    )

    author: str = Field(
        ...,
        min_length=2,
        description="Author name",
        examples=["Leo Tolstoy"],
    )

    isbn: str = Field(
        ...,
        description="ISBN-10 or ISBN-13, hyphens allowed",
        examples=["978-0-13-468599-1", "0451524934"],
    )

    published_year: int = Field(
        ...,
        ge=MIN_PUBLISHED_YEAR,
        validation_alias=AliasChoices("publishedYear", "published_year"),
        serialization_alias="publishedYear",
        description="Year of publication, not in the future",
        examples=[1869],
    )

    genre: Genre = Field(
        ...,
        description="One of the catalog genres",
        examples=["Fiction"],
    )

    price: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Book price",
        examples=[12.99],
    )

    in_stock: bool = Field(
        default=True,
        validation_alias=AliasChoices("inStock", "in_stock"),
        serialization_alias="inStock",
        description="Whether the book is available",
    )

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str) -> str:
        """Accept 10 or 13 digits with optional hyphens; store digits only."""
        if not is_valid_isbn(v):
            raise ValueError("Please provide a valid ISBN-10 or ISBN-13")
        return normalize_isbn(v)

    @field_validator("published_year")
    @classmethod
    def not_in_future(cls, v: int) -> int:
        """The upper bound is the current year at the time of validation."""
        if v > date.today().year:
            raise ValueError("Published year cannot be in the future")
        return v

    @field_validator("genre", mode="before")
    @classmethod
    def strip_genre(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("price", mode="before")
    @classmethod
    def reject_boolean_price(cls, v: Any) -> Any:
        # bool is an int subclass; lax float parsing would turn true into 1.0
        if isinstance(v, bool):
            raise ValueError("Price must be a number")
        return v


class BookRecord(BaseModel):
    """
    A persisted book.

    Built from ORM rows with ``BookRecord.model_validate(book)``; the
    values are detached from the session, so a record survives the row
    being deleted.
    """

    id: str = Field(..., description="Unique identifier")
    title: str
    author: str
    isbn: str
    published_year: int = Field(
        ...,
        validation_alias=AliasChoices("published_year", "publishedYear"),
        serialization_alias="publishedYear",
    )
    genre: str
    price: float
    in_stock: bool = Field(
        ...,
        validation_alias=AliasChoices("in_stock", "inStock"),
        serialization_alias="inStock",
    )
    created_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
        description="When the book was created",
    )
    updated_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
        description="When the book was last updated",
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "3f2b8c1e9d7a4e6b8c0d1f2a3b4c5d6e",
                "title": "War and Peace",
                "author": "Leo Tolstoy",
                "isbn": "9780140447934",
                "publishedYear": 1869,
                "genre": "Fiction",
                "price": 14.5,
                "inStock": True,
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": "2024-01-15T10:30:00Z",
            }
        },
    )


# =============================================================================
# Response Envelopes
# =============================================================================
class BookEnvelope(BaseModel):
    """Single-record response."""

    success: bool = True
    message: str
    data: BookRecord


class BookListEnvelope(BaseModel):
    """Multi-record response. Results are never paginated."""

    success: bool = True
    message: str
    count: int = Field(..., ge=0)
    data: list[BookRecord]


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorEnvelope(BaseModel):
    """
    Error response.

    ``error`` carries internal store text and is only filled in debug mode.
    """

    success: bool = False
    message: str
    errors: list[ErrorDetail] = Field(default_factory=list)
    error: str | None = None
