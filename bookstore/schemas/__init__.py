"""
Pydantic Schemas Package

Pydantic models for validation and for the API's response shapes.

Schemas are kept separate from the SQLAlchemy models so field rules can be
checked without a database, and so the wire format can evolve
independently of the table layout.
"""

from bookstore.schemas.book import (
    BookEnvelope,
    BookFields,
    BookListEnvelope,
    BookRecord,
    ErrorDetail,
    ErrorEnvelope,
    Genre,
)

__all__ = [
    "BookFields",
    "BookRecord",
    "BookEnvelope",
    "BookListEnvelope",
    "ErrorDetail",
    "ErrorEnvelope",
    "Genre",
]
