"""
Book Validation Service

``validate_book`` checks a candidate set of fields against ``BookFields``
and returns either the normalized fields or every field violation found.

No database is involved: ISBN uniqueness is the store's job and is
reported by the repository as a duplicate key.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from bookstore.schemas.book import BookFields
from bookstore.services.outcomes import FieldViolation

# Python attribute name and wire alias both map to the wire name
WIRE_NAMES: dict[str, str] = {}
for _name, _field in BookFields.model_fields.items():
    _wire = _field.serialization_alias or _name
    WIRE_NAMES[_name] = _wire
    WIRE_NAMES[_wire] = _wire

# Wire name -> Python attribute name
FIELD_NAMES: dict[str, str] = {}
for _name, _field in BookFields.model_fields.items():
    FIELD_NAMES[_name] = _name
    FIELD_NAMES[_field.serialization_alias or _name] = _name

REQUIRED_MESSAGES = {
    "title": "Book title is required",
    "author": "Author name is required",
    "isbn": "ISBN is required",
    "publishedYear": "Published year is required",
    "genre": "Genre is required",
    "price": "Price is required",
}

CONSTRAINT_MESSAGES = {
    ("title", "string_too_short"): "Title must be at least 1 character long",
    ("title", "string_too_long"): "Title cannot exceed 200 characters",
    ("author", "string_too_short"): "Author name must be at least 2 characters long",
    ("publishedYear", "greater_than_equal"): "Published year must be after 1000",
    ("price", "greater_than_equal"): "Price cannot be negative",
}


def _violation(error: Mapping[str, Any]) -> FieldViolation:
    loc = error.get("loc") or ()
    field = WIRE_NAMES.get(str(loc[0]), str(loc[0])) if loc else "book"
    error_type = error["type"]

    if field in REQUIRED_MESSAGES and (
        error_type == "missing" or error.get("input", ...) is None
    ):
        message = REQUIRED_MESSAGES[field]
    elif (field, error_type) in CONSTRAINT_MESSAGES:
        message = CONSTRAINT_MESSAGES[(field, error_type)]
    elif error_type == "enum":
        message = f"{error.get('input')} is not a valid genre"
    elif error_type == "value_error" and "error" in error.get("ctx", {}):
        message = str(error["ctx"]["error"])
    else:
        message = error["msg"]

    return FieldViolation(field=field, message=message)


def validate_book(candidate: Mapping[str, Any]) -> BookFields | list[FieldViolation]:
    """
    Validate a candidate book.

    Args:
        candidate: Field values keyed by wire name or Python attribute name

    Returns:
        The validated ``BookFields`` (trimmed strings, digits-only ISBN,
        ``in_stock`` defaulted), or a non-empty list of violations
    """
    try:
        return BookFields.model_validate(dict(candidate))
    except ValidationError as exc:
        return [_violation(error) for error in exc.errors()]
