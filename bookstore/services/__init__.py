"""
Services Package

Business logic kept apart from HTTP handling so it can be tested without
a running application:

- outcomes.py: Tagged results returned by the repository
- validation.py: Field rules for a book, usable without a database
- repository.py: Create/read/update/delete and query operations on books
"""

from bookstore.services.outcomes import FieldViolation, Outcome, OutcomeKind
from bookstore.services.repository import BookRepository
from bookstore.services.validation import validate_book

__all__ = [
    "BookRepository",
    "FieldViolation",
    "Outcome",
    "OutcomeKind",
    "validate_book",
]
