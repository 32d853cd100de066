"""
FastAPI Dependencies Module

Reusable components injected into route handlers with ``Depends()``.

Instead of writing:
    def list_books(db: Session = Depends(get_db)):

routes write:
    def list_books(books: Books):
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from bookstore.database import get_db
from bookstore.services.repository import BookRepository

DbSession = Annotated[Session, Depends(get_db)]


def get_book_repository(db: DbSession) -> BookRepository:
    """Repository bound to the request's session."""
    return BookRepository(db)


Books = Annotated[BookRepository, Depends(get_book_repository)]
