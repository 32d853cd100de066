"""
SQLAlchemy Models Package

Models are SQLAlchemy ORM classes that map to database tables.
The catalog has a single table, ``books``.

Import all models here so they are registered with ``Base.metadata``
before ``CatalogStore.create_tables`` runs.
"""

from bookstore.models.book import Book

__all__ = [
    "Book",
]
