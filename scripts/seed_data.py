#!/usr/bin/env python3
"""
Database Seed Script

Populates the catalog with sample books for development.

USAGE:
    # From the project root with the package installed
    python scripts/seed_data.py

    # Keep existing books
    python scripts/seed_data.py --keep

This script:
1. Opens the catalog store using app settings
2. Creates the books table if it does not exist
3. Clears existing books (unless --keep)
4. Inserts sample books through the repository, so every record passes
   the same validation as API writes
"""

import sys

from sqlalchemy import delete

from bookstore.config import get_settings
from bookstore.database import CatalogStore
from bookstore.models import Book
from bookstore.services import BookRepository

SAMPLE_BOOKS = [
    {
        "title": "War and Peace",
        "author": "Leo Tolstoy",
        "isbn": "978-0-14-044793-4",
        "publishedYear": 1869,
        "genre": "Fiction",
        "price": 14.50,
    },
    {
        "title": "A Brief History of Time",
        "author": "Stephen Hawking",
        "isbn": "978-0-553-38016-3",
        "publishedYear": 1988,
        "genre": "Science",
        "price": 18.99,
    },
    {
        "title": "The Pragmatic Programmer",
        "author": "Andrew Hunt",
        "isbn": "978-0-13-595705-9",
        "publishedYear": 2019,
        "genre": "Technology",
        "price": 42.00,
    },
    {
        "title": "Steve Jobs",
        "author": "Walter Isaacson",
        "isbn": "978-1-4516-4853-9",
        "publishedYear": 2011,
        "genre": "Biography",
        "price": 21.00,
        "inStock": False,
    },
    {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "isbn": "0-261-10221-4",
        "publishedYear": 1937,
        "genre": "Fantasy",
        "price": 9.99,
    },
    {
        "title": "Murder on the Orient Express",
        "author": "Agatha Christie",
        "isbn": "978-0-06-269366-2",
        "publishedYear": 1934,
        "genre": "Mystery",
        "price": 11.25,
    },
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "isbn": "978-0-14-143951-8",
        "publishedYear": 1813,
        "genre": "Romance",
        "price": 7.99,
    },
    {
        "title": "SPQR: A History of Ancient Rome",
        "author": "Mary Beard",
        "isbn": "978-1-63149-222-8",
        "publishedYear": 2015,
        "genre": "History",
        "price": 19.95,
        "inStock": False,
    },
]


def seed_database(clear_existing: bool = True) -> int:
    """
    Seed the catalog.

    Args:
        clear_existing: If True, deletes all books before seeding.

    Returns:
        Number of books created
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    settings = get_settings()
    store = CatalogStore.from_settings(settings)
    store.open()

    try:
        store.create_tables()

        with store.session() as db:
            if clear_existing:
                print("Clearing existing books...")
                db.execute(delete(Book))
                db.commit()

            repository = BookRepository(db)
            created = 0
            for data in SAMPLE_BOOKS:
                outcome = repository.create(data)
                if outcome.ok:
                    created += 1
                    print(f"  + {data['title']}")
                else:
                    reasons = ", ".join(v.message for v in outcome.violations) or outcome.detail
                    print(f"  ! {data['title']}: {outcome.kind.value} ({reasons})")

        print("=" * 60)
        print(f"Database seeding completed: {created} books created.")
        print("=" * 60)
        print(f"\nAPI documentation at http://localhost:{settings.port}/docs")
        return created
    finally:
        store.close()


if __name__ == "__main__":
    seed_database(clear_existing="--keep" not in sys.argv[1:])
