"""
Test Suite for the Bookstore Catalog API

Test Organization:
- conftest.py: Shared fixtures (stores, repository, client, sample data)
- test_validation.py: Field rules, no database involved
- test_repository.py: Repository operations against SQLite
- test_books.py: HTTP endpoints and status mapping

Running Tests:
    pytest
    pytest tests/test_repository.py -v
"""
