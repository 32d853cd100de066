"""
API Routers Package

FastAPI routers that handle API endpoints. Each router is registered in
main.py under the versioned prefix.

Router Structure:
- books.py: /api/v1/books/* endpoints
"""

from bookstore.routers.books import router as books_router

__all__ = [
    "books_router",
]
