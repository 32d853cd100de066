"""
Books Router

HTTP endpoints for the catalog. Handlers stay thin: they pass typed
arguments to ``BookRepository`` and turn the returned ``Outcome`` into a
response envelope (success) or an error (``bookstore.errors.unwrap``).

Request bodies are taken as plain JSON objects. Field rules live in one
place, the repository's validation step, so a bad field is a 400 with
per-field messages rather than FastAPI's 422.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Path, Query, status

from bookstore.dependencies import Books
from bookstore.errors import unwrap
from bookstore.schemas import BookEnvelope, BookListEnvelope, ErrorEnvelope


router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        500: {"model": ErrorEnvelope, "description": "Store unavailable"},
    },
)

BookId = Annotated[str, Path(description="Book identifier")]
BookPayload = Annotated[
    dict[str, Any],
    Body(
        examples=[
            {
                "title": "War and Peace",
                "author": "Leo Tolstoy",
                "isbn": "978-0-14-044793-4",
                "publishedYear": 1869,
                "genre": "Fiction",
                "price": 14.5,
                "inStock": True,
            }
        ],
    ),
]


def list_envelope(message: str, books: list) -> BookListEnvelope:
    return BookListEnvelope(message=message, count=len(books), data=books)


# =============================================================================
# Collection Endpoints
# =============================================================================
@router.post(
    "/",
    response_model=BookEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a book",
    responses={
        400: {"model": ErrorEnvelope, "description": "Validation failed"},
        409: {"model": ErrorEnvelope, "description": "ISBN already exists"},
    },
)
def create_book(payload: BookPayload, books: Books) -> BookEnvelope:
    """
    Create a new book.

    Every field except ``inStock`` is required. ``id``, ``createdAt`` and
    ``updatedAt`` are assigned by the server and ignored if sent.
    """
    book = unwrap(books.create(payload))
    return BookEnvelope(message="Book created successfully", data=book)


@router.get(
    "/",
    response_model=BookListEnvelope,
    summary="List all books",
    description="Every book in the catalog, newest first.",
)
def list_books(books: Books) -> BookListEnvelope:
    return list_envelope("Books retrieved successfully", unwrap(books.list_all()))


@router.get(
    "/search",
    response_model=BookListEnvelope,
    summary="Search books",
    responses={400: {"model": ErrorEnvelope, "description": "Missing query"}},
)
def search_books(
    books: Books,
    q: Annotated[
        str | None,
        Query(description="Case-insensitive text to find in title or author"),
    ] = None,
) -> BookListEnvelope:
    """
    Books whose title or author contains ``q``, newest first.

    Examples:
        GET /api/v1/books/search?q=tolstoy
    """
    return list_envelope("Search completed successfully", unwrap(books.search(q)))


@router.get(
    "/stock/available",
    response_model=BookListEnvelope,
    summary="List in-stock books",
)
def list_in_stock_books(books: Books) -> BookListEnvelope:
    return list_envelope("In-stock books retrieved successfully", unwrap(books.in_stock()))


@router.get(
    "/genre/{genre}",
    response_model=BookListEnvelope,
    summary="List books of a genre",
    description="Exact, case-sensitive genre match. Unknown genres return an empty list.",
)
def list_books_by_genre(
    genre: Annotated[str, Path(description="Genre name, e.g. Fiction")],
    books: Books,
) -> BookListEnvelope:
    return list_envelope("Books retrieved successfully", unwrap(books.by_genre(genre)))


# =============================================================================
# Item Endpoints
# =============================================================================
@router.get(
    "/{book_id}",
    response_model=BookEnvelope,
    summary="Get a book by ID",
    responses={404: {"model": ErrorEnvelope, "description": "Book not found"}},
)
def get_book(book_id: BookId, books: Books) -> BookEnvelope:
    book = unwrap(books.get_by_id(book_id))
    return BookEnvelope(message="Book retrieved successfully", data=book)


@router.put(
    "/{book_id}",
    response_model=BookEnvelope,
    summary="Update a book",
    responses={
        400: {"model": ErrorEnvelope, "description": "Validation failed"},
        404: {"model": ErrorEnvelope, "description": "Book not found"},
        409: {"model": ErrorEnvelope, "description": "ISBN already exists"},
    },
)
def update_book(book_id: BookId, payload: BookPayload, books: Books) -> BookEnvelope:
    """
    Update an existing book.

    PATCH-like semantics: only the sent fields change, then the whole
    record is validated again.
    """
    book = unwrap(books.update(book_id, payload))
    return BookEnvelope(message="Book updated successfully", data=book)


@router.delete(
    "/{book_id}",
    response_model=BookEnvelope,
    summary="Delete a book",
    description="Permanently delete a book. The deleted record is returned.",
    responses={404: {"model": ErrorEnvelope, "description": "Book not found"}},
)
def delete_book(book_id: BookId, books: Books) -> BookEnvelope:
    book = unwrap(books.delete(book_id))
    return BookEnvelope(message="Book deleted successfully", data=book)
