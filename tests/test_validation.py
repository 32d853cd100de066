"""
Tests for Book Validation

validate_book runs without a database, so none of these tests use the
store fixtures.
"""

from datetime import date

import pytest

from bookstore.schemas.book import BookFields, Genre, is_valid_isbn
from bookstore.services.outcomes import FieldViolation
from bookstore.services.validation import validate_book


def violations_by_field(result) -> dict[str, str]:
    assert isinstance(result, list), f"expected violations, got {result!r}"
    return {violation.field: violation.message for violation in result}


class TestValidBook:
    """A complete, well-formed candidate."""

    def test_returns_normalized_fields(self, book_data):
        result = validate_book(book_data(title="  War and Peace  ", author=" Leo Tolstoy "))

        assert isinstance(result, BookFields)
        assert result.title == "War and Peace"
        assert result.author == "Leo Tolstoy"
        assert result.isbn == "9780140447934"
        assert result.published_year == 1869
        assert result.genre is Genre.FICTION

    def test_in_stock_defaults_to_true(self, book_data):
        data = book_data()
        del data["inStock"]

        result = validate_book(data)

        assert isinstance(result, BookFields)
        assert result.in_stock is True

    def test_accepts_python_attribute_names(self, book_data):
        data = book_data()
        data["published_year"] = data.pop("publishedYear")
        data["in_stock"] = data.pop("inStock")

        result = validate_book(data)

        assert isinstance(result, BookFields)
        assert result.published_year == 1869

    def test_ignores_unknown_and_server_owned_keys(self, book_data):
        result = validate_book(book_data(id="abc", createdAt="yesterday", color="blue"))

        assert isinstance(result, BookFields)
        assert "id" not in result.model_dump()

    def test_free_book_is_valid(self, book_data):
        assert isinstance(validate_book(book_data(price=0)), BookFields)


class TestRequiredFields:

    @pytest.mark.parametrize(
        "field,message",
        [
            ("title", "Book title is required"),
            ("author", "Author name is required"),
            ("isbn", "ISBN is required"),
            ("publishedYear", "Published year is required"),
            ("genre", "Genre is required"),
            ("price", "Price is required"),
        ],
    )
    def test_missing_field(self, book_data, field, message):
        data = book_data()
        del data[field]

        errors = violations_by_field(validate_book(data))

        assert errors == {field: message}

    def test_null_counts_as_missing(self, book_data):
        errors = violations_by_field(validate_book(book_data(title=None)))

        assert errors == {"title": "Book title is required"}

    def test_reports_every_violation(self):
        errors = violations_by_field(validate_book({}))

        assert set(errors) == {"title", "author", "isbn", "publishedYear", "genre", "price"}


class TestFieldRules:

    def test_whitespace_only_title(self, book_data):
        errors = violations_by_field(validate_book(book_data(title="   ")))

        assert errors == {"title": "Title must be at least 1 character long"}

    @pytest.mark.parametrize("length,valid", [(1, True), (200, True), (201, False)])
    def test_title_length(self, book_data, length, valid):
        result = validate_book(book_data(title="x" * length))

        if valid:
            assert isinstance(result, BookFields)
        else:
            assert violations_by_field(result) == {"title": "Title cannot exceed 200 characters"}

    def test_author_too_short_after_trimming(self, book_data):
        errors = violations_by_field(validate_book(book_data(author=" A ")))

        assert errors == {"author": "Author name must be at least 2 characters long"}

    def test_negative_price(self, book_data):
        errors = violations_by_field(validate_book(book_data(price=-0.01)))

        assert errors == {"price": "Price cannot be negative"}

    @pytest.mark.parametrize("price", [True, False])
    def test_boolean_price_is_rejected(self, book_data, price):
        errors = violations_by_field(validate_book(book_data(price=price)))

        assert errors == {"price": "Price must be a number"}

    def test_year_before_1000(self, book_data):
        errors = violations_by_field(validate_book(book_data(publishedYear=999)))

        assert errors == {"publishedYear": "Published year must be after 1000"}

    def test_year_1000_is_valid(self, book_data):
        assert isinstance(validate_book(book_data(publishedYear=1000)), BookFields)

    def test_year_in_future(self, book_data):
        errors = violations_by_field(validate_book(book_data(publishedYear=3000)))

        assert errors == {"publishedYear": "Published year cannot be in the future"}

    def test_current_year_is_valid(self, book_data):
        result = validate_book(book_data(publishedYear=date.today().year))

        assert isinstance(result, BookFields)

    def test_genre_is_case_sensitive(self, book_data):
        errors = violations_by_field(validate_book(book_data(genre="fiction")))

        assert errors == {"genre": "fiction is not a valid genre"}

    @pytest.mark.parametrize("genre", [g.value for g in Genre])
    def test_every_genre_is_accepted(self, book_data, genre):
        result = validate_book(book_data(genre=genre))

        assert isinstance(result, BookFields)
        assert result.genre.value == genre

    def test_wrong_type_reports_field(self, book_data):
        result = validate_book(book_data(price="cheap"))

        assert [v.field for v in result] == ["price"]
        assert isinstance(result[0], FieldViolation)


class TestIsbn:
    """ISBN shape checks. No checksum is computed."""

    @pytest.mark.parametrize(
        "isbn,valid",
        [
            ("978-0-13-468599-1", True),   # ISBN-13 with hyphens
            ("9780134685991", True),        # ISBN-13 without hyphens
            ("1234567890", True),           # 10 digits, checksum not verified
            ("0-06-112008-1", True),        # ISBN-10 with hyphens
            ("12345", False),               # Too short
            ("12345678901", False),         # 11 digits
            ("12345678901234", False),      # Too long
            ("006112008X", False),          # Check digit X is not a digit
            ("978 0 13 468599 1", False),   # Only hyphens are stripped
            ("", False),
        ],
    )
    def test_isbn_shape(self, book_data, isbn, valid):
        result = validate_book(book_data(isbn=isbn))

        if valid:
            assert isinstance(result, BookFields)
            assert len(result.isbn) in (10, 13)
            assert result.isbn.isdigit()
        else:
            assert violations_by_field(result) == {
                "isbn": "Please provide a valid ISBN-10 or ISBN-13"
            }

    def test_hyphenated_isbn13_normalizes_to_digits(self, book_data):
        result = validate_book(book_data(isbn="978-0-13-468599-1"))

        assert result.isbn == "9780134685991"

    def test_is_valid_isbn_helper(self):
        assert is_valid_isbn(" 0-06-112008-1 ")
        assert not is_valid_isbn("١٢٣٤٥٦٧٨٩٠")  # non-ASCII digits
