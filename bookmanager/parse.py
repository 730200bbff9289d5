"""Parse book service responses."""
import logging
from typing import Any, List, Optional
from bookmanager.models import Book

logger = logging.getLogger(__name__)


def parse_book(item: Any) -> Optional[Book]:
    """
    Parse a single book record from the book service.

    Args:
        item: Decoded JSON object for one book

    Returns:
        Book object or None if the record is unusable
    """
    if not isinstance(item, dict):
        logger.warning(f"Skipping non-object book record: {item!r}")
        return None

    # A record without an id can't be edited or deleted
    book_id = item.get("id")
    if book_id is None or book_id == "":
        return None

    return Book(
        id=book_id,
        title=item.get("title"),
        author=item.get("author"),
        genre=item.get("genre"),
        price=item.get("price"),
        published_year=item.get("publishedYear"),
        stock=item.get("stock")
    )


def parse_books_response(response_json: Any) -> List[Book]:
    """
    Parse the full list returned by the book service.

    Args:
        response_json: Decoded JSON array of book records

    Returns:
        List of Book objects in server order (empty if nothing usable)
    """
    if not isinstance(response_json, list):
        logger.warning(f"Expected a list of books, got {type(response_json).__name__}")
        return []

    books = []

    for item in response_json:
        book = parse_book(item)
        if book:
            books.append(book)

    return books
