"""Text rendering of the book manager view."""
import json
from typing import List, Optional
from tabulate import tabulate

from bookmanager.manager import BookManagerState
from bookmanager.models import BOOK_FIELDS, Book, Message

TITLE = "Book Management System 📚"


def render_banner(message: Optional[Message]) -> str:
    """Banner line for the last outcome, or empty when there is none."""
    if not message or not message.text:
        return ""
    icon = "❌" if message.is_error else "✅"
    return f"{icon} {message.text}"


def render_form(state: BookManagerState) -> str:
    """
    Render the add/edit form.

    Args:
        state: Current view state

    Returns:
        Heading, field/value grid and the available actions
    """
    heading = "Edit Book" if state.edit_mode else "Add Book"
    rows = [[field, state.book.get(field, "")] for field in BOOK_FIELDS]
    actions = "update | cancel" if state.edit_mode else "add"
    return "\n".join([
        heading,
        tabulate(rows, headers=["Field", "Value"], tablefmt="simple"),
        f"Actions: {actions}"
    ])


def render_fetched(fetched: Optional[Book]) -> str:
    """Render the lookup section, with the record as JSON when one was found."""
    lines = ["Get Book By ID"]
    if fetched:
        lines.append("Book Found:")
        lines.append(json.dumps(fetched.to_dict(), indent=2))
    return "\n".join(lines)


def render_books(books: List[Book], format_type: str = "table") -> str:
    """
    Render the book list.

    Args:
        books: Books in server order
        format_type: table, json or compact
    """
    if not books:
        return "No books found."

    if format_type == "json":
        return json.dumps([book.to_dict() for book in books], indent=2)

    if format_type == "compact":
        return "\n".join(
            f"{book.id}. {book.title} - {book.author}"
            for book in books
        )

    rows = [
        ["" if value is None else value for value in book.to_dict().values()]
        for book in books
    ]
    return tabulate(rows, headers=list(BOOK_FIELDS), tablefmt="grid")


def render(state: BookManagerState) -> str:
    """Full screen for the current state."""
    sections = []
    banner = render_banner(state.message)
    if banner:
        sections.append(banner)
    sections.append(TITLE)
    sections.append(render_form(state))
    sections.append(render_fetched(state.fetched_book))
    sections.append("All Books\n" + render_books(state.books))
    return "\n\n".join(sections)
