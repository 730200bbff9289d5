"""Tests for the blocking book manager view-model."""
import json
from unittest.mock import MagicMock

import pytest
import requests

from bookmanager.client import BookServiceClient, BookServiceError
from bookmanager.manager import BookManager
from bookmanager.models import BOOK_FIELDS, Book, Outcome, empty_buffer

DUNE = {
    "id": 1, "title": "Dune", "author": "Herbert", "genre": "SciFi",
    "price": 15, "publishedYear": 1965, "stock": 10
}
LISTED = [Book(1, "Dune", "Herbert", "SciFi", 15, 1965, 10)]


def make_response(status_code, json_body):
    """Build a real requests.Response carrying a JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(json_body).encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def client():
    c = MagicMock(spec=BookServiceClient)
    c.list_books.return_value = list(LISTED)
    return c


@pytest.fixture
def manager(client):
    return BookManager(client)


def fill(manager, record):
    for field, value in record.items():
        manager.handle_change(field, value)


def test_initial_state(manager, client):
    """Test a new manager is empty and has not called the service."""
    assert manager.books == []
    assert manager.book == empty_buffer()
    assert manager.message is None
    assert manager.edit_mode is False
    assert manager.fetched_book is None
    client.list_books.assert_not_called()


def test_mount_fetches_list(manager, client):
    """Test mounting loads the full list once."""
    manager.mount()

    assert manager.books == LISTED
    client.list_books.assert_called_once_with()


def test_fetch_failure_keeps_books(manager, client):
    """Test a failed refresh leaves the list alone."""
    manager.mount()
    client.list_books.side_effect = BookServiceError("down")

    assert manager.fetch_all_books() is False
    assert manager.books == LISTED
    assert manager.message.text == "Failed to fetch books."
    assert manager.message.is_error


def test_handle_change_does_not_validate(manager):
    """Test field edits are stored as-is."""
    manager.handle_change("title", "   ")

    assert manager.book["title"] == "   "
    assert manager.message is None
    assert manager.edit_mode is False


@pytest.mark.parametrize("blank", ["", "   ", None])
@pytest.mark.parametrize("field", BOOK_FIELDS)
def test_validate_form_names_first_blank_field(manager, field, blank):
    """Test validation reports the first missing field in template order."""
    fill(manager, DUNE)
    manager.handle_change(field, blank)
    # A later blank field must not be reported first
    manager.handle_change("stock", "" if field != "stock" else blank)

    assert manager.validate_form() is False
    assert manager.message.text == f"Please fill out the {field} field."
    assert manager.message.outcome is Outcome.ERROR


def test_validate_form_accepts_zero(manager):
    """Test numeric zero counts as filled in."""
    fill(manager, dict(DUNE, stock=0))

    assert manager.validate_form() is True
    assert manager.message is None


def test_add_book_success(manager, client):
    """Test a valid add posts the exact buffer, refreshes once and resets."""
    fill(manager, DUNE)

    assert manager.add_book() is True

    client.add_book.assert_called_once_with(DUNE)
    client.list_books.assert_called_once_with()
    assert manager.book == empty_buffer()
    assert manager.edit_mode is False
    assert manager.books == LISTED
    assert manager.message.text == "Book added successfully."
    assert not manager.message.is_error


def test_add_book_invalid_sends_nothing(manager, client):
    """Test validation failure aborts before any request."""
    fill(manager, dict(DUNE, genre=""))

    assert manager.add_book() is False

    client.add_book.assert_not_called()
    client.list_books.assert_not_called()
    assert manager.message.text == "Please fill out the genre field."


def test_add_book_failure_keeps_buffer(manager, client):
    """Test a failed add keeps the buffer and reports a generic error."""
    client.add_book.side_effect = BookServiceError("500", status_code=500)
    fill(manager, DUNE)

    assert manager.add_book() is False

    assert manager.book == DUNE
    assert manager.message.text == "Error adding book."
    assert manager.message.is_error
    client.list_books.assert_not_called()


def test_update_book_success(manager, client):
    """Test update puts the full record and resets edit mode."""
    manager.handle_edit(dict(DUNE, stock=3))

    assert manager.update_book() is True

    client.update_book.assert_called_once_with(dict(DUNE, stock=3))
    client.list_books.assert_called_once_with()
    assert manager.book == empty_buffer()
    assert manager.edit_mode is False
    assert manager.message.text == "Book updated successfully."


def test_update_book_failure(manager, client):
    """Test a failed update keeps edit mode and the buffer."""
    client.update_book.side_effect = BookServiceError("boom")
    manager.handle_edit(DUNE)

    assert manager.update_book() is False

    assert manager.edit_mode is True
    assert manager.book == DUNE
    assert manager.message.text == "Error updating book."


def test_submit_routes_by_edit_mode(manager, client):
    """Test the primary action adds normally and updates while editing."""
    fill(manager, DUNE)
    manager.submit()
    client.add_book.assert_called_once()
    client.update_book.assert_not_called()

    manager.handle_edit(DUNE)
    manager.submit()
    client.update_book.assert_called_once()


def test_handle_edit(manager):
    """Test editing copies the record and leaves the list alone."""
    manager.mount()
    record = {"id": 2, "title": "X", "author": "A", "genre": "G",
              "price": 1, "publishedYear": 2000, "stock": 1}

    manager.handle_edit(record)

    assert manager.book == record
    assert manager.book is not record
    assert manager.edit_mode is True
    assert manager.books == LISTED
    assert manager.message.text == "Editing book with ID 2"
    assert not manager.message.is_error


def test_handle_edit_accepts_listed_book(manager):
    """Test a Book row is converted to a service-named buffer."""
    manager.handle_edit(LISTED[0])

    assert manager.book == DUNE


def test_delete_book_success(manager, client):
    """Test the server's text becomes the message and the list refreshes once."""
    client.delete_book.return_value = "Book with id 2 deleted"

    assert manager.delete_book(2) is True

    client.delete_book.assert_called_once_with(2)
    client.list_books.assert_called_once_with()
    assert manager.message.text == "Book with id 2 deleted"
    assert not manager.message.is_error


def test_delete_book_failure(manager, client):
    """Test a failed delete leaves books untouched."""
    manager.mount()
    client.list_books.reset_mock()
    client.delete_book.side_effect = BookServiceError("404", status_code=404)

    assert manager.delete_book(2) is False

    assert manager.message.text == "Error deleting book."
    assert manager.books == LISTED
    client.list_books.assert_not_called()


def test_get_book_by_id_success(manager, client):
    """Test a lookup stores the record and clears the message."""
    client.get_book.return_value = LISTED[0]
    manager.message = None
    manager.handle_edit(DUNE)
    manager.id_to_fetch = "1"

    assert manager.get_book_by_id() is True

    client.get_book.assert_called_once_with("1")
    assert manager.fetched_book == LISTED[0]
    assert manager.message is None


def test_get_book_by_id_not_found(manager, client):
    """Test a missing id clears the fetched record."""
    client.get_book.return_value = LISTED[0]
    manager.id_to_fetch = "1"
    manager.get_book_by_id()

    client.get_book.side_effect = BookServiceError("404", status_code=404)
    manager.id_to_fetch = "999"

    assert manager.get_book_by_id() is False

    assert manager.fetched_book is None
    assert manager.message.text == "Book not found."
    assert manager.message.is_error


def test_reset_form_after_changes(manager):
    """Test reset always returns to the empty template."""
    fill(manager, DUNE)
    manager.handle_change("title", "Something else")
    manager.handle_edit(DUNE)

    manager.reset_form()

    assert manager.book == empty_buffer()
    assert manager.edit_mode is False


def test_find_listed_compares_ids_as_text(manager):
    """Test typed ids match ids coming from the command line."""
    manager.mount()

    assert manager.find_listed("1") is LISTED[0]
    assert manager.find_listed(42) is None


def test_non_list_refresh_keeps_books():
    """Test an unusable /all body reports a fetch failure and keeps the list."""
    service = BookServiceClient("http://books.test/bookapi")
    service.session = MagicMock()
    service.session.request.side_effect = [
        make_response(200, [DUNE]),
        make_response(200, {"error": "db down"})
    ]
    manager = BookManager(service)
    manager.mount()

    assert manager.fetch_all_books() is False

    assert manager.books == LISTED
    assert manager.message.text == "Failed to fetch books."
    assert manager.message.is_error
