"""Book manager view-model: form buffer, banner message and CRUD handlers."""
import logging
from typing import Optional, Dict, Any, List, Union

from bookmanager.async_client import AsyncBookServiceClient
from bookmanager.client import BookServiceClient, BookServiceError
from bookmanager.models import BOOK_FIELDS, Book, Message, empty_buffer

logger = logging.getLogger(__name__)

ADDED = "Book added successfully."
UPDATED = "Book updated successfully."
ADD_FAILED = "Error adding book."
UPDATE_FAILED = "Error updating book."
DELETE_FAILED = "Error deleting book."
NOT_FOUND = "Book not found."
FETCH_FAILED = "Failed to fetch books."


class BookManagerState:
    """
    Local UI state shared by the blocking and async managers.

    Nothing here talks to the book service; the subclasses own the
    handlers that do.
    """

    def __init__(self):
        self.books: List[Book] = []
        self.book: Dict[str, Any] = empty_buffer()
        self.id_to_fetch: str = ""
        self.fetched_book: Optional[Book] = None
        self.message: Optional[Message] = None
        self.edit_mode = False

    def handle_change(self, field: str, value: Any) -> None:
        """Set one buffer field; validation waits until submit."""
        self.book[field] = value

    def validate_form(self) -> bool:
        """
        Check that every buffer field is filled in.

        Returns:
            False (with a message naming the first empty field) or True
        """
        for field in BOOK_FIELDS:
            value = self.book.get(field)
            if value is None or str(value).strip() == "":
                self.message = Message.error(f"Please fill out the {field} field.")
                return False
        return True

    def handle_edit(self, record: Union[Book, Dict[str, Any]]) -> None:
        """Load a listed record into the buffer and switch to edit mode."""
        self.book = record.to_dict() if isinstance(record, Book) else dict(record)
        self.edit_mode = True
        self.message = Message.success(f"Editing book with ID {self.book.get('id')}")

    def reset_form(self) -> None:
        """Empty the buffer and leave edit mode."""
        self.book = empty_buffer()
        self.edit_mode = False

    def find_listed(self, book_id: Union[int, str]) -> Optional[Book]:
        """Look up a row of the current list by id."""
        for book in self.books:
            if str(book.id) == str(book_id):
                return book
        return None


class BookManager(BookManagerState):
    """View-model whose handlers block on the book service."""

    def __init__(self, client: BookServiceClient):
        super().__init__()
        self.client = client

    def mount(self) -> None:
        """Initial load."""
        self.fetch_all_books()

    def fetch_all_books(self) -> bool:
        """
        Replace the book list with the service's current one.

        Returns:
            True if the list was refreshed; on failure the old list is kept
            and an error message is set
        """
        try:
            self.books = self.client.list_books()
        except BookServiceError as e:
            logger.warning(f"List refresh failed: {e}")
            self.message = Message.error(FETCH_FAILED)
            return False
        logger.info(f"Loaded {len(self.books)} books")
        return True

    def add_book(self) -> bool:
        """
        Create a book from the buffer.

        Runs form validation first. On success the list is refreshed once
        and the form is reset; on failure the buffer is left as it was.

        Returns:
            True if the book was added
        """
        if not self.validate_form():
            return False
        try:
            self.client.add_book(dict(self.book))
        except BookServiceError as e:
            logger.warning(f"Add failed: {e}")
            self.message = Message.error(ADD_FAILED)
            return False
        self.message = Message.success(ADDED)
        self.fetch_all_books()
        self.reset_form()
        return True

    def update_book(self) -> bool:
        """
        Replace the book identified by the buffer's id with the buffer.

        Returns:
            True if the book was updated (list refreshed, form reset)
        """
        if not self.validate_form():
            return False
        try:
            self.client.update_book(dict(self.book))
        except BookServiceError as e:
            logger.warning(f"Update of {self.book.get('id')} failed: {e}")
            self.message = Message.error(UPDATE_FAILED)
            return False
        self.message = Message.success(UPDATED)
        self.fetch_all_books()
        self.reset_form()
        return True

    def submit(self) -> bool:
        """Primary form action: update in edit mode, add otherwise."""
        return self.update_book() if self.edit_mode else self.add_book()

    def delete_book(self, book_id: Union[int, str]) -> bool:
        """
        Delete a book; the service's reply becomes the message.

        Args:
            book_id: Identifier of the book to remove

        Returns:
            True if the book was deleted and the list refreshed
        """
        try:
            text = self.client.delete_book(book_id)
        except BookServiceError as e:
            logger.warning(f"Delete of {book_id} failed: {e}")
            self.message = Message.error(DELETE_FAILED)
            return False
        self.message = Message.success(text)
        self.fetch_all_books()
        return True

    def get_book_by_id(self) -> bool:
        """
        Look up the book whose id is in ``id_to_fetch``.

        Returns:
            True if ``fetched_book`` was set; False clears it and reports
            that the book was not found
        """
        try:
            self.fetched_book = self.client.get_book(self.id_to_fetch)
        except BookServiceError as e:
            logger.info(f"Lookup of {self.id_to_fetch!r} failed: {e}")
            self.fetched_book = None
            self.message = Message.error(NOT_FOUND)
            return False
        self.message = None
        return True


class AsyncBookManager(BookManagerState):
    """
    View-model whose handlers are coroutines.

    Handlers may overlap. List refreshes are sequenced: each one takes a
    ticket and only the most recently started refresh may replace
    ``books``, whatever order the responses arrive in.
    """

    def __init__(self, client: AsyncBookServiceClient):
        super().__init__()
        self.client = client
        self._refresh_ticket = 0

    async def mount(self) -> None:
        """Initial load."""
        await self.fetch_all_books()

    async def fetch_all_books(self) -> bool:
        """
        Refresh the book list, unless a newer refresh has started.

        Returns:
            True only if this refresh's response was applied
        """
        self._refresh_ticket += 1
        ticket = self._refresh_ticket
        try:
            books = await self.client.list_books()
        except BookServiceError as e:
            if ticket != self._refresh_ticket:
                logger.debug(f"Ignoring failure of superseded refresh #{ticket}")
                return False
            logger.warning(f"List refresh failed: {e}")
            self.message = Message.error(FETCH_FAILED)
            return False
        if ticket != self._refresh_ticket:
            logger.debug(f"Dropping stale refresh #{ticket} (latest is #{self._refresh_ticket})")
            return False
        self.books = books
        logger.info(f"Loaded {len(books)} books")
        return True

    async def add_book(self) -> bool:
        """Create a book from the buffer; see ``BookManager.add_book``."""
        if not self.validate_form():
            return False
        try:
            await self.client.add_book(dict(self.book))
        except BookServiceError as e:
            logger.warning(f"Add failed: {e}")
            self.message = Message.error(ADD_FAILED)
            return False
        self.message = Message.success(ADDED)
        self.reset_form()
        await self.fetch_all_books()
        return True

    async def update_book(self) -> bool:
        """Replace a book with the buffer; see ``BookManager.update_book``."""
        if not self.validate_form():
            return False
        try:
            await self.client.update_book(dict(self.book))
        except BookServiceError as e:
            logger.warning(f"Update of {self.book.get('id')} failed: {e}")
            self.message = Message.error(UPDATE_FAILED)
            return False
        self.message = Message.success(UPDATED)
        self.reset_form()
        await self.fetch_all_books()
        return True

    async def submit(self) -> bool:
        """Primary form action: update in edit mode, add otherwise."""
        if self.edit_mode:
            return await self.update_book()
        return await self.add_book()

    async def delete_book(self, book_id: Union[int, str]) -> bool:
        """Delete a book; the service's reply becomes the message."""
        try:
            text = await self.client.delete_book(book_id)
        except BookServiceError as e:
            logger.warning(f"Delete of {book_id} failed: {e}")
            self.message = Message.error(DELETE_FAILED)
            return False
        self.message = Message.success(text)
        await self.fetch_all_books()
        return True

    async def get_book_by_id(self) -> bool:
        """Look up the book whose id is in ``id_to_fetch``."""
        try:
            self.fetched_book = await self.client.get_book(self.id_to_fetch)
        except BookServiceError as e:
            logger.info(f"Lookup of {self.id_to_fetch!r} failed: {e}")
            self.fetched_book = None
            self.message = Message.error(NOT_FOUND)
            return False
        self.message = None
        return True
