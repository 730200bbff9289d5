"""Async HTTP client for the book service."""
import httpx
from typing import Optional, Dict, Any, List, Union
import logging

from bookmanager.client import BookServiceError
from bookmanager.models import Book
from bookmanager.parse import parse_book, parse_books_response

logger = logging.getLogger(__name__)


class AsyncBookServiceClient:
    """Async client for the book service CRUD endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize async client.

        Args:
            base_url: Service base path, e.g. http://localhost:8080/bookapi
            timeout: Request timeout
            transport: Optional httpx transport (mock transports in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        # Create async HTTP client
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def list_books(self) -> List[Book]:
        """Fetch every book, in the order the service returns them."""
        response = await self._request("GET", "/all")
        body = self._json(response)
        if not isinstance(body, list):
            raise BookServiceError(
                f"Expected a list of books from {response.url}",
                status_code=response.status_code
            )
        return parse_books_response(body)

    async def add_book(self, payload: Dict[str, Any]) -> None:
        """Create a book from a full record."""
        await self._request("POST", "/add", json=payload)

    async def update_book(self, payload: Dict[str, Any]) -> None:
        """Replace the book whose id is in the payload."""
        await self._request("PUT", "/update", json=payload)

    async def delete_book(self, book_id: Union[int, str]) -> str:
        """
        Delete a book.

        Args:
            book_id: Identifier of the book to remove

        Returns:
            The service's response text, shown to the user unchanged
        """
        response = await self._request("DELETE", f"/delete/{book_id}")
        return response.text

    async def get_book(self, book_id: Union[int, str]) -> Book:
        """
        Fetch a single book by id.

        Args:
            book_id: Identifier to look up

        Returns:
            The parsed Book

        Raises:
            BookServiceError: on failure or when the body holds no usable record
        """
        response = await self._request("GET", f"/get/{book_id}")
        book = parse_book(self._json(response))
        if book is None:
            raise BookServiceError(f"No usable book record for id {book_id}")
        return book

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Send one request asynchronously.

        Raises:
            BookServiceError: on transport failure or a non-2xx status
        """
        url = f"{self.base_url}{path}"
        logger.info(f"Async {method} {url}")

        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout on {method} {url}")
            raise BookServiceError(f"Timeout on {method} {url}") from e
        except httpx.HTTPError as e:
            logger.warning(f"Async request failed on {method} {url}: {e}")
            raise BookServiceError(f"Request failed on {method} {url}") from e

        if not response.is_success:
            logger.error(f"{method} {url} returned {response.status_code}: {response.text}")
            raise BookServiceError(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code
            )

        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BookServiceError(
                f"Invalid JSON from {response.url}",
                status_code=response.status_code
            ) from e

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
