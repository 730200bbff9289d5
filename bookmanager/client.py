"""HTTP client for the book service REST API."""
import requests
from typing import Optional, Dict, Any, List, Union
import logging

from bookmanager.models import Book
from bookmanager.parse import parse_book, parse_books_response

logger = logging.getLogger(__name__)


class BookServiceError(Exception):
    """Any failed call to the book service (bad status, transport, bad body)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BookServiceClient:
    """Blocking client for the book service CRUD endpoints."""

    def __init__(self, base_url: str, timeout: int = 10):
        """
        Initialize book service client.

        Args:
            base_url: Service base path, e.g. http://localhost:8080/bookapi
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        # Create session for connection pooling
        self.session = requests.Session()

    def list_books(self) -> List[Book]:
        """Fetch every book, in the order the service returns them."""
        response = self._request("GET", "/all")
        body = self._json(response)
        if not isinstance(body, list):
            raise BookServiceError(
                f"Expected a list of books from {response.url}",
                status_code=response.status_code
            )
        return parse_books_response(body)

    def add_book(self, payload: Dict[str, Any]) -> None:
        """Create a book from a full record."""
        self._request("POST", "/add", json=payload)

    def update_book(self, payload: Dict[str, Any]) -> None:
        """Replace the book whose id is in the payload."""
        self._request("PUT", "/update", json=payload)

    def delete_book(self, book_id: Union[int, str]) -> str:
        """
        Delete a book.

        Returns:
            The service's response text, meant to be shown to the user as-is
        """
        response = self._request("DELETE", f"/delete/{book_id}")
        return response.text

    def get_book(self, book_id: Union[int, str]) -> Book:
        """Fetch a single book by id."""
        response = self._request("GET", f"/get/{book_id}")
        book = parse_book(self._json(response))
        if book is None:
            raise BookServiceError(f"No usable book record for id {book_id}")
        return book

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Send one request; no retries.

        Raises:
            BookServiceError: on transport failure or a non-2xx status
        """
        url = f"{self.base_url}{path}"
        logger.info(f"{method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.warning(f"Timeout on {method} {url}")
            raise BookServiceError(f"Timeout on {method} {url}") from e
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Connection error on {method} {url}: {e}")
            raise BookServiceError(f"Connection error on {method} {url}") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request failed on {method} {url}: {e}")
            raise BookServiceError(f"Request failed on {method} {url}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"{method} {url} returned {response.status_code}: {response.text}")
            raise BookServiceError(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code
            )

        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BookServiceError(
                f"Invalid JSON from {response.url}",
                status_code=response.status_code
            ) from e

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
