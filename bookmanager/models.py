"""Data models for books and view state."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Union

# Wire field names in form/table order
BOOK_FIELDS = ("id", "title", "author", "genre", "price", "publishedYear", "stock")


def empty_buffer() -> Dict[str, Any]:
    """Return a fresh, all-empty edit buffer."""
    return {field: "" for field in BOOK_FIELDS}


@dataclass
class Book:
    """A book record as returned by the book service."""
    id: Union[int, str]
    title: Optional[str]
    author: Optional[str]
    genre: Optional[str]
    price: Optional[float]
    published_year: Optional[int]
    stock: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the service's field names."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "price": self.price,
            "publishedYear": self.published_year,
            "stock": self.stock,
        }


class Outcome(Enum):
    """Whether a banner message reports success or failure."""
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Message:
    """Banner text tagged with its outcome."""
    text: str
    outcome: Outcome

    @classmethod
    def success(cls, text: str) -> "Message":
        return cls(text, Outcome.SUCCESS)

    @classmethod
    def error(cls, text: str) -> "Message":
        return cls(text, Outcome.ERROR)

    @property
    def is_error(self) -> bool:
        return self.outcome is Outcome.ERROR
