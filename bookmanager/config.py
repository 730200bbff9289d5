"""Configuration management."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Book service
    API_URL = os.getenv("API_URL", "http://localhost:8080")

    @property
    def BOOK_API_URL(self):
        """Build the book service base path."""
        return f"{self.API_URL.rstrip('/')}/bookapi"

    # Defaults
    DEFAULT_TIMEOUT = int(os.getenv("DEFAULT_TIMEOUT", "10"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
