"""
Exceptions raised by the item finder.
"""

from typing import Optional


class ItemFinderError(Exception):
    """Base class for all item finder errors."""


class ConfigurationError(ItemFinderError):
    """Invalid or missing configuration (API key, threshold)."""


class InputError(ItemFinderError):
    """Search input is incomplete or unusable."""


class ApiResponseError(ItemFinderError):
    """The chat-completion API failed or returned something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
