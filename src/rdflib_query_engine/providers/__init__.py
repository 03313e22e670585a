"""Providers that fetch the raw bytes of source documents."""

from .base import BaseProvider, FetchedDocument
from .file import FileProvider
from .http import HttpProvider

__all__ = [
    "BaseProvider",
    "FetchedDocument",
    "FileProvider",
    "HttpProvider",
]
