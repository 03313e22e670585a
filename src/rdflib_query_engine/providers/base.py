"""Base provider class for fetching source documents."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

from ..config.schemas import FetchConfig


@dataclass(frozen=True)
class FetchedDocument:
    """Raw bytes of a document together with what is known about its format."""

    url: str
    content: bytes
    content_type: str | None = None


class BaseProvider(ABC):
    """Abstract base class for document providers."""

    def __init__(self, name: str):
        """Initialize provider.

        Args:
            name: Name of the provider, used for its logger
        """
        self.name = name
        self.logger = logging.getLogger(f"provider.{name}")

    @abstractmethod
    def handles(self, document: str) -> bool:
        """Check whether this provider can fetch the given document.

        Args:
            document: Document identifier (URL or path) without fragment

        Returns:
            True if :meth:`fetch` accepts the document
        """
        pass

    @abstractmethod
    def fetch(self, document: str, config: FetchConfig) -> FetchedDocument:
        """Fetch the raw bytes of a document.

        Args:
            document: Document identifier (URL or path) without fragment
            config: Fetch configuration

        Returns:
            The fetched document

        Raises:
            Exception: If fetching fails
        """
        pass
