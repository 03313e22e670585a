"""File provider for reading local documents."""

from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from ..config.schemas import FetchConfig
from .base import BaseProvider, FetchedDocument


class FileProvider(BaseProvider):
    """Provider for reading documents from the local filesystem."""

    def __init__(self) -> None:
        super().__init__("file")

    def handles(self, document: str) -> bool:
        scheme = urlparse(document).scheme
        # Single letters are Windows drive names, not URL schemes
        return scheme in ("", "file") or len(scheme) == 1

    def fetch(self, document: str, config: FetchConfig) -> FetchedDocument:
        """Read a document from disk.

        Args:
            document: ``file:`` URI or filesystem path
            config: Fetch configuration (unused for local files)

        Returns:
            The file content; the content type is left to extension sniffing
        """
        path = self.to_path(document)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        self.logger.info(f"Reading file: {path}")
        data = path.read_bytes()
        self.logger.info(f"Read {len(data)} bytes from {path}")

        return FetchedDocument(url=path.resolve().as_uri(), content=data)

    @staticmethod
    def to_path(document: str) -> Path:
        """Convert a ``file:`` URI or plain path to a :class:`Path`."""
        parsed = urlparse(document)
        if parsed.scheme == "file":
            return Path(url2pathname(parsed.path))
        return Path(document)
