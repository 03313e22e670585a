"""HTTP provider for fetching documents from web URLs."""

from urllib.parse import urlparse

import requests

from ..config.schemas import FetchConfig
from .base import BaseProvider, FetchedDocument


class HttpProvider(BaseProvider):
    """Provider that downloads documents over HTTP(S)."""

    def __init__(self) -> None:
        super().__init__("http")

    def handles(self, document: str) -> bool:
        return urlparse(document).scheme in ("http", "https")

    def fetch(self, document: str, config: FetchConfig) -> FetchedDocument:
        timeout = max(int(config.timeout), 1)
        headers = {"Accept": config.accept, "User-Agent": config.user_agent}

        self.logger.info("Downloading %s", document)
        response = requests.get(document, headers=headers, timeout=timeout)
        response.raise_for_status()
        self.logger.info("Fetched %s bytes from %s", len(response.content), document)

        return FetchedDocument(
            url=response.url or document,
            content=response.content,
            content_type=response.headers.get("Content-Type"),
        )
