"""Document fetcher that loads RDF documents into a quad store."""

import asyncio
import logging
from urllib.parse import urlparse

from rdflib import Dataset, Graph, URIRef
from rdflib.util import guess_format

from .config.schemas import FetchConfig
from .errors import SourceLoadError
from .providers import BaseProvider, FetchedDocument, FileProvider, HttpProvider
from .store import QuadStore

logger = logging.getLogger(__name__)

CONTENT_TYPE_FORMATS = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/n-triples": "nt",
    "application/n-quads": "nquads",
    "application/trig": "trig",
    "application/trix": "trix",
    "application/rdf+xml": "xml",
    "text/n3": "n3",
    "application/ld+json": "json-ld",
    "application/json": "json-ld",
}

# Formats that carry graph names and must be parsed into a Dataset
QUAD_FORMATS = {"nquads", "trig", "trix"}


class DocumentFetcher:
    """
    Fetches RDF documents and adds their statements to one store.

    The fetcher attaches itself to the store's ``fetcher`` slot. Each
    document is requested once per fetcher; repeated or concurrent loads of
    the same document share the outcome of the first request.
    """

    def __init__(
        self,
        store: QuadStore,
        config: FetchConfig | None = None,
        providers: list[BaseProvider] | None = None,
    ):
        """
        Initialize the fetcher.

        Args:
            store: Store that receives the loaded statements
            config: Fetch configuration
            providers: Providers tried in order; HTTP and file by default
        """
        self.store = store
        self.config = config or FetchConfig()
        self.providers = providers or [HttpProvider(), FileProvider()]
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._requested: dict[str, asyncio.Future[int]] = {}

        store.fetcher = self

    async def load(self, document: str) -> int:
        """
        Load a document into the store.

        Args:
            document: Document URL or path, without fragment

        Returns:
            int: Number of statements the document contributed

        Raises:
            SourceLoadError: If the document cannot be fetched or parsed
        """
        pending = self._requested.get(document)
        if pending is None:
            pending = asyncio.ensure_future(self._load(document))
            self._requested[document] = pending
        else:
            self.logger.debug(f"Reusing request for {document}")
        return await asyncio.shield(pending)

    async def _load(self, document: str) -> int:
        provider = self._provider_for(document)

        try:
            graph, base = await asyncio.to_thread(
                self._fetch_and_parse, provider, document
            )
        except Exception as e:
            raise SourceLoadError(f"Failed to load {document}: {e}", document) from e

        # Merging happens on the event loop thread only
        count = self.store.add_graph(graph, URIRef(base))
        self.logger.info(f"Loaded {count} statements from {document}")
        return count

    def _provider_for(self, document: str) -> BaseProvider:
        for provider in self.providers:
            if provider.handles(document):
                return provider
        raise SourceLoadError(f"No provider can fetch {document}", document)

    def _fetch_and_parse(
        self, provider: BaseProvider, document: str
    ) -> tuple[Graph, str]:
        fetched = provider.fetch(document, self.config)
        rdf_format = self.resolve_format(fetched)

        graph = Dataset() if rdf_format in QUAD_FORMATS else Graph()
        graph.parse(data=fetched.content, format=rdf_format, publicID=fetched.url)
        return graph, fetched.url

    def resolve_format(self, fetched: FetchedDocument) -> str:
        """
        Pick the rdflib parser for a fetched document.

        The content type wins, then the file extension, then the configured
        default format.
        """
        if fetched.content_type:
            media_type = fetched.content_type.split(";", 1)[0].strip().lower()
            if media_type in CONTENT_TYPE_FORMATS:
                return CONTENT_TYPE_FORMATS[media_type]

        guessed = guess_format(urlparse(fetched.url).path)
        if guessed:
            return guessed

        return self.config.default_format
