"""Asynchronous iterator wrapper around rdflib's SPARQL engine."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
import logging
from typing import Any, cast

from .config.schemas import EngineConfig
from .errors import UnsupportedOperationError
from .query import Binding, is_update, parse_query, project_row, run_query
from .sources.loader import read_sources
from .store import QuadStore

logger = logging.getLogger(__name__)


class LazyStore:
    """
    Memoised, lazily evaluated store.

    The factory runs at most once (per event loop, until it finishes). Its
    outcome, the store or the exception, is cached and handed to every
    awaiter.
    """

    def __init__(self, factory: Callable[[], Awaitable[QuadStore]]):
        self._factory = factory
        self._task: asyncio.Task[None] | None = None
        self._store: QuadStore | None = None
        self._error: BaseException | None = None
        self._settled = False

    @property
    def settled(self) -> bool:
        return self._settled

    def start(self) -> None:
        """Begin evaluation if an event loop is running; otherwise do nothing."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._ensure_task(loop)

    async def get(self) -> QuadStore:
        """
        Return the store, evaluating it first if needed.

        Raises:
            Exception: Whatever the factory raised, on every call
        """
        if not self._settled:
            task = self._ensure_task(asyncio.get_running_loop())
            await asyncio.shield(task)

        if self._error is not None:
            raise self._error
        return cast(QuadStore, self._store)

    def _ensure_task(self, loop: asyncio.AbstractEventLoop) -> "asyncio.Task[None]":
        # A task left behind by a closed loop cannot be awaited from this one
        if (
            self._task is None
            or self._task.get_loop() is not loop
            or self._task.cancelled()
        ):
            self._task = loop.create_task(self._evaluate())
        return self._task

    async def _evaluate(self) -> None:
        try:
            self._store = await self._factory()
        except Exception as e:
            self._error = e
        self._settled = True


class RdflibQueryEngine:
    """
    Executes SPARQL SELECT queries over RDF sources loaded into rdflib.

    Sources can be document URLs or paths, RDF terms naming a document,
    objects with a ``match`` method streaming quads, rdflib graphs, or
    (nested) lists of these; any of them may be passed as an awaitable.
    """

    def __init__(
        self, default_sources: Any = None, config: EngineConfig | None = None
    ):
        """
        Create a query engine with the given sources as default.

        Loading of the default sources starts right away when an event loop
        is running, otherwise on the first query that needs them. Loading
        errors are not raised here; they surface from :meth:`execute`.

        Args:
            default_sources: Source descriptor used when a query passes none
            config: Engine configuration
        """
        self.config = config or EngineConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._default_store = LazyStore(lambda: self.read_sources(default_sources))
        self._default_store.start()

    async def execute(
        self, sparql: str, sources: Any = None
    ) -> AsyncIterator[Binding]:
        """
        Create an asynchronous iterable of results for the given SPARQL query.

        Args:
            sparql: SPARQL SELECT query
            sources: Source descriptor to query instead of the default sources.
                Only None selects the defaults; any other value, including an
                empty string or list, is loaded as given

        Yields:
            Binding: One dict per solution, keyed by ``?name``

        Raises:
            UnsupportedOperationError: For UPDATE requests and non-SELECT queries
            QuerySyntaxError: If the query cannot be parsed
            UnsupportedSourceError: If a source has an unknown shape
            SourceLoadError: If a source cannot be loaded
            QueryExecutionError: If evaluation fails
        """
        if is_update(sparql):
            async for binding in self.execute_update(sparql, sources):
                yield binding
            return

        query = parse_query(sparql)

        if sources is not None:
            store = await self.read_sources(sources)
        else:
            store = await self._default_store.get()

        # No link traversal while querying
        store.fetcher = None

        rows = await run_query(store, query)
        self.logger.info(f"Query produced {len(rows)} results")

        for row in rows:
            # rdflib may report variables that were not requested
            yield project_row(row, query.variables)

    async def execute_update(
        self, sparql: str, sources: Any = None
    ) -> AsyncIterator[Binding]:
        """Execute a SPARQL UPDATE request; always fails, updates are unsupported."""
        raise UnsupportedOperationError(
            f"SPARQL UPDATE queries are unsupported, received: {sparql}", sparql
        )
        yield {}  # pragma: no cover

    async def read_sources(
        self, sources: Any, store: QuadStore | None = None
    ) -> QuadStore:
        """Read the given sources into a store (a new one unless given)."""
        return await read_sources(sources, store, config=self.config.fetch)

    async def clear_cache(self, document: str | None = None) -> None:
        """
        Remove the given document (or all) from the cache.

        Nothing to do: every store gets its own fetcher, and fetchers are
        detached before querying.
        """
