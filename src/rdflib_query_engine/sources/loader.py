"""Loads source descriptors into a quad store."""

import asyncio
from collections.abc import Callable, Iterator
from contextlib import (
    AbstractAsyncContextManager,
    AbstractContextManager,
    aclosing,
    closing,
    contextmanager,
    nullcontext,
)
import inspect
import logging
from typing import Any

from rdflib.term import Node

from ..config.schemas import FetchConfig
from ..errors import SourceLoadError
from ..fetcher import DocumentFetcher
from ..store import QuadStore
from .descriptors import DocumentRef, QuadSource, SourceList, classify_source

logger = logging.getLogger(__name__)


async def read_sources(
    sources: Any,
    store: QuadStore | None = None,
    *,
    config: FetchConfig | None = None,
) -> QuadStore:
    """
    Read one source descriptor (possibly pending or nested) into a store.

    Args:
        sources: Document identifier, list of descriptors, quad source,
            or an awaitable resolving to one of those
        store: Store to add to; a new empty store when omitted
        config: Fetch configuration for documents

    Returns:
        QuadStore: The store that was passed in, or the new one

    Raises:
        UnsupportedSourceError: If a descriptor has an unknown shape
        SourceLoadError: If a document or stream fails to load
    """
    if store is None:
        store = QuadStore()

    source = sources
    if inspect.isawaitable(source):
        source = await source

    if not source:
        return store

    descriptor = classify_source(source)

    if isinstance(descriptor, DocumentRef):
        fetcher = store.fetcher or DocumentFetcher(store, config)
        await fetcher.load(descriptor.document)

    elif isinstance(descriptor, SourceList):
        # First failure wins; quads already added by siblings stay in the store
        await asyncio.gather(
            *(read_sources(item, store, config=config) for item in descriptor.items)
        )

    elif isinstance(descriptor, QuadSource):
        count = await _read_quad_source(descriptor.provider, store)
        logger.debug(f"Read {count} quads from {descriptor.provider!r}")

    return store


async def _read_quad_source(provider: Any, store: QuadStore) -> int:
    results = provider.match(None, None, None, None)

    if callable(getattr(results, "on", None)):
        return await _read_quad_events(results, store)

    count = 0
    try:
        if hasattr(results, "__aiter__"):
            async with _async_closing(results):
                async for quad in results:
                    store.add(*_quad_parts(quad))
                    count += 1
        else:
            with _closing(results):
                for quad in results:
                    store.add(*_quad_parts(quad))
                    count += 1
    except Exception as e:
        raise SourceLoadError(f"Failed to read quad source: {e}", provider) from e
    return count


async def _read_quad_events(results: Any, store: QuadStore) -> int:
    loop = asyncio.get_running_loop()
    finished: asyncio.Future[BaseException | None] = loop.create_future()
    count = 0

    def finish(error: BaseException | None = None) -> None:
        if not finished.done():
            finished.set_result(error)

    def add_quad(quad: Any) -> None:
        nonlocal count
        if finished.done():
            return
        try:
            store.add(*_quad_parts(quad))
            count += 1
        except Exception as e:
            finish(e)

    with _listening(results, {"data": add_quad, "end": finish, "error": finish}):
        error = await finished

    if error is not None:
        raise SourceLoadError(
            f"Failed to read quad stream: {error}", results
        ) from error
    return count


@contextmanager
def _listening(
    emitter: Any, listeners: dict[str, Callable[..., None]]
) -> Iterator[None]:
    for event, listener in listeners.items():
        emitter.on(event, listener)
    try:
        yield
    finally:
        for event, listener in listeners.items():
            emitter.remove_listener(event, listener)


def _async_closing(results: Any) -> AbstractAsyncContextManager[Any]:
    if callable(getattr(results, "aclose", None)):
        return aclosing(results)
    return nullcontext()


def _closing(results: Any) -> AbstractContextManager[Any]:
    # Generators are closed; plain collections have nothing to release
    if callable(getattr(results, "close", None)):
        return closing(results)
    return nullcontext()


def _quad_parts(quad: Any) -> tuple[Node, Node, Node, Node | None]:
    if hasattr(quad, "subject"):
        return quad.subject, quad.predicate, quad.object, getattr(quad, "graph", None)

    if len(quad) == 3:
        subject, predicate, obj = quad
        return subject, predicate, obj, None

    subject, predicate, obj, graph = quad
    return subject, predicate, obj, graph
