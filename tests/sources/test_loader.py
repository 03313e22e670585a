"""Tests for read_sources."""

import asyncio
from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from rdflib import Graph, Literal, Namespace, URIRef

from rdflib_query_engine.errors import SourceLoadError, UnsupportedSourceError
from rdflib_query_engine.providers import FileProvider
from rdflib_query_engine.sources import read_sources
from rdflib_query_engine.store import QuadStore
from rdflib_query_engine.streams import Quad, QuadStream

EX = Namespace("http://example.org/")


class ScriptedSource:
    """Quad source whose stream replays a fixed script of events."""

    def __init__(self, events: list[tuple[str, Any]]):
        self.events = events
        self.streams: list[QuadStream] = []

    def match(self, *pattern: Any) -> QuadStream:
        stream = QuadStream()
        self.streams.append(stream)
        asyncio.get_running_loop().call_soon(self._play, stream)
        return stream

    def _play(self, stream: QuadStream) -> None:
        for event, payload in self.events:
            if event == "data":
                stream.push(payload)
            elif event == "error":
                stream.fail(payload)
            else:
                stream.end()


class IterableSource:
    """Quad source whose ``match`` returns a plain iterable."""

    def __init__(self, quads: Any):
        self.quads = quads

    def match(self, *pattern: Any) -> Any:
        return self.quads


class AsyncIterableSource:
    """Quad source whose ``match`` returns an async iterable."""

    def __init__(self, quads: list[Any]):
        self.quads = quads

    def match(self, *pattern: Any) -> AsyncIterator[Any]:
        async def generate() -> AsyncIterator[Any]:
            for quad in self.quads:
                await asyncio.sleep(0)
                yield quad

        return generate()


class GeneratorSource:
    """Quad source backed by a generator that records when it is closed."""

    def __init__(self, quads: list[Any], asynchronous: bool):
        self.quads = quads
        self.asynchronous = asynchronous
        self.closed = False

    def match(self, *pattern: Any) -> Any:
        return self._agenerate() if self.asynchronous else self._generate()

    def _generate(self) -> Iterator[Any]:
        try:
            yield from self.quads
        finally:
            self.closed = True

    async def _agenerate(self) -> AsyncIterator[Any]:
        try:
            for quad in self.quads:
                await asyncio.sleep(0)
                yield quad
        finally:
            self.closed = True


def _load(sources: Any, store: QuadStore | None = None) -> QuadStore:
    return asyncio.run(read_sources(sources, store))


class TestEmptyDescriptors:
    """Test descriptors that contribute nothing."""

    @pytest.mark.parametrize("sources", [None, "", [], ()])
    def test_new_store_is_empty(self, sources: Any) -> None:
        store = _load(sources)

        assert isinstance(store, QuadStore)
        assert len(store) == 0

    def test_given_store_returned_unchanged(self) -> None:
        store = QuadStore()
        store.add(EX.a, EX.p, Literal("1"))

        assert _load([], store) is store
        assert len(store) == 1

    def test_awaitable_resolving_to_nothing(self) -> None:
        async def nothing() -> None:
            return None

        assert len(_load(nothing())) == 0


class TestDocuments:
    """Test loading of document identifiers."""

    def test_path_string(self, turtle_file: Path) -> None:
        store = _load(str(turtle_file))

        assert (EX.a, EX.p, Literal("1")) in store
        assert len(store) == 2

    def test_path_object(self, turtle_file: Path) -> None:
        assert len(_load(turtle_file)) == 2

    def test_awaitable_descriptor(self, turtle_file: Path) -> None:
        async def pending() -> str:
            await asyncio.sleep(0)
            return str(turtle_file)

        assert len(_load(pending())) == 2

    def test_fragment_is_ignored(self, turtle_file: Path) -> None:
        document = turtle_file.resolve().as_uri()

        store = _load(URIRef(f"{document}#me"))

        assert {quad.graph for quad in store.quads()} == {URIRef(document)}

    def test_nested_lists(self, turtle_file: Path, other_turtle_file: Path) -> None:
        store = _load([[str(turtle_file)], [[str(other_turtle_file)]]])

        assert len(store) == 3
        assert (EX.c, EX.q, Literal("3")) in store

    def test_document_fetched_once_per_store(self, turtle_file: Path) -> None:
        document = turtle_file.resolve().as_uri()

        with patch.object(
            FileProvider, "fetch", autospec=True, side_effect=FileProvider.fetch
        ) as mock_fetch:
            store = _load([document, f"{document}#a", [f"{document}#b"]])

        assert mock_fetch.call_count == 1
        assert len(store) == 2

    def test_failure_keeps_earlier_statements(self, missing_file: Path) -> None:
        store = QuadStore()
        store.add(EX.a, EX.p, Literal("1"))

        with pytest.raises(SourceLoadError):
            _load(str(missing_file), store)

        assert (EX.a, EX.p, Literal("1")) in store

    def test_one_failing_item_fails_the_list(
        self, turtle_file: Path, missing_file: Path
    ) -> None:
        with pytest.raises(SourceLoadError, match="missing.ttl"):
            _load([str(turtle_file), str(missing_file)])

    def test_unsupported_item_in_list(self, turtle_file: Path) -> None:
        with pytest.raises(UnsupportedSourceError):
            _load([str(turtle_file), 42])


class TestQuadSources:
    """Test loading of objects exposing ``match``."""

    def test_rdflib_graph(self, sample_graph: Graph) -> None:
        store = _load(sample_graph)

        assert set(store.quads()) == {
            Quad(EX.a, EX.p, Literal("1")),
            Quad(EX.b, EX.p, Literal("2")),
        }

    def test_stream_keeps_graph_names(self) -> None:
        source = ScriptedSource(
            [
                ("data", Quad(EX.a, EX.p, Literal("1"), EX.g1)),
                ("data", (EX.b, EX.p, Literal("2"))),
                ("end", None),
            ]
        )

        store = _load(source)

        assert list(store.quads(graph=EX.g1)) == [
            Quad(EX.a, EX.p, Literal("1"), EX.g1)
        ]
        assert (EX.b, EX.p, Literal("2")) in store
        assert source.streams[0].listener_count("data") == 0

    def test_stream_error(self) -> None:
        failure = RuntimeError("connection reset")
        source = ScriptedSource(
            [("data", Quad(EX.a, EX.p, Literal("1"))), ("error", failure)]
        )

        with pytest.raises(SourceLoadError, match="connection reset") as exc_info:
            _load(source)

        assert exc_info.value.__cause__ is failure
        stream = source.streams[0]
        for event in QuadStream.EVENTS:
            assert stream.listener_count(event) == 0

    def test_rejected_quad_stops_loading(self) -> None:
        source = ScriptedSource(
            [
                ("data", (EX.a, EX.p)),
                ("data", Quad(EX.b, EX.p, Literal("2"))),
                ("end", None),
            ]
        )
        store = QuadStore()

        with pytest.raises(SourceLoadError):
            _load(source, store)

        assert len(store) == 0
        assert source.streams[0].listener_count("data") == 0

    def test_plain_iterable(self) -> None:
        source = IterableSource(
            [(EX.a, EX.p, Literal("1")), (EX.b, EX.p, Literal("2"), EX.g1)]
        )

        store = _load(source)

        assert len(store) == 2
        assert list(store.quads(graph=EX.g1)) == [
            Quad(EX.b, EX.p, Literal("2"), EX.g1)
        ]

    def test_plain_iterable_error(self) -> None:
        def broken() -> Any:
            yield (EX.a, EX.p, Literal("1"))
            raise OSError("disk gone")

        with pytest.raises(SourceLoadError, match="disk gone"):
            _load(IterableSource(broken()))

    def test_async_iterable(self) -> None:
        source = AsyncIterableSource(
            [Quad(EX.a, EX.p, Literal("1")), Quad(EX.c, EX.q, Literal("3"), EX.g1)]
        )

        store = _load(source)

        assert len(store) == 2

    def test_mixed_list(self, turtle_file: Path) -> None:
        source = IterableSource([(EX.c, EX.q, Literal("3"))])

        store = _load([str(turtle_file), source])

        assert len(store) == 3

    @pytest.mark.parametrize("asynchronous", [False, True])
    def test_generator_closed_when_quad_rejected(self, asynchronous: bool) -> None:
        source = GeneratorSource(
            [(EX.a, EX.p), Quad(EX.b, EX.p, Literal("2"))], asynchronous
        )

        with pytest.raises(SourceLoadError):
            _load(source)

        assert source.closed

    @pytest.mark.parametrize("asynchronous", [False, True])
    def test_generator_closed_after_last_quad(self, asynchronous: bool) -> None:
        source = GeneratorSource([Quad(EX.a, EX.p, Literal("1"))], asynchronous)

        store = _load(source)

        assert len(store) == 1
        assert source.closed


class TestUnsupportedSources:
    """Test descriptors that name no loadable source."""

    @pytest.mark.parametrize("source", [42, Literal("hello")])
    def test_rejected_before_any_fetch(self, source: Any) -> None:
        with patch.object(FileProvider, "fetch") as mock_fetch:
            with pytest.raises(UnsupportedSourceError):
                _load(source)

        mock_fetch.assert_not_called()
