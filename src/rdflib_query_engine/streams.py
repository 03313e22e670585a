"""Event-style quad streams and an adapter exposing rdflib graphs as quad sources."""

import asyncio
from collections.abc import Callable, Iterator
from typing import Any, NamedTuple

from rdflib import ConjunctiveGraph, Graph
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.term import Node

Listener = Callable[..., Any]


class Quad(NamedTuple):
    """A single statement; ``graph`` is None for the default graph."""

    subject: Node
    predicate: Node
    object: Node
    graph: Node | None = None


class QuadStream:
    """
    Push-based stream of quads.

    Emits any number of ``data`` events (one quad each) followed by exactly
    one ``end`` or ``error`` event. Emissions after the stream closed are
    ignored.
    """

    EVENTS = ("data", "end", "error")

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {
            event: [] for event in self.EVENTS
        }
        self.closed = False

    def on(self, event: str, listener: Listener) -> "QuadStream":
        self._check_event(event)
        self._listeners[event].append(listener)
        return self

    def remove_listener(self, event: str, listener: Listener) -> "QuadStream":
        self._check_event(event)
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)
        return self

    def listener_count(self, event: str) -> int:
        self._check_event(event)
        return len(self._listeners[event])

    def push(self, quad: Quad) -> None:
        if not self.closed:
            self._emit("data", quad)

    def end(self) -> None:
        if not self.closed:
            self.closed = True
            self._emit("end")

    def fail(self, error: BaseException) -> None:
        if not self.closed:
            self.closed = True
            self._emit("error", error)

    def _emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners[event]):
            listener(*args)

    def _check_event(self, event: str) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown stream event: {event}")


class GraphSource:
    """Expose an rdflib graph or dataset through the ``match`` protocol."""

    def __init__(self, graph: Graph):
        self.graph = graph

    def match(
        self,
        subject: Node | None = None,
        predicate: Node | None = None,
        obj: Node | None = None,
        graph: Node | None = None,
    ) -> QuadStream:
        """
        Stream every quad matching the pattern; None is a wildcard.

        Events are emitted from the running event loop after this call
        returns, so listeners attached right away see the whole stream.
        """
        stream = QuadStream()
        loop = asyncio.get_running_loop()
        loop.call_soon(self._drain, stream, (subject, predicate, obj, graph))
        return stream

    def _drain(self, stream: QuadStream, pattern: tuple[Node | None, ...]) -> None:
        try:
            for quad in self.quads(*pattern):
                stream.push(quad)
        except Exception as e:
            stream.fail(e)
        else:
            stream.end()

    def quads(
        self,
        subject: Node | None = None,
        predicate: Node | None = None,
        obj: Node | None = None,
        graph: Node | None = None,
    ) -> Iterator[Quad]:
        if not isinstance(self.graph, ConjunctiveGraph):
            # A plain graph only has a default graph
            if graph is not None:
                return
            for s, p, o in self.graph.triples((subject, predicate, obj)):
                yield Quad(s, p, o, None)
            return

        for s, p, o, context in self.graph.quads((subject, predicate, obj, graph)):
            name = getattr(context, "identifier", context)
            if name == DATASET_DEFAULT_GRAPH_ID:
                name = None
            yield Quad(s, p, o, name)
