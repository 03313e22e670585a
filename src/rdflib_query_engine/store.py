"""In-memory quad store used as the query execution substrate."""

from collections.abc import Callable, Iterator
import logging
from typing import TYPE_CHECKING, Any

from rdflib import Dataset, Graph
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.plugins.sparql.sparql import Query
from rdflib.term import Node

from .streams import GraphSource, Quad, QuadStream

if TYPE_CHECKING:
    from .fetcher import DocumentFetcher

logger = logging.getLogger(__name__)

RawRow = dict[str, Node]


class QuadStore:
    """
    Mutable collection of quads backed by an rdflib Dataset.

    Queries see the union of all graphs. Quads are only ever added; a store
    that is no longer needed is simply dropped.
    """

    def __init__(self) -> None:
        self._dataset = Dataset(default_union=True)
        self.fetcher: "DocumentFetcher | None" = None

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def add(
        self,
        subject: Node,
        predicate: Node,
        obj: Node,
        graph: Node | None = None,
    ) -> None:
        """Add one quad; a None graph targets the default graph."""
        if graph is None or graph == DATASET_DEFAULT_GRAPH_ID:
            self._dataset.add((subject, predicate, obj))
        else:
            self._dataset.add((subject, predicate, obj, graph))

    def add_graph(self, graph: Graph, context: Node | None = None) -> int:
        """
        Copy every statement of a parsed graph into the store.

        Args:
            graph: Graph or dataset to copy from
            context: Graph name for statements that sit in the default graph

        Returns:
            int: Number of statements copied
        """
        count = 0
        for quad in GraphSource(graph).quads():
            self.add(quad.subject, quad.predicate, quad.object, quad.graph or context)
            count += 1
        logger.debug(f"Copied {count} statements into store")
        return count

    def quads(
        self,
        subject: Node | None = None,
        predicate: Node | None = None,
        obj: Node | None = None,
        graph: Node | None = None,
    ) -> Iterator[Quad]:
        return GraphSource(self._dataset).quads(subject, predicate, obj, graph)

    def match(
        self,
        subject: Node | None = None,
        predicate: Node | None = None,
        obj: Node | None = None,
        graph: Node | None = None,
    ) -> QuadStream:
        """Stream matching quads, so a store can itself be used as a source."""
        return GraphSource(self._dataset).match(subject, predicate, obj, graph)

    def query(
        self,
        query: Query,
        on_result: Callable[[RawRow], Any],
        on_done: Callable[[BaseException | None], Any],
    ) -> None:
        """
        Evaluate a prepared SELECT query.

        ``on_result`` is called once per solution with a row keyed by
        ``?name``; ``on_done`` is called exactly once afterwards, with the
        error if evaluation failed.
        """
        try:
            result = self._dataset.query(query)
            for solution in result.bindings:
                on_result({variable.n3(): term for variable, term in solution.items()})
        except Exception as e:
            on_done(e)
        else:
            on_done(None)

    def __len__(self) -> int:
        return sum(1 for _ in self.quads())

    def __contains__(self, triple: tuple[Node, Node, Node]) -> bool:
        for _ in self._dataset.triples(triple):
            return True
        return False

