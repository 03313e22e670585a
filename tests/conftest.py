"""Shared test fixtures for the query engine tests."""

import asyncio
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import pytest
from rdflib import Dataset, Graph, Literal, Namespace, URIRef

EX = Namespace("http://example.org/")

SAMPLE_TURTLE = """\
@prefix ex: <http://example.org/> .
ex:a ex:p "1" .
ex:b ex:p "2" .
"""

OTHER_TURTLE = """\
@prefix ex: <http://example.org/> .
ex:c ex:q "3" .
"""

SAMPLE_NQUADS = """\
<http://example.org/a> <http://example.org/p> "1" <http://example.org/g1> .
<http://example.org/b> <http://example.org/p> "2" .
"""


@pytest.fixture
def turtle_file(tmp_path: Path) -> Path:
    """Turtle document with two ex:p statements."""
    path = tmp_path / "data.ttl"
    path.write_text(SAMPLE_TURTLE, encoding="utf-8")
    return path


@pytest.fixture
def other_turtle_file(tmp_path: Path) -> Path:
    """Turtle document with a single ex:q statement."""
    path = tmp_path / "other.ttl"
    path.write_text(OTHER_TURTLE, encoding="utf-8")
    return path


@pytest.fixture
def nquads_file(tmp_path: Path) -> Path:
    """N-Quads document with one named-graph statement and one triple."""
    path = tmp_path / "data.nq"
    path.write_text(SAMPLE_NQUADS, encoding="utf-8")
    return path


@pytest.fixture
def missing_file(tmp_path: Path) -> Path:
    """Path of a document that does not exist."""
    return tmp_path / "missing.ttl"


@pytest.fixture
def sample_graph() -> Graph:
    """In-memory graph with the same statements as the turtle fixture."""
    graph = Graph()
    graph.add((EX.a, EX.p, Literal("1")))
    graph.add((EX.b, EX.p, Literal("2")))
    return graph


@pytest.fixture
def sample_dataset() -> Dataset:
    """Dataset with one statement in the default graph and one in ex:g1."""
    dataset = Dataset()
    dataset.add((EX.a, EX.p, Literal("1")))
    dataset.add((EX.c, EX.q, Literal("3"), URIRef("http://example.org/g1")))
    return dataset


@pytest.fixture
def collect() -> Callable[[AsyncIterator[Any]], list[Any]]:
    """Drain an async iterator on a fresh event loop and return its items."""

    def _collect(iterator: AsyncIterator[Any]) -> list[Any]:
        async def drain() -> list[Any]:
            return [item async for item in iterator]

        return asyncio.run(drain())

    return _collect
