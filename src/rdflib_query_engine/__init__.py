"""
rdflib query engine

Runs SPARQL SELECT queries over RDF documents, quad streams and rdflib
graphs. Sources are loaded into an in-memory rdflib Dataset and results are
produced as an asynchronous iterator of bindings.
"""

from .engine import RdflibQueryEngine
from .errors import (
    QueryEngineError,
    QueryExecutionError,
    QuerySyntaxError,
    SourceLoadError,
    UnsupportedOperationError,
    UnsupportedSourceError,
)
from .sources import read_sources
from .store import QuadStore
from .streams import GraphSource, Quad, QuadStream

__version__ = "0.1.0"

__all__ = [
    "GraphSource",
    "Quad",
    "QuadStore",
    "QuadStream",
    "QueryEngineError",
    "QueryExecutionError",
    "QuerySyntaxError",
    "RdflibQueryEngine",
    "SourceLoadError",
    "UnsupportedOperationError",
    "UnsupportedSourceError",
    "read_sources",
]
