"""Exceptions raised by the query engine."""

from typing import Any


class QueryEngineError(Exception):
    """Base class for all query engine errors."""


class UnsupportedOperationError(QueryEngineError):
    """Raised for query forms the engine does not execute (e.g. SPARQL UPDATE)."""

    def __init__(self, message: str, query: str):
        super().__init__(message)
        self.query = query


class UnsupportedSourceError(QueryEngineError):
    """Raised when a source descriptor has no recognisable shape."""

    def __init__(self, source: Any):
        super().__init__(f"Unsupported source: {source}")
        self.source = source


class SourceLoadError(QueryEngineError):
    """Raised when a document or quad stream could not be loaded into a store."""

    def __init__(self, message: str, source: Any = None):
        super().__init__(message)
        self.source = source


class QueryExecutionError(QueryEngineError):
    """Raised when the SPARQL engine fails while evaluating a query."""


class QuerySyntaxError(QueryEngineError, ValueError):
    """Raised when a query string cannot be parsed."""
