"""Classification of source descriptors into the shapes the loader understands."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any
from urllib.parse import ParseResult, SplitResult

from rdflib import Graph, URIRef
from rdflib.term import Identifier

from ..errors import UnsupportedSourceError
from ..streams import GraphSource


@dataclass(frozen=True)
class DocumentRef:
    """A single RDF document to fetch, identified without its fragment."""

    document: str


@dataclass(frozen=True)
class SourceList:
    """Several descriptors loaded into the same store."""

    items: tuple[Any, ...]


@dataclass(frozen=True)
class QuadSource:
    """An object exposing ``match(subject, predicate, object, graph)``."""

    provider: Any


SourceDescriptor = DocumentRef | SourceList | QuadSource


def strip_fragment(location: str) -> str:
    """Drop the ``#fragment`` part of a document identifier."""
    return location.split("#", 1)[0]


def _as_location(source: Any) -> str | None:
    # Literals, blank nodes and variables are str subclasses but name no document
    if isinstance(source, Identifier) and not isinstance(source, URIRef):
        return None
    if isinstance(source, str):
        return source
    if isinstance(source, ParseResult | SplitResult):
        return source.geturl()
    if isinstance(source, os.PathLike):
        return Path(source).resolve().as_uri()

    href = getattr(source, "href", None)
    if isinstance(href, str):
        return href
    if getattr(source, "termType", None) == "NamedNode":
        return str(source.value)
    return None


def classify_source(source: Any) -> SourceDescriptor:
    """
    Determine which kind of source a resolved descriptor is.

    Args:
        source: An already-awaited, non-empty descriptor

    Returns:
        SourceDescriptor: Document reference, list or quad source

    Raises:
        UnsupportedSourceError: If the value matches none of the known shapes
    """
    location = _as_location(source)
    if location is not None:
        return DocumentRef(strip_fragment(location))

    if isinstance(source, list | tuple):
        return SourceList(tuple(source))

    if callable(getattr(source, "match", None)):
        return QuadSource(source)

    if isinstance(source, Graph):
        return QuadSource(GraphSource(source))

    raise UnsupportedSourceError(source)
