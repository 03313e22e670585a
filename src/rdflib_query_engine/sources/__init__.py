"""Source descriptors and the loader that reads them into a store."""

from .descriptors import (
    DocumentRef,
    QuadSource,
    SourceDescriptor,
    SourceList,
    classify_source,
    strip_fragment,
)
from .loader import read_sources

__all__ = [
    "DocumentRef",
    "QuadSource",
    "SourceDescriptor",
    "SourceList",
    "classify_source",
    "read_sources",
    "strip_fragment",
]
