"""
Predicate backends.

Lower compiled predicate trees into the native query form of a data store.

Example usage:
    from uifilter.db.filters import SQLiteFilterBackend

    backend = SQLiteFilterBackend()
    where_clause, params = backend.convert(predicate)
"""

from .sqlite_backend import SQLiteFilterBackend, quote_identifier
from .qdrant_backend import QdrantFilterBackend

__all__ = [
    'SQLiteFilterBackend',
    'QdrantFilterBackend',
    'quote_identifier',
]
