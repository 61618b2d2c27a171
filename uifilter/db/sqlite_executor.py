#!/usr/bin/env python3
"""
Query executor for a single SQLite table.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import aiosqlite

from ..plan import QueryExecutor, QueryPlan
from ..predicate import Predicate
from ..resolver import FieldResolver, FieldValueCategory, MappingFieldResolver
from ..sort import SortSpec
from .db_helpers import aconnect
from .filters.sqlite_backend import SQLiteFilterBackend, quote_identifier


def category_for_declared_type(declared_type: str) -> FieldValueCategory:
    """
    Map a declared SQLite column type to a value category, following
    SQLite's column affinity rules.
    """
    declared = (declared_type or "").upper()
    if "INT" in declared:
        return FieldValueCategory.ORDERED
    if "CHAR" in declared or "CLOB" in declared or "TEXT" in declared:
        return FieldValueCategory.TEXT
    if not declared or "BLOB" in declared or "BOOL" in declared:
        return FieldValueCategory.OPAQUE
    # REAL and NUMERIC affinity (REAL, DECIMAL, DATE, DATETIME, ...)
    return FieldValueCategory.ORDERED


class SQLiteQueryExecutor(QueryExecutor):
    """
    Runs query plans against one SQLite table and returns rows as dicts.
    """

    def __init__(self,
                 db_path: str,
                 table: str,
                 resolver: Optional[FieldResolver] = None,
                 metadata_column: Optional[str] = None,
                 direct_fields: Optional[Iterable[str]] = None):
        """
        Initialize the executor.

        Args:
            db_path: Path to SQLite database
            table: Table to query
            resolver: When given, sort fields must resolve through it
            metadata_column: JSON column holding fields that are not columns
            direct_fields: Fields stored as real columns when metadata_column is set
        """
        self.db_path = db_path
        self.table = table
        self.resolver = resolver
        self.metadata_column = metadata_column
        self.direct_fields = set(direct_fields or ())
        self.logger = logging.getLogger(__name__)

    def _backend(self) -> SQLiteFilterBackend:
        # Backends collect params while converting, so each query gets its own
        return SQLiteFilterBackend(
            metadata_column=self.metadata_column,
            direct_fields=self.direct_fields,
        )

    def _check_sort(self, sort: SortSpec) -> None:
        if self.resolver is None:
            return
        for order in sort:
            self.resolver.require(order.field)

    async def find(self, plan: QueryPlan) -> List[Dict[str, Any]]:
        """
        Fetch the rows matched by a plan.

        Raises:
            FieldResolutionError: If a sort field is unknown to the resolver
        """
        self._check_sort(plan.sort)

        backend = self._backend()
        where, params = backend.convert(plan.predicate)
        order_by = backend.order_by(plan.sort)
        limit, limit_params = backend.limit(plan.page)

        sql = " ".join(part for part in (
            f"SELECT * FROM {quote_identifier(self.table)} WHERE {where}", order_by, limit
        ) if part)
        self.logger.debug(f"find: {sql} {params + limit_params}")

        async with aconnect(self.db_path) as conn:
            conn.row_factory = aiosqlite.Row
            cursor = await conn.execute(sql, params + limit_params)
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def count(self, predicate: Optional[Predicate]) -> int:
        """Count the rows matched by a predicate."""
        where, params = self._backend().convert(predicate)
        sql = f"SELECT COUNT(*) FROM {quote_identifier(self.table)} WHERE {where}"
        self.logger.debug(f"count: {sql} {params}")

        async with aconnect(self.db_path) as conn:
            cursor = await conn.execute(sql, params)
            row = await cursor.fetchone()
        return row[0]

    async def load_resolver(self) -> MappingFieldResolver:
        """
        Build a resolver from the table's declared column types.
        """
        async with aconnect(self.db_path) as conn:
            cursor = await conn.execute(f"PRAGMA table_info({quote_identifier(self.table)})")
            columns = await cursor.fetchall()
        # table_info rows: (cid, name, type, notnull, dflt_value, pk)
        return MappingFieldResolver({
            column[1]: category_for_declared_type(column[2]) for column in columns
        })
