"""
Configuration helpers for the UI filter service.
Supports environment variables for easy deployment configuration.
"""

import os
from typing import Any, Dict, List, Optional


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """
    Configuration helper that reads from environment variables.

    Environment variables:
        UIFILTER_GLOBAL_ATTRIBUTES: Comma separated attributes searched by the global field
        UIFILTER_DEFAULT_SORT_FIELD: Sort field used when a request names none
        UIFILTER_DB_PATH: SQLite database path
        UIFILTER_TABLE: SQLite table queried by the executor
    """

    @staticmethod
    def from_env() -> Dict[str, Any]:
        """
        Create service configuration from environment variables.

        Returns:
            Dict with keyword arguments for UIFilterService

        Example:
            from uifilter import UIFilterService
            from uifilter.config import Config

            service = UIFilterService(resolver, **Config.from_env())
        """
        config: Dict[str, Any] = {
            "global_attributes": _split_list(os.getenv("UIFILTER_GLOBAL_ATTRIBUTES")),
        }

        default_sort_field = os.getenv("UIFILTER_DEFAULT_SORT_FIELD", "").strip()
        if default_sort_field:
            config["default_sort_field"] = default_sort_field

        return config

    @staticmethod
    def for_sqlite(db_path: str, table: str) -> Dict[str, Any]:
        """
        Configuration for a SQLite executor.

        Args:
            db_path: Path to SQLite database
            table: Table to query

        Returns:
            Dict with keyword arguments for SQLiteQueryExecutor
        """
        return {
            "db_path": db_path,
            "table": table,
        }

    @staticmethod
    def sqlite_from_env() -> Dict[str, Any]:
        """
        SQLite executor configuration from UIFILTER_DB_PATH and UIFILTER_TABLE.
        """
        return Config.for_sqlite(
            os.path.expanduser(os.getenv("UIFILTER_DB_PATH", "./uifilter.db")),
            os.getenv("UIFILTER_TABLE", "records"),
        )
