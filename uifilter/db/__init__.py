"""
Storage backends and executors for compiled query plans.
"""

from .db_helpers import aconnect
from .sqlite_executor import SQLiteQueryExecutor, category_for_declared_type

__all__ = [
    'aconnect',
    'SQLiteQueryExecutor',
    'category_for_declared_type',
]
