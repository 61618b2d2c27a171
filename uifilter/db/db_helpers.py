#!/usr/bin/env python3
"""
Database connection helpers.
"""

from contextlib import asynccontextmanager

import aiosqlite


def unicode_lower(value):
    """lower() for SQL that folds every script, not just ASCII."""
    return value.lower() if isinstance(value, str) else value


@asynccontextmanager
async def aconnect(db_path: str, writer: bool = False):
    """
    Asynchronous database connection context manager.

    SQLite's built-in lower() only folds ASCII letters. It is replaced on
    every connection so that case-insensitive comparisons fold the column
    the same way the compiler folds the operands.

    Args:
        db_path: Path to SQLite database
        writer: If True, commits changes on exit
    """
    conn = await aiosqlite.connect(db_path)
    try:
        await (await conn.execute("PRAGMA busy_timeout=5000")).close()
        await conn.create_function("lower", 1, unicode_lower, deterministic=True)

        yield conn

        if writer:
            await conn.commit()
    except Exception:
        if writer:
            await conn.rollback()
        raise
    finally:
        await conn.close()
