# durable key-value store, values are JSON text
from __future__ import annotations

import json
from typing import Any, Optional

import aiosqlite

from db.database import connect
from utils.logger import get_logger

_logger = get_logger(__name__)

STORAGE_KEYS = {
    "auth": "biocat_auth",
    "products": "biocat_products",
    "clients": "biocat_clients",
    "theme": "biocat_theme",
}


async def get_item(key: str) -> Optional[Any]:
    """Return the parsed value stored under key.

    Missing keys and malformed JSON both come back as None, never an exception.
    """
    try:
        async with connect() as conn:
            cur = await conn.execute("SELECT value FROM kv WHERE key = ?;", (key,))
            row = await cur.fetchone()
            await cur.close()
    except (aiosqlite.Error, OSError) as e:
        _logger.error(f"Error reading from store: {key} ({e})")
        return None

    if row is None:
        return None
    try:
        return json.loads(row[0])
    except json.JSONDecodeError:
        _logger.warning(f"Malformed value under {key}, treating it as absent.")
        return None


async def set_item(key: str, value: Any) -> bool:
    """Serialize value and store it under key. Returns False on failure."""
    try:
        text = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        _logger.error(f"Error serializing value for store: {key} ({e})")
        return False

    try:
        async with connect() as conn:
            await conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value;
                """,
                (key, text),
            )
            await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        _logger.error(f"Error writing to store: {key} ({e})")
        return False
    return True


async def remove_item(key: str) -> bool:
    try:
        async with connect() as conn:
            await conn.execute("DELETE FROM kv WHERE key = ?;", (key,))
            await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        _logger.error(f"Error removing from store: {key} ({e})")
        return False
    return True


async def clear_items() -> bool:
    try:
        async with connect() as conn:
            await conn.execute("DELETE FROM kv;")
            await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        _logger.error(f"Error clearing store ({e})")
        return False
    return True
