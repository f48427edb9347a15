"""
Key Registry CRUD Operations Module

This module handles the persisted registry that maps a string signature
(namespace, kind, normalized text) to its assigned dotted key:
- Keys: create, lookup, list, delete
- Batch registration for a whole extraction run

For schema management and migrations, see core/schema.py
"""

import os
import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

DB_FILE = Path(os.environ.get("LOCALIZER_DB", Path(__file__).parent.parent.parent / "localizer.db"))


def get_connection():
    """Get a database connection."""
    return sqlite3.connect(DB_FILE)


# ============================================================
# Key CRUD Operations
# ============================================================

def create_key(namespace: str, kind: str, text: str, key: str) -> int:
    """Register one signature -> key association."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO keys (namespace, kind, text, key)
            VALUES (?, ?, ?, ?)
        """, (namespace, kind, text, key))
        conn.commit()
        return cursor.lastrowid


def get_key(namespace: str, kind: str, text: str) -> Optional[str]:
    """Get the key assigned to a signature."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT key FROM keys WHERE namespace = ? AND kind = ? AND text = ?",
            (namespace, kind, text),
        )
        row = cursor.fetchone()
        return row[0] if row else None


def get_key_record(key: str) -> Optional[Dict[str, Any]]:
    """Get the full registry row for a dotted key."""
    with get_connection() as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM keys WHERE key = ?", (key,))
        row = cursor.fetchone()
        return dict(row) if row else None


def get_all_keys(namespace: Optional[str] = None) -> List[Dict[str, Any]]:
    """Get all registered keys, optionally for one namespace, ordered by key."""
    with get_connection() as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()
        if namespace is None:
            cursor.execute("SELECT * FROM keys ORDER BY key")
        else:
            cursor.execute("SELECT * FROM keys WHERE namespace = ? ORDER BY key", (namespace,))
        return [dict(row) for row in cursor.fetchall()]


def get_key_texts() -> Dict[str, str]:
    """Map every registered key to its text (used for slug collision checks)."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT key, text FROM keys")
        return {key: text for key, text in cursor.fetchall()}


def delete_key(key: str) -> bool:
    """Delete a key. Returns True when a row was removed."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM keys WHERE key = ?", (key,))
        conn.commit()
        return cursor.rowcount > 0


def add_keys_batch(entries: Iterable[Tuple[Tuple[str, str, str], str]]) -> int:
    """
    Register many signature -> key associations at once.

    Signatures that are already registered keep their existing key.

    Args:
        entries: Iterable of ((namespace, kind, text), key) pairs

    Returns:
        Number of rows actually inserted
    """
    rows = [(ns, kind, text, key) for (ns, kind, text), key in entries]
    if not rows:
        return 0
    with get_connection() as conn:
        cursor = conn.cursor()
        before = conn.total_changes
        cursor.executemany("""
            INSERT OR IGNORE INTO keys (namespace, kind, text, key)
            VALUES (?, ?, ?, ?)
        """, rows)
        conn.commit()
        return conn.total_changes - before
