"""
Key registry schema

The schema is a list of ordered steps; the registry records how many have
been applied in SQLite's ``user_version`` pragma. Opening an older file
applies the missing steps in order. CRUD lives in core/database.py.
"""

import sqlite3
from typing import List, Tuple

# Import the database module itself so DB_FILE can be monkeypatched in tests
import localizer.core.database as db
from localizer.logger import get_logger

logger = get_logger(__name__)

# (version, statements); a step's version is the user_version after it ran
SCHEMA_STEPS: List[Tuple[int, Tuple[str, ...]]] = [
    (1, (
        """
        CREATE TABLE IF NOT EXISTS keys (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            namespace TEXT NOT NULL,
            kind TEXT NOT NULL,
            text TEXT NOT NULL,
            key TEXT NOT NULL UNIQUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (namespace, kind, text)
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_keys_namespace ON keys(namespace)",
    )),
    (2, (
        "CREATE INDEX IF NOT EXISTS idx_keys_key ON keys(key)",
    )),
]

DB_VERSION = SCHEMA_STEPS[-1][0]


def get_db_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def migrate_database(conn: sqlite3.Connection, from_version: int) -> int:
    """Apply every schema step newer than ``from_version``; returns the new version."""
    version = from_version
    for step_version, statements in SCHEMA_STEPS:
        if step_version <= version:
            continue
        for statement in statements:
            conn.execute(statement)
        # PRAGMA does not take bound parameters
        conn.execute(f"PRAGMA user_version = {int(step_version)}")
        version = step_version
    conn.commit()
    return version


def initialize_database() -> int:
    """Create the registry file if needed and bring its schema up to date."""
    db.DB_FILE.parent.mkdir(parents=True, exist_ok=True)
    with db.get_connection() as conn:
        current = get_db_version(conn)
        if current >= DB_VERSION:
            return current
        version = migrate_database(conn, current)
    if current == 0:
        logger.info(f"Key registry created at {db.DB_FILE}")
    else:
        logger.info(f"Key registry migrated from version {current} to {version}")
    return version
