"""
Core module - key registry and locale storage

This module provides:
- database: CRUD operations for the key registry
- schema: Registry initialization and migrations
- store: Locale JSON documents (key paths, layouts, atomic writes)
- sync: Granular propagation of keys across locales
"""

from localizer.core.database import (
    DB_FILE,
    get_connection,
    create_key,
    get_key,
    get_key_record,
    get_all_keys,
    get_key_texts,
    delete_key,
    add_keys_batch,
)

from localizer.core.schema import (
    DB_VERSION,
    SCHEMA_STEPS,
    get_db_version,
    initialize_database,
    migrate_database,
)
