"""Request helpers shared by the route blueprints."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from flask import current_app

from localizer.config import ProjectPaths, load_ignore_config
from localizer.core.sync import SyncOptions
from localizer.keys import KeyMap, compile_key_pattern
from localizer.parsers import ParseOptions
from localizer.replacers import ReplaceOptions


def get_config() -> Dict[str, Any]:
    return current_app.config["LOCALIZER_CONFIG"]


def get_paths() -> ProjectPaths:
    return current_app.config["LOCALIZER_PATHS"]


def project_path(value: str) -> Path:
    """Resolve a request path against the project root."""
    path = Path(value)
    return path if path.is_absolute() else get_paths().project_root / path


def parse_options() -> ParseOptions:
    config = get_config()
    ignore = load_ignore_config(config, current_app.config["LOCALIZER_PROJECT_ROOT"])
    return ParseOptions(ignore, compile_key_pattern(config))


def replace_options() -> ReplaceOptions:
    config = get_config()
    return ReplaceOptions.from_config(config, load_ignore_config(config, current_app.config["LOCALIZER_PROJECT_ROOT"]))


def commons_namespace() -> str:
    return get_config().get("commons_namespace") or "Commons"


def key_map_from_payload(entries: Optional[List[Dict[str, Any]]]) -> KeyMap:
    """Key map from explicit ``{namespace, kind, text, key}`` entries, else the registry."""
    if entries is not None:
        return KeyMap.from_records(entries, commons_namespace=commons_namespace())
    return KeyMap.from_registry(commons_namespace=commons_namespace())


def string_list(value) -> Optional[List[str]]:
    """A list of non-empty strings, or None when the value is not one."""
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    return [item for item in value if item.strip()]


def sync_options(data: Dict[str, Any]) -> SyncOptions:
    locales = data.get("locales")
    return SyncOptions.from_config(
        get_config(),
        base_locale=data.get("base_locale"),
        locales=string_list(locales) if locales is not None else None,
        force=bool(data.get("force")) or None,
        overwrite_targets=bool(data.get("overwrite_targets")) or None,
        timeout=data.get("timeout"),
    )
