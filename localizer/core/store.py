"""
Locale Store Module

This module handles locale JSON documents on disk:
- key-path access on nested dict trees (get/has/set)
- recursive key sorting and leaf flattening
- strict and lenient document reads, atomic sorted writes
- flat vs. grouped layout detection and locale discovery
- mapping a key to its namespace document in the grouped layout
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from localizer.exceptions import MalformedLocaleDocument
from localizer.logger import get_logger

logger = get_logger(__name__)

LAYOUT_FLAT = "flat"
LAYOUT_GROUPED = "grouped"
DEFAULT_DOCUMENT = "common.json"

MISSING = object()


def split_key(key: str) -> List[str]:
    return [segment for segment in key.split(".") if segment]


def get_key_path(tree: Dict[str, Any], key: str, default: Any = None) -> Any:
    node: Any = tree
    for segment in split_key(key):
        if not isinstance(node, dict) or segment not in node:
            return default
        node = node[segment]
    return node


def has_key_path(tree: Dict[str, Any], key: str) -> bool:
    return get_key_path(tree, key, MISSING) is not MISSING


def set_key_path(tree: Dict[str, Any], key: str, value: Any) -> None:
    """Set a leaf, creating intermediate objects and replacing non-object intermediates."""
    segments = split_key(key)
    if not segments:
        raise ValueError("empty key")
    node = tree
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value


def is_missing_value(value: Any) -> bool:
    """Absent leaves and empty/whitespace-only strings count as missing."""
    if value is None or value is MISSING:
        return True
    return isinstance(value, str) and not value.strip()


def sort_deep(value: Any) -> Any:
    """Return a copy with object keys sorted ascending at every level."""
    if isinstance(value, dict):
        return {k: sort_deep(value[k]) for k in sorted(value)}
    if isinstance(value, list):
        return [sort_deep(v) for v in value]
    return value


def flatten_leaves(tree: Any, prefix: str = "") -> Dict[str, str]:
    """Collect every string leaf as ``dotted.key -> value``."""
    leaves: Dict[str, str] = {}
    if not isinstance(tree, dict):
        return leaves
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            leaves.update(flatten_leaves(value, path))
        elif isinstance(value, str):
            leaves[path] = value
    return leaves


def read_document(path: Path) -> Dict[str, Any]:
    """
    Read a locale document.

    Returns {} for a missing file. Raises MalformedLocaleDocument when the
    file is not valid JSON or its top level is not an object.
    """
    path = Path(path)
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    except UnicodeDecodeError as e:
        raise MalformedLocaleDocument(path, f"not UTF-8: {e}") from e
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedLocaleDocument(path, str(e)) from e
    if not isinstance(data, dict):
        raise MalformedLocaleDocument(path, f"top level is {type(data).__name__}, expected object")
    return data


def read_document_or_empty(path: Path) -> Dict[str, Any]:
    """Lenient read: a malformed document is logged and treated as empty."""
    try:
        return read_document(path)
    except MalformedLocaleDocument as e:
        logger.warning(f"{e}; treating it as empty")
        return {}


def serialize_document(data: Dict[str, Any]) -> str:
    return json.dumps(sort_deep(data), ensure_ascii=False, indent=2) + "\n"


def write_document(path: Path, data: Dict[str, Any]) -> None:
    """
    Write a locale document atomically with keys sorted recursively.

    The content goes to a temporary file in the target directory first and
    is then renamed over the target, so readers never see a partial file.
    OSError propagates to the caller.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".json.tmp")
    temp_path = Path(temp_name)
    try:
        with open(temp_fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(serialize_document(data))
        temp_path.replace(path)
        logger.debug(f"Wrote {path}")
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def detect_layout(root: Path, base_locale: str) -> str:
    """Grouped when ``<root>/<base_locale>`` is a directory, flat otherwise."""
    return LAYOUT_GROUPED if (Path(root) / base_locale).is_dir() else LAYOUT_FLAT


def discover_locales(root: Path, base_locale: str) -> List[str]:
    """Locales present under the translations root, excluding the base locale."""
    root = Path(root)
    if not root.is_dir():
        return []
    locales = set()
    for entry in root.iterdir():
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            locales.add(entry.name)
        elif entry.is_file() and entry.suffix == ".json":
            locales.add(entry.stem)
    locales.discard(base_locale)
    return sorted(locales)


def locale_document_path(root: Path, locale: str, layout: str, relative: Optional[str] = None) -> Path:
    """Path of a locale's document: ``<locale>.json`` (flat) or ``<locale>/<relative>`` (grouped)."""
    root = Path(root)
    if layout == LAYOUT_FLAT:
        return root / f"{locale}.json"
    return root / locale / (relative or DEFAULT_DOCUMENT)


def document_for_key(root: Path, base_locale: str, key: str) -> str:
    """
    Relative document (grouped layout) that holds ``key``.

    The first key segment names the document: ``<segment>.json`` when the
    base locale has it, else ``<segment lower>/<second lower>.json`` when
    the base locale keeps that namespace as a directory, else
    ``<segment lower>.json``. Single-segment keys live in common.json.
    """
    segments = split_key(key)
    if len(segments) < 2:
        return DEFAULT_DOCUMENT
    base_dir = Path(root) / base_locale
    first = segments[0]
    if (base_dir / f"{first}.json").is_file():
        return f"{first}.json"
    lower = first.lower()
    if len(segments) >= 3 and (base_dir / lower).is_dir():
        return f"{lower}/{segments[1].lower()}.json"
    return f"{lower}.json"


def _merge_trees(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge_trees(target[key], value)
        else:
            target[key] = value


def read_locale_tree(root: Path, locale: str, base_locale: Optional[str] = None) -> Dict[str, Any]:
    """
    Every document of one locale merged into a single tree.

    In the grouped layout each document already holds fully qualified keys,
    so documents are deep-merged in path order. Malformed documents count
    as empty.
    """
    root = Path(root)
    layout = detect_layout(root, base_locale or locale)
    if layout == LAYOUT_FLAT:
        return read_document_or_empty(locale_document_path(root, locale, LAYOUT_FLAT))
    tree: Dict[str, Any] = {}
    locale_dir = root / locale
    if locale_dir.is_dir():
        for path in sorted(locale_dir.rglob("*.json")):
            _merge_trees(tree, read_document_or_empty(path))
    return tree
