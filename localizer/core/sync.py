"""
Granular locale synchronization module.

This module propagates keys from the base locale into sibling locales:
- sync_keys: push an explicit key list to every target locale
- sync_file: push every leaf of a base-locale document that just changed
- ensure_keys: create missing base-locale keys, then push them

Both on-disk layouts are supported and detected automatically: flat
(``<root>/<locale>.json``) and grouped (``<root>/<locale>/<namespace>.json``).
Sync is additive: base keys are never removed and non-empty target values
are never overwritten unless ``overwrite_targets`` is set.

Documents for different paths are processed concurrently. Each
read-modify-write cycle runs in a worker thread while holding a
process-wide lock for its path, so concurrent operations on the same
document (from any event loop or thread) never lose each other's keys.
"""

import asyncio
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from localizer.core.store import (
    LAYOUT_FLAT,
    LAYOUT_GROUPED,
    MISSING,
    detect_layout,
    discover_locales,
    document_for_key,
    flatten_leaves,
    get_key_path,
    is_missing_value,
    locale_document_path,
    read_document_or_empty,
    set_key_path,
    split_key,
    write_document,
)
from localizer.exceptions import SyncCancelled, SyncIOError
from localizer.logger import get_logger
from localizer.text_utils import humanize_key_segment

logger = get_logger(__name__)


@dataclass
class SyncOptions:
    """Options shared by all sync operations."""

    base_locale: str = "en"
    locales: Optional[List[str]] = None  # None => discover from the translations root
    force: bool = False  # ensure_keys: overwrite base values when a new value is supplied
    overwrite_targets: bool = False  # sync: replace non-empty target values with base values
    timeout: Optional[float] = None  # seconds for the whole operation
    should_cancel: Optional[Callable[[], bool]] = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **overrides) -> "SyncOptions":
        options = cls(
            base_locale=config.get("base_locale") or "en",
            locales=config.get("locales"),
            timeout=config.get("sync_timeout"),
        )
        for name, value in overrides.items():
            if value is not None:
                setattr(options, name, value)
        return options


@dataclass
class SyncResult:
    """Container for synchronization results.

    ``updated_count`` is the number of documents written; ``updated_keys``
    is the number of leaves set across those documents.
    """

    updated_count: int = 0
    updated_keys: int = 0
    files: List[str] = field(default_factory=list)
    failures: List[Dict[str, str]] = field(default_factory=list)  # [{"path", "error"}]
    cancelled: bool = False

    def record_write(self, path: Path, updated_keys: int) -> None:
        self.updated_count += 1
        self.updated_keys += updated_keys
        self.files.append(str(path))

    def record_failure(self, path: Path, error: Exception) -> None:
        self.failures.append({"path": str(path), "error": str(error)})

    def merge(self, other: "SyncResult") -> "SyncResult":
        self.updated_count += other.updated_count
        self.updated_keys += other.updated_keys
        self.files.extend(f for f in other.files if f not in self.files)
        self.failures.extend(other.failures)
        self.cancelled = self.cancelled or other.cancelled
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "updated_count": self.updated_count,
            "updated_keys": self.updated_keys,
            "files": list(self.files),
            "failures": list(self.failures),
            "cancelled": self.cancelled,
        }

    def __str__(self):
        return (f"SyncResult(updated={self.updated_count}, "
                f"files={len(self.files)}, "
                f"failed={len(self.failures)}, "
                f"cancelled={self.cancelled})")


class _RunControl:
    """Cooperative cancellation and deadline, checked before each document write.

    ``check`` is called from worker threads, so the deadline uses the
    monotonic clock rather than the event loop's.
    """

    def __init__(self, options: SyncOptions):
        self._should_cancel = options.should_cancel
        self._deadline = None
        if options.timeout is not None:
            self._deadline = time.monotonic() + options.timeout

    def check(self) -> None:
        if self._should_cancel is not None and self._should_cancel():
            raise SyncCancelled("cancelled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise SyncCancelled("timeout")


# Resolved path -> lock; shared by every thread and event loop in the process
_path_locks: Dict[str, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(Path(path).resolve())
    with _path_locks_guard:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.Lock()
        return lock


def _read_locked(path: Path) -> Dict[str, Any]:
    with _lock_for(path):
        return read_document_or_empty(path)


async def _read(path: Path) -> Dict[str, Any]:
    return await asyncio.to_thread(_read_locked, path)


def _update_document(path: Path, apply: Callable[[Dict[str, Any]], int], control: _RunControl) -> int:
    """Read a document, let ``apply`` edit it in place, and write it back when it changed."""
    with _lock_for(path):
        data = read_document_or_empty(path)
        updated = apply(data)
        if updated:
            control.check()
            write_document(path, data)
    return updated


async def _update(
    path: Path,
    apply: Callable[[Dict[str, Any]], int],
    control: _RunControl,
    result: SyncResult,
) -> None:
    try:
        updated = await asyncio.to_thread(_update_document, path, apply, control)
    except OSError as e:
        error = SyncIOError(path, e)
        logger.error(str(error))
        result.record_failure(path, error)
        return
    if updated:
        result.record_write(path, updated)
        logger.debug(f"Updated {updated} keys in {path}")


def _leaf_items(base: Dict[str, Any], key: str) -> Iterable[Tuple[str, Any]]:
    """The base leaves under ``key`` (the key itself, or every leaf of a subtree)."""
    value = get_key_path(base, key, MISSING)
    if value is MISSING:
        return []
    if isinstance(value, dict):
        return [(f"{key}.{sub}", leaf) for sub, leaf in flatten_leaves(value).items()]
    return [(key, value)]


async def _propagate(
    base_path: Path,
    target_path: Path,
    keys: List[str],
    options: SyncOptions,
    control: _RunControl,
    result: SyncResult,
) -> None:
    if not base_path.exists():
        logger.debug(f"Base document {base_path} missing; nothing to propagate")
        return
    control.check()
    base = await _read(base_path)
    leaves = [
        (leaf_key, value)
        for key in keys
        for leaf_key, value in _leaf_items(base, key)
        if not is_missing_value(value)
    ]

    def apply(target: Dict[str, Any]) -> int:
        updated = 0
        for leaf_key, value in leaves:
            current = get_key_path(target, leaf_key, MISSING)
            if isinstance(current, dict):
                continue
            if is_missing_value(current) or (options.overwrite_targets and current != value):
                set_key_path(target, leaf_key, value)
                updated += 1
        return updated

    if leaves:
        await _update(target_path, apply, control, result)


async def _run(jobs: List[Tuple[Path, Path, List[str]]], options: SyncOptions, result: SyncResult) -> None:
    control = _RunControl(options)
    outcomes = await asyncio.gather(
        *(_propagate(base, target, keys, options, control, result) for base, target, keys in jobs),
        return_exceptions=True,
    )
    unexpected = None
    for outcome in outcomes:
        if isinstance(outcome, SyncCancelled):
            result.cancelled = True
        elif isinstance(outcome, BaseException) and unexpected is None:
            unexpected = outcome
    if result.cancelled:
        logger.warning(f"Sync stopped early after writing {len(result.files)} files")
    if unexpected is not None:
        raise unexpected


def target_locales(root: Path, options: SyncOptions) -> List[str]:
    """Configured locales, else the locales discovered under the translations root."""
    if options.locales:
        return [code for code in dict.fromkeys(options.locales) if code and code != options.base_locale]
    return discover_locales(root, options.base_locale)


def _clean_keys(keys: Iterable[str]) -> List[str]:
    return [key for key in dict.fromkeys(k.strip() for k in keys if k) if split_key(key)]


def _group_by_document(root: Path, base_locale: str, layout: str, keys: List[str]) -> Dict[Optional[str], List[str]]:
    if layout == LAYOUT_FLAT:
        return {None: keys}
    groups: Dict[Optional[str], List[str]] = defaultdict(list)
    for key in keys:
        groups[document_for_key(root, base_locale, key)].append(key)
    return dict(groups)


async def sync_keys(root, keys: Iterable[str], options: Optional[SyncOptions] = None) -> SyncResult:
    """
    Copy the given keys from the base locale into every target locale where they are missing.

    Args:
        root: Translations root
        keys: Dotted keys to propagate
        options: Sync options (base locale, explicit locales, cancellation)

    Returns:
        SyncResult with the documents written (and keys set) and any failures
    """
    options = options or SyncOptions()
    root = Path(root)
    result = SyncResult()
    keys = _clean_keys(keys)
    if not keys:
        return result

    layout = detect_layout(root, options.base_locale)
    locales = target_locales(root, options)
    jobs = []
    for relative, group in _group_by_document(root, options.base_locale, layout, keys).items():
        base_path = locale_document_path(root, options.base_locale, layout, relative)
        for locale in locales:
            jobs.append((base_path, locale_document_path(root, locale, layout, relative), group))

    await _run(jobs, options, result)
    logger.info(f"sync_keys: {len(keys)} keys, {layout} layout, {len(locales)} locales -> {result}")
    return result


def infer_document_locale(root: Path, file_path: Path, layout: str) -> Tuple[str, str, Optional[str]]:
    """
    Work out which locale a document belongs to.

    Returns (locale, layout, relative document path). A file directly under
    the root is a flat ``<locale>.json`` document whatever the detected layout.
    """
    try:
        rel = Path(file_path).resolve().relative_to(Path(root).resolve())
    except ValueError:
        rel = None
    if rel is None:
        return Path(file_path).stem, layout, Path(file_path).name if layout == LAYOUT_GROUPED else None
    if len(rel.parts) == 1:
        return rel.stem, LAYOUT_FLAT, None
    return rel.parts[0], LAYOUT_GROUPED, "/".join(rel.parts[1:])


async def sync_file(root, file_path, options: Optional[SyncOptions] = None) -> SyncResult:
    """Propagate every leaf of a base-locale document; other locales' documents are ignored."""
    options = options or SyncOptions()
    root = Path(root)
    file_path = Path(file_path)
    locale, layout, relative = infer_document_locale(root, file_path, detect_layout(root, options.base_locale))
    if locale != options.base_locale:
        logger.debug(f"sync_file: {file_path} belongs to {locale}, not the base locale; skipping")
        return SyncResult()

    document = await _read(file_path)
    keys = list(flatten_leaves(document))
    result = SyncResult()
    if not keys:
        return result

    locales = target_locales(root, options)
    jobs = [(file_path, locale_document_path(root, code, layout, relative), keys) for code in locales]
    await _run(jobs, options, result)
    logger.info(f"sync_file: {file_path} ({len(keys)} keys) -> {result}")
    return result


async def _ensure_document(
    base_path: Path,
    keys: List[str],
    values: Mapping[str, str],
    options: SyncOptions,
    control: _RunControl,
    result: SyncResult,
) -> None:
    def apply(base: Dict[str, Any]) -> int:
        updated = 0
        for key in keys:
            current = get_key_path(base, key, MISSING)
            supplied = values.get(key)
            if is_missing_value(current):
                set_key_path(base, key, supplied or humanize_key_segment(key))
                updated += 1
            elif options.force and supplied and not isinstance(current, dict) and current != supplied:
                set_key_path(base, key, supplied)
                updated += 1
        return updated

    await _update(base_path, apply, control, result)


async def ensure_keys(
    root,
    keys: Iterable[str],
    values: Optional[Mapping[str, str]] = None,
    options: Optional[SyncOptions] = None,
) -> SyncResult:
    """
    Make sure keys exist in the base locale, then propagate them.

    A missing key gets the supplied value or one derived from its last
    segment. With ``options.force`` a supplied value replaces the existing
    base value.
    """
    options = options or SyncOptions()
    root = Path(root)
    values = values or {}
    keys = _clean_keys(keys)
    result = SyncResult()
    if not keys:
        return result

    layout = detect_layout(root, options.base_locale)
    control = _RunControl(options)
    groups = _group_by_document(root, options.base_locale, layout, keys)
    outcomes = await asyncio.gather(
        *(
            _ensure_document(
                locale_document_path(root, options.base_locale, layout, relative),
                group, values, options, control, result,
            )
            for relative, group in groups.items()
        ),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, SyncCancelled):
            result.cancelled = True
        elif isinstance(outcome, BaseException):
            raise outcome
    if result.cancelled:
        return result

    result.merge(await sync_keys(root, keys, options))
    return result


def run_sync(coro):
    """Run a sync coroutine from synchronous code (CLI, Flask routes, job threads)."""
    return asyncio.run(coro)


__all__ = [
    "LAYOUT_FLAT",
    "LAYOUT_GROUPED",
    "SyncOptions",
    "SyncResult",
    "ensure_keys",
    "infer_document_locale",
    "run_sync",
    "sync_file",
    "sync_keys",
    "target_locales",
]
