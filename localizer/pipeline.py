"""
Batch pipeline

This module runs the per-file stages over a whole source tree:
- collect_source_files: walk the source root, skipping vendor/build folders
- extract_files: parse every file (in parallel) into ExtractionResults
- assign_from_extraction: register keys for everything extracted
- rewrite_files: replace literals in every file with translation calls

Files are independent, so they are processed by a thread pool. A file that
fails is recorded in BatchResult.failures and the batch carries on.
"""

import concurrent.futures
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from localizer.frameworks import is_source_file, parse_source, replace_source
from localizer.keys import COMMONS_NAMESPACE, KeyMap, Signature, register_extraction
from localizer.logger import get_logger
from localizer.parsers import ExtractionResult, ParseOptions
from localizer.replacers import ReplaceOptions
from localizer.text_utils import namespace_from_path

logger = get_logger(__name__)

SKIPPED_DIRECTORIES = frozenset({
    "node_modules", "vendor", ".git", "storage", "bootstrap", "public", "dist", "build",
})

DEFAULT_MAX_WORKERS = 4


@dataclass
class BatchResult:
    """Outcome of one batch run."""

    extractions: Dict[str, Tuple[str, ExtractionResult]] = field(default_factory=dict)  # path -> (namespace, result)
    changed_files: List[str] = field(default_factory=list)
    change_count: int = 0
    unresolved: Dict[str, List[str]] = field(default_factory=dict)  # path -> texts without a key
    failures: List[Dict[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def items_by_namespace(self) -> Dict[str, List[Any]]:
        grouped: Dict[str, List[Any]] = {}
        for namespace, result in self.extractions.values():
            grouped.setdefault(namespace, []).extend(result.items)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extractions": {
                path: {"namespace": namespace, **result.to_dict()}
                for path, (namespace, result) in sorted(self.extractions.items())
            },
            "changed_files": sorted(self.changed_files),
            "change_count": self.change_count,
            "unresolved": self.unresolved,
            "failures": self.failures,
        }


def collect_source_files(src_root, extensions: Optional[Iterable[str]] = None) -> List[Path]:
    """Source files under ``src_root`` in sorted order."""
    root = Path(src_root)
    if not root.is_dir():
        return []
    extensions = tuple(extensions) if extensions else None
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIPPED_DIRECTORIES and not d.startswith("."))
        for name in filenames:
            path = Path(dirpath) / name
            if is_source_file(path, extensions):
                found.append(path)
    return sorted(found)


def _read_text(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _run_parallel(
    work: Callable[[Path], Any],
    paths: Iterable,
    max_workers: int,
    result: BatchResult,
) -> List[Tuple[Path, Any]]:
    outcomes = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers or DEFAULT_MAX_WORKERS) as executor:
        futures = {executor.submit(work, Path(path)): Path(path) for path in paths}
        for future in concurrent.futures.as_completed(futures):
            path = futures[future]
            try:
                outcomes.append((path, future.result()))
            except Exception as e:
                logger.exception(f"Failed to process {path}")
                result.failures.append({"path": str(path), "error": str(e)})
    return sorted(outcomes, key=lambda outcome: str(outcome[0]))


def extract_files(
    paths: Iterable,
    project_root=None,
    options: Optional[ParseOptions] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> BatchResult:
    """Parse every file and record its namespace and extraction result."""
    result = BatchResult()

    def work(path: Path) -> Tuple[str, ExtractionResult]:
        return namespace_from_path(path, project_root), parse_source(_read_text(path), path, options)

    for path, extraction in _run_parallel(work, paths, max_workers, result):
        result.extractions[str(path)] = extraction
    total = sum(r.stats.extracted_count for _, r in result.extractions.values())
    logger.info(f"Extracted {total} strings from {len(result.extractions)} files ({len(result.failures)} failed)")
    return result


def assign_from_extraction(batch: BatchResult, commons_namespace: str = COMMONS_NAMESPACE) -> Dict[Signature, str]:
    """Register keys for every extracted item; returns the newly assigned ones."""
    return register_extraction(batch.items_by_namespace(), commons_namespace)


def rewrite_files(
    paths: Iterable,
    key_map: KeyMap,
    project_root=None,
    options: Optional[ReplaceOptions] = None,
    dry_run: bool = False,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> BatchResult:
    """
    Replace literals with translation calls in every file.

    Args:
        paths: Files to rewrite
        key_map: Assigned keys; misses leave the text as is
        project_root: Used to derive each file's namespace
        options: Replacer options (import path, validator overrides)
        dry_run: Count changes without writing

    Returns:
        BatchResult with changed files, total substitutions and failures
    """
    result = BatchResult()

    def work(path: Path):
        content = _read_text(path)
        replaced = replace_source(content, key_map, namespace_from_path(path, project_root), path, options)
        if replaced.change_count and not dry_run:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(replaced.content)
        return replaced

    for path, replaced in _run_parallel(work, paths, max_workers, result):
        if replaced.unresolved:
            result.unresolved[str(path)] = list(replaced.unresolved)
        if replaced.change_count:
            result.changed_files.append(str(path))
            result.change_count += replaced.change_count
            logger.debug(f"{'Would rewrite' if dry_run else 'Rewrote'} {path} ({replaced.change_count} changes)")
    logger.info(f"Rewrote {len(result.changed_files)} files, {result.change_count} substitutions")
    return result
