"""Extraction and replacement API routes."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Blueprint, jsonify, request

from localizer.frameworks import Framework, detect_framework, parse_source, replace_source
from localizer.logger import get_logger
from localizer.pipeline import collect_source_files, extract_files, rewrite_files
from localizer.text_utils import namespace_from_path

from .common import (
    get_config,
    get_paths,
    key_map_from_payload,
    parse_options,
    project_path,
    replace_options,
    string_list,
)

extraction_bp = Blueprint("extraction", __name__)
logger = get_logger(__name__)


def _framework(data: Dict[str, Any]) -> Optional[Framework]:
    value = data.get("framework")
    if not value:
        return None
    return Framework(str(value).lower())


def _batch_paths(data: Dict[str, Any]):
    if "paths" in data:
        paths = string_list(data.get("paths"))
        if paths is None:
            return None
        return [project_path(p) for p in paths]
    config = get_config()
    return collect_source_files(get_paths().src_root, config.get("source_extensions"))


@extraction_bp.post("/extract")
def extract_endpoint():
    """
    Extract candidate strings.

    With ``content`` a single buffer is parsed (``file_path`` and
    ``framework`` pick the parser). Otherwise every file in ``paths``, or
    every source file of the project, is parsed in a batch.
    """
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    try:
        framework = _framework(data)
    except ValueError:
        return jsonify({"error": f"Unknown framework: {data.get('framework')}"}), 400

    content = data.get("content")
    if content is not None:
        if not isinstance(content, str):
            return jsonify({"error": "content must be a string"}), 400
        file_path = data.get("file_path")
        framework = framework or detect_framework(file_path, content)
        result = parse_source(content, file_path, parse_options(), framework)
        namespace = data.get("namespace") or (
            namespace_from_path(file_path, get_paths().project_root) if file_path else None
        )
        return jsonify({"framework": framework.value, "namespace": namespace, **result.to_dict()})

    paths = _batch_paths(data)
    if paths is None:
        return jsonify({"error": "paths must be a list of strings"}), 400

    batch = extract_files(
        paths, get_paths().project_root, parse_options(), get_config().get("max_workers") or 4
    )
    logger.info("Batch extraction over %s files (%s failed)", len(paths), len(batch.failures))
    return jsonify(batch.to_dict())


@extraction_bp.post("/replace")
def replace_endpoint():
    """
    Replace literals with translation calls.

    ``keys`` may carry explicit ``{namespace, kind, text, key}`` entries;
    without it the persisted registry is used. With ``content`` the
    rewritten buffer is returned; otherwise files are rewritten in place
    unless ``dry_run`` is set.
    """
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    entries = data.get("keys")
    if entries is not None and not isinstance(entries, list):
        return jsonify({"error": "keys must be a list of entries"}), 400
    try:
        framework = _framework(data)
        key_map = key_map_from_payload(entries)
    except ValueError:
        return jsonify({"error": f"Unknown framework: {data.get('framework')}"}), 400
    except (KeyError, TypeError, AttributeError):
        return jsonify({"error": "each key entry needs namespace, kind, text and key"}), 400

    content = data.get("content")
    if content is not None:
        if not isinstance(content, str):
            return jsonify({"error": "content must be a string"}), 400
        file_path = data.get("file_path")
        namespace = data.get("namespace") or (
            namespace_from_path(file_path, get_paths().project_root) if file_path else None
        )
        if not namespace:
            return jsonify({"error": "namespace or file_path is required"}), 400
        result = replace_source(content, key_map, namespace, file_path, replace_options(), framework)
        return jsonify({"namespace": namespace, **result.to_dict()})

    paths = _batch_paths(data)
    if paths is None:
        return jsonify({"error": "paths must be a list of strings"}), 400

    dry_run = bool(data.get("dry_run"))
    batch = rewrite_files(
        paths,
        key_map,
        get_paths().project_root,
        replace_options(),
        dry_run=dry_run,
        max_workers=get_config().get("max_workers") or 4,
    )
    payload = batch.to_dict()
    payload.pop("extractions", None)
    payload["dry_run"] = dry_run
    return jsonify(payload)
