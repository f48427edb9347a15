"""Locale sync API routes."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from localizer.core.sync import ensure_keys, run_sync, sync_file, sync_keys
from localizer.logger import get_logger

from .common import get_paths, project_path, string_list, sync_options

sync_bp = Blueprint("sync", __name__)
logger = get_logger(__name__)


def _sync_response(result):
    status = 207 if result.failures else 200
    return jsonify(result.to_dict()), status


@sync_bp.post("/keys")
def sync_keys_endpoint():
    """Propagate ``keys`` from the base locale to every target locale."""
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    keys = string_list(data.get("keys"))
    if not keys:
        return jsonify({"error": "keys must be a non-empty list of strings"}), 400

    result = run_sync(sync_keys(get_paths().translations_root, keys, sync_options(data)))
    logger.info("Sync of %s keys via API: %s", len(keys), result)
    return _sync_response(result)


@sync_bp.post("/file")
def sync_file_endpoint():
    """Propagate every key of one base-locale document."""
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    file_path = data.get("file_path")
    if not isinstance(file_path, str) or not file_path.strip():
        return jsonify({"error": "file_path is required"}), 400

    path = project_path(file_path)
    if not path.is_file():
        return jsonify({"error": "Locale document not found", "file_path": str(path)}), 404

    result = run_sync(sync_file(get_paths().translations_root, path, sync_options(data)))
    logger.info("Sync of %s via API: %s", path, result)
    return _sync_response(result)


@sync_bp.post("/ensure")
def ensure_keys_endpoint():
    """
    Create missing base-locale keys, then propagate them.

    ``values`` maps keys to their base text; keys without a value get one
    derived from their last segment.
    """
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    values = data.get("values") or {}
    if not isinstance(values, dict) or not all(isinstance(v, str) for v in values.values()):
        return jsonify({"error": "values must map keys to strings"}), 400
    keys = string_list(data.get("keys", list(values)))
    if not keys:
        return jsonify({"error": "keys must be a non-empty list of strings"}), 400

    result = run_sync(ensure_keys(get_paths().translations_root, keys, values, sync_options(data)))
    logger.info("Ensure of %s keys via API: %s", len(keys), result)
    return _sync_response(result)
