"""Syntax-tree normalizer API routes."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from localizer.exceptions import StructuralParseError
from localizer.logger import get_logger
from localizer.normalizer import find_paren_issues, issue_keys, normalize_files, normalize_source
from localizer.pipeline import collect_source_files

from .common import get_config, get_paths, project_path, string_list

normalize_bp = Blueprint("normalize", __name__)
logger = get_logger(__name__)

_NORMALIZED_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")


@normalize_bp.post("")
def normalize_endpoint():
    """
    Repair split parentheticals.

    With ``content`` one buffer is normalized and returned. Otherwise
    ``paths`` (or every JS/TS source file) are rewritten in place. Unless
    ``keys`` is given, or ``all_keys`` is set, only keys whose locale
    values have unbalanced parentheses are repaired.
    """
    data: Dict[str, Any] = request.get_json(silent=True) or {}

    keys = None
    if data.get("keys") is not None:
        keys = string_list(data.get("keys"))
        if keys is None:
            return jsonify({"error": "keys must be a list of strings"}), 400
    elif not data.get("all_keys"):
        base_locale = get_config().get("base_locale") or "en"
        keys = sorted(issue_keys(find_paren_issues(get_paths().translations_root, base_locale)))

    content = data.get("content")
    if content is not None:
        if not isinstance(content, str):
            return jsonify({"error": "content must be a string"}), 400
        try:
            updated, count = normalize_source(content, data.get("file_path"), keys, data.get("language"))
        except StructuralParseError as e:
            return jsonify({"error": str(e), "code": e.code}), 422
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"content": updated, "repair_count": count})

    if "paths" in data:
        paths = string_list(data.get("paths"))
        if paths is None:
            return jsonify({"error": "paths must be a list of strings"}), 400
        paths = [project_path(p) for p in paths]
    else:
        paths = collect_source_files(get_paths().src_root, _NORMALIZED_EXTENSIONS)

    report = normalize_files(paths, keys)
    logger.info("Normalized %s files (%s repairs)", len(report.changed_files), report.repair_count)
    return jsonify(report.to_dict())
