"""Background sync job API routes."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from localizer.logger import get_logger
from localizer.web.tasks import SYNC_OPERATIONS, cancel_job, create_sync_job, get_job, serialize_job

from .common import get_paths, project_path, string_list, sync_options

jobs_bp = Blueprint("jobs", __name__)
logger = get_logger(__name__)


@jobs_bp.post("/sync")
def start_sync_job():
    """Start a sync operation in a background thread."""
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    operation = data.get("operation", "sync_keys")
    if operation not in SYNC_OPERATIONS:
        return jsonify({"error": f"operation must be one of {', '.join(SYNC_OPERATIONS)}"}), 400

    values = data.get("values") or {}
    if not isinstance(values, dict) or not all(isinstance(v, str) for v in values.values()):
        return jsonify({"error": "values must map keys to strings"}), 400

    keys = None
    file_path = None
    if operation == "sync_file":
        if not isinstance(data.get("file_path"), str) or not data["file_path"].strip():
            return jsonify({"error": "file_path is required"}), 400
        file_path = str(project_path(data["file_path"]))
    else:
        keys = string_list(data.get("keys", list(values)))
        if not keys:
            return jsonify({"error": "keys must be a non-empty list of strings"}), 400

    options = sync_options(data)
    try:
        job = create_sync_job(
            operation,
            str(get_paths().translations_root),
            keys=keys,
            values=values,
            file_path=file_path,
            base_locale=options.base_locale,
            locales=options.locales,
            force=options.force,
            overwrite_targets=options.overwrite_targets,
            timeout=options.timeout,
        )
    except Exception as e:
        logger.exception("Failed to create sync job: %s", e)
        return jsonify({"error": f"Failed to create sync job: {str(e)}"}), 500

    return jsonify({"job_id": job.job_id, "job": serialize_job(job)}), 202


@jobs_bp.get("/<job_id>")
def get_job_status(job_id: str):
    """Return status for an asynchronous sync job."""
    job = get_job(job_id)
    if not job:
        return jsonify({"error": "Job not found or expired"}), 404
    return jsonify({"job": serialize_job(job)})


@jobs_bp.post("/<job_id>/cancel")
def cancel_sync_job(job_id: str):
    """Request cancellation; the engine stops before its next document write."""
    job = get_job(job_id)
    if not job:
        return jsonify({"error": "Job not found or expired"}), 404

    if cancel_job(job_id):
        return jsonify({"status": "cancellation_requested", "job_id": job_id})
    else:
        return jsonify({"error": "Job already finished"}), 400
