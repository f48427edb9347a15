"""Diagnostic message API routes."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from localizer.diagnostics import diagnostic_to_dict, parse_diagnostic

diagnostics_bp = Blueprint("diagnostics", __name__)


@diagnostics_bp.post("/parse")
def parse_endpoint():
    """Parse one ``message`` or a list of ``messages``."""
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    if isinstance(data.get("message"), str):
        return jsonify({"diagnostic": diagnostic_to_dict(parse_diagnostic(data["message"]))})

    messages = data.get("messages")
    if not isinstance(messages, list) or not all(isinstance(m, str) for m in messages):
        return jsonify({"error": "message or messages is required"}), 400
    return jsonify({
        "diagnostics": [
            {"message": message, "diagnostic": diagnostic_to_dict(parse_diagnostic(message))}
            for message in messages
        ]
    })
