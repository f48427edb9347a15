"""Key registry API routes."""

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, jsonify, request

from localizer.core import database as db
from localizer.keys import KeyMap, assign_keys, validate_key
from localizer.logger import get_logger

from .common import commons_namespace

keys_bp = Blueprint("keys", __name__)
logger = get_logger(__name__)


@keys_bp.get("")
def list_keys():
    """Return registered keys, optionally for one namespace."""
    namespace = request.args.get("namespace") or None
    keys = db.get_all_keys(namespace)
    logger.debug("Keys listed: %s", len(keys))
    return jsonify({"keys": keys})


@keys_bp.post("/assign")
def assign_endpoint():
    """
    Assign keys to ``items`` (``{namespace, kind, text}``).

    Known signatures keep their key. New assignments are stored unless
    ``persist`` is false.
    """
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    items = data.get("items")
    if not isinstance(items, list) or not items:
        return jsonify({"error": "items must be a non-empty list"}), 400

    candidates = []
    for item in items:
        if not isinstance(item, dict) or not all(isinstance(item.get(f), str) for f in ("namespace", "kind", "text")):
            return jsonify({"error": "each item needs string namespace, kind and text"}), 400
        candidates.append((item["namespace"], item["kind"], item["text"]))

    commons = commons_namespace()
    existing = KeyMap.from_registry(commons_namespace=commons)
    assigned = assign_keys(candidates, existing, db.get_key_texts(), commons)
    invalid = [key for key in assigned.values() if not validate_key(key)]
    if invalid:
        return jsonify({"error": "generated keys are not valid", "keys": invalid}), 400

    persist = data.get("persist", True)
    inserted = db.add_keys_batch(assigned.items()) if persist else 0

    combined = KeyMap(list(existing.items()) + list(assigned.items()), commons_namespace=commons)
    resolved: List[Dict[str, Any]] = [
        {"namespace": namespace, "kind": kind, "text": text, "key": combined.resolve(namespace, kind, text)}
        for namespace, kind, text in candidates
    ]

    logger.info("Assigned %s new keys (%s stored)", len(assigned), inserted)
    return jsonify({"assigned": len(assigned), "stored": inserted, "items": resolved})
