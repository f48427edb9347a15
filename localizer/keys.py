"""
Key Map and key assignment

This module provides:
- KeyMap: immutable (namespace, kind, normalized text) -> dotted key mapping
  consumed by the replacers
- assign_keys: deterministic key synthesis for signatures not seen before
- register_extraction: assign keys for an extraction run and persist them
  in the key registry
- validate_key / compile_key_pattern helpers
"""

import re
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Pattern, Tuple

from localizer.core import database as db
from localizer.core.store import flatten_leaves
from localizer.logger import get_logger
from localizer.patterns import COMMON
from localizer.text_utils import is_common_short_text, normalize_text, slugify_for_key

logger = get_logger(__name__)

COMMONS_NAMESPACE = "Commons"
FALLBACK_KIND = "text"

Signature = Tuple[str, str, str]

_VALID_KEY = re.compile(r"^[A-Za-z0-9_-]+(?:\.[A-Za-z0-9_-]+)*$")


def validate_key(key: Optional[str]) -> bool:
    """A key is one or more dot-separated segments of letters, digits, ``_`` or ``-``."""
    return bool(key) and bool(_VALID_KEY.match(key))


def compile_key_pattern(config: Optional[Dict[str, Any]] = None) -> Pattern:
    """Idempotency marker regex from config, falling back to the built-in one."""
    custom = (config or {}).get("key_pattern")
    return re.compile(custom) if custom else COMMON.key_reference


def make_signature(namespace: str, kind: str, text: str) -> Signature:
    return namespace, kind, normalize_text(text)


class KeyMap(Mapping):
    """
    Read-only association from a string signature to its assigned key.

    The mapping never changes after construction, so the same signature
    always resolves to the same key for the lifetime of the instance.
    """

    def __init__(
        self,
        entries: Iterable[Tuple[Signature, str]] = (),
        commons_namespace: str = COMMONS_NAMESPACE,
    ):
        data = {}
        if isinstance(entries, Mapping):
            entries = entries.items()
        for (namespace, kind, text), key in entries:
            data[make_signature(namespace, kind, text)] = key
        self._entries = MappingProxyType(data)
        self.commons_namespace = commons_namespace

    def __getitem__(self, signature: Signature) -> str:
        return self._entries[signature]

    def __iter__(self) -> Iterator[Signature]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"KeyMap({len(self)} entries)"

    def lookup(self, namespace: str, kind: str, text: str) -> Optional[str]:
        """Exact signature lookup without fallbacks."""
        return self._entries.get(make_signature(namespace, kind, text))

    def resolve(self, namespace: str, kind: str, text: str) -> Optional[str]:
        """
        Resolve a key for text found in ``namespace`` with ``kind``.

        Common short text is looked up in the Commons namespace first, then
        in the file namespace; each namespace is tried with the exact kind
        and then with the generic ``text`` kind. A miss returns None.
        """
        normalized = normalize_text(text)
        if not normalized:
            return None
        namespaces = [namespace]
        if is_common_short_text(normalized) and namespace != self.commons_namespace:
            namespaces.insert(0, self.commons_namespace)
        for ns in namespaces:
            for candidate_kind in dict.fromkeys((kind, FALLBACK_KIND)):
                key = self._entries.get((ns, candidate_kind, normalized))
                if key:
                    return key
        return None

    def to_entries(self) -> List[Dict[str, str]]:
        return [
            {"namespace": ns, "kind": kind, "text": text, "key": key}
            for (ns, kind, text), key in sorted(self._entries.items(), key=lambda item: item[1])
        ]

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], **kwargs) -> "KeyMap":
        """Build from dicts with namespace/kind/text/key fields (registry rows, API payloads)."""
        return cls(
            (((r["namespace"], r["kind"], r["text"]), r["key"]) for r in records if r.get("key")),
            **kwargs,
        )

    @classmethod
    def from_registry(cls, namespace: Optional[str] = None, **kwargs) -> "KeyMap":
        """Load the persisted registry (see core.database)."""
        return cls.from_records(db.get_all_keys(namespace), **kwargs)

    @classmethod
    def from_locale_tree(cls, tree: Mapping[str, Any], **kwargs) -> "KeyMap":
        """
        Rebuild a key map from a base-locale document laid out as
        ``<namespace...>.<kind>.<slug> -> text``.

        Leaves with fewer than three segments carry no kind and are skipped.
        """
        entries = []
        for key, text in flatten_leaves(tree).items():
            parts = key.split(".")
            if len(parts) < 3:
                continue
            entries.append(((".".join(parts[:-2]), parts[-2], text), key))
        return cls(entries, **kwargs)


def effective_namespace(namespace: str, text: str, commons_namespace: str = COMMONS_NAMESPACE) -> str:
    return commons_namespace if is_common_short_text(text) else namespace


def assign_keys(
    candidates: Iterable[Tuple[str, str, str]],
    existing: Optional[Mapping[Signature, str]] = None,
    taken: Optional[Dict[str, str]] = None,
    commons_namespace: str = COMMONS_NAMESPACE,
) -> Dict[Signature, str]:
    """
    Assign keys to (namespace, kind, text) candidates.

    Known signatures keep their key. New ones get ``<namespace>.<kind>.<slug>``
    where the slug comes from slugify_for_key(); if that key already belongs
    to different text, ``_2``, ``_3``... are appended.

    Args:
        candidates: (namespace, kind, text) tuples; namespace is the file namespace
        existing: Signatures already assigned (registry contents)
        taken: key -> text for every key already in use; updated in place

    Returns:
        Newly assigned signatures only.
    """
    existing = existing or {}
    taken = {} if taken is None else taken
    assigned: Dict[Signature, str] = {}

    for namespace, kind, text in candidates:
        normalized = normalize_text(text)
        if not normalized:
            continue
        signature = (effective_namespace(namespace, normalized, commons_namespace), kind, normalized)
        if signature in existing or signature in assigned:
            continue

        ns = signature[0]
        base_slug = slugify_for_key(normalized)
        slug = base_slug
        index = 2
        while f"{ns}.{kind}.{slug}" in taken and taken[f"{ns}.{kind}.{slug}"] != normalized:
            slug = f"{base_slug}_{index}"
            index += 1

        key = f"{ns}.{kind}.{slug}"
        taken[key] = normalized
        assigned[signature] = key
    return assigned


def register_extraction(
    items_by_namespace: Mapping[str, Iterable[Any]],
    commons_namespace: str = COMMONS_NAMESPACE,
) -> Dict[Signature, str]:
    """
    Assign keys for extracted items and persist the new ones in the registry.

    Args:
        items_by_namespace: namespace -> iterable of ExtractedItem

    Returns:
        The newly registered signatures and their keys.
    """
    existing = KeyMap.from_registry(commons_namespace=commons_namespace)
    taken = db.get_key_texts()
    candidates = [
        (namespace, item.kind, item.text)
        for namespace, items in items_by_namespace.items()
        for item in items
    ]
    assigned = assign_keys(candidates, existing, taken, commons_namespace)
    inserted = db.add_keys_batch(assigned.items())
    logger.info(f"Registered {inserted} new keys ({len(candidates)} candidates)")
    return assigned
