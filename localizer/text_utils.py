"""
Text helpers shared by parsing, key assignment and replacement.

This module provides:
- normalize_text: whitespace collapsing used for every key-map signature
- is_common_short_text: short UI labels that live in the Commons namespace
- slugify_for_key: deterministic slug for brand-new keys
- analyze_template_literal: `${expr}` interpolation to {placeholder} conversion
- namespace_from_path: namespace derived from a source file location
- humanize_key_segment: readable default value for a key
"""

import re
import unicodedata
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import List, Optional, Pattern, Tuple

from localizer.patterns import COMMON

NAMESPACE_ROOT_MARKERS = ("resources/js", "src", "resources/views")
_SKIPPED_FIRST_SEGMENTS = {"pages", "components"}


def normalize_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace and trim."""
    return re.sub(r"\s+", " ", text or "").strip()


def is_common_short_text(text: Optional[str]) -> bool:
    """Short labels such as "Save" or "Sign in" are shared across namespaces."""
    cleaned = normalize_text(text)
    if not cleaned:
        return False
    if re.search(r"[.!?]", cleaned):
        return False
    words = cleaned.split(" ")
    if len(words) > 2 or len(cleaned) > 24:
        return False
    return not re.search(r"[/_]", cleaned)


def slugify_for_key(text: Optional[str], max_words: int = 4, max_length: int = 48) -> str:
    """
    Build the last key segment from raw text.

    Accents are folded (NFKD), everything is lowercased, and the first
    ``max_words`` alphanumeric runs are joined with underscores. Empty input
    yields ``text``; the result is cut at ``max_length`` characters.
    """
    decomposed = unicodedata.normalize("NFKD", text or "")
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    words = re.findall(r"[a-z0-9]+", folded.lower())
    slug = "_".join(words[:max_words]) or "text"
    return slug[:max_length]


@dataclass(frozen=True)
class Placeholder:
    name: str
    expression: str


@dataclass(frozen=True)
class TemplateLiteral:
    """Static text of a template literal with interpolations named as placeholders."""

    base_text: str
    placeholders: Tuple[Placeholder, ...]

    def call_arguments(self) -> str:
        """Render ``{ name: expr, ... }`` for a t() call, or "" without placeholders."""
        if not self.placeholders:
            return ""
        pairs = []
        for placeholder in self.placeholders:
            if placeholder.expression == placeholder.name:
                pairs.append(placeholder.name)
            else:
                pairs.append(f"{placeholder.name}: {placeholder.expression}")
        return "{ " + ", ".join(pairs) + " }"


def analyze_template_literal(inner: str, interpolation: Optional[Pattern] = None) -> TemplateLiteral:
    """
    Convert the body of a template literal (without backticks) into base text.

    ``Hello ${user.name}, ${items.length} items`` becomes
    ``Hello {name}, {itemsCount} items``. Passing another ``interpolation``
    pattern (group 1 = expression) handles ``{{ expr }}`` markup the same way.
    """
    placeholders: List[Placeholder] = []
    used = set()
    parts = []
    last = 0
    for match in (interpolation or COMMON.interpolation).finditer(inner):
        parts.append(inner[last:match.start()])
        last = match.end()
        expression = match.group(1).strip()
        if not expression:
            continue

        name = None
        length_match = re.search(r"([A-Za-z_]\w*)\s*\.length\s*$", expression)
        if length_match:
            base = length_match.group(1)
            name = base if base.lower().endswith("count") else f"{base}Count"
        if name is None:
            id_match = re.search(r"([A-Za-z_]\w*)\s*$", expression)
            if id_match:
                name = id_match.group(1)
        if name is None:
            name = f"value{len(placeholders) + 1}"

        unique = name
        counter = 2
        while unique in used:
            unique = f"{name}{counter}"
            counter += 1
        used.add(unique)
        placeholders.append(Placeholder(unique, expression))
        parts.append("{" + unique + "}")
    parts.append(inner[last:])
    return TemplateLiteral("".join(parts), tuple(placeholders))


def _pascal_case(segment: str) -> str:
    spaced = re.sub(r"[_\-.\s]+", " ", segment)
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", spaced)
    return "".join(word[:1].upper() + word[1:] for word in spaced.split() if word)


def namespace_from_path(file_path, project_root=None) -> str:
    """
    Derive the namespace for a source file.

    The path is taken relative to the first source-root marker, the
    extension (including ``.blade.php``) is dropped, a leading ``pages`` or
    ``components`` directory is skipped and each segment is PascalCased.
    ``src/components/auth/LoginForm.tsx`` becomes ``Auth.LoginForm``.
    """
    rel = str(file_path).replace("\\", "/")
    if project_root is not None:
        root = str(project_root).replace("\\", "/").rstrip("/") + "/"
        if rel.startswith(root):
            rel = rel[len(root):]
    for marker in NAMESPACE_ROOT_MARKERS:
        probe = "/" + rel
        idx = probe.find(f"/{marker}/")
        if idx != -1:
            rel = probe[idx + len(marker) + 2:]
            break

    if rel.endswith(".blade.php"):
        rel = rel[: -len(".blade.php")]
    else:
        rel = str(PurePosixPath(rel).with_suffix("")) if PurePosixPath(rel).suffix else rel

    raw_segments = [s for s in rel.split("/") if s and s != "."]
    segments = list(raw_segments)
    if segments and segments[0].lower() in _SKIPPED_FIRST_SEGMENTS and len(segments) > 1:
        segments = segments[1:]
    names = [n for n in (_pascal_case(s) for s in segments) if n]
    return ".".join(names) or "Common"


def humanize_key_segment(key: str) -> str:
    """``auth.form.save_changes`` -> ``Save changes``."""
    last = key.split(".")[-1]
    words = re.sub(r"[_\-]+", " ", last)
    words = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", words).strip().lower()
    if not words:
        return key
    return words[0].upper() + words[1:]
