"""
Translatability Validator

This module provides the single predicate that decides whether a candidate
string should be translated. Parsers and replacers both call
should_translate() so extraction and rewriting always agree.

The checks are heuristic:
- ignore patterns supplied by the project (exact, case-insensitive, contains, regex)
- already-translated call markers and key-reference lookalikes
- code-shape markers (assignments, control flow, import/export/require)
- linguistic screening that separates English prose from identifiers,
  CSS classes, URLs, ids and other technical tokens
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Pattern, Tuple

from localizer.patterns import COMMON

_VOWELS = "aeiouy"
_CONSONANTS = "bcdfghjklmnpqrstvwxz"

_COMMON_SHORT_WORDS = frozenset({
    "a", "i", "an", "at", "be", "by", "do", "go", "he", "if", "in", "is", "it",
    "me", "my", "no", "of", "on", "or", "so", "to", "up", "us", "we",
})

_VALID_CLUSTERS = ("tch", "sch", "str", "spr", "spl", "scr", "thr", "shr", "phr")

_COMMON_BIGRAMS = frozenset({
    "th", "he", "in", "er", "an", "re", "on", "at", "en", "nd",
    "ti", "es", "or", "te", "of", "ed", "is", "it", "al", "ar",
    "st", "to", "nt", "ng", "se", "ha", "as", "ou", "io", "le",
})

_TECHNICAL_WORDS = frozenset({
    "div", "span", "input", "form", "select", "option", "textarea",
    "true", "false", "null", "undefined",
    "primary", "secondary", "danger", "info", "light", "dark",
    "sm", "md", "lg", "xl", "xs", "2xl", "3xl",
})

_UUID = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
_BRACKET_TOKEN = re.compile(r"^[A-Za-z0-9:._\-\[\]]+$")
_CODE_KEYWORD = re.compile(r"\b(?:const|let|var|function|return|if|else|for|while|class|async|await)\b")
_CSS_CLASS_LIST = re.compile(r"^[a-z0-9-]+(?:\s+[a-z0-9-]+)*$")
_UTILITY_CLASS = re.compile(
    r"^(?:[a-z][a-z0-9]*(?:-[a-z0-9]+)+|[a-z]*\d[a-z0-9]*"
    r"|flex|grid|block|inline|hidden|absolute|relative|fixed|sticky"
    r"|rounded|shadow|border|container|truncate|underline|italic|uppercase|lowercase|capitalize)$"
)
_IDENTIFIER = re.compile(r"^(?:[a-z][a-zA-Z0-9]*|[A-Z][a-zA-Z0-9]*)$")
_ABBREVIATION = re.compile(r"^[A-Z]{2,5}$")
_URL_LIKE = re.compile(r"^(?:https?://|www\.|/)")
_QUERY_LIKE = re.compile(r"^(?:[?#])?[A-Za-z0-9_.-]+(?:=[^&\s]*)?(?:&[A-Za-z0-9_.-]+(?:=[^&\s]*)?)*$")
_FILE_EXTENSION = re.compile(r"\.(?:js|ts|tsx|jsx|vue|css|scss|json|png|jpg|svg|html|xml|php)$", re.IGNORECASE)
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{3,8}$")
_NUMERIC = re.compile(r"^\d+$|^\d[\d\s.,-]*\d$")
_DOMAIN = re.compile(r"^[A-Za-z0-9.-]+\.[A-Za-z]{2,}(?::\d+)?(?:\s*\([A-Za-z0-9\s]+\))?$")
_PLACEHOLDER_WORD = re.compile(r"^\{[^}]+\}$")
_PLACEHOLDER = re.compile(r"\{[A-Za-z_]\w*\}")
_CSSISH_WORD = re.compile(r"[-:]")
_WORD_SPLIT = re.compile(r"[\s,;.!?()\[\]{}]+")
_LETTER = re.compile(r"[A-Za-z]")


@dataclass(frozen=True)
class IgnoreConfig:
    """Project-level ignore rules, usually loaded from scripts/i18n-ignore-patterns.json."""

    exact: FrozenSet[str] = frozenset()
    exact_insensitive: FrozenSet[str] = frozenset()
    contains: Tuple[str, ...] = ()
    patterns: Tuple[Pattern, ...] = ()
    ignore_attributes: FrozenSet[str] = frozenset()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "IgnoreConfig":
        """Build from the JSON shape used by the ignore-pattern document.

        Unknown keys are ignored; invalid regexes raise re.error.
        """
        if not data:
            return cls()

        def _strings(name: str) -> Iterable[str]:
            values = data.get(name) or []
            if not isinstance(values, list):
                return ()
            return [str(v) for v in values if v is not None and str(v)]

        return cls(
            exact=frozenset(_strings("exact")),
            exact_insensitive=frozenset(v.lower() for v in _strings("exactInsensitive")),
            contains=tuple(_strings("contains")),
            patterns=tuple(re.compile(p) for p in _strings("patterns")),
            ignore_attributes=frozenset(v.lower() for v in _strings("ignoreAttributes")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exact": sorted(self.exact),
            "exactInsensitive": sorted(self.exact_insensitive),
            "contains": list(self.contains),
            "patterns": [p.pattern for p in self.patterns],
            "ignoreAttributes": sorted(self.ignore_attributes),
        }

    def matches(self, text: str) -> bool:
        normalized = re.sub(r"\s+", " ", text.strip())
        if normalized in self.exact:
            return True
        if normalized.lower() in self.exact_insensitive:
            return True
        if any(part in normalized for part in self.contains):
            return True
        return any(p.search(normalized) for p in self.patterns)


EMPTY_IGNORE_CONFIG = IgnoreConfig()


def has_english_phonetic_pattern(word: str) -> bool:
    """Check whether a word follows basic English consonant/vowel patterns."""
    if not word:
        return False
    lower = word.lower()

    if len(lower) <= 2:
        return lower in _COMMON_SHORT_WORDS

    vowel_count = sum(1 for ch in lower if ch in _VOWELS)
    if vowel_count == 0:
        return False

    clusters = re.findall(r"[bcdfghjklmnpqrstvwxz]{4,}", lower)
    if clusters and not any(valid in cluster for cluster in clusters for valid in _VALID_CLUSTERS):
        return False

    if re.search(r"[aeiouy]{4,}", lower):
        return False

    transitions = 0
    cv_transitions = 0
    for curr, nxt in zip(lower, lower[1:]):
        curr_is_letter = curr in _VOWELS or curr in _CONSONANTS
        next_is_letter = nxt in _VOWELS or nxt in _CONSONANTS
        if curr_is_letter and next_is_letter:
            transitions += 1
            if (curr in _VOWELS) != (nxt in _VOWELS):
                cv_transitions += 1
    if transitions > 0 and cv_transitions / transitions < 0.3:
        return False

    bigram_matches = sum(1 for i in range(len(lower) - 1) if lower[i:i + 2] in _COMMON_BIGRAMS)
    if len(lower) > 4 and bigram_matches == 0:
        return False

    return True


def contains_english_words(text: str) -> bool:
    """At least half of the words must look like English."""
    words = [w for w in _WORD_SPLIT.split(text.strip()) if w]
    if not words:
        return False
    valid = sum(1 for w in words if has_english_phonetic_pattern(w.strip("'\"")))
    return valid / len(words) >= 0.5


def is_translatable_text(text: str) -> bool:
    """Linguistic screening: prose passes, identifiers and technical tokens fail."""
    if not text:
        return False
    trimmed = text.strip()
    has_space = bool(re.search(r"\s", trimmed))

    if _UUID.match(trimmed):
        return False
    if not has_space and re.search(r"[:\[\]]", trimmed) and _BRACKET_TOKEN.match(trimmed):
        return False
    if re.search(r"[{};]", _PLACEHOLDER.sub("", trimmed)) and _CODE_KEYWORD.search(trimmed):
        return False
    if not _LETTER.search(trimmed):
        return False
    if len(trimmed) < 2:
        return False

    if _CSS_CLASS_LIST.match(trimmed):
        # lowercase class lists; at most one plain word among utility tokens
        tokens = trimmed.split()
        utility = [t for t in tokens if _UTILITY_CLASS.match(t)]
        if utility and len(utility) >= len(tokens) - 1:
            return False
    if _IDENTIFIER.match(trimmed):
        return False
    if _ABBREVIATION.match(trimmed):
        return False
    if _URL_LIKE.match(trimmed):
        return False
    if not has_space and _QUERY_LIKE.match(trimmed):
        return False
    if _FILE_EXTENSION.search(trimmed):
        return False
    if _HEX_COLOR.match(trimmed):
        return False
    if _NUMERIC.match(trimmed):
        return False
    if not has_space:
        has_digit = bool(re.search(r"\d", trimmed))
        if has_digit and 6 <= len(trimmed) <= 64:
            return False
        if "_" in trimmed or "." in trimmed:
            return False
        if trimmed.lower() in _TECHNICAL_WORDS:
            return False

    normalized = re.sub(r"\s+", " ", trimmed)
    if _DOMAIN.match(normalized):
        return False

    words = normalized.split(" ")
    prose_words = [w for w in words if not _PLACEHOLDER_WORD.match(w)]
    if prose_words:
        cssish = [w for w in prose_words if _CSSISH_WORD.search(w) and _BRACKET_TOKEN.match(w)]
        if len(cssish) >= 2 and len(cssish) >= len(prose_words) - 1:
            return False
        if len(prose_words) == 1 and len(cssish) == 1 and "-" in prose_words[0]:
            return False

    if not contains_english_words(normalized):
        return False

    if len(words) == 1:
        if trimmed[0] != trimmed[0].upper():
            return False
    elif all("-" in w for w in words):
        return False

    return True


def looks_like_code(text: str) -> bool:
    """True for assignments, control flow and import/export/require forms."""
    stripped = _PLACEHOLDER.sub("", text)
    if any(p.search(stripped) for p in COMMON.module_specifiers):
        return True
    return any(p.search(stripped) for p in COMMON.code_markers)


def is_key_reference(text: str, key_pattern: Optional[Pattern] = None) -> bool:
    """Idempotency marker: the literal already looks like a dotted translation key."""
    pattern = key_pattern or COMMON.key_reference
    return bool(pattern.match(text.strip()))


def is_already_translated(text: str, key_pattern: Optional[Pattern] = None) -> bool:
    if any(p.search(text) for p in COMMON.translated_calls):
        return True
    return is_key_reference(text, key_pattern)


def has_balanced_parentheses(text: str) -> bool:
    return text.count("(") == text.count(")")


def should_ignore_attribute(name: Optional[str], ignore_config: Optional[IgnoreConfig] = None) -> bool:
    if not name or ignore_config is None:
        return False
    return name.lower().lstrip(":") in ignore_config.ignore_attributes


def should_translate(
    text: Optional[str],
    ignore_config: Optional[IgnoreConfig] = None,
    key_pattern: Optional[Pattern] = None,
) -> bool:
    """
    Decide whether a candidate string is eligible for translation.

    Args:
        text: Raw candidate text.
        ignore_config: Project ignore rules; None means no project rules.
        key_pattern: Override for the "already a key" idempotency marker.

    Returns:
        True when the text looks like user-facing prose that is not yet translated.
    """
    if not text:
        return False
    trimmed = text.strip()
    if not trimmed or not _LETTER.search(_PLACEHOLDER.sub("", trimmed)):
        return False
    if COMMON.punctuation_only.match(trimmed):
        return False
    if ignore_config is not None and ignore_config.matches(trimmed):
        return False
    if is_already_translated(trimmed, key_pattern):
        return False
    if looks_like_code(trimmed):
        return False
    if not is_translatable_text(trimmed):
        return False
    return has_balanced_parentheses(trimmed)
