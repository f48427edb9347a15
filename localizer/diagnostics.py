"""
Diagnostic message parsing

Editor diagnostics are produced elsewhere as fixed message templates; the
fix-up commands only get the message text back. This module recovers the
key, locale(s) and suggested value from those messages:
- ``Missing translation for "<key>" [<locale>]``
- ``Untranslated (same as default) "<key>" [<locale>]``
- ``Style suggestion "<key>" [<locale>] (suggested: <text>)``
- ``Missing default locale translation for "<key>" [<locale>] (exists in: <a>, <b>)``
plus the older ``... for key <key> in locale <locale>`` phrasing, which may
carry an ``AI i18n:`` prefix. Anything else parses to None.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

_LOCALE = r"[A-Za-z0-9_-]+"
_LEGACY_PREFIX = re.compile(r"^AI i18n:\s*")

_MISSING = re.compile(r'^Missing translation for "(.+?)"\s*\[(' + _LOCALE + r")\]")
_UNTRANSLATED = re.compile(r'^Untranslated \(same as default\) "(.+?)"\s*\[(' + _LOCALE + r")\]")
_LEGACY_MISSING = re.compile(r"^Missing translation for key\s+(.+?)\s+in locale\s+(" + _LOCALE + ")")
_LEGACY_UNTRANSLATED = re.compile(
    r"^Untranslated \(same as default\) value for key\s+(.+?)\s+in locale\s+(" + _LOCALE + ")"
)
_SELECTION = re.compile(r"^Missing translations for\s+(.+?)\s+in locales:\s+(.+)$")

_STYLE = re.compile(r'^Style suggestion "(.+?)"\s*\[(' + _LOCALE + r")\]\s*\(([^)]*)\)")
_LEGACY_STYLE = re.compile(r"^Style suggestion for key\s+(.+?)\s+in locale\s+(" + _LOCALE + r")\s*\(([^)]*)\)")
_SUGGESTED = re.compile(r"suggested:\s*([^|)]+)", re.IGNORECASE)

_MISSING_DEFAULT = re.compile(
    r'^Missing default locale translation for "(.+?)"\s*\[(' + _LOCALE + r")\]\s*\(exists in:\s*([^)]*)\)"
)
_LEGACY_MISSING_DEFAULT = re.compile(
    r"^Missing default locale translation for key\s+(.+?)\s+in locale\s+(" + _LOCALE + r")"
    r"\s*\(exists in:\s*([^)]*)\)"
)


@dataclass(frozen=True)
class MissingTranslationDiagnostic:
    key: str
    locales: Tuple[str, ...]
    untranslated: bool = False


@dataclass(frozen=True)
class StyleDiagnostic:
    key: str
    locale: str
    suggested: str


@dataclass(frozen=True)
class MissingDefaultDiagnostic:
    key: str
    default_locale: str
    existing_locales: Tuple[str, ...]


Diagnostic = Union[MissingTranslationDiagnostic, StyleDiagnostic, MissingDefaultDiagnostic]


def _split_locales(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def parse_untranslated_diagnostic(message: Optional[str]) -> Optional[MissingTranslationDiagnostic]:
    """Missing or untranslated value for one key, in one or more locales."""
    if not message:
        return None
    for pattern, untranslated in ((_MISSING, False), (_UNTRANSLATED, True)):
        match = pattern.match(message)
        if match:
            return MissingTranslationDiagnostic(match.group(1).strip(), (match.group(2),), untranslated)

    clean = _LEGACY_PREFIX.sub("", message)
    for pattern, untranslated in ((_LEGACY_MISSING, False), (_LEGACY_UNTRANSLATED, True)):
        match = pattern.match(clean)
        if match:
            return MissingTranslationDiagnostic(match.group(1).strip(), (match.group(2),), untranslated)

    match = _SELECTION.match(clean)
    if match:
        key = match.group(1).strip()
        locales = _split_locales(match.group(2))
        if key and locales:
            return MissingTranslationDiagnostic(key, locales)
    return None


def _style_from_match(match) -> Optional[StyleDiagnostic]:
    key, locale = match.group(1).strip(), match.group(2).strip()
    suggested = _SUGGESTED.search(match.group(3) or "")
    value = suggested.group(1).strip() if suggested else ""
    if not key or not locale or not value:
        return None
    return StyleDiagnostic(key, locale, value)


def parse_style_diagnostic(message: Optional[str]) -> Optional[StyleDiagnostic]:
    if not message:
        return None
    match = _STYLE.match(message)
    if match:
        return _style_from_match(match)
    match = _LEGACY_STYLE.match(_LEGACY_PREFIX.sub("", message))
    return _style_from_match(match) if match else None


def parse_missing_default_diagnostic(message: Optional[str]) -> Optional[MissingDefaultDiagnostic]:
    """
    Parse a missing-default-locale message.

    The trailing ``(exists in: ...)`` group is required and must name at
    least one locale.
    """
    if not message:
        return None
    match = _MISSING_DEFAULT.match(message) or _LEGACY_MISSING_DEFAULT.match(_LEGACY_PREFIX.sub("", message))
    if not match:
        return None
    existing = _split_locales(match.group(3))
    key = match.group(1).strip()
    if not key or not existing:
        return None
    return MissingDefaultDiagnostic(key, match.group(2), existing)


def parse_diagnostic(message: Optional[str]) -> Optional[Diagnostic]:
    """Try every known message shape."""
    for parser in (parse_missing_default_diagnostic, parse_style_diagnostic, parse_untranslated_diagnostic):
        parsed = parser(message)
        if parsed is not None:
            return parsed
    return None


def diagnostic_to_dict(diagnostic: Optional[Diagnostic]):
    if diagnostic is None:
        return None
    if isinstance(diagnostic, MissingDefaultDiagnostic):
        return {
            "type": "missing-default",
            "key": diagnostic.key,
            "default_locale": diagnostic.default_locale,
            "existing_locales": list(diagnostic.existing_locales),
        }
    if isinstance(diagnostic, StyleDiagnostic):
        return {
            "type": "style",
            "key": diagnostic.key,
            "locale": diagnostic.locale,
            "suggested": diagnostic.suggested,
        }
    return {
        "type": "untranslated" if diagnostic.untranslated else "missing",
        "key": diagnostic.key,
        "locales": list(diagnostic.locales),
    }
