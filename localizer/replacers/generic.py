"""Replacer for plain-text selections."""

from typing import Optional

from localizer.keys import KeyMap
from localizer.patterns import COMMON
from localizer.replacers.base import EditCollector, ReplaceOptions, ReplaceResult, t_call


def replace_generic(
    text: str,
    key_map: KeyMap,
    namespace: str,
    options: Optional[ReplaceOptions] = None,
) -> ReplaceResult:
    """
    Replace the whole selection with a t() call.

    A quoted selection is replaced including its quotes; surrounding
    whitespace is kept. Selections with code markers are left alone.
    """
    edits = EditCollector(key_map, namespace, options)
    stripped = text.strip() if text else ""
    if not stripped or any(p.search(stripped) for p in COMMON.selection_code_markers):
        return edits.result(text or "")

    start = text.index(stripped)
    candidate = stripped
    literal = COMMON.quoted_string.fullmatch(stripped)
    if literal:
        candidate = literal.group("text")
    edits.replace(start, start + len(stripped), candidate, "text", lambda key: t_call(key))
    return edits.result(text)
