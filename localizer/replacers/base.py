"""
Replacement result types and the edit collector shared by every replacer.

Replacers never rewrite the buffer while scanning. Each pass matches the
original content, asks the EditCollector to resolve the literal against
the KeyMap and records an edit; the edits are applied back to front at
the end. Spans are claimed in pass order so a later, more general pass
never rewrites a span an earlier pass already owned.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from localizer.keys import KeyMap
from localizer.patterns import COMMON
from localizer.text_utils import normalize_text
from localizer.validation import IgnoreConfig, should_translate

DEFAULT_IMPORT_PATH = "@/i18n"


@dataclass(frozen=True)
class ReplaceOptions:
    import_path: str = DEFAULT_IMPORT_PATH
    ensure_import: bool = True
    ignore_config: Optional[IgnoreConfig] = None
    key_pattern: Optional[Pattern] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any], ignore_config: Optional[IgnoreConfig] = None) -> "ReplaceOptions":
        custom = config.get("key_pattern")
        return cls(
            import_path=config.get("t_import_path") or DEFAULT_IMPORT_PATH,
            ignore_config=ignore_config,
            key_pattern=re.compile(custom) if custom else None,
        )


@dataclass(frozen=True)
class ReplaceResult:
    content: str
    change_count: int
    unresolved: Tuple[str, ...] = field(default=())  # eligible texts with no key

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "change_count": self.change_count,
            "unresolved": list(self.unresolved),
        }


def quote_key(key: str) -> str:
    return f"'{key}'"


def t_call(key: str, arguments: str = "", function: str = "t") -> str:
    """``t('key')`` or ``t('key', { name })``."""
    if arguments:
        return f"{function}({quote_key(key)}, {arguments})"
    return f"{function}({quote_key(key)})"


class EditCollector:
    """Resolves candidates for one replace call and records non-overlapping edits."""

    def __init__(self, key_map: KeyMap, namespace: str, options: Optional[ReplaceOptions] = None):
        self.key_map = key_map
        self.namespace = namespace
        self.options = options or ReplaceOptions()
        self._edits: List[Tuple[int, int, str, int]] = []  # (start, end, replacement, changes)
        self._claimed: List[Tuple[int, int]] = []
        self._unresolved: List[str] = []

    def overlaps(self, start: int, end: int) -> bool:
        return any(start < c_end and c_start < end for c_start, c_end in self._claimed)

    def claim(self, start: int, end: int) -> None:
        self._claimed.append((start, end))

    def resolve(self, text: str, kind: str) -> Optional[str]:
        """Key for an eligible text, or None (rejected by the validator, or a key-map miss)."""
        candidate = normalize_text(text)
        if not should_translate(candidate, self.options.ignore_config, self.options.key_pattern):
            return None
        key = self.key_map.resolve(self.namespace, kind, candidate)
        if key is None and candidate not in self._unresolved:
            self._unresolved.append(candidate)
        return key

    def replace(self, start: int, end: int, text: str, kind: str, render: Callable[[str], str]) -> bool:
        """
        Claim ``[start, end)`` and, when ``text`` resolves, replace that span with ``render(key)``.

        The span is claimed even when nothing is replaced so later passes
        leave it alone.
        """
        if self.overlaps(start, end):
            return False
        self.claim(start, end)
        key = self.resolve(text, kind)
        if not key:
            return False
        self._edits.append((start, end, render(key), 1))
        return True

    def splice(self, start: int, end: int, result: ReplaceResult) -> None:
        """Take over a sub-buffer (e.g. a Vue script block) rewritten by another replacer."""
        if self.overlaps(start, end):
            return
        self.claim(start, end)
        if result.change_count:
            self._edits.append((start, end, result.content, result.change_count))
        self._unresolved.extend(text for text in result.unresolved if text not in self._unresolved)

    def replace_text_run(self, start: int, end: int, raw: str, kind: str, render: Callable[[str], str]) -> bool:
        """Like replace(), but keeps the run's leading and trailing whitespace verbatim."""
        lead = len(raw) - len(raw.lstrip())
        trail = len(raw) - len(raw.rstrip())
        return self.replace(start + lead, end - trail, raw.strip(), kind, render) if raw.strip() else False

    @property
    def change_count(self) -> int:
        return sum(edit[3] for edit in self._edits)

    def apply(self, content: str) -> str:
        result = content
        for start, end, replacement, _ in sorted(self._edits, key=lambda edit: edit[0], reverse=True):
            result = result[:start] + replacement + result[end:]
        return result

    def result(self, content: str) -> ReplaceResult:
        return ReplaceResult(self.apply(content), self.change_count, tuple(self._unresolved))


def has_t_import(content: str, import_path: str = DEFAULT_IMPORT_PATH) -> bool:
    pattern = r"import\s*\{[^}]*\bt\b[^}]*\}\s*from\s*['\"]" + re.escape(import_path) + r"['\"]"
    return bool(re.search(pattern, content))


def ensure_t_import(content: str, import_path: str = DEFAULT_IMPORT_PATH) -> str:
    """
    Add ``import { t } from '<import_path>';`` when the content calls t() without importing it.

    The import goes after the last import statement; without imports it
    goes after a ``'use client'`` style prologue, else at the top followed
    by a blank line.
    """
    if has_t_import(content, import_path) or not re.search(r"(?<![\w$.])t\s*\(", content):
        return content
    line = f"import {{ t }} from '{import_path}';"

    imports = list(COMMON.import_statement.finditer(content))
    if imports:
        pos = imports[-1].end()
        return content[:pos] + "\n" + line + content[pos:]

    prologue = COMMON.directive_prologue.match(content)
    if prologue:
        pos = prologue.end()
        return content[:pos] + line + "\n\n" + content[pos:].lstrip("\n")

    return f"{line}\n\n{content}"
