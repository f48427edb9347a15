"""
Syntax-Tree Normalizer

Mechanical rewriting can split a parenthetical phrase across JSX siblings:

    <p>{t('cart.text.items')}{count}) </p>

where the translated text used to end in `` (``. This module parses the
source with tree-sitter, finds a ``{t('key')}`` container followed (blank
text aside) by one expression container and then a text node starting
with ``)``, and rewrites the run as

    <p>{t('cart.text.items')} ({count}) </p>

It also scans locale documents for values with unbalanced parentheses;
their keys narrow the repair to the strings that actually lost a paren.
"""

import functools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from localizer.core.store import LAYOUT_GROUPED, detect_layout, flatten_leaves, read_document, write_document
from localizer.exceptions import MalformedLocaleDocument, StructuralParseError
from localizer.logger import get_logger
from localizer.validation import has_balanced_parentheses

logger = get_logger(__name__)

LANGUAGE_BY_SUFFIX = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".tsx": "tsx",
}

_ELEMENT_EDGES = frozenset({"jsx_opening_element", "jsx_closing_element"})


@functools.lru_cache(maxsize=None)
def get_language(name: str) -> Language:
    if name == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    if name == "typescript":
        return Language(tree_sitter_typescript.language_typescript())
    if name == "javascript":
        return Language(tree_sitter_javascript.language())
    raise ValueError(f"Unsupported language: {name}")


def language_for_path(file_path=None) -> str:
    """Grammar name for a file; TSX when the path is unknown."""
    if file_path is None:
        return "tsx"
    suffix = Path(str(file_path)).suffix.lower()
    if suffix not in LANGUAGE_BY_SUFFIX:
        raise ValueError(f"No grammar for {file_path}")
    return LANGUAGE_BY_SUFFIX[suffix]


@dataclass(frozen=True)
class ParenRepair:
    key: str
    start_byte: int
    end_byte: int
    replacement: bytes


def translation_key(container: Node) -> Optional[str]:
    """Key of a ``{t('key')}`` expression container, else None."""
    inner = [child for child in container.named_children if child.type != "comment"]
    if len(inner) != 1 or inner[0].type != "call_expression":
        return None
    call = inner[0]
    function = call.child_by_field_name("function")
    if function is None or function.type != "identifier" or function.text != b"t":
        return None
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return None
    first = next((arg for arg in arguments.named_children if arg.type != "comment"), None)
    if first is None or first.type != "string":
        return None
    return first.text.decode("utf-8")[1:-1]


def _is_blank_text(node: Node) -> bool:
    return node.type == "jsx_text" and not node.text.strip()


def _repairs_in_element(element: Node, keys: Optional[Set[str]]) -> List[ParenRepair]:
    content = [
        child for child in element.named_children
        if child.type not in _ELEMENT_EDGES and child.type != "comment" and not _is_blank_text(child)
    ]
    repairs = []
    i = 0
    while i + 2 < len(content):
        node, expression, closing = content[i], content[i + 1], content[i + 2]
        key = translation_key(node) if node.type == "jsx_expression" else None
        if (
            key
            and (not keys or key in keys)
            and expression.type == "jsx_expression"
            and translation_key(expression) is None
            and closing.type == "jsx_text"
        ):
            text = closing.text.decode("utf-8").lstrip()
            if text.startswith(")"):
                replacement = b" (" + expression.text + b")" + text[1:].encode("utf-8")
                repairs.append(ParenRepair(key, node.end_byte, closing.end_byte, replacement))
                i += 3
                continue
        i += 1
    return repairs


def find_split_parentheticals(root: Node, keys: Optional[Set[str]] = None) -> List[ParenRepair]:
    """Every repair in the tree, in source order, without overlaps."""
    found: List[ParenRepair] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "jsx_element":
            found.extend(_repairs_in_element(node, keys))
        stack.extend(reversed(node.children))

    repairs: List[ParenRepair] = []
    for repair in sorted(found, key=lambda r: r.start_byte):
        if repairs and repair.start_byte < repairs[-1].end_byte:
            continue
        repairs.append(repair)
    return repairs


def normalize_source(
    source: str,
    file_path=None,
    keys: Optional[Iterable[str]] = None,
    language: Optional[str] = None,
) -> Tuple[str, int]:
    """
    Repair split parentheticals in one source buffer.

    Args:
        source: JS/TS module text
        file_path: Used to pick the grammar and in error messages
        keys: Only repair ``t()`` calls for these keys (None or empty => all)
        language: Grammar override (javascript, typescript, tsx)

    Returns:
        (new source, number of repairs)

    Raises:
        StructuralParseError: the source does not parse cleanly
    """
    data = source.encode("utf-8")
    parser = Parser(get_language(language or language_for_path(file_path)))
    tree = parser.parse(data)
    if tree.root_node.has_error:
        raise StructuralParseError(file_path or "<source>")

    repairs = find_split_parentheticals(tree.root_node, set(keys) if keys else None)
    if not repairs:
        return source, 0

    out = bytearray(data)
    for repair in reversed(repairs):
        out[repair.start_byte:repair.end_byte] = repair.replacement
    return out.decode("utf-8"), len(repairs)


def normalize_file(file_path, keys: Optional[Iterable[str]] = None) -> int:
    """Normalize a file in place; it is written only when something changed."""
    path = Path(file_path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        source = f.read()
    updated, count = normalize_source(source, path, keys)
    if count:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(updated)
        logger.info(f"Repaired {count} split parentheticals in {path}")
    return count


@dataclass
class NormalizeReport:
    changed_files: List[str] = field(default_factory=list)
    repair_count: int = 0
    failures: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self):
        return {
            "changed_files": list(self.changed_files),
            "repair_count": self.repair_count,
            "failures": list(self.failures),
        }


def normalize_files(paths: Iterable, keys: Optional[Iterable[str]] = None) -> NormalizeReport:
    """Normalize many files; a file that fails to parse or read is recorded and skipped."""
    keys = set(keys) if keys else None
    report = NormalizeReport()
    for path in paths:
        try:
            count = normalize_file(path, keys)
        except StructuralParseError as e:
            logger.warning(str(e))
            report.failures.append({"path": str(path), "error": e.reason})
            continue
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning(f"Could not normalize {path}: {e}")
            report.failures.append({"path": str(path), "error": str(e)})
            continue
        if count:
            report.changed_files.append(str(path))
            report.repair_count += count
    return report


# ============================================================
# Locale value scan
# ============================================================

@dataclass(frozen=True)
class ParenIssue:
    locale: str
    document: str
    key: str
    value: str

    def to_dict(self):
        return {"locale": self.locale, "document": self.document, "key": self.key, "value": self.value}


def _locale_documents(root: Path, base_locale: str) -> List[Tuple[str, Path]]:
    grouped = detect_layout(root, base_locale) == LAYOUT_GROUPED
    documents = []
    for path in sorted(root.rglob("*.json")):
        rel = path.relative_to(root)
        if any(part.startswith(".") for part in rel.parts):
            continue
        locale = rel.parts[0] if grouped and len(rel.parts) > 1 else path.stem
        documents.append((locale, path))
    return documents


def find_paren_issues(root, base_locale: str = "en") -> List[ParenIssue]:
    """Every locale string whose ``(`` and ``)`` counts differ. Malformed documents are skipped."""
    root = Path(root)
    if not root.is_dir():
        return []
    issues = []
    for locale, path in _locale_documents(root, base_locale):
        try:
            document = read_document(path)
        except MalformedLocaleDocument as e:
            logger.warning(str(e))
            continue
        for key, value in flatten_leaves(document).items():
            if not has_balanced_parentheses(value):
                issues.append(ParenIssue(locale, str(path.relative_to(root)), key, value))
    return issues


def issue_keys(issues: Iterable[ParenIssue]) -> Set[str]:
    return {issue.key for issue in issues}


def fix_paren_value(value: str) -> str:
    """Drop a single dangling ``(`` or ``)`` at either end of a value."""
    opened, closed = value.count("("), value.count(")")
    if opened == closed:
        return value
    stripped = value
    if opened == 1 and closed == 0:
        if stripped.rstrip().endswith("("):
            stripped = stripped.rstrip()[:-1].rstrip()
        elif stripped.lstrip().startswith("("):
            stripped = stripped.lstrip()[1:].lstrip()
    elif opened == 0 and closed == 1:
        if stripped.lstrip().startswith(")"):
            stripped = stripped.lstrip()[1:].lstrip()
        elif stripped.rstrip().endswith(")"):
            stripped = stripped.rstrip()[:-1].rstrip()
    return stripped


def _fix_tree(tree) -> bool:
    changed = False
    for name, value in tree.items():
        if isinstance(value, dict):
            changed = _fix_tree(value) or changed
        elif isinstance(value, str):
            fixed = fix_paren_value(value)
            if fixed != value:
                tree[name] = fixed
                changed = True
    return changed


def fix_paren_values(root, base_locale: str = "en") -> List[str]:
    """Apply fix_paren_value() to every locale document; returns the documents written."""
    root = Path(root)
    if not root.is_dir():
        return []
    written = []
    for _, path in _locale_documents(root, base_locale):
        try:
            document = read_document(path)
        except MalformedLocaleDocument as e:
            logger.warning(str(e))
            continue
        if _fix_tree(document):
            write_document(path, document)
            written.append(str(path))
    return written
