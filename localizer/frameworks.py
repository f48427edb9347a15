"""
Framework variant dispatch

This module provides:
- Framework: the template syntaxes the parsers and replacers understand
- detect_framework: pick a variant from a file name or, failing that, content markers
- HANDLERS: the parse/replace pair of every variant
- parse_source / replace_source: dispatch through HANDLERS
- generate_call: the translation call that replaces a single selection
"""

import re
from enum import Enum
from pathlib import PurePath
from typing import Callable, Dict, NamedTuple, Optional

from localizer.keys import KeyMap
from localizer.parsers import ExtractionResult, ParseOptions, parse_blade, parse_generic, parse_jsx, parse_vue
from localizer.replacers import (
    ReplaceOptions,
    ReplaceResult,
    replace_blade,
    replace_generic,
    replace_jsx,
    replace_vue,
)
from localizer.text_utils import TemplateLiteral


class Framework(str, Enum):
    GENERIC = "generic"
    JSX = "jsx"
    VUE = "vue"
    BLADE = "blade"


class FrameworkHandler(NamedTuple):
    parse: Callable[..., ExtractionResult]
    replace: Callable[..., ReplaceResult]


HANDLERS: Dict[Framework, FrameworkHandler] = {
    Framework.GENERIC: FrameworkHandler(parse_generic, replace_generic),
    Framework.JSX: FrameworkHandler(parse_jsx, replace_jsx),
    Framework.VUE: FrameworkHandler(parse_vue, replace_vue),
    Framework.BLADE: FrameworkHandler(parse_blade, replace_blade),
}

JSX_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".mts")

_BLADE_MARKERS = re.compile(r"\{\{--|@(?:extends|section|yield|include|foreach|if|csrf|lang)\b|['\"][\w.\-]+['\"]\s*=>")
_JSX_MARKERS = re.compile(r"</[A-Za-z][\w.]*>|\bclassName=|^\s*import\s", re.MULTILINE)


def detect_framework(file_path=None, content: Optional[str] = None) -> Framework:
    """
    Pick the variant for a file.

    The file name decides when it is known; otherwise content markers are
    checked in order (Vue root blocks, Blade syntax, JSX markup or imports).
    Anything else is GENERIC.
    """
    if file_path:
        name = PurePath(str(file_path)).name.lower()
        if name.endswith(".vue"):
            return Framework.VUE
        if name.endswith(".blade.php") or name.endswith(".php"):
            return Framework.BLADE
        if name.endswith(JSX_EXTENSIONS):
            return Framework.JSX

    if content:
        if re.search(r"<template\b", content, re.IGNORECASE):
            return Framework.VUE
        if _BLADE_MARKERS.search(content):
            return Framework.BLADE
        if _JSX_MARKERS.search(content):
            return Framework.JSX
    return Framework.GENERIC


def is_source_file(file_path, extensions=None) -> bool:
    """True for files the pipeline should process; declaration files are skipped."""
    name = PurePath(str(file_path)).name.lower()
    if name.endswith(".d.ts"):
        return False
    return name.endswith(tuple(extensions or JSX_EXTENSIONS + (".vue", ".blade.php")))


def parse_source(
    content: str,
    file_path=None,
    options: Optional[ParseOptions] = None,
    framework: Optional[Framework] = None,
) -> ExtractionResult:
    framework = framework or detect_framework(file_path, content)
    return HANDLERS[framework].parse(content, options)


def replace_source(
    content: str,
    key_map: KeyMap,
    namespace: str,
    file_path=None,
    options: Optional[ReplaceOptions] = None,
    framework: Optional[Framework] = None,
) -> ReplaceResult:
    framework = framework or detect_framework(file_path, content)
    return HANDLERS[framework].replace(content, key_map, namespace, options)


def generate_call(framework: Framework, key: str, template: Optional[TemplateLiteral] = None) -> str:
    """
    Translation call that replaces a selected string.

    Blade and Vue selections sit in markup and get an echo; JS-like and
    generic selections get a bare call, with placeholder arguments when the
    selection was a template literal.
    """
    if framework == Framework.BLADE:
        return f"{{{{ __('{key}') }}}}"
    if framework == Framework.VUE:
        return f"{{{{ $t('{key}') }}}}"
    if template is not None and template.placeholders:
        pairs = ", ".join(f"{p.name}: {p.expression}" for p in template.placeholders)
        return f"t('{key}', {{ {pairs} }})"
    return f"t('{key}')"
