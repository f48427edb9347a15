"""
Parsers - candidate string extraction per template syntax

This module provides:
- base: ExtractedItem, ExtractionResult and the validating Collector
- generic: whole-selection parsing for plain text
- jsx: JSX/TSX and plain JS/TS modules
- vue: Vue single-file components
- blade: Laravel Blade templates
"""

from localizer.parsers.base import (
    ITEM_TYPES,
    Collector,
    ExtractedItem,
    ExtractionResult,
    ExtractionStats,
    ParseOptions,
    SourceRange,
)
from localizer.parsers.blade import parse_blade
from localizer.parsers.generic import parse_generic
from localizer.parsers.jsx import parse_jsx
from localizer.parsers.vue import parse_vue

__all__ = [
    "ITEM_TYPES",
    "Collector",
    "ExtractedItem",
    "ExtractionResult",
    "ExtractionStats",
    "ParseOptions",
    "SourceRange",
    "parse_blade",
    "parse_generic",
    "parse_jsx",
    "parse_vue",
]
