"""
Replacers - rewrite translatable literals into translation calls

This module provides:
- base: ReplaceOptions, ReplaceResult, the EditCollector and import injection
- generic: whole-selection replacement
- jsx: JSX/TSX and plain JS/TS modules (``t('key')``)
- vue: Vue single-file components (``$t('key')`` in templates)
- blade: Laravel Blade templates (``__('key')``)
"""

from localizer.replacers.base import (
    DEFAULT_IMPORT_PATH,
    EditCollector,
    ReplaceOptions,
    ReplaceResult,
    ensure_t_import,
    has_t_import,
    t_call,
)
from localizer.replacers.blade import replace_blade
from localizer.replacers.generic import replace_generic
from localizer.replacers.jsx import replace_jsx
from localizer.replacers.vue import replace_vue

__all__ = [
    "DEFAULT_IMPORT_PATH",
    "EditCollector",
    "ReplaceOptions",
    "ReplaceResult",
    "ensure_t_import",
    "has_t_import",
    "replace_blade",
    "replace_generic",
    "replace_jsx",
    "replace_vue",
    "t_call",
]
