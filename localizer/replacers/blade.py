"""
Blade template replacer

Rewrites the shapes recognized by parsers.blade with Laravel's ``__()``:
directive arguments and array-pair values become ``__('key')``, echoed
literals and markup text become ``{{ __('key') }}``. Text runs with
echoes pass them as replacement parameters. No import is needed.
"""

from typing import Optional

from localizer.keys import KeyMap
from localizer.kinds import DEFAULT_KIND, infer_kind_from_property, infer_kind_from_tag
from localizer.parsers.blade import is_translated_markup, mask_comments
from localizer.patterns import BLADE
from localizer.replacers.base import EditCollector, ReplaceOptions, ReplaceResult, quote_key
from localizer.text_utils import TemplateLiteral, analyze_template_literal

_SKIPPED_TAGS = frozenset({"script", "style"})


def blade_call(key: str, template: Optional[TemplateLiteral] = None) -> str:
    """``__('key')`` or ``__('key', ['name' => $expr])``."""
    if template is None or not template.placeholders:
        return f"__({quote_key(key)})"
    pairs = ", ".join(f"'{p.name}' => {p.expression}" for p in template.placeholders)
    return f"__({quote_key(key)}, [{pairs}])"


def blade_echo(key: str, template: Optional[TemplateLiteral] = None) -> str:
    return "{{ " + blade_call(key, template) + " }}"


def replace_blade(
    content: str,
    key_map: KeyMap,
    namespace: str,
    options: Optional[ReplaceOptions] = None,
) -> ReplaceResult:
    edits = EditCollector(key_map, namespace, options)
    source = mask_comments(content)

    for match in BLADE.directive_argument.finditer(source):
        edits.replace(
            match.start("quote"), match.end("text") + 1, match.group("text"),
            infer_kind_from_property(match.group("name")), blade_call,
        )

    for match in BLADE.array_pair.finditer(source):
        edits.replace(
            match.start("quote"), match.end("text") + 1, match.group("text"),
            infer_kind_from_property(match.group("name")), blade_call,
        )

    for match in BLADE.echo_literal.finditer(source):
        edits.replace(match.start(), match.end(), match.group("text"), DEFAULT_KIND, blade_echo)

    for match in BLADE.text_run.finditer(source):
        text = match.group("text")
        start, end = match.start("text"), match.end("text")
        if not text.strip() or match.group("tag").lower() in _SKIPPED_TAGS:
            continue
        if is_translated_markup(text) or BLADE.directive.search(text) or BLADE.raw_echo.search(text):
            edits.claim(start, end)
            continue
        kind = infer_kind_from_tag(match.group("tag"))
        if BLADE.echo.search(text):
            if not any(ch.isalpha() for ch in BLADE.echo.sub(" ", text)):
                continue
            template = analyze_template_literal(text.strip(), BLADE.echo)
            lead = len(text) - len(text.lstrip())
            edits.replace(
                start + lead, start + lead + len(text.strip()), template.base_text, kind,
                lambda key, template=template: blade_echo(key, template),
            )
            continue
        edits.replace_text_run(start, end, text, kind, blade_echo)

    return edits.result(content)
