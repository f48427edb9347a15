"""
JSX/TSX replacer

Rewrites the shapes recognized by parsers.jsx, in the same order:
object-property values, descriptive variable initializers, toast calls,
markup text runs, expression-container literals, attribute values,
attribute-expression literals and return-statement literals.
"""

from typing import Optional, Tuple

from localizer.keys import KeyMap
from localizer.kinds import (
    infer_kind_from_attribute,
    infer_kind_from_property,
    infer_kind_from_tag,
    infer_kind_from_variable,
)
from localizer.patterns import COMMON, JSX
from localizer.replacers.base import EditCollector, ReplaceOptions, ReplaceResult, ensure_t_import, t_call
from localizer.text_utils import analyze_template_literal
from localizer.validation import should_ignore_attribute


def _literal(match) -> Tuple[str, str, int, int]:
    """(candidate text, t() arguments, span start, span end) for a quoted literal match."""
    text = match.group("text")
    args = ""
    if match.group("quote") == "`":
        template = analyze_template_literal(text)
        text, args = template.base_text, template.call_arguments()
    return text, args, match.start("quote"), match.end("text") + 1


def _replace_literal(edits: EditCollector, match, kind: str) -> None:
    text, args, start, end = _literal(match)
    edits.replace(start, end, text, kind, lambda key: t_call(key, args))


def collect_jsx_edits(content: str, edits: EditCollector) -> None:
    ignore_config = edits.options.ignore_config

    for pattern in COMMON.module_specifiers:
        for match in pattern.finditer(content):
            edits.claim(match.start(), match.end())

    for match in JSX.object_property.finditer(content):
        _replace_literal(edits, match, infer_kind_from_property(match.group("prop")))

    for match in JSX.variable_initializer.finditer(content):
        name = match.group("name")
        if JSX.descriptive_name.search(name):
            _replace_literal(edits, match, infer_kind_from_variable(name))

    for match in JSX.toast_call.finditer(content):
        _replace_literal(edits, match, "toast")

    for match in JSX.text_run.finditer(content):
        edits.replace_text_run(
            match.start("text"), match.end("text"), match.group("text"),
            infer_kind_from_tag(match.group("tag")),
            lambda key: "{" + t_call(key) + "}",
        )

    for match in JSX.expression_literal.finditer(content):
        _replace_literal(edits, match, "text")

    for match in JSX.attribute.finditer(content):
        attr = match.group("attr")
        if should_ignore_attribute(attr, ignore_config):
            continue
        edits.replace(
            match.start("quote"), match.end(), match.group("text"), infer_kind_from_attribute(attr),
            lambda key: "{" + t_call(key) + "}",
        )

    for match in JSX.attribute_expression.finditer(content):
        attr = match.group("attr")
        if should_ignore_attribute(attr, ignore_config):
            continue
        kind = infer_kind_from_attribute(attr)
        base = match.start("expr")
        for literal in COMMON.quoted_string.finditer(match.group("expr")):
            if "${" in literal.group("text"):
                continue
            edits.replace(
                base + literal.start(), base + literal.end(), literal.group("text"), kind,
                lambda key: t_call(key),
            )

    for match in JSX.return_literal.finditer(content):
        _replace_literal(edits, match, "text")


def replace_jsx(
    content: str,
    key_map: KeyMap,
    namespace: str,
    options: Optional[ReplaceOptions] = None,
) -> ReplaceResult:
    """
    Replace translatable literals in a JS/TS module with t() calls.

    Args:
        content: Source text
        key_map: Assigned keys; a miss leaves the literal untouched
        namespace: Namespace of the file
        options: Import path, import injection and validator overrides

    Returns:
        ReplaceResult with the rewritten content and the number of substitutions
    """
    edits = EditCollector(key_map, namespace, options)
    collect_jsx_edits(content, edits)
    result = edits.result(content)
    if result.change_count and edits.options.ensure_import:
        return ReplaceResult(
            ensure_t_import(result.content, edits.options.import_path),
            result.change_count,
            result.unresolved,
        )
    return result
