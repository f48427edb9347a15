"""
JSX/TSX parser

Recognizes, in this order (earlier recognizers claim their spans first):
1. object-property values (``title: "..."``)
2. descriptive variable initializers (``const errorMessage = "..."``)
3. toast/notification call arguments
4. markup text runs between tags
5. expression-container literals (``{"..."}``)
6. attribute values for user-facing attributes
7. string literals inside attribute expressions
8. return-statement literals

The same order is used by the JSX replacer so both sides agree on which
rule owns a span.
"""

from typing import Optional

from localizer.kinds import (
    infer_kind_from_attribute,
    infer_kind_from_property,
    infer_kind_from_tag,
    infer_kind_from_variable,
)
from localizer.patterns import COMMON, JSX
from localizer.parsers.base import Collector, ExtractionResult, ParseOptions
from localizer.text_utils import analyze_template_literal
from localizer.validation import should_ignore_attribute


def _literal_text(match) -> str:
    """Candidate text for a quoted literal; template literals use their placeholder form."""
    text = match.group("text")
    if match.group("quote") == "`":
        return analyze_template_literal(text).base_text
    return text


def parse_jsx(content: str, options: Optional[ParseOptions] = None) -> ExtractionResult:
    collector = Collector(options)
    ignore_config = collector.options.ignore_config

    for pattern in COMMON.module_specifiers:
        for match in pattern.finditer(content):
            collector.claim(match.start(), match.end())

    for match in JSX.object_property.finditer(content):
        collector.add(
            _literal_text(match), "string", infer_kind_from_property(match.group("prop")),
            match.start("text"), match.end("text"),
        )

    for match in JSX.variable_initializer.finditer(content):
        name = match.group("name")
        if not JSX.descriptive_name.search(name):
            continue
        collector.add(
            _literal_text(match), "string", infer_kind_from_variable(name),
            match.start("text"), match.end("text"),
        )

    for match in JSX.toast_call.finditer(content):
        collector.add(_literal_text(match), "string", "toast", match.start("text"), match.end("text"))

    for match in JSX.text_run.finditer(content):
        if not match.group("text").strip():
            continue
        collector.add(
            match.group("text"), "text", infer_kind_from_tag(match.group("tag")),
            match.start("text"), match.end("text"),
        )

    for match in JSX.expression_literal.finditer(content):
        collector.add(match.group("text"), "text", "text", match.start("text"), match.end("text"))

    for match in JSX.attribute.finditer(content):
        attr = match.group("attr")
        if should_ignore_attribute(attr, ignore_config):
            continue
        collector.add(
            match.group("text"), "attribute-value", infer_kind_from_attribute(attr),
            match.start("text"), match.end("text"),
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
            collector.add(
                literal.group("text"), "attribute-value", kind,
                base + literal.start("text"), base + literal.end("text"),
            )

    for match in JSX.return_literal.finditer(content):
        collector.add(match.group("text"), "string", "text", match.start("text"), match.end("text"))

    return collector.result()
