"""
Vue single-file component parser

The template is scanned token by token (comments, tags, text) with a tag
stack so text kinds can be inferred from the enclosing element. Script
blocks are handed to the JSX parser. A fragment without a template,
script or style root is wrapped in ``<template>`` before scanning.
"""

import re
from typing import Optional, Tuple

from localizer.kinds import DEFAULT_KIND, infer_kind_from_attribute, infer_kind_from_tag
from localizer.patterns import COMMON, VUE, VUE_TEXT_ATTRIBUTES
from localizer.parsers.base import Collector, ExtractionResult, ParseOptions
from localizer.parsers.jsx import parse_jsx
from localizer.text_utils import analyze_template_literal
from localizer.validation import is_already_translated, should_ignore_attribute

TEMPLATE_WRAPPER = ("<template>", "</template>")

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})

RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

CALL_PREFIX = re.compile(r"(?<![\w$])\$?t\s*\(\s*$")


def ensure_template_root(content: str) -> Tuple[str, int]:
    """Wrap a bare fragment in a template root. Returns the source and the shift applied."""
    if VUE.root_blocks.search(content):
        return content, 0
    opening, closing = TEMPLATE_WRAPPER
    return f"{opening}{content}{closing}", len(opening)


def literal_value(value: Optional[str]) -> Optional[Tuple[str, int]]:
    """Inner text and offset of a bound value that is exactly one quoted literal."""
    if value is None:
        return None
    stripped = value.strip()
    literal = COMMON.quoted_string.fullmatch(stripped)
    if not literal:
        return None
    return literal.group("text"), value.index(stripped) + literal.start("text")


def _scan_attributes(collector: Collector, attrs: str, base: int) -> None:
    ignore_config = collector.options.ignore_config
    for attr in VUE.attribute.finditer(attrs):
        name = attr.group("name")
        group = "dq" if attr.group("dq") is not None else "sq" if attr.group("sq") is not None else None
        if group is None:
            continue
        value = attr.group(group)
        value_start = base + attr.start(group)

        if name.startswith(":") or name.startswith("v-bind:"):
            bare = name.split(":", 1)[1]
            if bare not in VUE_TEXT_ATTRIBUTES or should_ignore_attribute(bare, ignore_config):
                continue
            literal = literal_value(value)
            if literal:
                text, offset = literal
                collector.add(
                    text, "attribute-value", infer_kind_from_attribute(bare),
                    value_start + offset, value_start + offset + len(text),
                )
        elif name in ("v-text", "v-html"):
            literal = literal_value(value)
            if literal:
                text, offset = literal
                collector.add(text, "string", DEFAULT_KIND, value_start + offset, value_start + offset + len(text))
        elif name in VUE_TEXT_ATTRIBUTES and not should_ignore_attribute(name, ignore_config):
            collector.add(
                value, "attribute-value", infer_kind_from_attribute(name),
                value_start, value_start + len(value),
            )


def _scan_text(collector: Collector, text: str, base: int, parent: Optional[str]) -> None:
    if not text.strip():
        return
    mustaches = list(COMMON.mustache.finditer(text))
    if not mustaches:
        collector.add(text, "text", infer_kind_from_tag(parent), base, base + len(text))
        return

    static = COMMON.mustache.sub(" ", text)
    if any(ch.isalpha() for ch in static) and not is_already_translated(text):
        # Interpolations become {placeholders} of one message
        pattern = analyze_template_literal(text.strip(), COMMON.mustache)
        collector.add(pattern.base_text, "text", infer_kind_from_tag(parent), base, base + len(text))
        return

    for mustache in mustaches:
        expr_start = base + mustache.start(1)
        expression = mustache.group(1)
        for literal in COMMON.quoted_string.finditer(expression):
            if CALL_PREFIX.search(expression[:literal.start()]):
                continue
            collector.add(
                literal.group("text"), "string", DEFAULT_KIND,
                expr_start + literal.start("text"), expr_start + literal.end("text"),
            )


def _scan_template(collector: Collector, body: str, base: int) -> None:
    stack = []
    raw_until = None
    for token in VUE.token.finditer(body):
        tag = token.group("tag")
        if raw_until is not None:
            if tag and token.group("close") and tag.lower() == raw_until:
                raw_until = None
            continue
        if token.group("comment"):
            continue
        if tag:
            lower = tag.lower()
            if token.group("close"):
                while stack:
                    if stack.pop().lower() == lower:
                        break
                continue
            _scan_attributes(collector, token.group("attrs") or "", base + token.start("attrs"))
            if lower in RAW_TEXT_ELEMENTS:
                raw_until = lower
            elif not token.group("selfclose") and lower not in VOID_ELEMENTS:
                stack.append(tag)
            continue
        if token.group("text") is not None:
            _scan_text(collector, token.group("text"), base + token.start("text"), stack[-1] if stack else None)


def parse_vue(content: str, options: Optional[ParseOptions] = None) -> ExtractionResult:
    source, shift = ensure_template_root(content)
    collector = Collector(options, offset=-shift)

    template = VUE.template_block.search(source)
    if template:
        _scan_template(collector, template.group("body"), template.start("body"))

    for script in VUE.script_block.finditer(source):
        script_result = parse_jsx(script.group("body"), collector.options)
        collector.extend(script_result, offset=script.start("body") - shift)

    return collector.result()
