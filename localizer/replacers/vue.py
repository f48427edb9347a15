"""
Vue single-file component replacer

Template strings become ``$t()`` calls:
- text runs: ``{{ $t('key') }}`` (interpolated runs pass their placeholders)
- static attributes: ``title="..."`` -> ``:title="$t('key')"``
- bound attributes, v-text/v-html and mustache literals: ``$t('key')``
Script blocks are rewritten by the JSX replacer with ``t()`` and get the
import when needed.
"""

from typing import Optional

from localizer.keys import KeyMap
from localizer.kinds import DEFAULT_KIND, infer_kind_from_attribute, infer_kind_from_tag
from localizer.parsers.vue import (
    CALL_PREFIX,
    RAW_TEXT_ELEMENTS,
    VOID_ELEMENTS,
    ensure_template_root,
    literal_value,
)
from localizer.patterns import COMMON, VUE, VUE_TEXT_ATTRIBUTES
from localizer.replacers.base import EditCollector, ReplaceOptions, ReplaceResult, t_call
from localizer.replacers.jsx import replace_jsx
from localizer.text_utils import analyze_template_literal
from localizer.validation import is_already_translated, should_ignore_attribute


def _dollar_t(key: str, arguments: str = "") -> str:
    return t_call(key, arguments, function="$t")


def _mustache(key: str, arguments: str = "") -> str:
    return "{{ " + _dollar_t(key, arguments) + " }}"


def _rewrite_attributes(edits: EditCollector, attrs: str, base: int) -> None:
    ignore_config = edits.options.ignore_config
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
                start = value_start + offset - 1
                edits.replace(
                    start, start + len(text) + 2, text, infer_kind_from_attribute(bare),
                    lambda key: _dollar_t(key),
                )
        elif name in ("v-text", "v-html"):
            literal = literal_value(value)
            if literal:
                text, offset = literal
                start = value_start + offset - 1
                edits.replace(start, start + len(text) + 2, text, DEFAULT_KIND, lambda key: _dollar_t(key))
        elif name in VUE_TEXT_ATTRIBUTES and not should_ignore_attribute(name, ignore_config):
            edits.replace(
                base + attr.start(), base + attr.end(), value, infer_kind_from_attribute(name),
                lambda key, name=name: f":{name}=\"{_dollar_t(key)}\"",
            )


def _rewrite_text(edits: EditCollector, text: str, base: int, parent: Optional[str]) -> None:
    if not text.strip():
        return
    kind = infer_kind_from_tag(parent)
    mustaches = list(COMMON.mustache.finditer(text))
    if not mustaches:
        edits.replace_text_run(base, base + len(text), text, kind, lambda key: _mustache(key))
        return

    static = COMMON.mustache.sub(" ", text)
    if any(ch.isalpha() for ch in static) and not is_already_translated(text):
        template = analyze_template_literal(text.strip(), COMMON.mustache)
        lead = len(text) - len(text.lstrip())
        start = base + lead
        edits.replace(
            start, start + len(text.strip()), template.base_text, kind,
            lambda key: _mustache(key, template.call_arguments()),
        )
        return

    for mustache in mustaches:
        expr_start = base + mustache.start(1)
        expression = mustache.group(1)
        for literal in COMMON.quoted_string.finditer(expression):
            if CALL_PREFIX.search(expression[:literal.start()]):
                continue
            edits.replace(
                expr_start + literal.start(), expr_start + literal.end(), literal.group("text"),
                DEFAULT_KIND, lambda key: _dollar_t(key),
            )


def _rewrite_template(edits: EditCollector, body: str, base: int) -> None:
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
            _rewrite_attributes(edits, token.group("attrs") or "", base + token.start("attrs"))
            if lower in RAW_TEXT_ELEMENTS:
                raw_until = lower
            elif not token.group("selfclose") and lower not in VOID_ELEMENTS:
                stack.append(tag)
            continue
        if token.group("text") is not None:
            _rewrite_text(edits, token.group("text"), base + token.start("text"), stack[-1] if stack else None)


def replace_vue(
    content: str,
    key_map: KeyMap,
    namespace: str,
    options: Optional[ReplaceOptions] = None,
) -> ReplaceResult:
    source, shift = ensure_template_root(content)
    edits = EditCollector(key_map, namespace, options)

    template = VUE.template_block.search(source)
    if template:
        _rewrite_template(edits, template.group("body"), template.start("body"))

    for script in VUE.script_block.finditer(source):
        script_result = replace_jsx(script.group("body"), key_map, namespace, edits.options)
        edits.splice(script.start("body"), script.end("body"), script_result)

    result = edits.result(source)
    if shift:
        opening_length = shift
        closing_length = len(source) - len(content) - shift
        rewritten = result.content[opening_length:len(result.content) - closing_length]
        return ReplaceResult(rewritten, result.change_count, result.unresolved)
    return result
