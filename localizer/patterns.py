"""
Pattern Library

This module provides the text-shape recognizers shared by every parser,
replacer and the validator:
- COMMON: quoted literals, interpolation markers, module specifiers,
  already-translated call markers and code-shape markers
- JSX: expression containers, markup text runs, attributes, object
  properties, descriptive variables, toast calls, return literals
- VUE: template/script blocks, template tokens, bound and static attributes
- BLADE: comments, echo expressions, array pairs, directive arguments

All tables are frozen dataclasses of compiled patterns, built once at
import time.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

# Body of a single-line quoted literal, 2-200 characters, honouring escapes.
# Requires the opening quote to be captured as the ``quote`` group.
_LITERAL_BODY = r"(?P<text>(?:\\.|(?!(?P=quote))[^\\\n]){2,200})"

# Attribute names whose string values are user-facing in JSX markup
JSX_TEXT_ATTRIBUTES: Tuple[str, ...] = ("placeholder", "title", "alt", "aria-label", "label")

# Vue templates also commonly carry form-helper attributes
VUE_TEXT_ATTRIBUTES: Tuple[str, ...] = JSX_TEXT_ATTRIBUTES + ("error-message", "helper-text")

OBJECT_TEXT_PROPERTIES: Tuple[str, ...] = (
    "title", "description", "message", "label", "placeholder", "cta",
    "text", "error", "heading", "alt", "reason",
)

DESCRIPTIVE_VARIABLE_WORDS: Tuple[str, ...] = (
    "title", "label", "message", "placeholder", "text", "heading",
    "description", "error", "reason",
)

TOAST_METHODS: Tuple[str, ...] = ("success", "error", "warning", "info", "show", "message", "loading")

BLADE_TEXT_DIRECTIVES: Tuple[str, ...] = ("section", "slot", "push", "prepend", "title")


def _alternation(names: Tuple[str, ...]) -> str:
    return "|".join(re.escape(name) for name in names)


@dataclass(frozen=True)
class CommonPatterns:
    quoted_string: Pattern
    template_string: Pattern
    interpolation: Pattern
    mustache: Pattern
    module_specifiers: Tuple[Pattern, ...]
    translated_calls: Tuple[Pattern, ...]
    code_markers: Tuple[Pattern, ...]
    selection_code_markers: Tuple[Pattern, ...]
    punctuation_only: Pattern
    key_reference: Pattern
    import_statement: Pattern
    directive_prologue: Pattern


@dataclass(frozen=True)
class JsxPatterns:
    expression_literal: Pattern
    text_run: Pattern
    attribute: Pattern
    attribute_expression: Pattern
    object_property: Pattern
    variable_initializer: Pattern
    descriptive_name: Pattern
    toast_call: Pattern
    return_literal: Pattern


@dataclass(frozen=True)
class VuePatterns:
    root_blocks: Pattern
    template_block: Pattern
    script_block: Pattern
    token: Pattern
    attribute: Pattern
    text_run: Pattern
    static_attribute: Pattern
    bound_attribute: Pattern
    directive_text: Pattern


@dataclass(frozen=True)
class BladePatterns:
    comment: Pattern
    echo: Pattern
    raw_echo: Pattern
    echo_literal: Pattern
    array_pair: Pattern
    directive_argument: Pattern
    text_run: Pattern
    translation_markers: Tuple[Pattern, ...]
    directive: Pattern


COMMON = CommonPatterns(
    quoted_string=re.compile(r"(?P<quote>['\"])(?P<text>(?:\\.|(?!(?P=quote))[^\\])+?)(?P=quote)"),
    template_string=re.compile(r"`(?P<text>(?:\\.|[^`\\])*)`"),
    interpolation=re.compile(r"\$\{([^}]*)\}"),
    mustache=re.compile(r"\{\{([\s\S]*?)\}\}"),
    module_specifiers=(
        re.compile(r"\bimport\s+[^;'\"`()]*?\bfrom\s*['\"][^'\"]+['\"]"),
        re.compile(r"\bimport\s*\(\s*['\"][^'\"]+['\"]\s*\)"),
        re.compile(r"\bexport\s+[^;'\"`()]*?\bfrom\s*['\"][^'\"]+['\"]"),
        re.compile(r"\brequire\s*\(\s*['\"][^'\"]+['\"]\s*\)"),
    ),
    translated_calls=(
        re.compile(r"(?<![\w$])\$?t\s*\(\s*['\"`][^'\"`]+['\"`]"),
        re.compile(r"\bi18n\.t\s*\("),
        re.compile(r"\buseI18n\(\)\.t\s*\("),
        re.compile(r"(?<![\w$])__\s*\(\s*['\"]"),
        re.compile(r"@lang\s*\("),
        re.compile(r"\btrans(?:_choice)?\s*\("),
    ),
    code_markers=(
        re.compile(r"^\s*(?:import|export)\s"),
        re.compile(r"\brequire\s*\(\s*['\"]"),
        re.compile(r"^\s*(?:const|let|var)\s+[\w$]+\s*="),
        re.compile(r"^\s*[\w$]+(?:\.[\w$]+|\[[^\]]*\])*\s*(?:[-+*/]?=)(?!=)\s*\S"),
        re.compile(r"\b(?:if|for|while|switch|catch)\s*\([^)]*\)\s*\{"),
        re.compile(r"=>"),
        re.compile(r"\bfunction\s*[\w$]*\s*\("),
        re.compile(r"\breturn\b[^.!?]*;"),
        re.compile(r"[{};][\s\S]*\b(?:const|let|var|function|return|if|else|for|while|class|async|await)\b"),
        re.compile(r"\b(?:const|let|var|function|return|if|else|for|while|class|async|await)\b[\s\S]*[{};]"),
    ),
    selection_code_markers=(
        re.compile(r"[:;{}<>]|=>|\bfunction\b|\breturn\b"),
        re.compile(r"^\s*(?:import|export|const|let|var)\s"),
    ),
    punctuation_only=re.compile(r"^[\s.,;:!?'\"()\[\]{}<>/\\|@#$%^&*+=~`\-]+$"),
    key_reference=re.compile(r"^[A-Za-z][\w-]*(?:\.[A-Za-z_][\w-]*)+$"),
    import_statement=re.compile(
        r"^[ \t]*import\b(?:[^;'\"`]|'[^'\n]*'|\"[^\"\n]*\")*?['\"][^'\"\n]+['\"][ \t]*;?",
        re.MULTILINE,
    ),
    directive_prologue=re.compile(r"\A(?:\s*(['\"])use (?:client|server|strict)\1;?[ \t]*\n)+"),
)


JSX = JsxPatterns(
    expression_literal=re.compile(
        r"\{\s*(?P<quote>['\"])(?P<text>(?:\\.|(?!(?P=quote))[^\\\n])+?)(?P=quote)\s*\}"
    ),
    text_run=re.compile(
        r"(?<![\w$.)\]])<(?P<tag>[A-Za-z][\w.]*)"
        r"(?:\s(?:[^<>{}\"']|\"[^\"]*\"|'[^']*'|\{(?:[^{}]|\{[^{}]*\})*\})*)?/?>"
        r"(?P<text>[^<>{}`]*[A-Za-z][^<>{}`]*)(?=<)"
    ),
    attribute=re.compile(
        r"(?<=\s)(?P<attr>" + _alternation(JSX_TEXT_ATTRIBUTES) + r")="
        r"(?P<quote>['\"])(?P<text>[^'\"\n]{2,200})(?P=quote)"
    ),
    attribute_expression=re.compile(
        r"(?<=\s)(?P<attr>" + _alternation(JSX_TEXT_ATTRIBUTES) + r")="
        r"\{(?P<expr>[^{}]{2,400})\}"
    ),
    object_property=re.compile(
        r"(?<![\w$.])(?P<pq>['\"]?)(?P<prop>" + _alternation(OBJECT_TEXT_PROPERTIES) + r")(?P=pq)"
        r"\s*:\s*(?P<quote>['\"`])" + _LITERAL_BODY + r"(?P=quote)"
    ),
    variable_initializer=re.compile(
        r"\b(?P<decl>const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)"
        r"\s*(?::\s*[\w$<>\[\]|. ]+?)?\s*=\s*(?P<quote>['\"`])" + _LITERAL_BODY + r"(?P=quote)"
    ),
    descriptive_name=re.compile(_alternation(DESCRIPTIVE_VARIABLE_WORDS), re.IGNORECASE),
    toast_call=re.compile(
        r"(?<![\w$.])toast(?:\.(?P<method>" + _alternation(TOAST_METHODS) + r"))?"
        r"\s*\(\s*(?P<quote>['\"`])" + _LITERAL_BODY + r"(?P=quote)"
    ),
    return_literal=re.compile(
        r"\breturn\s+(?P<quote>['\"])(?P<text>[^'\"\n]{3,200})(?P=quote)(?=\s*(?:;|\n|\}|$))"
    ),
)


VUE = VuePatterns(
    root_blocks=re.compile(r"<(?:template|script|style)\b", re.IGNORECASE),
    template_block=re.compile(r"<template(?P<attrs>[^>]*)>(?P<body>[\s\S]*)</template>", re.IGNORECASE),
    script_block=re.compile(r"<script(?P<attrs>[^>]*)>(?P<body>[\s\S]*?)</script>", re.IGNORECASE),
    token=re.compile(
        r"(?P<comment><!--[\s\S]*?-->)"
        r"|<(?P<close>/)?(?P<tag>[A-Za-z][\w:.-]*)"
        r"(?P<attrs>(?:[^<>\"']|\"[^\"]*\"|'[^']*')*?)(?P<selfclose>/)?>"
        r"|(?P<text>[^<]+)"
        r"|<"
    ),
    attribute=re.compile(
        r"(?P<name>[:@#]?[\w.:\-\[\]]+)"
        r"(?:\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<bare>[^\s\"'>/=]+)))?"
    ),
    text_run=re.compile(r">(?P<text>[^<>{}]*[A-Za-z][^<>{}]*)<"),
    static_attribute=re.compile(
        r"(?<=\s)(?P<attr>" + _alternation(VUE_TEXT_ATTRIBUTES) + r")="
        r"(?P<quote>['\"])(?P<text>[^'\"\n]{2,200})(?P=quote)"
    ),
    bound_attribute=re.compile(
        r"(?<=\s)(?P<prefix>:|v-bind:)(?P<attr>" + _alternation(VUE_TEXT_ATTRIBUTES) + r")="
        r"\"\s*'(?P<text>[^'\"\n]{2,200})'\s*\""
    ),
    directive_text=re.compile(
        r"(?<=\s)(?P<directive>v-text|v-html)=\"\s*'(?P<text>[^'\"\n]{2,200})'\s*\""
    ),
)


BLADE = BladePatterns(
    comment=re.compile(r"\{\{--[\s\S]*?--\}\}"),
    echo=re.compile(r"\{\{(?!--)\s*(?P<expr>[\s\S]+?)\s*\}\}"),
    raw_echo=re.compile(r"\{!!\s*(?P<expr>[\s\S]+?)\s*!!\}"),
    echo_literal=re.compile(r"\{\{\s*(?P<quote>['\"])" + _LITERAL_BODY + r"(?P=quote)\s*\}\}"),
    array_pair=re.compile(
        r"(?P<kq>['\"])(?P<name>[\w.\-]+)(?P=kq)\s*=>\s*(?P<quote>['\"])" + _LITERAL_BODY + r"(?P=quote)"
    ),
    directive_argument=re.compile(
        r"@(?P<directive>" + _alternation(BLADE_TEXT_DIRECTIVES) + r")\(\s*"
        r"(?P<nq>['\"])(?P<name>[^'\"]+)(?P=nq)\s*,\s*(?P<quote>['\"])" + _LITERAL_BODY + r"(?P=quote)\s*\)"
    ),
    text_run=re.compile(
        r"<(?P<tag>[A-Za-z][\w.:-]*)(?:\s(?:[^<>\"']|\"[^\"]*\"|'[^']*')*)?/?>"
        r"(?P<text>[^<>]*[A-Za-z][^<>]*)(?=<)"
    ),
    translation_markers=(
        re.compile(r"(?<![\w$])__\s*\("),
        re.compile(r"@lang\s*\("),
        re.compile(r"\btrans(?:_choice)?\s*\("),
        re.compile(r"@choice\s*\("),
    ),
    directive=re.compile(
        r"@(?:extends|section|endsection|yield|include|if|elseif|endif|foreach|endforeach|"
        r"csrf|php|endphp|auth|guest|lang|component|slot)\b"
    ),
)
