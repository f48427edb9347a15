"""Kind inference tables shared by parsers and replacers.

A kind is the semantic category of a candidate string (heading, label,
button, placeholder, message, toast, ...). It becomes the middle segment of
generated keys, so the parser and the replacer must infer it identically.
"""

import re
from typing import Optional

DEFAULT_KIND = "text"

_HEADING_TAG = re.compile(r"^h[1-6]$")

TAG_KINDS = {
    "label": "label",
    "button": "button",
    "a": "link",
    "link": "link",
    "input": "placeholder",
    "textarea": "placeholder",
    "select": "placeholder",
    "title": "title",
    "th": "label",
    "legend": "label",
    "caption": "label",
    "option": "label",
}

# Vue ecosystem components (Vue Router, Nuxt, Quasar, Vuetify, Element, PrimeVue)
COMPONENT_KINDS = {
    "nuxt-link": "link",
    "nuxtlink": "link",
    "router-link": "link",
    "routerlink": "link",
    "nuxt-page": "text",
    "router-view": "text",
    "el-button": "button",
    "el-input": "placeholder",
    "el-select": "placeholder",
    "el-dialog": "heading",
    "p-button": "button",
    "p-inputtext": "placeholder",
    "inputtext": "placeholder",
    "p-dialog": "heading",
    "dialog": "heading",
}

COMPONENT_PREFIX_KINDS = (
    ("q-btn", "button"),
    ("q-input", "placeholder"),
    ("q-select", "placeholder"),
    ("q-dialog", "heading"),
    ("q-card-section", "text"),
    ("v-btn", "button"),
    ("v-text-field", "placeholder"),
    ("v-select", "placeholder"),
    ("v-dialog", "heading"),
    ("v-card-title", "heading"),
    ("v-card-text", "text"),
)

ATTRIBUTE_KINDS = {
    "placeholder": "placeholder",
    "title": "title",
    "alt": "alt",
    "aria-label": "aria_label",
    "label": "label",
    "error-message": "message",
    "helper-text": "text",
}

PROPERTY_KINDS = {
    "title": "heading",
    "heading": "heading",
    "description": "text",
    "text": "text",
    "message": "message",
    "error": "message",
    "reason": "message",
    "label": "label",
    "placeholder": "placeholder",
    "cta": "button",
    "alt": "alt",
}

# Checked in order; the first word found in the variable name wins
VARIABLE_NAME_KINDS = (
    ("placeholder", "placeholder"),
    ("message", "message"),
    ("error", "message"),
    ("reason", "message"),
    ("title", "title"),
    ("heading", "heading"),
    ("label", "label"),
    ("description", "text"),
    ("text", "text"),
)


def infer_kind_from_tag(tag: Optional[str]) -> str:
    if not tag:
        return DEFAULT_KIND
    lower = tag.lower()
    if _HEADING_TAG.match(lower):
        return "heading"
    if lower in COMPONENT_KINDS:
        return COMPONENT_KINDS[lower]
    for prefix, kind in COMPONENT_PREFIX_KINDS:
        if lower.startswith(prefix):
            return kind
    if lower in TAG_KINDS:
        return TAG_KINDS[lower]
    if lower.endswith("button") or lower.endswith("btn"):
        return "button"
    if "link" in lower:
        return "link"
    if lower in ("heading", "title") or lower.endswith("title"):
        return "heading"
    return DEFAULT_KIND


def infer_kind_from_attribute(name: Optional[str]) -> str:
    if not name:
        return DEFAULT_KIND
    return ATTRIBUTE_KINDS.get(name.lower().lstrip(":"), DEFAULT_KIND)


def infer_kind_from_property(name: Optional[str]) -> str:
    if not name:
        return DEFAULT_KIND
    return PROPERTY_KINDS.get(name.lower(), DEFAULT_KIND)


def infer_kind_from_variable(name: Optional[str]) -> str:
    """Infer a kind from a descriptive variable name such as ``errorMessage``."""
    if not name:
        return DEFAULT_KIND
    lower = name.lower()
    for word, kind in VARIABLE_NAME_KINDS:
        if word in lower:
            return kind
    return DEFAULT_KIND
