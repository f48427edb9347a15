"""
Tests for framework detection and dispatch.
"""

from __future__ import annotations

import pytest

from localizer.frameworks import (
    Framework,
    detect_framework,
    generate_call,
    is_source_file,
    parse_source,
    replace_source,
)
from localizer.keys import KeyMap
from localizer.replacers import ReplaceOptions
from localizer.text_utils import analyze_template_literal


class TestDetectFramework:
    """Test cases for detect_framework()."""

    @pytest.mark.parametrize(
        "file_path,expected",
        [
            ("resources/js/pages/Cart.vue", Framework.VUE),
            ("resources/views/cart.blade.php", Framework.BLADE),
            ("lang/en/messages.php", Framework.BLADE),
            ("src/App.tsx", Framework.JSX),
            ("src/util.mjs", Framework.JSX),
        ],
    )
    def test_by_file_name(self, file_path: str, expected: Framework) -> None:
        assert detect_framework(file_path) == expected

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("<template>\n  <p>Hi</p>\n</template>", Framework.VUE),
            ("@extends('layouts.app')", Framework.BLADE),
            ("return [\n    'welcome' => 'Welcome',\n];", Framework.BLADE),
            ("import React from 'react'", Framework.JSX),
            ('<div className="x">Hi</div>', Framework.JSX),
            ("Thanks for your order", Framework.GENERIC),
        ],
    )
    def test_by_content(self, content: str, expected: Framework) -> None:
        assert detect_framework(None, content) == expected

    def test_file_name_wins_over_content(self) -> None:
        assert detect_framework("notes.tsx", "<template></template>") == Framework.JSX


class TestSourceFiles:
    """Test cases for is_source_file()."""

    def test_declaration_files_are_skipped(self) -> None:
        assert not is_source_file("src/types/env.d.ts")
        assert is_source_file("src/App.tsx")
        assert is_source_file("resources/views/home.blade.php")
        assert not is_source_file("README.md")

    def test_custom_extensions(self) -> None:
        assert is_source_file("a.vue", [".vue"])
        assert not is_source_file("a.tsx", [".vue"])


class TestDispatch:
    """Test cases for parse_source(), replace_source() and generate_call()."""

    def test_parse_source_uses_file_name(self) -> None:
        result = parse_source('<button>{"Click me"}</button>', "Button.jsx")

        assert result.texts() == ["Click me"]
        assert result.items[0].kind == "text"

    def test_replace_source_forced_framework(self) -> None:
        key_map = KeyMap([(("App", "text", "Click me"), "app.button.click_me")])
        result = replace_source(
            '<button>{"Click me"}</button>',
            key_map,
            "App",
            options=ReplaceOptions(ensure_import=False),
            framework=Framework.JSX,
        )

        assert result.content == "<button>{t('app.button.click_me')}</button>"

    def test_generate_call(self) -> None:
        assert generate_call(Framework.BLADE, "auth.title") == "{{ __('auth.title') }}"
        assert generate_call(Framework.VUE, "auth.title") == "{{ $t('auth.title') }}"
        assert generate_call(Framework.JSX, "auth.title") == "t('auth.title')"
        assert generate_call(Framework.GENERIC, "auth.title") == "t('auth.title')"

    def test_generate_call_with_placeholders(self) -> None:
        template = analyze_template_literal("Hello ${user.name}")

        assert generate_call(Framework.JSX, "home.hello", template) == "t('home.hello', { name: user.name })"
