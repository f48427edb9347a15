"""
Tests for the framework replacers.

Covers the rewrite shapes per syntax, import injection, idempotence
(a second pass changes nothing) and key-map-miss safety (text without a
key is left byte-identical).
"""

from __future__ import annotations

from localizer.keys import KeyMap
from localizer.replacers import (
    ReplaceOptions,
    ensure_t_import,
    has_t_import,
    replace_blade,
    replace_generic,
    replace_jsx,
    replace_vue,
)

NO_IMPORT = ReplaceOptions(ensure_import=False)


class TestJsxReplacer:
    """Test cases for replace_jsx()."""

    def test_expression_container(self) -> None:
        key_map = KeyMap([(("App", "text", "Click me"), "app.button.click_me")])
        result = replace_jsx('<button>{"Click me"}</button>', key_map, "App", NO_IMPORT)

        assert result.content == "<button>{t('app.button.click_me')}</button>"
        assert result.change_count == 1

    def test_descriptive_variable(self) -> None:
        key_map = KeyMap([(("ns", "message", "Something went wrong"), "ns.message.something_went_wrong")])
        result = replace_jsx('const errorMessage = "Something went wrong"', key_map, "ns", NO_IMPORT)

        assert result.content == "const errorMessage = t('ns.message.something_went_wrong')"

    def test_text_run_keeps_whitespace(self) -> None:
        key_map = KeyMap([(("Auth", "label", "Email address"), "auth.label.email_address")])
        result = replace_jsx("<label>\n  Email address\n</label>", key_map, "Auth", NO_IMPORT)

        assert result.content == "<label>\n  {t('auth.label.email_address')}\n</label>"

    def test_attribute_value_becomes_expression(self) -> None:
        key_map = KeyMap([(("Auth", "placeholder", "Enter your name"), "auth.placeholder.enter_your_name")])
        result = replace_jsx('<input placeholder="Enter your name" />', key_map, "Auth", NO_IMPORT)

        assert result.content == "<input placeholder={t('auth.placeholder.enter_your_name')} />"

    def test_template_literal_passes_placeholders(self) -> None:
        key_map = KeyMap([(("Home", "message", "Hello {name}, welcome back"), "home.message.hello_name_welcome_back")])
        result = replace_jsx(
            "const welcomeMessage = `Hello ${user.name}, welcome back`;", key_map, "Home", NO_IMPORT
        )

        assert result.content == "const welcomeMessage = t('home.message.hello_name_welcome_back', { name: user.name });"

    def test_commons_namespace_is_tried_first(self) -> None:
        """Common short text resolves through the Commons namespace."""
        key_map = KeyMap([(("Commons", "button", "Save changes"), "Commons.button.save_changes")])
        result = replace_jsx("<button>Save changes</button>", key_map, "Settings", NO_IMPORT)

        assert result.content == "<button>{t('Commons.button.save_changes')}</button>"

    def test_second_pass_changes_nothing(self) -> None:
        key_map = KeyMap([
            (("App", "text", "Click me"), "app.button.click_me"),
            (("App", "message", "Something went wrong"), "app.message.something_went_wrong"),
        ])
        content = (
            "export function Panel() {\n"
            '  const errorMessage = "Something went wrong";\n'
            '  return <button>{"Click me"}</button>;\n'
            "}\n"
        )
        first = replace_jsx(content, key_map, "App")
        second = replace_jsx(first.content, key_map, "App")

        assert first.change_count == 2
        assert second.change_count == 0
        assert second.content == first.content

    def test_key_map_miss_leaves_literal(self) -> None:
        content = '<p>{"Click me"}</p>\n<input placeholder="Enter your name" />'
        result = replace_jsx(content, KeyMap(), "App")

        assert result.content == content
        assert result.change_count == 0
        assert set(result.unresolved) == {"Click me", "Enter your name"}

    def test_partial_miss_only_rewrites_known_text(self) -> None:
        key_map = KeyMap([(("App", "text", "Click me"), "app.button.click_me")])
        content = '<p>{"Click me"}</p><p>{"Something went wrong"}</p>'
        result = replace_jsx(content, key_map, "App", NO_IMPORT)

        assert result.content == "<p>{t('app.button.click_me')}</p><p>{\"Something went wrong\"}</p>"
        assert result.unresolved == ("Something went wrong",)


class TestImportInjection:
    """Test cases for ensure_t_import()."""

    def test_import_added_after_last_import(self) -> None:
        key_map = KeyMap([(("App", "text", "Click me"), "app.button.click_me")])
        content = 'import React from "react";\n\nexport const A = () => <b>{"Click me"}</b>;\n'
        result = replace_jsx(content, key_map, "App")

        assert result.content == (
            'import React from "react";\n'
            "import { t } from '@/i18n';\n\n"
            "export const A = () => <b>{t('app.button.click_me')}</b>;\n"
        )

    def test_import_after_use_client_prologue(self) -> None:
        content = "'use client';\nexport const A = () => t('x.y');\n"
        assert ensure_t_import(content) == (
            "'use client';\nimport { t } from '@/i18n';\n\nexport const A = () => t('x.y');\n"
        )

    def test_import_at_top_without_imports(self) -> None:
        assert ensure_t_import("const a = t('x.y');", "~/lang") == "import { t } from '~/lang';\n\nconst a = t('x.y');"

    def test_existing_import_is_kept(self) -> None:
        content = "import { t } from '@/i18n';\nconst a = t('x.y');"
        assert has_t_import(content)
        assert ensure_t_import(content) == content

    def test_no_import_without_calls(self) -> None:
        assert ensure_t_import("const a = 1;") == "const a = 1;"


class TestVueReplacer:
    """Test cases for replace_vue()."""

    def test_template_text_and_attributes(self) -> None:
        key_map = KeyMap([
            (("Auth", "heading", "Welcome back"), "auth.heading.welcome_back"),
            (("Auth", "placeholder", "Enter your name"), "auth.placeholder.enter_your_name"),
            (("Auth", "title", "Edit profile"), "auth.title.edit_profile"),
        ])
        content = (
            "<template>\n"
            "  <h1>Welcome back</h1>\n"
            '  <input placeholder="Enter your name" />\n'
            "  <a :title=\"'Edit profile'\">x</a>\n"
            "</template>\n"
        )
        result = replace_vue(content, key_map, "Auth")

        assert result.content == (
            "<template>\n"
            "  <h1>{{ $t('auth.heading.welcome_back') }}</h1>\n"
            "  <input :placeholder=\"$t('auth.placeholder.enter_your_name')\" />\n"
            "  <a :title=\"$t('auth.title.edit_profile')\">x</a>\n"
            "</template>\n"
        )
        assert result.change_count == 3

    def test_interpolated_text(self) -> None:
        key_map = KeyMap([(("Home", "text", "Hello {name}, welcome back"), "home.text.hello_name_welcome_back")])
        result = replace_vue("<template><p>Hello {{ user.name }}, welcome back</p></template>", key_map, "Home")

        assert result.content == (
            "<template><p>{{ $t('home.text.hello_name_welcome_back', { name: user.name }) }}</p></template>"
        )

    def test_script_block_uses_t_and_import(self) -> None:
        key_map = KeyMap([(("Account", "title", "Account settings"), "account.title.account_settings")])
        content = '<template><div /></template>\n<script setup>\nconst pageTitle = "Account settings";\n</script>\n'
        result = replace_vue(content, key_map, "Account")

        assert "const pageTitle = t('account.title.account_settings');" in result.content
        assert "import { t } from '@/i18n';" in result.content
        assert result.change_count == 1

    def test_bare_fragment_is_unwrapped(self) -> None:
        key_map = KeyMap([(("Commons", "button", "Save changes"), "Commons.button.save_changes")])
        result = replace_vue("<button>Save changes</button>", key_map, "Settings")

        assert result.content == "<button>{{ $t('Commons.button.save_changes') }}</button>"

    def test_second_pass_changes_nothing(self) -> None:
        key_map = KeyMap([(("Auth", "heading", "Welcome back"), "auth.heading.welcome_back")])
        first = replace_vue("<template><h1>Welcome back</h1></template>", key_map, "Auth")
        second = replace_vue(first.content, key_map, "Auth")

        assert first.change_count == 1
        assert second.change_count == 0


class TestBladeReplacer:
    """Test cases for replace_blade()."""

    def test_directive_text_and_echo(self) -> None:
        key_map = KeyMap([
            (("Dashboard", "heading", "Account settings"), "dashboard.heading.account_settings"),
            (("Dashboard", "heading", "Your dashboard"), "dashboard.heading.your_dashboard"),
            (("Dashboard", "text", "Thanks for your order"), "dashboard.text.thanks_for_your_order"),
            (("Dashboard", "text", "Hello {name}, welcome back"), "dashboard.text.hello_name_welcome_back"),
        ])
        content = (
            "@section('title', 'Account settings')\n"
            "<h1>Your dashboard</h1>\n"
            "<p>{{ 'Thanks for your order' }}</p>\n"
            "<p>Hello {{ $name }}, welcome back</p>\n"
        )
        result = replace_blade(content, key_map, "Dashboard")

        assert result.content == (
            "@section('title', __('dashboard.heading.account_settings'))\n"
            "<h1>{{ __('dashboard.heading.your_dashboard') }}</h1>\n"
            "<p>{{ __('dashboard.text.thanks_for_your_order') }}</p>\n"
            "<p>{{ __('dashboard.text.hello_name_welcome_back', ['name' => $name]) }}</p>\n"
        )
        assert result.change_count == 4

        again = replace_blade(result.content, key_map, "Dashboard")
        assert again.change_count == 0

    def test_comment_is_untouched(self) -> None:
        key_map = KeyMap([(("Dashboard", "text", "Internal note for developers"), "dashboard.text.note")])
        content = "<p>{{-- Internal note for developers --}}</p>"

        assert replace_blade(content, key_map, "Dashboard").content == content


class TestGenericReplacer:
    """Test cases for replace_generic()."""

    def test_quoted_selection(self) -> None:
        key_map = KeyMap([(("App", "text", "Save your changes"), "app.text.save_your_changes")])
        result = replace_generic('  "Save your changes" ', key_map, "App")

        assert result.content == "  t('app.text.save_your_changes') "

    def test_code_selection_is_left_alone(self) -> None:
        result = replace_generic("return a;", KeyMap(), "App")

        assert result.content == "return a;"
        assert result.change_count == 0
