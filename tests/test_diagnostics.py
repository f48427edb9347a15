"""
Tests for diagnostic message parsing.
"""

from __future__ import annotations

import pytest

from localizer.diagnostics import (
    MissingDefaultDiagnostic,
    MissingTranslationDiagnostic,
    StyleDiagnostic,
    diagnostic_to_dict,
    parse_diagnostic,
    parse_missing_default_diagnostic,
    parse_style_diagnostic,
    parse_untranslated_diagnostic,
)


class TestMissingDefault:
    """Test cases for missing-default-locale messages."""

    def test_exists_in_group(self) -> None:
        parsed = parse_missing_default_diagnostic(
            'Missing default locale translation for "auth.title" [fr] (exists in: es, de)'
        )
        assert parsed == MissingDefaultDiagnostic("auth.title", "fr", ("es", "de"))

    def test_group_is_required(self) -> None:
        message = 'Missing default locale translation for "auth.title" [fr]'

        assert parse_missing_default_diagnostic(message) is None
        assert parse_diagnostic(message) is None

    def test_empty_group(self) -> None:
        assert parse_missing_default_diagnostic(
            'Missing default locale translation for "auth.title" [fr] (exists in: )'
        ) is None

    def test_legacy_phrasing(self) -> None:
        parsed = parse_missing_default_diagnostic(
            "AI i18n: Missing default locale translation for key auth.title in locale en (exists in: fr)"
        )
        assert parsed == MissingDefaultDiagnostic("auth.title", "en", ("fr",))


class TestUntranslated:
    """Test cases for missing and untranslated value messages."""

    @pytest.mark.parametrize(
        "message,expected",
        [
            ('Missing translation for "nav.home" [fr]', MissingTranslationDiagnostic("nav.home", ("fr",))),
            (
                'Untranslated (same as default) "nav.home" [de]',
                MissingTranslationDiagnostic("nav.home", ("de",), untranslated=True),
            ),
            (
                "AI i18n: Missing translation for key nav.home in locale fr",
                MissingTranslationDiagnostic("nav.home", ("fr",)),
            ),
            (
                "Untranslated (same as default) value for key nav.home in locale pt-BR",
                MissingTranslationDiagnostic("nav.home", ("pt-BR",), untranslated=True),
            ),
            (
                "AI i18n: Missing translations for nav.home in locales: fr, de",
                MissingTranslationDiagnostic("nav.home", ("fr", "de")),
            ),
        ],
    )
    def test_shapes(self, message: str, expected: MissingTranslationDiagnostic) -> None:
        assert parse_untranslated_diagnostic(message) == expected

    @pytest.mark.parametrize("message", [None, "", "Something unrelated", 'Missing translation for "nav.home"'])
    def test_unknown(self, message) -> None:
        assert parse_untranslated_diagnostic(message) is None


class TestStyle:
    """Test cases for style suggestion messages."""

    def test_suggested_value(self) -> None:
        parsed = parse_style_diagnostic('Style suggestion "nav.home" [fr] (suggested: Accueil du site)')
        assert parsed == StyleDiagnostic("nav.home", "fr", "Accueil du site")

    def test_suggested_value_after_other_fields(self) -> None:
        parsed = parse_style_diagnostic('Style suggestion "nav.home" [fr] (current: Maison | suggested: Accueil)')
        assert parsed == StyleDiagnostic("nav.home", "fr", "Accueil")

    def test_legacy_phrasing(self) -> None:
        parsed = parse_style_diagnostic(
            "AI i18n: Style suggestion for key nav.home in locale fr (suggested: Accueil)"
        )
        assert parsed == StyleDiagnostic("nav.home", "fr", "Accueil")

    def test_without_suggestion(self) -> None:
        assert parse_style_diagnostic('Style suggestion "nav.home" [fr] (tone: formal)') is None


class TestDispatch:
    """Test cases for parse_diagnostic() and diagnostic_to_dict()."""

    def test_to_dict_shapes(self) -> None:
        assert diagnostic_to_dict(
            parse_diagnostic('Missing default locale translation for "auth.title" [fr] (exists in: es, de)')
        ) == {
            "type": "missing-default",
            "key": "auth.title",
            "default_locale": "fr",
            "existing_locales": ["es", "de"],
        }
        assert diagnostic_to_dict(parse_diagnostic('Style suggestion "a.b" [fr] (suggested: X)')) == {
            "type": "style",
            "key": "a.b",
            "locale": "fr",
            "suggested": "X",
        }
        assert diagnostic_to_dict(parse_diagnostic('Untranslated (same as default) "a.b" [de]')) == {
            "type": "untranslated",
            "key": "a.b",
            "locales": ["de"],
        }
        assert diagnostic_to_dict(parse_diagnostic('Missing translation for "a.b" [de]'))["type"] == "missing"

    def test_unknown_message(self) -> None:
        assert diagnostic_to_dict(parse_diagnostic("Unused variable 'x'")) is None
