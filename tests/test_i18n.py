"""Unit tests for locale resolution, the translator, and the layout builder."""

from __future__ import annotations

import pytest

from src.eventdesk.i18n import Translator, resolve_locale, supported_languages
from src.eventdesk.i18n.layout import build_layout
from src.eventdesk.i18n.locales import CATALOGS


@pytest.mark.parametrize(
    ("value", "expected"),
    [("en", "en"), ("ko", "ko"), ("fr", "es"), ("", "es"), (None, "es"), ("EN", "es")],
)
def test_resolve_locale_falls_back_to_default(value, expected):
    assert resolve_locale(value) == expected


def test_resolve_locale_custom_default():
    assert resolve_locale("de", default="en") == "en"
    # An unsupported default still lands on a supported locale
    assert resolve_locale("de", default="de") == "es"


def test_translate_dotted_key():
    assert Translator("en")("nav.dashboard") == "Dashboard"
    assert Translator("es")("nav.dashboard") == "Panel"
    assert Translator("ko")("header.changeLanguage") == "언어 변경"


@pytest.mark.parametrize(("count", "expected"), [(1, "1 active task"), (3, "3 active tasks")])
def test_translate_plural(count, expected):
    assert Translator("en")("dashboard.activeTasks", {"count": count}) == expected


def test_translate_plural_spanish():
    assert Translator("es")("time.minutesAgo", {"count": 1}) == "hace 1 minuto"
    assert Translator("es")("time.minutesAgo", {"count": 5}) == "hace 5 minutos"


def test_missing_key_returns_key():
    assert Translator("en")("nav.nowhere") == "nav.nowhere"


def test_subtree_key_returns_key():
    assert Translator("en")("nav") == "nav"


def test_unsupported_translator_locale_uses_fallback():
    assert Translator("fr").locale == "es"


def test_catalogs_share_the_same_keys():
    def keys(tree: dict, prefix: str = "") -> set[str]:
        out: set[str] = set()
        for key, value in tree.items():
            path = f"{prefix}{key}"
            out |= keys(value, f"{path}.") if isinstance(value, dict) else {path}
        return out

    assert keys(CATALOGS["en"]) == keys(CATALOGS["es"]) == keys(CATALOGS["ko"])


def test_supported_languages_flags_active():
    languages = supported_languages(active="ko")

    assert [lang["code"] for lang in languages] == ["en", "es", "ko"]
    assert [lang["name"] for lang in languages] == ["English", "Español", "한국어"]
    assert [lang["active"] for lang in languages] == [False, False, True]


def test_build_layout_localizes_navigation_and_header():
    layout = build_layout("es")

    assert layout["locale"] == "es"
    assert [item["key"] for item in layout["navigation"]] == [
        "dashboard", "events", "tracks", "tasks", "meetings",
    ]
    assert layout["navigation"][1] == {"key": "events", "href": "/events", "label": "Eventos"}
    assert layout["header"]["changeLanguage"] == "Cambiar idioma"
    assert [lang["active"] for lang in layout["languages"]] == [False, True, False]
