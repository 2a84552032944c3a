"""Localized application shell: sidebar navigation, header labels, language options.

build_layout() is the rendering entry point for the main layout. It takes
the locale as an argument; nothing here reads request state.
"""

from __future__ import annotations

from typing import Any

from src.eventdesk.i18n import Translator, supported_languages

NAV_ITEMS: tuple[tuple[str, str], ...] = (
    ("dashboard", "/"),
    ("events", "/events"),
    ("tracks", "/tracks"),
    ("tasks", "/tasks"),
    ("meetings", "/meetings"),
)

HEADER_KEYS: tuple[str, ...] = (
    "search",
    "notifications",
    "userMenu",
    "toggleMenu",
    "changeLanguage",
)


def build_layout(locale: str) -> dict[str, Any]:
    t = Translator(locale)
    return {
        "locale": t.locale,
        "navigation": [
            {"key": key, "href": href, "label": t(f"nav.{key}")}
            for key, href in NAV_ITEMS
        ],
        "header": {key: t(f"header.{key}") for key in HEADER_KEYS},
        "languages": supported_languages(active=t.locale),
    }
