"""Localization: supported locales, locale resolution, and message lookup.

The active locale is never global state. Callers resolve it (from the
locale cookie, via the API dependency) and pass it to Translator or to
the layout builder explicitly.
"""

from __future__ import annotations

import re
from typing import Any

import structlog

from src.eventdesk.config import FALLBACK_LOCALE, SUPPORTED_LOCALES
from src.eventdesk.i18n.locales import CATALOGS

logger = structlog.get_logger(__name__)

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "es": "Español",
    "ko": "한국어",
}


def is_supported_locale(value: str | None) -> bool:
    return value in SUPPORTED_LOCALES


def resolve_locale(value: str | None, default: str = FALLBACK_LOCALE) -> str:
    """Return value if it names a supported locale, otherwise default."""
    if is_supported_locale(value):
        return value  # type: ignore[return-value]
    return default if is_supported_locale(default) else FALLBACK_LOCALE


class Translator:
    """Resolve dotted message keys for one locale.

    Missing keys and keys that point at a subtree rather than a string are
    logged and returned unchanged, so the UI shows the key instead of
    failing.
    """

    def __init__(self, locale: str) -> None:
        self.locale = resolve_locale(locale)
        self._catalog = CATALOGS[self.locale]

    def __call__(self, key: str, params: dict[str, Any] | None = None) -> str:
        return self.translate(key, params)

    def translate(self, key: str, params: dict[str, Any] | None = None) -> str:
        value: Any = self._catalog
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                logger.warning("i18n.key_not_found", key=key, locale=self.locale)
                return key

        if not isinstance(value, str):
            logger.warning("i18n.value_not_string", key=key, locale=self.locale)
            return key

        if params:
            return _format(value, params)
        return value


def _format(message: str, params: dict[str, Any]) -> str:
    """Apply plural selectors first, then plain {name} substitution."""
    result = message
    for name, param in params.items():
        plural = re.compile(
            r"\{" + re.escape(name)
            + r",\s*plural,\s*one\s*\{([^}]+)\}\s*other\s*\{([^}]+)\}\}"
        )
        result = plural.sub(lambda m: m.group(1) if param == 1 else m.group(2), result)
        result = result.replace("{" + name + "}", str(param))
    return result


def supported_languages(active: str | None = None) -> list[dict[str, Any]]:
    """Language switcher options in display order."""
    return [
        {"code": code, "name": LANGUAGE_NAMES[code], "active": code == active}
        for code in SUPPORTED_LOCALES
    ]


__all__ = [
    "LANGUAGE_NAMES",
    "Translator",
    "is_supported_locale",
    "resolve_locale",
    "supported_languages",
]
