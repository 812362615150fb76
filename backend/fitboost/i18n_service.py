"""Internationalisation (i18n) service.

Loads translation bundles from ``fitboost/data/i18n/{lang}.json``.
Falls back to Portuguese when the requested locale is unavailable.

Supported locales: pt, en.
"""

import json
from functools import lru_cache
from pathlib import Path

I18N_DIR = Path(__file__).parent / "data" / "i18n"
_SUPPORTED = ("pt", "en")
_FALLBACK = "pt"


@lru_cache(maxsize=8)
def load_translations(lang: str) -> dict[str, object]:
    """Load and return the translation bundle for the given language code.

    Results are cached so the file is only read once per language per process.

    Args:
        lang: Language code (``"pt"`` or ``"en"``).

    Returns:
        Translation dict with keys ``lang_code``, ``lang_name``, ``ui``, ``errors``.
    """
    code = lang if lang in _SUPPORTED else _FALLBACK
    path = I18N_DIR / f"{code}.json"
    data: dict[str, object] = json.loads(path.read_text(encoding="utf-8"))
    return data


def translate(key: str, lang: str = _FALLBACK, **fmt: object) -> str:
    """Look up a translated string.

    Plain keys are read from the ``ui`` section; ``"errors.ai_chat"`` style
    keys name the section explicitly. A missing key returns the key itself
    so a gap in a bundle never breaks a page.

    Args:
        key: Translation key.
        lang: Language code.
        **fmt: Values substituted into ``{placeholders}``.

    Returns:
        The translated, formatted string.
    """
    section, _, name = key.rpartition(".")
    bundle = load_translations(lang).get(section or "ui", {})
    text = bundle.get(name) if isinstance(bundle, dict) else None
    if text is None:
        return key
    return str(text).format(**fmt) if fmt else str(text)


def get_supported_languages() -> list[dict[str, str]]:
    """Return the supported languages for the language picker."""
    return [
        {"code": code, "name": str(load_translations(code).get("lang_name", code))}
        for code in _SUPPORTED
    ]


def llm_language_instruction(lang: str) -> str:
    """Return a language instruction to append to LLM prompts.

    The prompts are written in Portuguese, so nothing is appended for
    ``pt``.

    Args:
        lang: Language code.

    Returns:
        Instruction string, or empty string for Portuguese.
    """
    _INSTRUCTIONS: dict[str, str] = {
        "en": (
            "\n\nIMPORTANT: Write your ENTIRE response in English. "
            "Do not use Portuguese."
        ),
    }
    return _INSTRUCTIONS.get(lang, "")
