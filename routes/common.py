"""
Helpers shared by the route blueprints.

Services live in app.config (created once in create_app()); the language of
messages follows the session.
"""

from __future__ import annotations

import html
from typing import Any, Dict, Mapping, Optional

import bleach
from flask import current_app, session

from core.constants import FORM_FIELDS
from modules.i18n import DEFAULT_LANGUAGE, translate
from modules.validation import Validator


# Free text field of the 'custom' paper class radio option
CUSTOM_PAPER_FIELD = "papierart_custom_value"
MAX_INPUT_LENGTH = 200


def current_language() -> str:
    return session.get("language", current_app.config.get("DEFAULT_LANGUAGE", DEFAULT_LANGUAGE))


def t(key: str, **kwargs) -> str:
    """Translate into the session language."""
    return translate(key, lang=current_language(), **kwargs)


def get_validator() -> Validator:
    return Validator(lang=current_language())


def get_service(name: str):
    """Service instance registered in create_app(), e.g. 'CONFIG_STORE'."""
    return current_app.config[name]


def sanitize_text(text: Any, max_length: Optional[int] = MAX_INPUT_LENGTH) -> str:
    """
    Strip markup from user input.

    Bleach escapes '&' and friends; the plain text is restored afterwards
    because Jinja escapes on output and '&' is a legal customer character.
    """
    if text is None:
        return ""

    text = str(text).strip()
    text = html.unescape(bleach.clean(text, tags=[], strip=True))

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitized_form(form: Mapping[str, Any]) -> Dict[str, str]:
    """Order form fields (and the custom paper class text) from a request."""
    data = {name: sanitize_text(form.get(name)) for name in FORM_FIELDS}
    data[CUSTOM_PAPER_FIELD] = sanitize_text(form.get(CUSTOM_PAPER_FIELD))
    return data
