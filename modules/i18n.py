"""
Internationalization (i18n) Module

Provides the German and English texts of the PDF renamer. German is the
default: the prepress staff and the original message catalogue are German.

Supported languages:
- German (de)
- English (en)

Usage in templates:
    {{ _('settings.title') }}

Usage in Python:
    from modules.i18n import translate
    message = translate('validation.required', lang='de', field='Kunde')
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Supported languages
SUPPORTED_LANGUAGES = {
    'de': {'name': 'Deutsch', 'flag_emoji': 'CH'},
    'en': {'name': 'English', 'flag_emoji': 'GB'},
}

DEFAULT_LANGUAGE = 'de'

# Translation cache
_translations: Dict[str, Dict[str, Any]] = {}


class I18nManager:
    """Loads translation files and resolves dotted keys."""

    def __init__(self, translations_dir: Optional[Path] = None):
        """
        Initialize i18n manager.

        Args:
            translations_dir: Path to translations directory.
                            Defaults to ./translations in the project root.
        """
        if translations_dir is None:
            translations_dir = Path(__file__).parent.parent / 'translations'

        self.translations_dir = translations_dir
        self._load_all_translations()

    def _load_all_translations(self) -> None:
        """Load every supported language from the translations directory."""
        if not self.translations_dir.exists():
            logger.warning(f"Translations directory not found: {self.translations_dir}")
            return

        for lang_code in SUPPORTED_LANGUAGES:
            self._load_translation(lang_code)

    def _load_translation(self, lang_code: str) -> None:
        translation_file = self.translations_dir / f'{lang_code}.json'

        if not translation_file.exists():
            logger.warning(f"Translation file not found: {translation_file}")
            _translations[lang_code] = {}
            return

        try:
            with open(translation_file, 'r', encoding='utf-8') as f:
                _translations[lang_code] = json.load(f)
            logger.debug(f"Loaded translations for language: {lang_code}")
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load translation file {translation_file}: {e}")
            _translations[lang_code] = {}

    @staticmethod
    def _lookup(key: str, lang: str) -> Optional[str]:
        value: Any = _translations.get(lang, {})
        for part in key.split('.'):
            if not isinstance(value, dict):
                return None
            value = value.get(part)
        return value if isinstance(value, str) else None

    def get_translation(self, key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
        """
        Get translated string for a key.

        Lookup order: requested language, then the default language, then the
        key itself. Keyword arguments are substituted with str.format.

        Args:
            key: Translation key (dot notation, e.g. 'validation.required')
            lang: Language code
            **kwargs: Variables for string formatting

        Returns:
            Translated string, or key if translation not found
        """
        if lang not in SUPPORTED_LANGUAGES:
            lang = DEFAULT_LANGUAGE

        value = self._lookup(key, lang)
        if value is None and lang != DEFAULT_LANGUAGE:
            value = self._lookup(key, DEFAULT_LANGUAGE)
        if value is None:
            logger.debug(f"Translation key not found: {key} (lang: {lang})")
            return key

        if not kwargs:
            return value
        try:
            return value.format(**kwargs)
        except (KeyError, IndexError) as e:
            logger.warning(f"Missing variable in translation: {e} (key: {key}, lang: {lang})")
            return value

    def get_all_languages(self) -> Dict[str, Dict[str, str]]:
        return SUPPORTED_LANGUAGES

    def is_language_supported(self, lang_code: str) -> bool:
        return lang_code in SUPPORTED_LANGUAGES


# Global i18n manager instance
i18n_manager = I18nManager()


def translate(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Translate a key to the specified language.

    Example:
        >>> translate('validation.required', lang='de', field='Kunde')
        'Kunde ist erforderlich'
    """
    return i18n_manager.get_translation(key, lang, **kwargs)


def field_display_name(field_name: str, lang: str = DEFAULT_LANGUAGE) -> str:
    """Human name of a form or config field; the raw name if unknown."""
    label = translate(f'fields.{field_name}', lang=lang)
    return field_name if label == f'fields.{field_name}' else label


def get_supported_languages() -> Dict[str, Dict[str, str]]:
    return i18n_manager.get_all_languages()


def create_translation_filter(current_language: str):
    """
    Create a translation function bound to the session language.

    Usage in Flask:
        @app.context_processor
        def inject_i18n():
            lang = session.get('language', DEFAULT_LANGUAGE)
            return {'_': create_translation_filter(lang)}
    """
    def translation_filter(key: str, **kwargs) -> str:
        return translate(key, lang=current_language, **kwargs)

    return translation_filter
