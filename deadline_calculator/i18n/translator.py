"""Translator module for Portuguese/English narration."""

from datetime import date

from deadline_calculator.i18n.translations import get_translation

# Supported languages
SUPPORTED_LANGUAGES = ["pt", "en"]


class Translator:
    """Translator bound to a single language.

    Each calculator holds its own instance, so narration never depends on
    process-wide state.
    """

    def __init__(self, language: str = "pt"):
        """Initialize the translator.

        Args:
            language: Language code ('pt' or 'en'). Defaults to 'pt'.
        """
        self.language = self._validate_language(language)

    def _validate_language(self, language: str) -> str:
        """Validate and normalize a language code.

        Args:
            language: The language code to validate.

        Returns:
            Valid language code ('pt' or 'en').
        """
        lang = (language or "").lower().strip()

        # Handle common variations
        if lang in ("pt", "portuguese", "português", "portugues", "pt-br", "pt_br"):
            return "pt"
        elif lang in ("en", "english", "en-us", "en_us", "en-gb", "en_gb"):
            return "en"

        # Default to Portuguese for unknown languages
        return "pt"

    def t(self, key: str, **kwargs) -> str:
        """Translate a key.

        Args:
            key: The translation key.
            **kwargs: Format arguments for the translation string.

        Returns:
            The translated string.
        """
        return get_translation(key, self.language, **kwargs)

    def __call__(self, key: str, **kwargs) -> str:
        """Shorthand for t()."""
        return self.t(key, **kwargs)

    def format_date(self, day: date) -> str:
        """Format a date for narration (DD/MM/YYYY in Portuguese)."""
        return day.strftime(self.t("format.date"))

    def weekday_name(self, day: date) -> str:
        """Return the localized weekday name of a date."""
        return self.t(f"weekday.{day.weekday()}")
