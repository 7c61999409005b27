"""Internationalization (i18n) module for Portuguese/English narration."""

from deadline_calculator.i18n.translator import SUPPORTED_LANGUAGES, Translator

__all__ = ["SUPPORTED_LANGUAGES", "Translator"]
