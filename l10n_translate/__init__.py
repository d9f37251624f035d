"""Recursive, markup-preserving translation of JSON localization files."""

from .errors import (
    ConfigurationError,
    InputFormatError,
    L10nTranslateError,
    LeafTranslationError,
    MissingApiKeyError,
    PlaceholderMismatchError,
    TranslationError,
)
from .translator import LeafResult, TranslationReport, run_translation, translate_document

__all__ = [
    "ConfigurationError",
    "InputFormatError",
    "L10nTranslateError",
    "LeafResult",
    "LeafTranslationError",
    "MissingApiKeyError",
    "PlaceholderMismatchError",
    "TranslationError",
    "TranslationReport",
    "run_translation",
    "translate_document",
]
