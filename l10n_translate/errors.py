from __future__ import annotations

from typing import Optional, Sequence, Union


class L10nTranslateError(Exception):
    """Base exception for the JSON translation tool."""


class ConfigurationError(L10nTranslateError):
    """The translation provider or the run itself is not usable as configured."""


class MissingApiKeyError(ConfigurationError):
    """Raised when a required provider credential is missing."""


class InputFormatError(L10nTranslateError, ValueError):
    """The input document is not valid JSON or its top level is not an object."""


class TranslationError(L10nTranslateError):
    """A call to the translation provider failed."""


class LeafTranslationError(TranslationError):
    """Failure of a single ``"translated"`` leaf. Stored on its result, never raised past it."""

    def __init__(
        self,
        message: str,
        path: Sequence[Union[str, int]] = (),
        original_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.path = tuple(path)
        self.original_exception = original_exception


class PlaceholderMismatchError(LeafTranslationError):
    """The provider dropped or duplicated a markup placeholder token."""
