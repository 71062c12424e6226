"""
Translation Exceptions

This module contains exception classes shared by the provider adapters and
the translation pipeline.
Separated to avoid circular imports between providers and translation.
"""


class TranslationError(Exception):
    """Translation service error with optional code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(TranslationError):
    """A provider could not be set up for a target language (e.g. endpoint discovery failed)."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="configuration_error", details=details)


class BatchTranslationError(TranslationError):
    """A single translation call failed or returned an unusable body."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="batch_failed", details=details)


class InputError(TranslationError):
    """The caller supplied nothing to translate or no target language."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="invalid_input", details=details)
