"""
Localization Exceptions

This module contains the exception classes raised by the AI client and the
record write-back. Separated to avoid circular imports between the client,
the configuration and the translation manager.
"""


class LocalizationError(Exception):
    """Localization engine error with optional code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(LocalizationError):
    """AI client configuration is missing or unusable."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="ai_config_missing", details=details)


class LLMRequestFailed(LocalizationError):
    """Non-success HTTP status, timeout, or malformed/empty model response."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="llm_request_failed", details=details)


class WriteBackFailed(LocalizationError):
    """The record store rejected a locale patch."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="write_back_failed", details=details)
