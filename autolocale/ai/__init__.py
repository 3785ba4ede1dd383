"""
AI Module

This module provides the JSON-completion client and the engine's exceptions.
"""

from autolocale.ai.exceptions import (
    LocalizationError,
    ConfigurationError,
    LLMRequestFailed,
    WriteBackFailed,
)
from autolocale.ai.service import LLMClient

__all__ = [
    'LocalizationError',
    'ConfigurationError',
    'LLMRequestFailed',
    'WriteBackFailed',
    'LLMClient',
]
