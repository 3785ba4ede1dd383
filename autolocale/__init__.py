"""
autolocale - fills missing translations of multi-locale content records.

Typical registration:

    from autolocale import LocalizeOptions, client_options_from_config, load_config, localize_collection

    hook = localize_collection(
        client_options_from_config(load_config()),
        store,
        LocalizeOptions(fields=['title', 'description'], guard_flag_field='autoLocalize'),
    )
    document = await hook(event)
"""

from autolocale.config import (
    ClientOptions,
    LocalizeOptions,
    load_config,
    client_options_from_config,
    validate_ai_config,
)
from autolocale.ai import LLMClient, LocalizationError, ConfigurationError, LLMRequestFailed, WriteBackFailed
from autolocale.core import ChangeEvent, GuardToken, LocalizationSettings, RecordStore
from autolocale.translation import LocalizationManager, ReconcileResult, SkipReason, localize_collection

__version__ = "0.1.0"

__all__ = [
    'ClientOptions',
    'LocalizeOptions',
    'load_config',
    'client_options_from_config',
    'validate_ai_config',
    'LLMClient',
    'LocalizationError',
    'ConfigurationError',
    'LLMRequestFailed',
    'WriteBackFailed',
    'ChangeEvent',
    'GuardToken',
    'LocalizationSettings',
    'RecordStore',
    'LocalizationManager',
    'ReconcileResult',
    'SkipReason',
    'localize_collection',
]
