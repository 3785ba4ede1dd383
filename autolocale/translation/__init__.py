"""
Translation module - Reconciliation workflow

This module provides:
- LocalizationManager: per-record reconciliation and write-back
- TranslationRequest / ReconcileResult: per-locale work and per-event outcome
- Prompt building and model-output sanitizing
"""

from autolocale.translation.result import SkipReason, TranslationRequest, ReconcileResult
from autolocale.translation.manager import LocalizationManager, localize_collection
from autolocale.translation.prompts import build_prompt, build_system_prompt
from autolocale.translation.validator import sanitize_model_output
from autolocale.translation.utils import safe_parse_json_object, match_json_object
