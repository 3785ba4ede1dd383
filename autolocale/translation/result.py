"""
Translation Request and Result Data Classes

Contains the per-locale TranslationRequest and the per-event ReconcileResult.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SkipReason(Enum):
    """Expected no-op exits. None of these is an error."""
    GUARDED = "guarded"
    LOCALIZATION_DISABLED = "localization_disabled"
    NO_TRANSLATABLE_FIELDS = "no_translatable_fields"
    GATE_CLOSED = "gate_closed"
    NO_SOURCE_CONTENT = "no_source_content"
    NOTHING_MISSING = "nothing_missing"


@dataclass
class TranslationRequest:
    """One (source -> target) unit of work; values are flattened plain text."""
    source_locale: str
    target_locale: str
    fields: List[str]
    source_values: Dict[str, str]


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation pass."""
    collection: str
    record_id: Any
    skipped: Optional[SkipReason] = None
    source_locale: Optional[str] = None
    requests: List[TranslationRequest] = field(default_factory=list)
    written_locales: List[str] = field(default_factory=list)
    failed_locales: Dict[str, str] = field(default_factory=dict)  # locale -> error message
    dry_run_patches: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failed_locales
