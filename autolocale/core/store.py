"""
Record-store and change-event contracts.

The host content framework owns storage and calls the engine after every
record mutation. This module describes what the engine needs from it:
- RecordStore: locale-aware reads and single-locale writes
- ChangeEvent: what a post-mutation callback receives
- GuardToken: request-scoped marker on the engine's own writes
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from autolocale.config import GUARD_MARKER_KEY


@dataclass
class LocalizationSettings:
    """Locales configured on the host framework."""
    locales: List[str]
    default_locale: str = "en"

    def __post_init__(self):
        self.locales = locale_codes(self.locales)
        if not self.default_locale and self.locales:
            self.default_locale = self.locales[0]


def locale_codes(locales: List[Any]) -> List[str]:
    """
    Normalize a host locale list to codes.

    Hosts may list locales as plain codes or as mappings with a 'code' key.

    Example:
        >>> locale_codes(['en', {'code': 'de', 'label': 'Deutsch'}])
        ['en', 'de']
    """
    codes: List[str] = []
    for locale in locales or []:
        code = locale.get('code') if isinstance(locale, dict) else locale
        if isinstance(code, str) and code and code not in codes:
            codes.append(code)
    return codes


@dataclass(frozen=True)
class GuardToken:
    """Marker attached to outbound writes; never persisted."""
    value: str

    @classmethod
    def issue(cls) -> 'GuardToken':
        return cls(value=uuid.uuid4().hex)

    def as_metadata(self) -> Dict[str, 'GuardToken']:
        return {GUARD_MARKER_KEY: self}


def is_guarded(request_metadata: Optional[Dict[str, Any]]) -> bool:
    """
    True when the change was produced by the engine's own write.

    Only a GuardToken instance counts; see RecordStore.update_record_locale
    for how hosts forward it.
    """
    if not request_metadata:
        return False
    return isinstance(request_metadata.get(GUARD_MARKER_KEY), GuardToken)


@dataclass
class ChangeEvent:
    """Payload of one post-mutation callback."""
    collection: str
    document: Dict[str, Any]
    schema: List[Dict[str, Any]] = field(default_factory=list)
    request_metadata: Dict[str, Any] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)
    locale: Optional[str] = None

    @property
    def record_id(self) -> Any:
        return self.document.get('id') if isinstance(self.document, dict) else None


class RecordStore(ABC):
    """Storage operations the engine relies on."""

    @property
    @abstractmethod
    def localization(self) -> Optional[LocalizationSettings]:
        """Configured locales, or None when localization is disabled."""
        ...

    @abstractmethod
    async def fetch_record_all_locales(self, collection: str, record_id: Any) -> Dict[str, Any]:
        """Return the record with every localized field as a locale -> value mapping."""
        ...

    @abstractmethod
    async def update_record_locale(
        self,
        collection: str,
        record_id: Any,
        locale: str,
        patch: Dict[str, Any],
        *,
        skip_access_control: bool = True,
        request_marker: Optional[GuardToken] = None,
    ) -> Dict[str, Any]:
        """
        Merge `patch` into one locale of one record and return the updated record.

        The write triggers the host's post-change callbacks, including this
        engine's hook. Implementations must hand `request_marker` to the
        change event of that write unchanged, as the `GuardToken` object under
        GUARD_MARKER_KEY in `ChangeEvent.request_metadata` or
        `ChangeEvent.context`. Any other form (a header string, a copied
        value) is not recognized and the hook would translate its own write.

        Args:
            collection: Collection slug
            record_id: Record id
            locale: The single locale the patch is written to
            patch: Nested field -> value mapping for that locale
            skip_access_control: Write with system privileges
            request_marker: Guard token to forward to the resulting change event
        """
        ...
