"""
Source-locale resolution.

Scores every configured locale by how many tracked fields hold content and
picks the locale translations are made from.
"""

from typing import Any, Dict, List, Optional, Tuple

from autolocale.core.paths import expand_fields, get_by_path, localized_value
from autolocale.core.richtext import has_text
from autolocale.core.schema import FieldDescriptor
from autolocale.core.store import LocalizationSettings, RecordStore
from autolocale.logger import get_logger

logger = get_logger(__name__)

# locale -> number of tracked fields holding content in that locale
LocaleContentScore = Dict[str, int]


def score_locales(
    record: Dict[str, Any],
    fields: List[FieldDescriptor],
    locales: List[str],
) -> LocaleContentScore:
    """
    Count, per locale, the tracked fields that hold content.

    Args:
        record: All-locale record view
        fields: Tracked fields
        locales: Configured locale codes

    Returns:
        Mapping locale -> score, in configured order (0 <= score <= len(fields))

    Example:
        >>> fields = [FieldDescriptor('title', FieldKind.PLAIN_TEXT)]
        >>> score_locales({'title': {'en': 'Hello', 'de': ''}}, fields, ['en', 'de'])
        {'en': 1, 'de': 0}
    """
    scores: LocaleContentScore = {}
    for locale in locales:
        scores[locale] = sum(
            1 for field in fields if has_text(localized_value(record, field.path, locale))
        )
    return scores


def pick_source_locale(
    scores: LocaleContentScore,
    locales: List[str],
    default_locale: str,
    preferred: Optional[str] = None,
) -> str:
    """
    Choose the source locale.

    A preferred locale with any content wins. Otherwise the strictly highest
    score wins, ties going to the earlier locale in configured order. When no
    locale has content the default locale is returned.
    """
    if preferred and scores.get(preferred, 0) > 0:
        return preferred

    best_locale = None
    best_score = 0
    for locale in locales:
        score = scores.get(locale, 0)
        if score > best_score:
            best_locale, best_score = locale, score

    return best_locale if best_locale is not None else default_locale


def is_all_locales_view(
    record: Dict[str, Any],
    fields: List[FieldDescriptor],
    locales: List[str],
) -> bool:
    """
    Tell whether fields are locale mappings or already resolved to one locale.

    The first tracked field holding a value decides. A mapping whose keys are
    all configured locales means the all-locale shape.
    """
    known = set(locales)
    for field in fields:
        value = get_by_path(record, field.path)
        if value is None:
            continue
        return isinstance(value, dict) and bool(value) and set(value.keys()) <= known
    return False


async def resolve_source(
    store: RecordStore,
    collection: str,
    record: Dict[str, Any],
    fields: List[FieldDescriptor],
    settings: LocalizationSettings,
    preferred: Optional[str] = None,
) -> Tuple[str, Dict[str, Any]]:
    """
    Resolve the source locale and the all-locale record it was scored on.

    Schema paths are expanded against the record (one path per block item).
    A locale-scoped record is re-fetched from the store in all-locale shape
    before scoring.

    Returns:
        Tuple of (source_locale, all_locale_record)
    """
    if not is_all_locales_view(record, expand_fields(record, fields), settings.locales):
        logger.debug(f"{collection}#{record.get('id')} - locale-scoped view, fetching all locales")
        record = await store.fetch_record_all_locales(collection, record.get('id'))

    scores = score_locales(record, expand_fields(record, fields), settings.locales)
    source_locale = pick_source_locale(scores, settings.locales, settings.default_locale, preferred)
    logger.debug(f"{collection}#{record.get('id')} - locale scores {scores}, source: {source_locale}")
    return source_locale, record
