"""
Translation completeness validation.

Decides which tracked fields are empty in a given locale of an all-locale
record. Each locale is checked on its own; a value in one locale never
affects another locale's result.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from autolocale.core.paths import localized_value
from autolocale.core.richtext import detect_document, flatten
from autolocale.core.schema import FieldDescriptor, FieldKind
from autolocale import language_codes as lc


@dataclass
class LocaleStats:
    """Statistics for one locale's completeness."""
    locale: str
    locale_name: str
    total_fields: int
    filled_count: int
    missing_count: int
    completeness_percent: float
    is_complete: bool

    def __str__(self):
        status = "Complete" if self.is_complete else f"Missing {self.missing_count} fields"
        return (f"{self.locale_name} ({self.locale}): "
                f"{self.filled_count}/{self.total_fields} "
                f"({self.completeness_percent:.1f}%) {status}")


def is_field_empty(value: Any, kind: FieldKind) -> bool:
    """
    Check one locale value for emptiness.

    Plain and multiline text are empty when absent or blank. Rich text is
    empty when absent, blank, an empty list, a recognized document with no
    visible text, or any other unrecognized non-string value.
    """
    if value is None:
        return True

    if isinstance(value, str):
        return not value.strip()

    if kind is not FieldKind.RICH_TEXT:
        return False

    document = detect_document(value)
    if not document.is_recognized:
        return True
    return not flatten(document)


def find_missing_fields(
    record: Dict[str, Any],
    fields: List[FieldDescriptor],
    locale: str,
) -> List[FieldDescriptor]:
    """
    Return the tracked fields that are empty in `locale`.

    Example:
        >>> fields = [FieldDescriptor('title', FieldKind.PLAIN_TEXT)]
        >>> find_missing_fields({'title': {'en': 'Hello', 'de': ' '}}, fields, 'de')
        [FieldDescriptor(path='title', kind=<FieldKind.PLAIN_TEXT: 'text'>)]
    """
    return [
        field for field in fields
        if is_field_empty(localized_value(record, field.path, locale), field.kind)
    ]


def collect_missing(
    record: Dict[str, Any],
    fields: List[FieldDescriptor],
    target_locales: List[str],
) -> Dict[str, List[FieldDescriptor]]:
    """Map each target locale to its missing fields, leaving out complete locales."""
    result: Dict[str, List[FieldDescriptor]] = {}
    for locale in target_locales:
        missing = find_missing_fields(record, fields, locale)
        if missing:
            result[locale] = missing
    return result


def get_locale_stats(
    record: Dict[str, Any],
    fields: List[FieldDescriptor],
    locale: str,
) -> LocaleStats:
    """
    Get completeness statistics for one locale of a record.

    Example:
        >>> stats = get_locale_stats(record, fields, 'de')
        >>> print(stats)
        German (de): 1/2 (50.0%) Missing 1 fields
    """
    total_fields = len(fields)
    missing_count = len(find_missing_fields(record, fields, locale))
    filled_count = total_fields - missing_count
    completeness_percent = (filled_count / total_fields * 100) if total_fields > 0 else 0

    return LocaleStats(
        locale=locale,
        locale_name=lc.get_language_name(locale) or locale,
        total_fields=total_fields,
        filled_count=filled_count,
        missing_count=missing_count,
        completeness_percent=completeness_percent,
        is_complete=missing_count == 0,
    )
