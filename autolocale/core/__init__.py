"""
Core module - Record introspection and completeness

This module provides:
- schema: translatable field discovery
- richtext: rich-text flatten/reinject
- locales: source-locale scoring and selection
- validation: missing-field detection per locale
- store: record-store, change-event and guard-token contracts
"""

from autolocale.core.schema import (
    FieldKind,
    FieldDescriptor,
    walk_schema,
    resolve_fields,
)

from autolocale.core.richtext import (
    DocumentKind,
    StructuredDocument,
    detect_document,
    flatten,
    reinject,
    has_text,
    to_plain_text,
)

from autolocale.core.paths import (
    TranslationPatch,
    get_by_path,
    expand_path,
    expand_fields,
    scope_to_locale,
    localized_value,
    build_patch_from_pairs,
)

from autolocale.core.store import (
    LocalizationSettings,
    ChangeEvent,
    GuardToken,
    RecordStore,
    is_guarded,
    locale_codes,
)

from autolocale.core.locales import (
    LocaleContentScore,
    score_locales,
    pick_source_locale,
    is_all_locales_view,
    resolve_source,
)

from autolocale.core.validation import (
    LocaleStats,
    is_field_empty,
    find_missing_fields,
    collect_missing,
    get_locale_stats,
)
