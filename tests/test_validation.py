from __future__ import annotations

import copy

from autolocale.core.schema import FieldDescriptor, FieldKind
from autolocale.core.validation import collect_missing, find_missing_fields, get_locale_stats, is_field_empty


TITLE = FieldDescriptor("title", FieldKind.PLAIN_TEXT)
SUMMARY = FieldDescriptor("summary", FieldKind.MULTILINE_TEXT)
BODY = FieldDescriptor("body", FieldKind.RICH_TEXT)
FIELDS = [TITLE, SUMMARY, BODY]


def test_plain_text_emptiness() -> None:
    assert is_field_empty(None, FieldKind.PLAIN_TEXT)
    assert is_field_empty("", FieldKind.PLAIN_TEXT)
    assert is_field_empty(" \n\t", FieldKind.MULTILINE_TEXT)
    assert not is_field_empty("Hallo", FieldKind.PLAIN_TEXT)
    assert not is_field_empty(0, FieldKind.PLAIN_TEXT)


def test_rich_text_emptiness(slate_body, lexical_body) -> None:
    assert is_field_empty(None, FieldKind.RICH_TEXT)
    assert is_field_empty([], FieldKind.RICH_TEXT)
    assert is_field_empty([{"children": [{"text": "  "}]}], FieldKind.RICH_TEXT)
    assert is_field_empty({"root": {"type": "root", "children": []}}, FieldKind.RICH_TEXT)
    assert is_field_empty("", FieldKind.RICH_TEXT)
    # unrecognized shapes are never silently treated as filled
    assert is_field_empty({"html": "<p>Hi</p>"}, FieldKind.RICH_TEXT)
    assert is_field_empty(42, FieldKind.RICH_TEXT)

    assert not is_field_empty(slate_body, FieldKind.RICH_TEXT)
    assert not is_field_empty(lexical_body, FieldKind.RICH_TEXT)
    assert not is_field_empty("legacy string body", FieldKind.RICH_TEXT)


def test_find_missing_fields_per_locale(slate_body) -> None:
    record = {
        "title": {"en": "Hello", "de": "Hallo"},
        "summary": {"en": "Short", "de": ""},
        "body": {"en": slate_body},
    }

    assert find_missing_fields(record, FIELDS, "en") == []
    assert find_missing_fields(record, FIELDS, "de") == [SUMMARY, BODY]
    assert find_missing_fields(record, FIELDS, "fr") == FIELDS


def test_missing_status_is_independent_across_locales() -> None:
    record = {"title": {"en": "Hello", "de": "", "fr": ""}}
    before_fr = find_missing_fields(record, [TITLE], "fr")

    filled = copy.deepcopy(record)
    filled["title"]["de"] = "Hallo"

    assert find_missing_fields(filled, [TITLE], "de") == []
    assert find_missing_fields(filled, [TITLE], "fr") == before_fr == [TITLE]


def test_collect_missing_leaves_out_complete_locales() -> None:
    record = {"title": {"en": "Hello", "de": "Hallo", "fr": ""}}

    assert collect_missing(record, [TITLE], ["de", "fr"]) == {"fr": [TITLE]}
    assert collect_missing(record, [TITLE], ["de"]) == {}


def test_get_locale_stats() -> None:
    record = {"title": {"de": "Hallo"}, "summary": {"de": ""}}

    stats = get_locale_stats(record, [TITLE, SUMMARY], "de")

    assert stats.filled_count == 1
    assert stats.missing_count == 1
    assert stats.completeness_percent == 50.0
    assert not stats.is_complete
    assert str(stats) == "German (de): 1/2 (50.0%) Missing 1 fields"
