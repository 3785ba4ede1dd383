from __future__ import annotations

from autolocale.core.schema import FieldDescriptor, FieldKind, resolve_fields, walk_schema


PAGE_SCHEMA = [
    {"name": "title", "type": "text", "localized": True},
    {"name": "id", "type": "text"},
    {"name": "slug", "type": "text", "localized": False},
    {
        "type": "row",
        "fields": [
            {"name": "subtitle", "type": "textarea", "localized": True},
            {"name": "publishDate", "type": "date", "localized": True},
        ],
    },
    {
        "name": "meta",
        "type": "group",
        "fields": [
            {"name": "description", "type": "textarea", "localized": True},
            {"name": "image", "type": "upload", "localized": False},
        ],
    },
    {
        "name": "layout",
        "type": "blocks",
        "blocks": [
            {"slug": "hero", "fields": [
                {"name": "heading", "type": "text", "localized": True},
                {"name": "body", "type": "richText", "localized": True},
            ]},
            {"slug": "cta", "fields": [
                {"name": "heading", "type": "text", "localized": True},
                {"name": "url", "type": "text"},
            ]},
        ],
    },
    {
        "type": "tabs",
        "tabs": [
            {"name": "seo", "fields": [{"name": "keywords", "type": "text", "localized": True}]},
            {"label": "Content", "fields": [{"name": "body", "type": "richText", "localized": True}]},
        ],
    },
]


def test_walk_schema_paths_and_kinds_in_declaration_order() -> None:
    descriptors = walk_schema(PAGE_SCHEMA)

    assert descriptors == [
        FieldDescriptor("title", FieldKind.PLAIN_TEXT),
        FieldDescriptor("subtitle", FieldKind.MULTILINE_TEXT),
        FieldDescriptor("meta.description", FieldKind.MULTILINE_TEXT),
        FieldDescriptor("layout.hero.heading", FieldKind.PLAIN_TEXT),
        FieldDescriptor("layout.hero.body", FieldKind.RICH_TEXT),
        FieldDescriptor("layout.cta.heading", FieldKind.PLAIN_TEXT),
        FieldDescriptor("seo.keywords", FieldKind.PLAIN_TEXT),
        FieldDescriptor("body", FieldKind.RICH_TEXT),
    ]


def test_walk_schema_skips_non_localized_and_non_text_fields() -> None:
    paths = [descriptor.path for descriptor in walk_schema(PAGE_SCHEMA)]

    for hidden in ("id", "slug", "publishDate", "meta.image", "layout.cta.url"):
        assert hidden not in paths


def test_walk_schema_empty_and_malformed_input() -> None:
    assert walk_schema([]) == []
    assert walk_schema([None, "title", {"type": "text", "localized": True}]) == []


def test_resolve_fields_without_explicit_list_returns_walked_fields() -> None:
    assert resolve_fields(PAGE_SCHEMA) == walk_schema(PAGE_SCHEMA)


def test_resolve_fields_explicit_list_keeps_order_and_kinds() -> None:
    resolved = resolve_fields(PAGE_SCHEMA, ["layout.hero.body", "title", "label", "title"])

    assert resolved == [
        FieldDescriptor("layout.hero.body", FieldKind.RICH_TEXT),
        FieldDescriptor("title", FieldKind.PLAIN_TEXT),
        FieldDescriptor("label", FieldKind.PLAIN_TEXT),
    ]


def test_resolve_fields_explicit_list_never_includes_non_localized_fields() -> None:
    assert resolve_fields(PAGE_SCHEMA, ["slug", "meta.image"]) == []
