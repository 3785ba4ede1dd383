"""
Collection schema introspection.

Walks a nested field schema and returns the translatable fields as dotted
paths, in declaration order:

    [
        {"name": "title", "type": "text", "localized": True},
        {"type": "row", "fields": [...]},              # unnamed: no path segment
        {"name": "meta", "type": "group", "fields": [...]},
        {"name": "layout", "type": "blocks", "blocks": [
            {"slug": "hero", "fields": [...]},         # variant slug becomes a segment
        ]},
        {"type": "tabs", "tabs": [{"name": "seo", "fields": [...]}]},
    ]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Set


class FieldKind(Enum):
    PLAIN_TEXT = "text"
    MULTILINE_TEXT = "textarea"
    RICH_TEXT = "richText"


@dataclass(frozen=True)
class FieldDescriptor:
    path: str
    kind: FieldKind

    @property
    def is_rich_text(self) -> bool:
        return self.kind is FieldKind.RICH_TEXT


FIELD_TYPE_KINDS = {kind.value: kind for kind in FieldKind}


def _join(prefix: str, name: Optional[str]) -> str:
    if not name:
        return prefix
    return f"{prefix}.{name}" if prefix else name


def _walk(
    fields: List[Dict[str, Any]],
    prefix: str,
    out: List[FieldDescriptor],
    named: Optional[Set[str]] = None,
):
    for field in fields or []:
        if not isinstance(field, dict):
            continue

        path = _join(prefix, field.get('name'))
        if named is not None and field.get('name'):
            named.add(path)

        kind = FIELD_TYPE_KINDS.get(field.get('type'))
        if kind is not None and field.get('localized') is True and field.get('name'):
            out.append(FieldDescriptor(path=path, kind=kind))

        if isinstance(field.get('fields'), list):
            _walk(field['fields'], path, out, named)

        for tab in field.get('tabs') or []:
            if isinstance(tab, dict):
                _walk(tab.get('fields') or [], _join(path, tab.get('name')), out, named)

        for block in field.get('blocks') or []:
            if isinstance(block, dict):
                _walk(block.get('fields') or [], _join(path, block.get('slug')), out, named)


def walk_schema(fields: List[Dict[str, Any]]) -> List[FieldDescriptor]:
    """
    Discover localizable text fields.

    Args:
        fields: Top-level field definitions of a collection

    Returns:
        FieldDescriptors in declaration order

    Example:
        >>> walk_schema([{"name": "title", "type": "text", "localized": True},
        ...              {"name": "slug", "type": "text"}])
        [FieldDescriptor(path='title', kind=<FieldKind.PLAIN_TEXT: 'text'>)]
    """
    out: List[FieldDescriptor] = []
    _walk(fields, '', out)
    return out


def resolve_fields(
    schema: List[Dict[str, Any]],
    explicit: Optional[List[str]] = None,
) -> List[FieldDescriptor]:
    """
    Pick the fields to reconcile.

    Without an explicit list every localizable field of the schema is used.
    With one, the explicit order wins; paths known to the schema keep their
    declared kind, paths the schema declares but does not localize are
    dropped, and paths absent from the schema are treated as plain text.
    """
    discovered: List[FieldDescriptor] = []
    named: Set[str] = set()
    _walk(schema, '', discovered, named)
    if not explicit:
        return discovered

    by_path = {descriptor.path: descriptor for descriptor in discovered}
    resolved: List[FieldDescriptor] = []
    seen = set()
    for path in explicit:
        if not isinstance(path, str) or not path.strip() or path in seen:
            continue
        seen.add(path)
        if path in by_path:
            resolved.append(by_path[path])
        elif path not in named:
            resolved.append(FieldDescriptor(path=path, kind=FieldKind.PLAIN_TEXT))
    return resolved
