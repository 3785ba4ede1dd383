"""
Dotted field-path helpers for reading record values and building patches.

The schema walker addresses a block variant by its slug
(`layout.hero.heading`). A record can hold several blocks of the same
variant, so before reading values those schema paths are expanded against
the record into concrete paths with one index segment per block item
(`layout.0.heading`, `layout.2.heading`).

Patches for concrete paths mirror the record: a list of blocks is written
back as a list of the same length, each item keeping its position, its
`id`/`blockType` and its current values for the target locale.
"""

import copy
from typing import Any, Dict, Iterable, List, Tuple

from autolocale.core.schema import FieldDescriptor

# Nested field -> value mapping written into one locale of one record
TranslationPatch = Dict[str, Any]

_MISSING = object()

BLOCK_TYPE_KEYS = ('blockType', 'block_type')


def _is_block(item: Any, slug: str) -> bool:
    return isinstance(item, dict) and any(item.get(k) == slug for k in BLOCK_TYPE_KEYS)


def _step(node: Any, key: str) -> Any:
    if isinstance(node, dict):
        return node.get(key, _MISSING)
    if isinstance(node, list) and key.isdigit():
        index = int(key)
        return node[index] if index < len(node) else _MISSING
    return _MISSING


def get_by_path(record: Any, path: str, default: Any = None) -> Any:
    """
    Read a value by concrete dotted path. Digit segments index into lists.

    Example:
        >>> get_by_path({"meta": {"title": "Hi"}}, "meta.title")
        'Hi'
        >>> get_by_path({"layout": [{"blockType": "hero", "heading": "Hi"}]}, "layout.0.heading")
        'Hi'
    """
    node = record
    for key in path.split('.'):
        node = _step(node, key)
        if node is _MISSING:
            return default
    return node


def expand_path(record: Any, path: str) -> List[str]:
    """
    Expand a schema path into the concrete paths present in a record.

    A segment that meets a list selects every block whose `blockType` equals
    the segment, replacing it with the block's index. Paths without blocks
    come back unchanged, even when the record lacks the field.

    Example:
        >>> record = {"layout": [{"blockType": "hero"}, {"blockType": "quote"}, {"blockType": "hero"}]}
        >>> expand_path(record, "layout.hero.heading")
        ['layout.0.heading', 'layout.2.heading']
    """
    branches: List[Tuple[List[str], Any]] = [([], record)]

    for segment in path.split('.'):
        expanded = []
        for prefix, node in branches:
            if isinstance(node, list):
                for index, item in enumerate(node):
                    if _is_block(item, segment):
                        expanded.append((prefix + [str(index)], item))
            else:
                child = node.get(segment) if isinstance(node, dict) else None
                expanded.append((prefix + [segment], child))
        branches = expanded

    return ['.'.join(prefix) for prefix, _ in branches]


def expand_fields(record: Any, fields: Iterable[FieldDescriptor]) -> List[FieldDescriptor]:
    """Concrete field descriptors for a record, in schema then block order."""
    concrete: List[FieldDescriptor] = []
    for field in fields:
        for path in expand_path(record, field.path):
            concrete.append(field if path == field.path else FieldDescriptor(path, field.kind))
    return concrete


def localized_value(record: Any, path: str, locale: str) -> Any:
    """
    Read one locale's value from an all-locale record.

    Returns None when the field is absent or is not a locale mapping.
    """
    value = get_by_path(record, path)
    if isinstance(value, dict):
        return value.get(locale)
    return None


def scope_to_locale(value: Any, locale: str, locales: List[str]) -> Any:
    """Project an all-locale value onto one locale; shared values are copied as-is."""
    if isinstance(value, dict):
        if value and set(value) <= set(locales):
            return copy.deepcopy(value.get(locale))
        return {key: scope_to_locale(child, locale, locales) for key, child in value.items()}
    if isinstance(value, list):
        return [scope_to_locale(item, locale, locales) for item in value]
    return copy.deepcopy(value)


class _Leaf:
    __slots__ = ('value',)

    def __init__(self, value: Any):
        self.value = value


def _mirror_list(branch: Dict[str, Any], items: List[Any], locale: str, locales: List[str]) -> List[Any]:
    mirrored = []
    for index, item in enumerate(items):
        entry = scope_to_locale(item, locale, locales)
        updates = branch.get(str(index))
        if isinstance(updates, dict) and isinstance(entry, dict):
            _apply(updates, entry, item, locale, locales)
        mirrored.append(entry)
    return mirrored


def _apply(tree: Dict[str, Any], target: Dict[str, Any], record_node: Any, locale, locales) -> None:
    for key, branch in tree.items():
        if isinstance(branch, _Leaf):
            target[key] = branch.value
            continue

        current = record_node.get(key) if isinstance(record_node, dict) else None
        if isinstance(current, list) and locale is not None:
            target[key] = _mirror_list(branch, current, locale, locales)
            continue

        child = target.get(key)
        if not isinstance(child, dict):
            child = target[key] = {}
        _apply(branch, child, current, locale, locales)


def build_patch_from_pairs(
    pairs: List[Tuple[str, Any]],
    record: Any = None,
    locale: str = None,
    locales: List[str] = None,
) -> TranslationPatch:
    """
    Rebuild a nested patch from (path, value) pairs.

    Without a record every segment becomes a mapping key. With the all-locale
    record and the target locale, index segments that land in a list of
    blocks produce the whole list, every item scoped to the target locale
    and the translated values set on the addressed items.

    Args:
        pairs: List of (field_path, value) tuples
        record: All-locale record the paths were expanded against
        locale: Target locale of the patch
        locales: Configured locale codes

    Returns:
        Nested dictionary mirroring the path hierarchy

    Example:
        >>> build_patch_from_pairs([("meta.title", "Hallo"), ("body", "Text")])
        {'meta': {'title': 'Hallo'}, 'body': 'Text'}
    """
    tree: Dict[str, Any] = {}

    for path, value in pairs:
        keys = path.split('.')
        node = tree

        for key in keys[:-1]:
            if not isinstance(node.get(key), dict):
                # A value at an intermediate key is replaced by a mapping
                node[key] = {}
            node = node[key]

        node[keys[-1]] = _Leaf(value)

    result: Dict[str, Any] = {}
    _apply(tree, result, record, locale, locales or [])
    return result
