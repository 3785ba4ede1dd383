"""
Rich-text normalization.

Two structured-document dialects are recognized:
- TREE_OF_NODES: an ordered list of node dicts, each holding a `text` leaf or
  a nested `children` list.
- ROOTED_TREE: a dict with a single `root` node whose descendants have the
  same text/children shape, plus `linebreak` nodes.

Anything else is OPAQUE and passes through untouched.

flatten() projects a document to plain text for the model; reinject() builds
a target-locale document from the source document's shape and the model's
translated string.
"""

import copy
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List


class DocumentKind(Enum):
    TREE_OF_NODES = "tree_of_nodes"
    ROOTED_TREE = "rooted_tree"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class StructuredDocument:
    kind: DocumentKind
    payload: Any

    @property
    def is_recognized(self) -> bool:
        return self.kind is not DocumentKind.OPAQUE


_EXCESS_NEWLINES = re.compile(r'\n{3,}')


def detect_document(value: Any) -> StructuredDocument:
    """
    Classify a raw field value once.

    Example:
        >>> detect_document([{"children": [{"text": "Hi"}]}]).kind
        <DocumentKind.TREE_OF_NODES: 'tree_of_nodes'>
    """
    if isinstance(value, StructuredDocument):
        return value

    if isinstance(value, list) and all(isinstance(node, dict) for node in value):
        return StructuredDocument(DocumentKind.TREE_OF_NODES, value)

    if isinstance(value, dict):
        root = value.get('root')
        if isinstance(root, dict) and isinstance(root.get('children'), list):
            return StructuredDocument(DocumentKind.ROOTED_TREE, value)

    return StructuredDocument(DocumentKind.OPAQUE, value)


def _tidy(text: str) -> str:
    return _EXCESS_NEWLINES.sub('\n\n', text).strip()


def _tree_node_text(node: dict) -> str:
    text = node.get('text')
    if isinstance(text, str):
        return text
    children = node.get('children')
    if isinstance(children, list):
        return ''.join(_tree_node_text(child) for child in children if isinstance(child, dict))
    return ''


def _rooted_node_text(node: dict) -> str:
    text = node.get('text')
    if isinstance(text, str):
        return text
    if node.get('type') == 'linebreak':
        return '\n'
    children = node.get('children')
    if isinstance(children, list):
        return ''.join(_rooted_node_text(child) for child in children if isinstance(child, dict))
    return ''


def flatten(value: Any) -> str:
    """
    Render a rich-text value as plain text.

    Top-level nodes of a TREE_OF_NODES document are separated by a newline;
    siblings inside a ROOTED_TREE are concatenated as-is. Runs of three or
    more newlines collapse to two and the result is stripped. Unrecognized
    values flatten to an empty string.
    """
    document = detect_document(value)

    if document.kind is DocumentKind.TREE_OF_NODES:
        lines = [_tree_node_text(node) for node in document.payload]
        return _tidy('\n'.join(lines))

    if document.kind is DocumentKind.ROOTED_TREE:
        return _tidy(_rooted_node_text(document.payload['root']))

    return ''


def _collect_text_leaves(nodes: List[Any], leaves: List[dict]):
    for node in nodes:
        if not isinstance(node, dict):
            continue
        if isinstance(node.get('text'), str):
            leaves.append(node)
        children = node.get('children')
        if isinstance(children, list):
            _collect_text_leaves(children, leaves)


def text_leaves(value: Any) -> List[dict]:
    """Return the text leaf nodes of a document in document order."""
    document = detect_document(value)
    leaves: List[dict] = []
    if document.kind is DocumentKind.TREE_OF_NODES:
        _collect_text_leaves(document.payload, leaves)
    elif document.kind is DocumentKind.ROOTED_TREE:
        _collect_text_leaves([document.payload['root']], leaves)
    return leaves


def reinject(source: Any, translated: str) -> Any:
    """
    Build a target-locale value from the source document's shape.

    The source is deep-copied, the whole translated string goes into the
    first text leaf and every later text leaf is blanked. Node count, nesting
    and non-text attributes are kept. The model returns one string per field,
    so there is no per-span alignment.

    Without a recognized source (or one without any text leaf) the
    translated string is returned as-is.

    Example:
        >>> src = [{"type": "p", "children": [{"text": "Hello "}, {"text": "world", "bold": True}]}]
        >>> reinject(src, "Bonjour le monde")
        [{'type': 'p', 'children': [{'text': 'Bonjour le monde'}, {'text': '', 'bold': True}]}]
    """
    document = detect_document(source)
    if not document.is_recognized:
        return translated

    clone = copy.deepcopy(document.payload)
    leaves = text_leaves(clone)
    if not leaves:
        return translated

    leaves[0]['text'] = translated
    for leaf in leaves[1:]:
        leaf['text'] = ''
    return clone


def has_text(value: Any) -> bool:
    """True for a non-blank string or a recognized document with visible text."""
    if isinstance(value, str):
        return bool(value.strip())
    return bool(flatten(value))


def to_plain_text(value: Any) -> str:
    """Plain-text projection used for prompts: strings pass, documents flatten."""
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    return flatten(value)
