"""AST serialization: JSON round-trip for Gotita AST nodes.

Converts typed AST nodes to/from JSON-compatible dicts. Useful for:
- Caching parsed documents
- Handing the tree to tools in other languages
- Debugging and inspection

All output is deterministic (sorted keys) for cache-key stability.

Example:
    from gotita import parse
    from gotita.serialization import to_json, from_json

    doc = parse("# Hello *World*")
    json_str = to_json(doc)
    restored = from_json(json_str)
    assert doc == restored

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
from dataclasses import fields
from typing import Any

from gotita.attributes import Attributes
from gotita.diagnostics import CompileWarning, WarningKind
from gotita.location import SourceLocation
from gotita.nodes import (
    BlockQuote,
    CodeBlock,
    Delete,
    Div,
    Document,
    DoubleQuoted,
    Emphasis,
    FootnoteDef,
    FootnoteRef,
    Heading,
    Image,
    Insert,
    LineBreak,
    Link,
    List,
    ListItem,
    Mark,
    Math,
    Node,
    Paragraph,
    RawBlock,
    RawInline,
    Reference,
    SingleQuoted,
    SoftBreak,
    Span,
    Strong,
    Subscript,
    Superscript,
    Symbol,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    Verbatim,
)

# Registry of node type names to classes for deserialization
_NODE_TYPES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in (
        Document,
        Paragraph,
        Heading,
        CodeBlock,
        RawBlock,
        BlockQuote,
        List,
        ListItem,
        ThematicBreak,
        Table,
        TableRow,
        TableCell,
        Div,
        FootnoteDef,
        Reference,
        Text,
        Emphasis,
        Strong,
        Superscript,
        Subscript,
        Mark,
        Insert,
        Delete,
        DoubleQuoted,
        SingleQuoted,
        Span,
        Link,
        Image,
        Verbatim,
        Math,
        RawInline,
        Symbol,
        FootnoteRef,
        LineBreak,
        SoftBreak,
    )
}


def to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.
    Recursively serializes child nodes, locations, attributes and warnings.

    Args:
        node: Any Gotita AST node.

    Returns:
        Dict with ``_type`` and all node fields.

    """
    result: dict[str, Any] = {"_type": type(node).__name__}

    for f in fields(node):
        result[f.name] = _serialize_value(getattr(node, f.name))

    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, SourceLocation):
        return {
            "_type": "SourceLocation",
            **{f.name: getattr(value, f.name) for f in fields(value)},
        }
    if isinstance(value, Attributes):
        return {"_type": "Attributes", "pairs": [list(pair) for pair in value]}
    if isinstance(value, CompileWarning):
        return {
            "_type": "CompileWarning",
            "kind": value.kind.name,
            "location": _serialize_value(value.location),
            "message": value.message,
        }
    if isinstance(value, dict):
        return {key: _serialize_value(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a typed AST node from a dict.

    Uses the ``_type`` discriminator to determine the node class.

    Args:
        data: Dict with ``_type`` and node fields (as produced by to_dict).

    Returns:
        Typed AST node (frozen dataclass).

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized node"
        raise ValueError(msg)

    node_cls = _NODE_TYPES.get(type_name)
    if node_cls is None:
        msg = f"Unknown node type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(node_cls):
        if f.name in data:
            kwargs[f.name] = _deserialize_value(data[f.name])

    return node_cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        type_name = value.get("_type")
        match type_name:
            case "SourceLocation":
                return SourceLocation(**{k: v for k, v in value.items() if k != "_type"})
            case "Attributes":
                return Attributes(tuple((key, val) for key, val in value["pairs"]))
            case "CompileWarning":
                return CompileWarning(
                    kind=WarningKind[value["kind"]],
                    location=_deserialize_value(value["location"]),
                    message=value["message"],
                )
            case None:
                # Plain mapping (Document.references / Document.footnotes)
                return {key: _deserialize_value(item) for key, item in value.items()}
            case _:
                return from_dict(value)
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(doc: Document, *, indent: int | None = None) -> str:
    """Serialize a Document, warnings included, to JSON.

    Keys are sorted so equal documents give byte-identical output.
    Non-ASCII text is written as-is.
    """
    return json.dumps(to_dict(doc), sort_keys=True, indent=indent, ensure_ascii=False)


def from_json(data: str) -> Document:
    """Rebuild a Document from ``to_json`` output.

    Raises:
        ValueError: If the top-level object is not a Document, or any
            nested object lacks a known ``_type``
    """
    node = from_dict(json.loads(data))
    if not isinstance(node, Document):
        msg = f"Expected Document, got {type(node).__name__}"
        raise ValueError(msg)
    return node
