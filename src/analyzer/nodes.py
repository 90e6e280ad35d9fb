"""Shape predicates for ESTree nodes and the pattern-to-identifiers helper."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

FUNCTION_TYPES = frozenset(
    {"FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"}
)

_LABEL_TYPES = frozenset({"LabeledStatement", "BreakStatement", "ContinueStatement"})

Node = Dict[str, Any]


def is_node(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def is_function(node: Node) -> bool:
    return node.get("type") in FUNCTION_TYPES


def is_object_key(node: Node, parent: Optional[Node]) -> bool:
    return (
        parent is not None
        and parent.get("type") == "Property"
        and parent.get("key") is node
    )


def is_shorthand_property(node: Node, parent: Optional[Node]) -> bool:
    return (
        node.get("type") == "Identifier"
        and is_object_key(node, parent)
        and bool(parent.get("shorthand"))
    )


def is_variable(node: Node, parent: Optional[Node]) -> bool:
    """
    True for an Identifier used as a value: not an object key, and within a
    member expression only the object or a computed property (`a[b]`).
    """
    if node.get("type") != "Identifier" or is_object_key(node, parent):
        return False
    if parent is None or parent.get("type") != "MemberExpression":
        return True
    if parent.get("object") is node:
        return True
    return parent.get("property") is node and bool(parent.get("computed"))


def is_non_variable_name(node: Node, parent: Optional[Node]) -> bool:
    """True for a static method key or a statement label, which never name a variable."""
    if parent is None:
        return False
    kind = parent.get("type")
    if kind == "MethodDefinition":
        return parent.get("key") is node and not parent.get("computed")
    if kind in _LABEL_TYPES:
        return parent.get("label") is node
    return False


def assigned_identifiers(pattern: Optional[Node]) -> Iterator[Node]:
    """Yield the Identifier nodes a declaration or parameter pattern binds."""
    if not is_node(pattern):
        return
    kind = pattern["type"]
    if kind == "Identifier":
        yield pattern
    elif kind == "ObjectPattern":
        for prop in pattern.get("properties") or []:
            if not is_node(prop):
                continue
            if prop["type"] == "RestElement":
                yield from assigned_identifiers(prop.get("argument"))
            else:
                yield from assigned_identifiers(prop.get("value"))
    elif kind == "ArrayPattern":
        for element in pattern.get("elements") or []:
            yield from assigned_identifiers(element)
    elif kind == "AssignmentPattern":
        yield from assigned_identifiers(pattern.get("left"))
    elif kind == "RestElement":
        yield from assigned_identifiers(pattern.get("argument"))


__all__ = [
    "FUNCTION_TYPES",
    "assigned_identifiers",
    "is_function",
    "is_node",
    "is_non_variable_name",
    "is_object_key",
    "is_shorthand_property",
    "is_variable",
]
