"""
Pre-order traversal of ESTree dicts.

`walk` visits every node reachable through child fields exactly once, the
parent before its children, and records each child's parent in the supplied
`NodeTable` before the child is visited. The scope analyzer relies on those
parent links for its ancestor searches.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Optional, Set

from .annotations import NodeTable
from .errors import InvalidArgumentError
from .nodes import is_node

Node = Dict[str, Any]
Visitor = Callable[[Node], None]

_NON_CHILD_KEYS = frozenset(
    {
        "type",
        "loc",
        "range",
        "comments",
        "tokens",
        "errors",
        "leadingComments",
        "trailingComments",
    }
)


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct child nodes of `node` in field order."""
    for key, value in node.items():
        if key in _NON_CHILD_KEYS:
            continue
        if isinstance(value, list):
            for element in value:
                if is_node(element):
                    yield element
        elif is_node(value):
            yield value


def walk(root: Node, visitor: Visitor, parents: Optional[NodeTable[Node]] = None) -> None:
    if not is_node(root):
        raise InvalidArgumentError("walk: root must be an ESTree node", root)
    seen: Set[int] = {id(root)}
    stack = [root]
    while stack:
        node = stack.pop()
        visitor(node)
        children = []
        for child in iter_children(node):
            if id(child) in seen:
                continue
            seen.add(id(child))
            if parents is not None:
                parents.set(child, node)
            children.append(child)
        stack.extend(reversed(children))


__all__ = ["iter_children", "walk"]
