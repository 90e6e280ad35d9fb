"""
Identity-keyed side tables for ESTree nodes.

ESTree nodes are plain dicts, so they cannot be hashed and two structurally
equal nodes compare equal. `NodeTable` keys entries on object identity and
keeps a reference to the node so the id stays valid for the table's lifetime.
Nothing is ever written into the node dicts themselves.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Iterator, Optional, Tuple, TypeVar

V = TypeVar("V")


class NodeTable(Generic[V]):
    def __init__(self) -> None:
        self._entries: Dict[int, Tuple[Any, V]] = {}

    def get(self, node: Any) -> Optional[V]:
        entry = self._entries.get(id(node))
        if entry is None:
            return None
        return entry[1]

    def set(self, node: Any, value: V) -> None:
        self._entries[id(node)] = (node, value)

    def __contains__(self, node: Any) -> bool:
        return id(node) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> Iterator[Tuple[Any, V]]:
        """Yield `(node, value)` pairs in insertion order."""
        yield from self._entries.values()

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["NodeTable"]
