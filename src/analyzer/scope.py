"""Mapping from declared names to bindings, owned by one scope-defining node."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from .binding import Binding


class Scope:
    """A lexical scope attached to a Program, BlockStatement or function node."""

    def __init__(self) -> None:
        self.bindings: Dict[str, Binding] = {}
        self.undeclared: Dict[str, List[Dict[str, Any]]] = {}

    def define(self, binding: Binding) -> Binding:
        """Insert `binding`, or merge its declarations into an existing one of the same name."""
        existing = self.bindings.get(binding.name)
        if existing is None:
            self.bindings[binding.name] = binding
            return binding
        for node in binding.declarations:
            existing.add_declaration(node)
        return existing

    def has(self, name: str) -> bool:
        return name in self.bindings

    def get_binding(self, name: str) -> Optional[Binding]:
        return self.bindings.get(name)

    def add(self, name: str, node: Dict[str, Any]) -> None:
        """Record `node` as a reference of `name`. Callers check `has(name)` first."""
        binding = self.bindings.get(name)
        if binding is not None:
            binding.add_reference(node)

    def add_undeclared(self, name: str, node: Dict[str, Any]) -> None:
        self.undeclared.setdefault(name, []).append(node)

    def undeclared_names(self) -> List[str]:
        return list(self.undeclared)

    def names(self) -> List[str]:
        return list(self.bindings)

    def __iter__(self) -> Iterator[Binding]:
        return iter(self.bindings.values())

    def __len__(self) -> int:
        return len(self.bindings)

    def __repr__(self) -> str:
        return f"Scope(names={self.names()!r})"


__all__ = ["Scope"]
