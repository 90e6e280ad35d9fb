"""A declared name together with every site that declares or references it."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class Binding:
    """
    One declared name within a single scope.

    `declarations` grows when the name is declared again in the same scope
    (`var x; var x;` or a function re-declared with `var`). `references`
    collects every identifier the binding pass resolved to this binding,
    declaration identifiers included.
    """

    def __init__(self, name: str, node: Optional[Dict[str, Any]] = None) -> None:
        self.name = name
        self.declarations: List[Dict[str, Any]] = []
        self.references: List[Dict[str, Any]] = []
        if node is not None:
            self.declarations.append(node)

    @property
    def definition(self) -> Optional[Dict[str, Any]]:
        """First declaration site, or None for an ambient binding."""
        return self.declarations[0] if self.declarations else None

    def add_declaration(self, node: Dict[str, Any]) -> None:
        self.declarations.append(node)

    def add_reference(self, node: Dict[str, Any]) -> None:
        self.references.append(node)

    def is_referenced(self) -> bool:
        """True when some identifier other than a declaration site refers here."""
        declared = {id(node) for node in self.declarations}
        return any(id(ref) not in declared for ref in self.references)

    def __repr__(self) -> str:
        return (
            f"Binding(name={self.name!r}, declarations={len(self.declarations)}, "
            f"references={len(self.references)})"
        )


__all__ = ["Binding"]
