"""
Scope and binding resolution for ESTree JavaScript ASTs.

Resolution runs in two passes over the whole tree. The scope pass attaches a
`Scope` to every scope-defining node that declares something (the Program,
function nodes, and block statements holding `let`/`const`) and defines a
`Binding` for each declared name, following hoisting rules: `var`, function
and class declarations go to the nearest function or Program, `let` and
`const` to the nearest block. The binding pass then resolves every identifier
used as a value by searching outward for the first ancestor whose scope
declares its name.

The scope pass must finish before the binding pass starts, since a name can be
used textually before the node declaring it is visited. Annotations live in
side tables on the analyzer; the AST dicts are left untouched.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from loguru import logger

from .annotations import NodeTable
from .binding import Binding
from .errors import InvalidArgumentError
from .nodes import (
    assigned_identifiers,
    is_function,
    is_node,
    is_non_variable_name,
    is_shorthand_property,
    is_variable,
)
from .scope import Scope
from .walker import walk

Node = Dict[str, Any]


def _require_node(value: Any, operation: str) -> Node:
    if not is_node(value):
        raise InvalidArgumentError(f"{operation}: node must be an ESTree node", value)
    return value


class ScopeAnalyzer:
    """
    Holds the node→scope and node→parent annotations for one analysis.

    `analyze` drives both passes itself. Callers with their own traversal can
    call `run_scope_pass` and `run_binding_pass` per node instead, as long as
    parent links are recorded in `parents` (see `walker.walk`) and every node
    has gone through the scope pass before any node goes through the binding
    pass.
    """

    def __init__(self, parents: Optional[NodeTable[Node]] = None) -> None:
        self.parents: NodeTable[Node] = parents if parents is not None else NodeTable()
        self._scopes: NodeTable[Scope] = NodeTable()

    # ------------------------------------------------------------------ public

    def annotate_scope(self, node: Any, names: Optional[Iterable[str]] = None) -> Scope:
        """Attach a scope to `node` unless it already has one, seeding `names` into it."""
        node = _require_node(node, "annotate_scope")
        scope = self._scopes.get(node)
        if scope is None:
            scope = Scope()
            self._scopes.set(node, scope)
            logger.debug("created scope on {} node", node["type"])
        for name in names or ():
            scope.define(Binding(name))
        return scope

    def run_scope_pass(self, node: Any) -> None:
        node = _require_node(node, "run_scope_pass")
        self._register_declarations(node)

    def run_binding_pass(self, node: Any) -> None:
        node = _require_node(node, "run_binding_pass")
        parent = self.parents.get(node)
        if is_variable(node, parent) or is_shorthand_property(node, parent):
            self._register_reference(node)

    def analyze(self, root: Any) -> Node:
        root = _require_node(root, "analyze")
        walk(root, self.run_scope_pass, self.parents)
        walk(root, self.run_binding_pass, self.parents)
        return root

    def get_scope(self, node: Any) -> Optional[Scope]:
        if node is None:
            return None
        return self._scopes.get(node)

    def get_binding(self, identifier: Any) -> Optional[Binding]:
        """
        Binding `identifier` resolves to.

        None for a free reference and for identifiers that never refer to a
        variable, such as the `b` in `a.b` or a non-shorthand object key.
        """
        if not isinstance(identifier, dict):
            raise InvalidArgumentError("get_binding: identifier must be a node", identifier)
        if identifier.get("type") != "Identifier":
            raise InvalidArgumentError(
                "get_binding: identifier must be an Identifier node", identifier
            )
        parent = self.parents.get(identifier)
        if not (is_variable(identifier, parent) or is_shorthand_property(identifier, parent)):
            return None
        scope = self._scopes.get(self._declared_scope(identifier))
        if scope is None:
            return None
        return scope.get_binding(identifier["name"])

    def nearest_scope(self, node: Any, block_scope: bool = False) -> Node:
        """Node whose scope a declaration at `node` belongs to."""
        node = _require_node(node, "nearest_scope")
        current = node
        parent = self.parents.get(current)
        while parent is not None:
            current = parent
            if is_function(current):
                break
            if block_scope and current["type"] == "BlockStatement":
                break
            if current["type"] == "Program":
                break
            parent = self.parents.get(current)
        return current

    def scopes(self) -> Iterator[Tuple[Node, Scope]]:
        """Yield `(node, scope)` pairs in the order scopes were created."""
        return self._scopes.items()

    def clear(self) -> None:
        self._scopes.clear()
        self.parents.clear()

    # ----------------------------------------------------------------- helpers

    def _define(self, scope: Scope, identifier: Node) -> None:
        scope.define(Binding(identifier["name"], identifier))
        logger.debug("defined {!r}", identifier["name"])

    def _register_declarations(self, node: Node) -> None:
        kind = node["type"]
        if kind == "VariableDeclaration":
            scope = self.annotate_scope(
                self.nearest_scope(node, node.get("kind") != "var")
            )
            for declarator in node.get("declarations") or []:
                for identifier in assigned_identifiers(declarator.get("id")):
                    self._define(scope, identifier)
        if kind in ("ClassDeclaration", "FunctionDeclaration"):
            scope = self.annotate_scope(self.nearest_scope(node))
            identifier = node.get("id")
            if is_node(identifier) and identifier["type"] == "Identifier":
                self._define(scope, identifier)
        if is_function(node):
            scope = self.annotate_scope(node)
            for param in node.get("params") or []:
                for identifier in assigned_identifiers(param):
                    self._define(scope, identifier)
        if kind in ("FunctionExpression", "ClassExpression"):
            # The expression's own name is visible only inside it.
            scope = self.annotate_scope(node)
            identifier = node.get("id")
            if is_node(identifier) and identifier["type"] == "Identifier":
                self._define(scope, identifier)

    def _declared_scope(self, identifier: Node) -> Node:
        current = identifier
        parent = self.parents.get(identifier)
        # A function declaration's own scope holds its params and locals, so
        # the search for its name starts outside the declaration.
        if (
            parent is not None
            and parent["type"] == "FunctionDeclaration"
            and parent.get("id") is identifier
        ):
            current = parent
        name = identifier["name"]
        parent = self.parents.get(current)
        while parent is not None:
            current = parent
            scope = self._scopes.get(current)
            if scope is not None and scope.has(name):
                break
            parent = self.parents.get(current)
        return current

    def _register_reference(self, node: Node) -> None:
        name = node["name"]
        scope = self._scopes.get(self._declared_scope(node))
        if scope is None:
            logger.debug("unresolved reference {!r}", name)
            return
        if scope.has(name):
            scope.add(name, node)
        elif not is_non_variable_name(node, self.parents.get(node)):
            scope.add_undeclared(name, node)
            logger.debug("free reference {!r}", name)


def analyze_scopes(
    ast: Node, *, ambient: Optional[Iterable[str]] = None
) -> ScopeAnalyzer:
    """
    Run both resolution passes over `ast`.

    Args:
        ast: ESTree Program dict (result of `parse_js`).
        ambient: Ambient names to seed into the root scope before resolving.
            The root always gets a scope, so free references are collected
            for every program.

    Returns:
        The ScopeAnalyzer holding the scope and binding annotations.
    """
    analyzer = ScopeAnalyzer()
    # Free references collect on the root even when nothing is declared there.
    analyzer.annotate_scope(ast, ambient)
    analyzer.analyze(ast)
    return analyzer


__all__ = ["ScopeAnalyzer", "analyze_scopes"]
