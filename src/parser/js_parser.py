"""
JavaScript parsing built on top of the Python `esprima` port.

`parse_js` returns the ESTree dict for a source text along with metadata about
the parse run. Callers choose between tolerant and strict parsing, and between
script and module source types.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, List, Optional

import esprima


@dataclass(frozen=True)
class ParseError:
    """Represents a recoverable parsing issue detected by esprima."""

    description: str
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class ParseResult:
    """Aggregate of the output AST plus metadata about the parse run."""

    ast: Any
    errors: List[ParseError]
    source_hash: str
    source_name: str

    def to_json(self) -> str:
        """Serialise the parse result to JSON for debugging or caching."""
        payload = {
            "ast": self.ast,
            "errors": [error.__dict__ for error in self.errors],
            "source_hash": self.source_hash,
            "source_name": self.source_name,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)


def _hash_source(source: str) -> str:
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def _share_shorthand_keys(node: Any) -> None:
    """
    Make `{ x }` properties hold one Identifier in both `key` and `value`.

    esprima builds two separate Identifier nodes for a shorthand property;
    ESTree walkers expect a single token there.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, list):
            stack.extend(current)
            continue
        if not isinstance(current, dict):
            continue
        if current.get("type") == "Property" and current.get("shorthand"):
            key = current.get("key")
            value = current.get("value")
            if (
                isinstance(key, dict)
                and isinstance(value, dict)
                and key.get("type") == value.get("type") == "Identifier"
                and key.get("name") == value.get("name")
            ):
                current["value"] = key
        for field, child in current.items():
            if field in ("loc", "range"):
                continue
            if field == "value" and child is current.get("key"):
                continue
            stack.append(child)


def parse_js(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    source_type: str = "script",
) -> ParseResult:
    """
    Parse JavaScript source text into an ESTree dict.

    Args:
        source: Raw JavaScript source code.
        source_name: Optional label used for diagnostics (defaults to `<input>`).
        tolerant: When True, esprima performs error recovery instead of raising.
        source_type: `"script"` or `"module"`; modules enable import/export.

    Returns:
        ParseResult containing the AST, any recoverable errors, and metadata.

    Raises:
        esprima.Error: If parsing fails and `tolerant` is False.
    """
    options = dict(loc=True, range=True, tolerant=tolerant)
    parser = esprima.parseModule if source_type == "module" else esprima.parseScript
    try:
        ast = parser(source, **options)
    except esprima.Error as exc:
        if not tolerant:
            raise
        errors = [
            ParseError(
                description=getattr(exc, "description", None) or "Failed to parse source.",
                line=getattr(exc, "lineNumber", None),
                column=getattr(exc, "column", None),
            )
        ]
        return ParseResult(
            ast=None,
            errors=errors,
            source_hash=_hash_source(source),
            source_name=source_name,
        )

    errors: List[ParseError] = []
    raw_ast = ast.toDict() if hasattr(ast, "toDict") else ast

    if tolerant and isinstance(raw_ast, dict):
        for error in raw_ast.pop("errors", None) or []:
            errors.append(
                ParseError(
                    description=error.get("description"),
                    line=error.get("lineNumber"),
                    column=error.get("column"),
                )
            )

    _share_shorthand_keys(raw_ast)

    return ParseResult(
        ast=raw_ast,
        errors=errors,
        source_hash=_hash_source(source),
        source_name=source_name,
    )


__all__ = ["ParseError", "ParseResult", "parse_js"]
