"""
Render scope analysis results as a text or JSON binding report.

The report lists each scope in creation order with its bindings, their
declaration sites and the sites that reference them, followed by the free
references collected on the root scope.
"""

from __future__ import annotations

import io
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from analyzer import Binding, Scope
from frontend import AnalysisResult

FORMATS = ("text", "json")


@dataclass(frozen=True)
class ReportOptions:
    format: str = "text"
    include_unreferenced: bool = True
    trailing_newline: bool = True


@dataclass(frozen=True)
class ReportResult:
    text: str
    binding_count: int
    undeclared: List[str]


def _position(node: Optional[Dict[str, Any]]) -> Optional[str]:
    if not node:
        return None
    start = (node.get("loc") or {}).get("start") or {}
    line = start.get("line")
    if line is None:
        return None
    return f"{line}:{start.get('column', 0)}"


def _reference_sites(binding: Binding) -> List[Dict[str, Any]]:
    declared = {id(node) for node in binding.declarations}
    return [node for node in binding.references if id(node) not in declared]


def _scope_entry(node: Dict[str, Any], scope: Scope, options: ReportOptions) -> Dict[str, Any]:
    bindings = []
    for binding in scope:
        if not options.include_unreferenced and not binding.is_referenced():
            continue
        bindings.append(
            {
                "name": binding.name,
                "declarations": [_position(decl) for decl in binding.declarations],
                "references": [_position(ref) for ref in _reference_sites(binding)],
            }
        )
    return {"type": node["type"], "loc": _position(node), "bindings": bindings}


def _render_text(source_name: str, entries: List[Dict[str, Any]], undeclared: List[str]) -> str:
    buffer = io.StringIO()
    buffer.write(f"{source_name}\n")
    for entry in entries:
        location = f" {entry['loc']}" if entry["loc"] else ""
        buffer.write(f"{entry['type']}{location}\n")
        for binding in entry["bindings"]:
            declared = ", ".join(pos or "?" for pos in binding["declarations"]) or "ambient"
            references = ", ".join(pos or "?" for pos in binding["references"]) or "-"
            buffer.write(f"  {binding['name']}  declared {declared}  references {references}\n")
    if undeclared:
        buffer.write(f"free: {', '.join(undeclared)}\n")
    return buffer.getvalue().rstrip("\n")


def render_report(analysis: AnalysisResult, options: Optional[ReportOptions] = None) -> ReportResult:
    """
    Render `analysis` in the format named by `options.format`.

    Raises:
        ValueError: If the format is not one of `FORMATS`.
    """
    options = options or ReportOptions()
    if options.format not in FORMATS:
        raise ValueError(f"Unknown report format: {options.format!r}")

    entries = [_scope_entry(node, scope, options) for node, scope in analysis.scopes()]
    undeclared = analysis.undeclared_names()

    if options.format == "json":
        text = json.dumps(
            {
                "source_name": analysis.source_name,
                "scopes": entries,
                "undeclared": undeclared,
            },
            ensure_ascii=False,
            indent=2,
        )
    else:
        text = _render_text(analysis.source_name, entries, undeclared)
    if options.trailing_newline:
        text += "\n"

    return ReportResult(
        text=text,
        binding_count=sum(len(entry["bindings"]) for entry in entries),
        undeclared=undeclared,
    )


__all__ = ["FORMATS", "ReportOptions", "ReportResult", "render_report"]
