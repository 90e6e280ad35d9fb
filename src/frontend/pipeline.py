"""
Front-end integration stitching together parsing and scope analysis.

`run_frontend` accepts raw JavaScript source, invokes the parser to obtain an
ESTree dict, optionally resolves scopes and bindings over it, and persists
cached parse artefacts when requested.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from loguru import logger

from analyzer import Binding, Scope, ScopeAnalyzer, analyze_scopes
from parser import ParseResult, parse_js


@dataclass(frozen=True)
class AnalysisOptions:
    ambient: Sequence[str] = ()
    collect_undeclared: bool = True


@dataclass(frozen=True)
class AnalysisResult:
    """Scope annotations for one parsed program."""

    source_name: str
    root: Dict[str, Any]
    analyzer: ScopeAnalyzer

    @property
    def root_scope(self) -> Optional[Scope]:
        return self.analyzer.get_scope(self.root)

    def scopes(self) -> Iterator[Tuple[Dict[str, Any], Scope]]:
        return self.analyzer.scopes()

    def bindings(self) -> Iterator[Binding]:
        for _, scope in self.analyzer.scopes():
            yield from scope

    def undeclared_names(self) -> List[str]:
        scope = self.root_scope
        return scope.undeclared_names() if scope is not None else []


@dataclass(frozen=True)
class FrontEndResult:
    """Combined output from the parsing and analysis pipeline."""

    parse: ParseResult
    analysis: Optional[AnalysisResult]

    @property
    def has_ast(self) -> bool:
        return self.parse.ast is not None

    @property
    def diagnostics(self):
        return list(self.parse.errors)


def run_frontend(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    analyze: bool = True,
    source_type: str = "script",
    options: Optional[AnalysisOptions] = None,
    cache_dir: Optional[Union[str, Path]] = None,
) -> FrontEndResult:
    """
    Execute parsing and optional scope analysis for JavaScript input.

    Args:
        source: Raw JavaScript source text.
        source_name: Identifier used in diagnostics, e.g. file path.
        tolerant: Forwarded to parser; when True esprima attempts recovery.
        analyze: Toggle to skip scope analysis.
        source_type: `"script"` or `"module"` to control parsing of import/export.
        options: Ambient names and free-reference collection settings.
        cache_dir: Optional directory to write parse artefacts (`None` disables).

    Returns:
        FrontEndResult containing the parser output and optional analysis result.
    """
    options = options or AnalysisOptions()
    parse_result = parse_js(
        source,
        source_name=source_name,
        tolerant=tolerant,
        source_type=source_type,
    )

    if cache_dir is not None:
        _persist_parse(cache_dir, parse_result)

    analysis_result: Optional[AnalysisResult] = None
    if analyze and parse_result.ast is not None:
        analyzer = analyze_scopes(parse_result.ast, ambient=options.ambient)
        if not options.collect_undeclared:
            for _, scope in analyzer.scopes():
                scope.undeclared.clear()
        analysis_result = AnalysisResult(
            source_name=source_name, root=parse_result.ast, analyzer=analyzer
        )
        logger.info(
            "{}: {} scopes, {} bindings",
            source_name,
            sum(1 for _ in analysis_result.scopes()),
            sum(1 for _ in analysis_result.bindings()),
        )

    return FrontEndResult(parse=parse_result, analysis=analysis_result)


def _persist_parse(cache_dir: Union[str, Path], parse_result: ParseResult) -> None:
    """Store the raw parse output to disk for reuse in subsequent runs."""
    path = Path(cache_dir)
    path.mkdir(parents=True, exist_ok=True)
    cache_file = path / f"{parse_result.source_hash}.json"
    cache_file.write_text(parse_result.to_json(), encoding="utf-8")


__all__ = ["AnalysisOptions", "AnalysisResult", "FrontEndResult", "run_frontend"]
