"""Lexical scope and binding resolution for ESTree JavaScript ASTs."""

from loguru import logger

from .annotations import NodeTable
from .binding import Binding
from .errors import InvalidArgumentError
from .nodes import assigned_identifiers
from .resolver import ScopeAnalyzer, analyze_scopes
from .scope import Scope
from .walker import walk

logger.disable(__name__)

__all__ = [
    "Binding",
    "InvalidArgumentError",
    "NodeTable",
    "Scope",
    "ScopeAnalyzer",
    "analyze_scopes",
    "assigned_identifiers",
    "walk",
]
