"""Exceptions raised by the scope analyzer."""

from __future__ import annotations

from typing import Any


class InvalidArgumentError(ValueError):
    """Raised when a public operation receives something that is not a usable node."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


__all__ = ["InvalidArgumentError"]
