"""linkname-gen: generate vendor-compatible go:linkname bindings."""

from __future__ import annotations

from . import errors
from .generate import GenerateRequest, GenerateResult, generate, run

__all__ = [
    "GenerateRequest",
    "GenerateResult",
    "errors",
    "generate",
    "run",
]
