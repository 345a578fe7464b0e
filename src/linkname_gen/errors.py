"""Domain-specific errors for linkname-gen."""

from __future__ import annotations


class LinknameGenError(Exception):
    """Base error for linkname-gen."""


class UsageError(LinknameGenError):
    """Raised when a required flag is missing or malformed."""


class InvalidDefinitionError(UsageError):
    """Raised when -def is not a `func name(...)` signature."""


class ToolchainError(LinknameGenError):
    """Raised when a Go tool is missing or a go command fails."""


class LoadError(LinknameGenError):
    """Raised when the target package cannot be discovered or read."""


class ParseError(LoadError):
    """Raised when a source file of the package is not valid Go."""


class TypeCheckError(LinknameGenError):
    """Raised when the package does not type-check."""


class SymbolNotFoundError(LinknameGenError):
    """Raised when no direct import of the package matches the requested symbol."""


class FormatError(LinknameGenError):
    """Raised when the import-normalizing formatter rejects the generated source."""


class WriteError(LinknameGenError):
    """Raised when the generated file or the assembly stub cannot be written."""
