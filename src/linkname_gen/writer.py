from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from .errors import FormatError, ToolchainError, WriteError
from .toolchain import goimports_binary, run_tool

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = "sym_linkname.go"
STUB_NAME = "linkname.s"

Formatter = Callable[[str], str]


def format_source(src: str) -> str:
    """Normalize imports and formatting with goimports."""
    try:
        return run_tool([goimports_binary()], stdin=src)
    except ToolchainError as e:
        raise FormatError(str(e)) from e


def format_or_raw(src: str, *, formatter: Formatter = format_source) -> tuple[str, bool]:
    """Format `src`, falling back to the raw text when the formatter fails.

    Returns the text to write and whether it was formatted.
    """
    try:
        return formatter(src), True
    except FormatError as e:
        # The user can compile the output to see the error.
        logger.warning("warning: internal error: invalid Go generated: %s", e)
        logger.warning("warning: compile the package to analyze the error")
        return src, False


def default_output_path(directory: Path) -> Path:
    return directory / DEFAULT_OUTPUT_NAME


def write_outputs(*, source: str, output_path: Path, directory: Path) -> tuple[Path, Path]:
    """Write the generated file and the empty assembly stub.

    The stub is rewritten on every run, whatever it contained before.
    """
    try:
        output_path.write_text(source, encoding="utf-8")
    except OSError as e:
        raise WriteError(f"writing output: {e}") from e

    stub_path = directory / STUB_NAME
    try:
        stub_path.write_text("", encoding="utf-8")
    except OSError as e:
        raise WriteError(f"writing assembly stub: {e}") from e

    logger.debug("wrote %s and %s", output_path, stub_path)
    return output_path, stub_path
