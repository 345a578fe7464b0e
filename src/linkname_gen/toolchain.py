from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from .errors import ToolchainError

logger = logging.getLogger(__name__)


def go_binary() -> str:
    """Return the Go command to invoke.

    Override with `LINKNAME_GEN_GO`.
    """
    return os.environ.get("LINKNAME_GEN_GO") or "go"


def goimports_binary() -> str:
    """Return the import-normalizing formatter to invoke.

    Override with `LINKNAME_GEN_GOIMPORTS`.
    """
    return os.environ.get("LINKNAME_GEN_GOIMPORTS") or "goimports"


def debug_enabled() -> bool:
    return os.environ.get("LINKNAME_GEN_DEBUG") == "1"


def run_tool(cmd: list[str], *, cwd: Path | None = None, stdin: str | None = None) -> str:
    """Run an external tool and return its stdout.

    Raises ToolchainError when the program is missing or exits non-zero; the
    message carries the tool's combined output.
    """
    prog = cmd[0] if cmd else "<unknown>"
    logger.debug("running %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            input=stdin.encode("utf-8") if stdin is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=False,
            check=False,
        )
    except FileNotFoundError as e:
        if prog == go_binary():
            raise ToolchainError(
                "Go toolchain not found (`go` is missing from PATH). "
                "Install Go and ensure `go` is available on PATH, "
                "or point LINKNAME_GEN_GO at it."
            ) from e
        raise ToolchainError(f"command not found: {prog}") from e

    stdout = (proc.stdout or b"").decode("utf-8", errors="replace")
    stderr = (proc.stderr or b"").decode("utf-8", errors="replace")
    if proc.returncode != 0:
        out = "\n".join([s for s in [stdout.strip("\n"), stderr.strip("\n")] if s])
        raise ToolchainError(f"{' '.join(cmd)} failed (exit {proc.returncode})\n{out}")
    return stdout


def run_go(args: list[str], *, cwd: Path | None = None) -> str:
    return run_tool([go_binary(), *args], cwd=cwd)
