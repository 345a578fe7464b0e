from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from .errors import LoadError, ParseError, ToolchainError
from .toolchain import run_go

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"[^\W\d]\w*")


@dataclass(frozen=True)
class SourceFile:
    path: Path
    package: str  # name declared by the file's package clause


@dataclass(frozen=True)
class Package:
    dir: Path
    name: str
    files: tuple[SourceFile, ...]
    defs: tuple[str, ...] = ()  # top-level identifiers, filled by the checker


ListPackage = Callable[[Path], dict[str, Any]]


def list_package(directory: Path) -> dict[str, Any]:
    """Describe the package in `directory` with `go list -json`."""
    try:
        out = run_go(["list", "-json", "."], cwd=directory)
    except ToolchainError as e:
        raise LoadError(f"cannot process directory {directory}: {e}") from e
    try:
        obj = json.loads(out)
    except Exception as e:  # noqa: BLE001
        raise LoadError(f"failed to parse go list output for {directory}: {e}") from e
    if not isinstance(obj, dict):
        raise LoadError(f"unexpected go list output for {directory}")
    return obj


def buildable_files(directory: Path, *, list_package: ListPackage = list_package) -> list[Path]:
    """Return the buildable source files of the package in `directory`.

    Test files are not included.
    """
    info = list_package(directory)
    names: list[str] = []
    for key in ("GoFiles", "CgoFiles", "SFiles"):
        items = info.get(key) or []
        if not isinstance(items, list):
            continue
        names.extend(n for n in items if isinstance(n, str))
    return [directory / n for n in names]


def parse_package_clause(src: str, *, filename: str = "<input>") -> str:
    """Return the name declared by the package clause of a Go source file.

    Leading whitespace and comments are skipped; the first token must be the
    `package` keyword followed by an identifier.
    """
    s = src.lstrip("﻿")
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        if ch.isspace():
            i += 1
        elif s.startswith("//", i):
            nl = s.find("\n", i)
            i = n if nl == -1 else nl + 1
        elif s.startswith("/*", i):
            end = s.find("*/", i + 2)
            if end == -1:
                raise ParseError(f"parsing package: {filename}: comment not terminated")
            i = end + 2
        else:
            break

    if not s.startswith("package", i):
        raise ParseError(f"parsing package: {filename}: expected 'package'")
    i += len("package")
    rest = s[i:]
    if not rest[:1].isspace():
        raise ParseError(f"parsing package: {filename}: expected package name")
    m = _IDENT_RE.match(rest.lstrip())
    if m is None or m.group(0) == "_":
        raise ParseError(f"parsing package: {filename}: invalid package name")
    return m.group(0)


def _read_source_file(path: Path) -> SourceFile:
    try:
        src = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"parsing package: {path}: {e}") from e
    return SourceFile(path=path, package=parse_package_clause(src, filename=str(path)))


def _is_directory(name: str) -> bool:
    p = Path(name)
    if not p.exists():
        raise LoadError(f"stat {name}: no such file or directory")
    return p.is_dir()


def load_package(paths: Sequence[str], *, list_package: ListPackage = list_package) -> Package:
    """Load the single Go package named by command-line arguments.

    With no arguments the package in the current directory is loaded. One
    directory argument loads that package; anything else is treated as a list
    of files that must declare the same package.
    """
    args = list(paths) or ["."]
    if len(args) == 1 and _is_directory(args[0]):
        directory = Path(args[0])
        names = buildable_files(directory, list_package=list_package)
    else:
        directory = Path(args[0]).parent
        names = [Path(a) for a in args]

    files: list[SourceFile] = []
    for name in names:
        if name.suffix != ".go":
            continue
        files.append(_read_source_file(name))
    if not files:
        raise LoadError(f"{directory}: no buildable Go files")

    pkg_name = files[0].package
    for f in files[1:]:
        if f.package != pkg_name:
            raise LoadError(
                f"found packages {pkg_name} ({files[0].path.name}) and {f.package} ({f.path.name}) in {directory}"
            )

    logger.debug("loaded package %s from %s (%d files)", pkg_name, directory, len(files))
    return Package(dir=directory, name=pkg_name, files=tuple(files))
