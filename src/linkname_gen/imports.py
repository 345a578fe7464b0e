"""Symbol parsing and import-graph matching."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from .errors import InvalidDefinitionError, SymbolNotFoundError, UsageError
from .toolchain import run_go

logger = logging.getLogger(__name__)

ListImports = Callable[[Path], list[str]]


@dataclass(frozen=True)
class SymbolRef:
    symbol: str
    dir: str  # everything up to and including the last '/'
    selector: str  # e.g. "generator.(*Generator).goTag"

    @classmethod
    def parse(cls, symbol: str) -> "SymbolRef":
        if not symbol:
            raise UsageError("-symbol is required")
        cut = symbol.rfind("/") + 1
        ref = cls(symbol=symbol, dir=symbol[:cut], selector=symbol[cut:])
        if not ref.package_name:
            raise UsageError(f"invalid symbol: `{symbol}`")
        return ref

    @property
    def package_name(self) -> str:
        return self.selector.split(".", 1)[0]

    @property
    def package_path(self) -> str:
        return self.dir + self.package_name

    @property
    def member(self) -> str:
        """Selector text after the package name ("" when the symbol names a package)."""
        parts = self.selector.split(".", 1)
        return parts[1] if len(parts) == 2 else ""


@dataclass(frozen=True)
class ImportMatch:
    ref: SymbolRef
    import_path: str

    @property
    def remote_symbol(self) -> str:
        """The symbol as the linker sees it through the resolved import path."""
        if not self.ref.member:
            return self.import_path
        return f"{self.import_path}.{self.ref.member}"


def list_imports(directory: Path) -> list[str]:
    """Return the direct import paths of the package in `directory`, in listing order."""
    out = run_go(["list", "-f", '{{join .Imports "\\n"}}', "."], cwd=directory)
    return [ln.strip() for ln in out.splitlines() if ln.strip()]


def match_import(ref: SymbolRef, imports: Iterable[str]) -> ImportMatch:
    """Find the import path whose suffix is the symbol's package path.

    The first match in listing order wins, even when several imports share the
    same trailing segments.
    """
    for dep in imports:
        if dep.endswith(ref.package_path):
            logger.debug("symbol %s resolved through import %s", ref.symbol, dep)
            return ImportMatch(ref=ref, import_path=dep)
    raise SymbolNotFoundError(f"no such symbol: `{ref.symbol}`")


def function_name(definition: str) -> str:
    """Extract the function identifier from a `func name(...) ...` definition."""
    keyword, sep, rest = definition.partition(" ")
    if keyword != "func" or not sep:
        raise InvalidDefinitionError(f"-def must start with `func `: `{definition}`")
    name = rest.split("(", 1)[0]
    if not name or "(" not in rest:
        raise InvalidDefinitionError(f"cannot find function name in -def: `{definition}`")
    return name
