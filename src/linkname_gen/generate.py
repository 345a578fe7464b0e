"""Pipeline wiring: load -> check -> match -> emit -> format -> write."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .checker import check_package
from .emit import render_source
from .imports import ImportMatch, ListImports, SymbolRef, function_name, list_imports, match_import
from .loader import ListPackage, Package, list_package, load_package
from .writer import STUB_NAME, Formatter, default_output_path, format_or_raw, format_source, write_outputs

logger = logging.getLogger(__name__)

CheckPackage = Callable[[Package], Package]


@dataclass(frozen=True)
class GenerateRequest:
    symbol: str
    definition: str
    paths: list[str] = field(default_factory=list)
    output: str | None = None
    argv: list[str] = field(default_factory=list)  # echoed in the generated header


@dataclass(frozen=True)
class GenerateResult:
    package: Package
    match: ImportMatch
    function_name: str
    source: str
    formatted: bool
    output_path: Path
    stub_path: Path


def generate(
    request: GenerateRequest,
    *,
    list_package: ListPackage = list_package,
    check: CheckPackage = check_package,
    list_imports: ListImports = list_imports,
    formatter: Formatter = format_source,
) -> GenerateResult:
    """Produce the generated source for `request` without touching disk."""
    # Flag values are validated before any Go tool runs.
    ref = SymbolRef.parse(request.symbol)
    func_name = function_name(request.definition)

    package = load_package(request.paths, list_package=list_package)
    package = check(package)

    imports = list_imports(package.dir)
    logger.debug("package %s has %d direct imports", package.name, len(imports))
    match = match_import(ref, imports)

    raw = render_source(
        argv=request.argv,
        package_name=package.name,
        import_path=match.import_path,
        function_name=func_name,
        remote_symbol=match.remote_symbol,
        definition=request.definition,
    )
    source, formatted = format_or_raw(raw, formatter=formatter)

    output_path = Path(request.output) if request.output else default_output_path(package.dir)
    return GenerateResult(
        package=package,
        match=match,
        function_name=func_name,
        source=source,
        formatted=formatted,
        output_path=output_path,
        stub_path=package.dir / STUB_NAME,
    )


def run(
    request: GenerateRequest,
    *,
    list_package: ListPackage = list_package,
    check: CheckPackage = check_package,
    list_imports: ListImports = list_imports,
    formatter: Formatter = format_source,
) -> GenerateResult:
    """Generate and write the linkname file plus its assembly stub."""
    result = generate(
        request,
        list_package=list_package,
        check=check,
        list_imports=list_imports,
        formatter=formatter,
    )
    write_outputs(source=result.source, output_path=result.output_path, directory=result.package.dir)
    return result
