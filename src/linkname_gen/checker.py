from __future__ import annotations

import dataclasses
import json
import logging
import os
import tempfile
from pathlib import Path

from .errors import ParseError, ToolchainError, TypeCheckError
from .loader import Package
from .toolchain import run_go, run_tool

logger = logging.getLogger(__name__)


def check_package(package: Package) -> Package:
    """Type-check `package` as one compilation unit.

    Parsing and checking are delegated to a small Go helper (go/parser +
    go/types with `FakeImportC`), since only the Go toolchain can answer
    whether the package is well-formed. The returned package carries the
    top-level identifiers it defines.
    """
    directory = package.dir.resolve()
    files = [str(f.path.resolve()) for f in package.files]

    with tempfile.TemporaryDirectory(prefix="linkname-gen-check-") as td:
        helper_dir = Path(td)
        (helper_dir / "go.mod").write_text(
            "\n".join(
                [
                    "module linkname_gen.checker",
                    "",
                    "go 1.18",
                    "",
                ]
            ),
            encoding="utf-8",
        )
        (helper_dir / "main.go").write_text(_checker_go_source(), encoding="utf-8")
        exe = helper_dir / ("checker.exe" if os.name == "nt" else "checker")

        run_go(["build", "-o", str(exe), "."], cwd=helper_dir)
        try:
            out = run_tool([str(exe), "-dir", str(directory), *files], cwd=directory)
        except ToolchainError as e:
            raise TypeCheckError(f"checking package: {e}") from e

    obj = _decode(out)
    stage = obj.get("stage")
    err = obj.get("error")
    if stage == "parse":
        raise ParseError(f"parsing package: {err}")
    if stage == "check":
        raise TypeCheckError(f"checking package: {err}")

    defs = obj.get("defs") or []
    if not isinstance(defs, list):
        raise TypeCheckError("checking package: malformed checker output")
    logger.debug("package %s type-checked (%d top-level definitions)", package.name, len(defs))
    return dataclasses.replace(package, defs=tuple(d for d in defs if isinstance(d, str)))


def _decode(out: str) -> dict:
    try:
        obj = json.loads(out)
    except Exception as e:  # noqa: BLE001
        raise TypeCheckError(f"failed to parse checker output: {e}\n{out}") from e
    if not isinstance(obj, dict):
        raise TypeCheckError(f"unexpected checker output: {out}")
    return obj


def _checker_go_source() -> str:
    # Keep this file stdlib-only so `go build` doesn't need network access.
    return r'''
package main

import (
	"encoding/json"
	"flag"
	"fmt"
	"go/ast"
	"go/importer"
	"go/parser"
	"go/token"
	"go/types"
	"os"
)

type outObj struct {
	Name  string   `json:"name,omitempty"`
	Defs  []string `json:"defs"`
	Stage string   `json:"stage,omitempty"`
	Error string   `json:"error,omitempty"`
}

func emit(o outObj) {
	enc := json.NewEncoder(os.Stdout)
	enc.SetEscapeHTML(false)
	_ = enc.Encode(o)
}

func main() {
	var dir string
	flag.StringVar(&dir, "dir", ".", "package directory")
	flag.Parse()

	files := flag.Args()
	if len(files) == 0 {
		fmt.Fprintln(os.Stderr, "no files to check")
		os.Exit(2)
	}

	fs := token.NewFileSet()
	astFiles := make([]*ast.File, 0, len(files))
	for _, name := range files {
		af, err := parser.ParseFile(fs, name, nil, 0)
		if err != nil {
			emit(outObj{Stage: "parse", Error: err.Error()})
			return
		}
		astFiles = append(astFiles, af)
	}

	conf := types.Config{
		Importer:    importer.ForCompiler(fs, "source", nil),
		FakeImportC: true,
	}
	info := &types.Info{Defs: map[*ast.Ident]types.Object{}}
	pkg, err := conf.Check(dir, fs, astFiles, info)
	if err != nil {
		emit(outObj{Stage: "check", Error: err.Error()})
		return
	}

	emit(outObj{Name: pkg.Name(), Defs: pkg.Scope().Names()})
}
'''
