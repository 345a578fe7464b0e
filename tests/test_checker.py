from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from linkname_gen.checker import check_package
from linkname_gen.errors import ParseError, ToolchainError, TypeCheckError
from linkname_gen.loader import Package, SourceFile


def _package(tmp_path: Path) -> Package:
    src = tmp_path / "main.go"
    src.write_text("package main\n\nfunc main() {}\n", encoding="utf-8")
    return Package(dir=tmp_path, name="main", files=(SourceFile(path=src, package="main"),))


def _fake_helper(payload: dict, calls: list):
    def fake_run(cmd, *args, **kwargs):  # noqa: ANN001
        calls.append((list(cmd), kwargs.get("cwd")))
        if cmd[:2] == ["go", "build"]:
            # The helper module is materialized before it is built.
            helper_dir = Path(kwargs["cwd"])
            assert (helper_dir / "go.mod").exists()
            assert "FakeImportC: true" in (helper_dir / "main.go").read_text(encoding="utf-8")
            return subprocess.CompletedProcess(cmd, 0, stdout=b"", stderr=b"")
        return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(payload).encode("utf-8"), stderr=b"")

    return fake_run


def test_check_package_records_definitions(monkeypatch, tmp_path: Path):
    calls: list = []
    monkeypatch.setattr(subprocess, "run", _fake_helper({"name": "main", "defs": ["main", "helper"]}, calls))

    pkg = _package(tmp_path)
    checked = check_package(pkg)
    assert checked.defs == ("main", "helper")
    assert checked.name == pkg.name
    assert pkg.defs == ()

    helper_cmd, helper_cwd = calls[1]
    assert helper_cmd[1:3] == ["-dir", str(tmp_path.resolve())]
    assert helper_cmd[3:] == [str((tmp_path / "main.go").resolve())]
    assert helper_cwd == str(tmp_path.resolve())


def test_check_package_parse_error(monkeypatch, tmp_path: Path):
    payload = {"stage": "parse", "error": "main.go:3:1: expected declaration", "defs": None}
    monkeypatch.setattr(subprocess, "run", _fake_helper(payload, []))
    with pytest.raises(ParseError, match="parsing package: main.go:3:1"):
        check_package(_package(tmp_path))


def test_check_package_type_error(monkeypatch, tmp_path: Path):
    payload = {"stage": "check", "error": "main.go:3:7: undefined: nope", "defs": None}
    monkeypatch.setattr(subprocess, "run", _fake_helper(payload, []))
    with pytest.raises(TypeCheckError, match="checking package: main.go:3:7: undefined: nope"):
        check_package(_package(tmp_path))


def test_check_package_garbage_output(monkeypatch, tmp_path: Path):
    def fake_run(cmd, *args, **kwargs):  # noqa: ANN001
        return subprocess.CompletedProcess(cmd, 0, stdout=b"not json", stderr=b"")

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(TypeCheckError, match="failed to parse checker output"):
        check_package(_package(tmp_path))


def test_check_package_missing_go(monkeypatch, tmp_path: Path):
    def fake_run(*args, **kwargs):  # noqa: ANN001
        raise FileNotFoundError("go")

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(ToolchainError, match=r"Go toolchain not found"):
        check_package(_package(tmp_path))
