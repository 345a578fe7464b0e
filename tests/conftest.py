from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _clear_linkname_gen_env(monkeypatch):
    # Tool overrides from the developer's shell must not leak into tests.
    for name in ("LINKNAME_GEN_GO", "LINKNAME_GEN_GOIMPORTS", "LINKNAME_GEN_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def write_go_package(pkg_dir: Path, *, name: str = "main", imports: list[str] | None = None) -> Path:
    pkg_dir.mkdir(parents=True, exist_ok=True)
    lines = [f"package {name}", ""]
    for imp in imports or []:
        lines.append(f'import _ "{imp}"')
    lines.append("")
    lines.append("//go:generate linkname-gen -symbol pkg/generator.(*Generator).goTag -def \"func goTag() string\"")
    lines.append("")
    (pkg_dir / "main.go").write_text("\n".join(lines), encoding="utf-8")
    return pkg_dir


class FakeToolchain:
    """Stands in for `go` and `goimports` behind subprocess.run."""

    def __init__(self, imports: list[str]):
        self.imports = imports
        self.calls: list[list[str]] = []
        self.format_fails = False
        self.check_error: tuple[str, str] | None = None

    def __call__(self, cmd, *args, **kwargs):  # noqa: ANN001
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        cwd = Path(kwargs.get("cwd") or ".")

        if cmd[:3] == ["go", "list", "-json"]:
            go_files = sorted(p.name for p in cwd.glob("*.go") if not p.name.endswith("_test.go"))
            return self._ok(cmd, json.dumps({"Dir": str(cwd), "GoFiles": go_files}))
        if cmd[:3] == ["go", "list", "-f"]:
            return self._ok(cmd, "\n".join(self.imports) + "\n")
        if cmd[:2] == ["go", "build"]:
            return self._ok(cmd, "")
        if Path(cmd[0]).stem == "checker":
            if self.check_error is not None:
                stage, err = self.check_error
                return self._ok(cmd, json.dumps({"stage": stage, "error": err, "defs": None}))
            return self._ok(cmd, json.dumps({"name": "main", "defs": ["main"]}))
        if cmd[0] == "goimports":
            if self.format_fails:
                return subprocess.CompletedProcess(cmd, 2, stdout=b"", stderr=b"<standard input>:9:1: expected declaration")
            return subprocess.CompletedProcess(cmd, 0, stdout=kwargs.get("input") or b"", stderr=b"")
        raise AssertionError(f"unexpected command: {cmd}")

    @staticmethod
    def _ok(cmd, out: str):  # noqa: ANN001
        return subprocess.CompletedProcess(cmd, 0, stdout=out.encode("utf-8"), stderr=b"")


@pytest.fixture
def fake_toolchain(monkeypatch):
    fake = FakeToolchain(imports=["fmt", "vendor/pkg/generator", "os"])
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def make_go_package():
    return write_go_package
