from __future__ import annotations

from typing import Sequence


def render_source(
    *,
    argv: Sequence[str],
    package_name: str,
    import_path: str,
    function_name: str,
    remote_symbol: str,
    definition: str,
) -> str:
    """Render the unformatted Go source binding `function_name` to `remote_symbol`.

    The definition is emitted verbatim; its parameter and result types are not
    checked against the remote function.
    """
    lines: list[str] = []
    lines.append(f'// Code generated by "linkname-gen {" ".join(argv)}"; DO NOT EDIT.')
    lines.append("")
    lines.append(f"package {package_name}")
    lines.append("")
    # Blank import: go:linkname is only honoured in files that import unsafe.
    lines.append('import _ "unsafe"')
    lines.append(f'import "{import_path}"')
    lines.append("")
    lines.append(f"//go:linkname {function_name} {remote_symbol}")
    lines.append(definition)
    return "\n".join(lines) + "\n"
