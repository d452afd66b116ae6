"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.text import Text

from tplctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from tplctl.services.result import ServiceResult

Renderer = Callable[..., None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    path = result.data.get("path")
    return str(path) if path else f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="tpl.ok"), Text(f"  {result.op}", style="tpl.op"))


def _field(console: Console, key: str, value: Any) -> None:
    style = "tpl.path" if key == "path" else ""
    console.print(Text(f"  {key}: ", style="tpl.key"), Text(str(value), style=style), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print stage timings (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for stage in result.meta.get("stages", []):
        duration = stage.get("duration_ms", 0.0)
        style = "bold red" if duration > 10_000 else "yellow" if duration > 1000 else "dim"
        console.print(f"    [{style}]{duration:>10.2f}ms[/{style}]  {stage.get('name', '?')}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="tpl.error"),
        Text(f"  {result.op}", style="tpl.op"),
        " — ",
        Text(msg),
    )
    if err and err.code == "INVALID_PROJECT_NAME":
        console.print("\nPlease choose a different project name.")
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))
    if verbose:
        _render_meta(console, result)


# ── Operation renderers ───────────────────────────────────────────────


def _render_create(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Success banner, available scripts, and next steps."""
    d = result.data
    name = d.get("name", "")
    console.print(
        Text("Success!", style="tpl.ok"),
        "Created",
        Text(name, style="tpl.name"),
        "at",
        Text(str(d.get("path", "")), style="tpl.path"),
    )
    template = d.get("template", "")
    version = d.get("template_version")
    _field(console, "template", f"{template}@{version}" if version else template)
    _field(console, "language", d.get("language", ""))

    scripts = d.get("scripts", [])
    if scripts:
        console.print()
        console.print("Inside that directory, you can run several commands:")
        for script in scripts:
            console.print(Text(f"    {script}", style="tpl.script"))

    console.print()
    console.print(Text(" - cd", style="tpl.script"), name)
    console.print(Text(" - check the README.md", style="tpl.script"))

    if verbose:
        files = d.get("files_created", [])
        _field(console, "files_created", len(files))
        for f in files:
            console.print(Text(f"    {f}"))
        _render_meta(console, result)


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("canonical_name", "resolution", "install_spec", "name", "version", "language"):
        value = result.data.get(key)
        if value is not None:
            _field(console, key, value)


def _render_info(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(Text("Environment Info", style="tpl.op"))
    width = max((len(k) for k in result.data), default=0)
    for key, value in result.data.items():
        shown = Text(str(value), style="tpl.name") if value else Text("not found", style="tpl.warning")
        console.print(f"  - {key.ljust(width)}  ", shown, sep="")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "create_project": _render_create,
    "resolve_template": _render_resolve,
    "info": _render_info,
    "preflight": _render_generic,
}
