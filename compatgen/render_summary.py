"""Console rendering for generation runs and queries."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .model import Compilation, VendorPrefix
from .targets import Targets, is_compatible, is_partially_compatible, prefixes_for
from .version import format_version

_MAX_WARNINGS_SHOWN = 10


def _prefix_label(prefixes: VendorPrefix) -> str:
    names = [str(member.name).lower() for member in VendorPrefix if member and member in prefixes]
    return ", ".join(f"-{name}-" for name in names) or "none"


def render_summary(compilation: Compilation, written: Sequence[Path]) -> Group:
    """Render counts and outputs of a generation run as a Rich renderable group."""
    lines: list[Text] = []

    lines.append(Text(f"Browsers: {', '.join(compilation.browsers)}"))
    lines.append(
        Text(
            f"Prefixed constructs: {len(compilation.prefixes.names)} "
            f"in {len(compilation.prefixes.groups)} groups"
        )
    )
    lines.append(
        Text(
            f"Features: {len(compilation.compat.names)} in {len(compilation.compat.groups)} groups"
        )
    )
    lines.append(Text(f"Flags: {len(compilation.flags)}"))

    if written:
        lines.append(Text(""))
        lines.append(Text("Artifacts", style="bold"))
        for path in written:
            lines.append(Text(f"  {path}"))

    warnings = compilation.warnings
    if warnings:
        lines.append(Text(""))
        lines.append(Text(f"Warnings ({len(warnings)})", style="bold yellow"))
        for warning in warnings[:_MAX_WARNINGS_SHOWN]:
            lines.append(Text(f"  {warning}", style="dim"))
        if len(warnings) > _MAX_WARNINGS_SHOWN:
            lines.append(Text(f"  ... {len(warnings) - _MAX_WARNINGS_SHOWN} more", style="dim"))

    return Group(Panel(Group(*lines), border_style="blue", title="compatgen"))


def render_query(compilation: Compilation, name: str, targets: Targets) -> Group:
    """Render what the compiled tables say about ``name`` for ``targets``."""
    lines: list[Text] = []
    target_text = ", ".join(
        f"{browser} {format_version(version)}" for browser, version in targets.items()
    )
    lines.append(Text(f"Targets: {target_text}"))

    found = False
    if name in compilation.prefixes.names:
        found = True
        prefixes = prefixes_for(compilation.prefixes, name, targets)
        lines.append(Text(f"Prefixes: {_prefix_label(prefixes)}"))

    if name in compilation.compat.names:
        found = True
        full = is_compatible(compilation.compat, name, targets)
        partial = is_partially_compatible(compilation.compat, name, targets)
        lines.append(Text(f"Compatible: {'yes' if full else 'no'}"))
        lines.append(Text(f"Partially compatible: {'yes' if partial else 'no'}"))

    if not found:
        lines.append(Text("Not a tracked construct or feature.", style="dim"))

    return Group(Panel(Group(*lines), border_style="blue", title=name))
