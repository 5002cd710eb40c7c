# -*- coding: utf-8 -*-
"""
Rendering of clone results for the CLI and the TUI.
"""

from typing import List, Sequence

from rich.console import Group
from rich.table import Table
from rich.text import Text

from models import CloneResult, FailureKind

# Styles per failure kind
KIND_STYLES = {
    FailureKind.INVALID_INPUT: "bold red",
    FailureKind.DESTINATION_EXISTS: "bold red",
    FailureKind.CROSS_DEVICE: "yellow",
    FailureKind.PERMISSION_DENIED: "red",
    FailureKind.NAME_COLLISION: "magenta",
    FailureKind.UNSUPPORTED_TYPE: "cyan",
    FailureKind.CANCELLED: "dim",
    FailureKind.OTHER: "red",
}


def summarize(results: Sequence[CloneResult]) -> str:
    """One status message for a whole run, as shown under the deploy button."""
    failed = [r for r in results if not r.ok]
    if not failed:
        return f"Successfully created hard links for {len(results)} folder(s)"
    lines = []
    for r in failed:
        first = r.failures[0]
        more = f" (+{len(r.failures) - 1} more)" if len(r.failures) > 1 else ""
        lines.append(f"Failed to link {r.source.name}: {first}{more}")
    return "Completed with errors:\n" + "\n".join(lines)


def results_table(results: Sequence[CloneResult]) -> Table:
    table = Table(title="Clone results")
    table.add_column("Source")
    table.add_column("Target")
    table.add_column("Processed", justify="right")
    table.add_column("Linked", justify="right", style="green")
    table.add_column("Failed", justify="right")
    table.add_column("Status")
    for r in results:
        status = Text(r.status.value, style="green" if r.ok else "red")
        failed = Text(str(len(r.failures)), style="red" if r.failures else "")
        table.add_row(Text(str(r.source)), Text(str(r.target)), str(r.processed), str(r.succeeded), failed, status)
    return table


def failures_table(result: CloneResult, limit: int = 0) -> Table:
    """Table of (relative path, kind, reason) for one source; limit=0 shows all."""
    table = Table(title=Text(f"Failures for {result.source.name}"), title_justify="left")
    table.add_column("Path")
    table.add_column("Kind")
    table.add_column("Reason")
    failures = result.failures[:limit] if limit else result.failures
    for f in failures:
        # Paths and OS messages are shown as plain text, never parsed as markup
        table.add_row(Text(str(f.path)), Text(str(f.kind), style=KIND_STYLES[f.kind]), Text(f.reason))
    if limit and len(result.failures) > limit:
        table.caption = f"{len(result.failures) - limit} more not shown"
    return table


def render_results(results: Sequence[CloneResult], failure_limit: int = 0) -> Group:
    parts: List = [results_table(results)]
    for r in results:
        if r.failures:
            parts.append(failures_table(r, limit=failure_limit))
    return Group(*parts)
