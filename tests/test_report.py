"""
Tests for result rendering.
"""

from pathlib import Path, PurePath

from rich.console import Console

from models import CloneResult, EntryFailure, FailureKind
from report import failures_table, render_results, results_table, summarize


def ok_result(name="photos", succeeded=3):
    return CloneResult(Path(f"/src/{name}"), Path(f"/dst/{name}"), succeeded)


def failed_result(name="music", n=1):
    failures = [EntryFailure(PurePath(f"f{i}.mp3"), FailureKind.CROSS_DEVICE, "Invalid cross-device link")
                for i in range(n)]
    return CloneResult(Path(f"/src/{name}"), Path(f"/dst/{name}"), 2, failures)


def render(renderable) -> str:
    console = Console(record=True, width=200)
    console.print(renderable)
    return console.export_text()


def test_summarize_success():
    assert summarize([ok_result(), ok_result("docs")]) == "Successfully created hard links for 2 folder(s)"


def test_summarize_errors_lists_failed_sources_only():
    text = summarize([ok_result(), failed_result(n=3)])
    lines = text.splitlines()
    assert lines[0] == "Completed with errors:"
    assert len(lines) == 2
    assert lines[1].startswith("Failed to link music: f0.mp3: [CrossDevice]")
    assert lines[1].endswith("(+2 more)")


def test_results_table_has_row_per_source():
    table = results_table([ok_result(), failed_result()])
    assert table.row_count == 2
    out = render(table)
    assert "/src/photos" in out
    assert "PartialFailure" in out


def test_failures_table_limit():
    table = failures_table(failed_result(n=5), limit=2)
    assert table.row_count == 2
    assert "3 more not shown" in render(table)


def test_render_results_includes_failures():
    out = render(render_results([ok_result(), failed_result()]))
    assert "Failures for music" in out
    assert "f0.mp3" in out
    assert "Failures for photos" not in out
