"""
Tests for the TUI helpers that run outside the Textual event loop.
"""

import os
import threading

from core import clone
from tui_browser import ProgressCounter, selection_path


def test_selection_keeps_symlinked_directory_name(photos, tmp_path, dest):
    os.symlink(photos, tmp_path / "holiday")

    source = selection_path(tmp_path / "holiday")

    assert source.name == "holiday"
    [result] = clone([source], dest)
    assert result.ok
    assert (dest / "holiday" / "a.jpg").exists()
    assert not (dest / "photos").exists()


def test_progress_counter_is_thread_safe():
    counter = ProgressCounter()

    def work():
        for _ in range(1000):
            counter.increment()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter.count == 8000
