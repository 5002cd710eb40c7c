#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
TUI browser for hlclone using Textual, providing nnn-like navigation and selection.

Navigate with h/j/k/l, mark source directories with space, then move into
the destination directory and press 'd' to clone every marked source into it.
Escape cancels a running clone; the outcome is shown in a results screen.
"""

import asyncio
import os
import pathlib
import threading
from typing import List, Optional

from rich.panel import Panel
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Footer, Header, Static

from config import DEFAULT_START_DIRS, TUI_KEYBINDS
from core import clone
from link_index import scan_hardlinks
from logger_utils import get_logger
from models import CloneResult
from report import render_results, summarize

logger = get_logger("hlclone.tui")


def selection_path(entry: pathlib.Path) -> pathlib.Path:
    """Key a selected source by the name shown in the browser, not its symlink target."""
    return entry.absolute()


class ProgressCounter:
    """Entry counter shared by the clone worker threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self.count = 0

    def increment(self) -> int:
        with self._lock:
            self.count += 1
            return self.count


class LinkerTUI(App):
    CSS_PATH = None
    BINDINGS = TUI_KEYBINDS

    def __init__(self, start_dir: Optional[str] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        if start_dir:
            self.current_dir = pathlib.Path(start_dir)
        else:
            self.current_dir = pathlib.Path.cwd()
            for candidate in DEFAULT_START_DIRS:
                p = pathlib.Path(candidate)
                if p.is_dir():
                    self.current_dir = p
                    break
        self.selected: List[pathlib.Path] = []
        self.cursor_index = 0
        self.items: List[pathlib.Path] = []
        self.cancel_event: Optional[threading.Event] = None

    def compose(self) -> ComposeResult:
        # Linux refuses to hardlink files owned by other users unless running as root
        if os.geteuid() != 0:
            yield Static(Panel("[bold yellow]Not running as root: linking files owned by other users may be refused.[/bold yellow]",
                               style="yellow"), id="root-warning")
        yield Header(show_clock=True)
        yield DataTable(id="filetable")
        yield Static("", id="status")
        yield Footer()

    async def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.add_columns("#", "Name", "Type", "Links", "Source")
        await self.load_directory(self.current_dir)
        table.focus()

    def set_status(self, message: str):
        self.query_one("#status", Static).update(Text(message))

    def selection_status(self) -> str:
        if not self.selected:
            return "No sources selected."
        names = ", ".join(p.name for p in self.selected)
        return f"Sources ({len(self.selected)}): {names}"

    async def load_directory(self, path: pathlib.Path, preserve_cursor_index: Optional[int] = None):
        """Loads directory contents into the DataTable, optionally preserving cursor position."""
        self.current_dir = path.resolve()
        logger.debug(f"[load_directory] Loading directory: {self.current_dir}")

        index = scan_hardlinks(self.current_dir, recursive=False)
        try:
            entries = list(self.current_dir.iterdir())
            entries.sort(key=lambda p: (not p.is_dir(), p.name.lower()))
        except OSError as e:
            logger.error(f"Error listing directory {self.current_dir}: {e}")
            entries = []
        self.items = entries

        table = self.query_one(DataTable)
        table.clear()
        for idx, entry in enumerate(entries):
            info = index.get(pathlib.PurePath(entry.name))
            is_dir = entry.is_dir() and not entry.is_symlink()
            name_text = Text(entry.name)
            if is_dir:
                name_text.stylize("bold blue")
            elif info is not None and info.is_hardlink:
                name_text.stylize("magenta")
            kind = info.type.value.capitalize() if info is not None else "?"
            links = str(info.nlink) if info is not None and info.is_hardlink else ""
            selected = selection_path(entry) in self.selected
            table.add_row(
                str(idx + 1),
                name_text,
                kind,
                f"[magenta]{links}[/magenta]" if links else "",
                "[green]✓[/green]" if selected else "",
            )

        if preserve_cursor_index is not None and 0 <= preserve_cursor_index < len(entries):
            self.cursor_index = preserve_cursor_index
        elif self.cursor_index >= len(entries) or self.cursor_index < 0:
            self.cursor_index = 0
        if entries:
            table.move_cursor(row=self.cursor_index)

        self.query_one(Header).sub_title = str(self.current_dir)
        if self.cancel_event is None:
            self.set_status(self.selection_status())

    def action_move_up(self):
        if self.cursor_index > 0:
            self.cursor_index -= 1
            self.query_one(DataTable).move_cursor(row=self.cursor_index)

    def action_move_down(self):
        if self.cursor_index < len(self.items) - 1:
            self.cursor_index += 1
            self.query_one(DataTable).move_cursor(row=self.cursor_index)

    def action_go_up(self):
        parent = self.current_dir.parent
        if parent != self.current_dir:
            asyncio.create_task(self.load_directory(parent))

    def action_enter_dir(self):
        if not self.items:
            return
        entry = self.items[self.cursor_index]
        if entry.is_dir():
            asyncio.create_task(self.load_directory(entry, preserve_cursor_index=0))

    def action_toggle_select(self):
        if not self.items or self.cursor_index >= len(self.items):
            return
        entry = self.items[self.cursor_index]
        if not entry.is_dir():
            self.bell()
            return
        source = selection_path(entry)
        if source in self.selected:
            logger.debug(f"[toggle_select] Removing source: {source}")
            self.selected.remove(source)
        else:
            logger.debug(f"[toggle_select] Adding source: {source}")
            self.selected.append(source)
        if self.cursor_index < len(self.items) - 1:
            self.cursor_index += 1
        asyncio.create_task(self.load_directory(self.current_dir, preserve_cursor_index=self.cursor_index))

    def action_clear_selection(self):
        self.selected = []
        asyncio.create_task(self.load_directory(self.current_dir, preserve_cursor_index=self.cursor_index))

    def action_deploy(self):
        if not self.selected or self.cancel_event is not None:
            self.bell()
            return
        asyncio.create_task(self.run_clone(list(self.selected), self.current_dir))

    def action_cancel_clone(self):
        if self.cancel_event is not None:
            logger.info("Cancel requested from TUI.")
            self.cancel_event.set()
            self.set_status("Cancelling...")

    async def run_clone(self, sources: List[pathlib.Path], destination: pathlib.Path):
        logger.info(f"Deploying {len(sources)} selected sources to: {destination}")
        self.cancel_event = threading.Event()
        progress = ProgressCounter()
        self.set_status("Creating links...")

        def on_entry(entry, failure):
            # Called concurrently from one worker thread per source
            count = progress.increment()
            if count % 500 == 0:
                self.call_from_thread(self.set_status, f"Creating links... {count} entries")

        try:
            results = await asyncio.to_thread(clone, sources, destination,
                                              cancel_event=self.cancel_event, on_entry=on_entry)
        finally:
            self.cancel_event = None
        summary = summarize(results)
        logger.info(summary)
        self.set_status(summary)
        self.bell()
        self.selected = []
        await self.load_directory(self.current_dir, preserve_cursor_index=self.cursor_index)
        self.push_screen(ResultsModalScreen(results))

    def action_quit(self):
        if self.cancel_event is not None:
            self.cancel_event.set()
        self.exit()

    def on_unmount(self) -> None:
        logger.info("hlclone TUI session ended.")

    def on_data_table_row_highlighted(self, event) -> None:
        self.cursor_index = event.cursor_row


class ResultsModalScreen(ModalScreen):
    """Shows per-source counts and the failure list after a clone."""

    def __init__(self, results: List[CloneResult]):
        super().__init__()
        self.results = results

    def compose(self):
        yield Vertical(
            VerticalScroll(Static(render_results(self.results, failure_limit=200))),
            Button("Close", id="close"),
        )

    async def on_button_pressed(self, event):
        if event.button.id == "close":
            self.dismiss()

    async def on_key(self, event):
        if event.key in ("escape", "q", "enter"):
            self.dismiss()
            event.stop()


def main():
    import sys
    start_dir = sys.argv[1] if len(sys.argv) > 1 else None
    LinkerTUI(start_dir=start_dir).run()


if __name__ == "__main__":
    main()
