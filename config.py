# -*- coding: utf-8 -*-
"""
Central configuration for hlclone.
Contains static paths, keybinds, worker limits and other constants.
"""

import getpass
import os

# Default start directories for the TUI (in order of preference)
DEFAULT_START_DIRS = [
    os.path.expanduser("~"),
]

# Keybinds for the TUI
TUI_KEYBINDS = [
    ("h", "go_up", "Go up dir"),
    ("j", "move_down", "Move down"),
    ("k", "move_up", "Move up"),
    ("l", "enter_dir", "Enter dir"),
    ("space", "toggle_select", "Select source"),
    ("x", "clear_selection", "Clear sources"),
    ("d", "deploy", "Clone here"),
    ("escape", "cancel_clone", "Cancel"),
    ("q", "quit", "Quit"),
]

# Log file path, overridable for tests and packaging
LOG_PATH = os.environ.get("HLCLONE_LOG_PATH", f"/tmp/hlclone_{getpass.getuser()}.log")

# Upper bound on sources cloned in parallel
MAX_WORKERS = int(os.environ.get("HLCLONE_MAX_WORKERS", os.cpu_count() or 1))
