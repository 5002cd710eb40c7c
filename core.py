#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Core hardlink cloning logic: mirror directory trees, hardlinking every file."""

import os
import pathlib
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional

from config import MAX_WORKERS
from logger_utils import get_logger
from models import (
    CloneResult,
    EntryFailure,
    EntryType,
    FailureKind,
    TreeEntry,
    classify_os_error,
    entry_type_of,
)

logger = get_logger("hlclone.core")

ROOT = pathlib.PurePath(".")

EntryCallback = Callable[[TreeEntry, Optional[EntryFailure]], None]


def _list_dir(path) -> List[str]:
    # Sorted so that traversal and failure order are reproducible.
    return sorted(os.listdir(path))


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)


class TreeCloner:
    """
    Clones one source directory to ``destination / source.name``.

    Directories are created, regular files are hardlinked, symlinks are
    recreated with the same target text and anything else is reported as
    unsupported. Filesystem errors never escape: each one is logged and
    recorded against the entry it happened on, and the walk carries on
    with the next sibling.
    """

    def __init__(self, source, destination, cancel_event: Optional[threading.Event] = None,
                 on_entry: Optional[EntryCallback] = None):
        self.source = pathlib.Path(os.path.abspath(source))
        self.destination = pathlib.Path(os.path.abspath(destination))
        self.target = self.destination / self.source.name
        self.cancel_event = cancel_event
        self.on_entry = on_entry
        self.result = CloneResult(source=self.source, target=self.target)

    # --- Bookkeeping ---

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _succeed(self, entry: TreeEntry):
        self.result.succeeded += 1
        if self.on_entry:
            self.on_entry(entry, None)

    def _fail(self, entry: TreeEntry, kind: FailureKind, reason: str):
        failure = EntryFailure(entry.path, kind, reason)
        self.result.failures.append(failure)
        if self.on_entry:
            self.on_entry(entry, failure)

    def _reject(self, kind: FailureKind, reason: str):
        logger.error(f"Skipping source '{self.source}': {reason}")
        self.result.failures.append(EntryFailure(ROOT, kind, reason))

    # --- Source-level checks ---

    def _check_preconditions(self) -> Optional[List[str]]:
        """Validate the source and return its listing, or None if rejected."""
        src, dst = self.source, self.destination
        if not src.is_dir():
            self._reject(FailureKind.INVALID_INPUT, f"Source '{src}' does not exist or is not a directory.")
            return None
        if not dst.is_dir():
            self._reject(FailureKind.INVALID_INPUT, f"Destination '{dst}' does not exist or is not a directory.")
            return None
        if not src.name:
            self._reject(FailureKind.INVALID_INPUT, f"Source '{src}' has no base name to clone under.")
            return None
        real_src, real_dst = src.resolve(), dst.resolve()
        if real_src == real_dst:
            self._reject(FailureKind.INVALID_INPUT, "Source and destination are the same directory.")
            return None
        if real_src in real_dst.parents:
            self._reject(FailureKind.INVALID_INPUT, f"Destination '{dst}' is inside the source.")
            return None
        if real_dst in real_src.parents:
            self._reject(FailureKind.INVALID_INPUT, f"Source '{src}' is inside the destination.")
            return None
        if os.path.lexists(self.target):
            self._reject(FailureKind.DESTINATION_EXISTS, f"Target '{self.target}' already exists.")
            return None
        try:
            return _list_dir(src)
        except OSError as e:
            self._reject(FailureKind.INVALID_INPUT, f"Cannot read source '{src}': {_reason(e)}")
            return None

    def _create_root(self) -> bool:
        try:
            os.mkdir(self.target)
        except FileExistsError:
            self._reject(FailureKind.DESTINATION_EXISTS, f"Target '{self.target}' already exists.")
            return False
        except OSError as e:
            logger.error(f"Failed to create directory '{self.target}': {e}")
            self._fail(TreeEntry(ROOT, EntryType.DIRECTORY), classify_os_error(e), _reason(e))
            return False
        logger.info(f"Created directory '{self.target}'")
        return True

    # --- Per-entry handlers ---

    def _clone_directory(self, entry: TreeEntry, src: pathlib.Path, dst: pathlib.Path) -> List[str]:
        """Create one directory and return its children, or [] if its subtree is skipped."""
        try:
            children = _list_dir(src)
        except OSError as e:
            logger.error(f"Failed to read directory '{src}': {e}")
            self._fail(entry, classify_os_error(e), f"Cannot read directory: {_reason(e)}")
            return []
        try:
            os.mkdir(dst)
        except OSError as e:
            logger.error(f"Failed to create directory '{dst}': {e}")
            self._fail(entry, classify_os_error(e), _reason(e))
            return []
        logger.info(f"Created directory '{dst}'")
        self._succeed(entry)
        return children

    def _link_file(self, entry: TreeEntry, src: pathlib.Path, dst: pathlib.Path):
        try:
            logger.info(f"Creating hardlink: '{src}' -> '{dst}'")
            os.link(src, dst, follow_symlinks=False)
        except OSError as e:
            logger.error(f"Failed to create hardlink '{src}' -> '{dst}': {e}")
            self._fail(entry, classify_os_error(e), _reason(e))
            return
        self._succeed(entry)

    def _copy_symlink(self, rel: pathlib.PurePath, src: pathlib.Path, dst: pathlib.Path):
        try:
            link_target = os.readlink(src)
        except OSError as e:
            logger.error(f"Failed to read symlink '{src}': {e}")
            self._fail(TreeEntry(rel, EntryType.SYMLINK), classify_os_error(e), _reason(e))
            return
        entry = TreeEntry(rel, EntryType.SYMLINK, link_target)
        try:
            logger.info(f"Creating symlink: '{dst}' -> '{link_target}'")
            os.symlink(link_target, dst)
        except OSError as e:
            logger.error(f"Failed to create symlink '{dst}': {e}")
            self._fail(entry, classify_os_error(e), _reason(e))
            return
        self._succeed(entry)

    def _mark_cancelled(self, rel: pathlib.PurePath, stack: List[pathlib.PurePath]):
        """Report an entry as cancelled and queue its descendants so they are reported too."""
        src = self.source / rel
        try:
            etype = entry_type_of(os.lstat(src).st_mode)
        except OSError:
            etype = EntryType.OTHER
        if etype is EntryType.DIRECTORY:
            try:
                stack.extend(rel / name for name in reversed(_list_dir(src)))
            except OSError as e:
                logger.warning(f"Could not list cancelled directory '{src}': {e}")
        self._fail(TreeEntry(rel, etype), FailureKind.CANCELLED, "Cancelled before this entry was created.")

    # --- Traversal ---

    def run(self) -> CloneResult:
        listing = self._check_preconditions()
        if listing is None:
            return self.result
        if self._cancelled():
            # Nothing is created; the loop below reports every entry as cancelled.
            logger.warning(f"Cancelled before cloning '{self.source}'.")
            if not listing:
                self.result.failures.append(
                    EntryFailure(ROOT, FailureKind.CANCELLED, "Cancelled before the clone started."))
        elif not self._create_root():
            return self.result
        else:
            logger.info(f"Cloning '{self.source}' -> '{self.target}'")

        # Depth-first: children are pushed in reverse so they pop in sorted order.
        stack = [pathlib.PurePath(name) for name in reversed(listing)]
        while stack:
            rel = stack.pop()
            if self._cancelled():
                self._mark_cancelled(rel, stack)
                continue
            src = self.source / rel
            dst = self.target / rel
            try:
                etype = entry_type_of(os.lstat(src).st_mode)
            except OSError as e:
                logger.error(f"Failed to stat '{src}': {e}")
                self._fail(TreeEntry(rel, EntryType.OTHER), classify_os_error(e), _reason(e))
                continue

            if etype is EntryType.DIRECTORY:
                children = self._clone_directory(TreeEntry(rel, etype), src, dst)
                stack.extend(rel / name for name in reversed(children))
            elif etype is EntryType.FILE:
                self._link_file(TreeEntry(rel, etype), src, dst)
            elif etype is EntryType.SYMLINK:
                self._copy_symlink(rel, src, dst)
            else:
                logger.error(f"Source path '{src}' is not a file, directory or symlink. Type not supported.")
                self._fail(TreeEntry(rel, etype), FailureKind.UNSUPPORTED_TYPE,
                           "Not a regular file, directory or symlink.")

        if self.result.ok:
            logger.info(f"Cloned '{self.source}': {self.result.succeeded} entries.")
        else:
            logger.warning(f"Cloned '{self.source}' with errors: {self.result.succeeded} succeeded, "
                           f"{len(self.result.failures)} failed.")
        return self.result


def clone(sources: Iterable, destination, *, cancel_event: Optional[threading.Event] = None,
          on_entry: Optional[EntryCallback] = None, max_workers: Optional[int] = None) -> List[CloneResult]:
    """
    Clone every source directory as a child of destination.

    Args:
        sources: Source directory paths. Each is cloned to destination/<basename>.
        destination: Existing directory that receives the clones.
        cancel_event: When set, remaining entries are reported as cancelled instead of created.
        on_entry: Called after each entry outcome, from the worker thread handling that source.
        max_workers: Upper bound on sources cloned in parallel (defaults to config.MAX_WORKERS).

    Returns:
        One CloneResult per source, in the order the sources were given.
    """
    sources = list(sources)
    if not sources:
        return []
    workers = max(1, min(len(sources), max_workers or MAX_WORKERS))
    logger.info(f"Cloning {len(sources)} source(s) into '{destination}' with {workers} worker(s).")

    def run_one(source):
        return TreeCloner(source, destination, cancel_event=cancel_event, on_entry=on_entry).run()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="hlclone") as pool:
        return list(pool.map(run_one, sources))
