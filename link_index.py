#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Hardlink indexing utilities: inode/link-count listings and clone verification."""

import os
import pathlib
from dataclasses import dataclass
from typing import Dict, List, Optional

from models import EntryType, entry_type_of


@dataclass
class HardlinkEntry:
    path: pathlib.PurePath  # relative to the scanned root
    type: EntryType
    nlink: int
    inode: int
    device: int
    link_target: Optional[str] = None

    @property
    def is_hardlink(self) -> bool:
        # Directories always report nlink > 1, they are never hardlinks.
        return self.type is EntryType.FILE and self.nlink > 1


def scan_hardlinks(base_path: pathlib.Path, recursive: bool = True) -> Dict[pathlib.PurePath, HardlinkEntry]:
    """
    Index every object under base_path without following symlinks.

    Args:
        base_path: The root directory to scan.
        recursive: Descend into subdirectories (symlinked directories are never entered).

    Returns:
        Mapping of relative path to HardlinkEntry. Unreadable entries are left out.
    """
    base_path = pathlib.Path(base_path)
    entries = {}
    for root, dirs, files in os.walk(base_path):
        root_path = pathlib.Path(root)
        for name in dirs + files:
            full = root_path / name
            try:
                st = os.lstat(full)
                link_target = os.readlink(full) if os.path.islink(full) else None
            except OSError:
                continue  # Vanished or permission denied
            rel = full.relative_to(base_path)
            entries[rel] = HardlinkEntry(
                path=rel,
                type=entry_type_of(st.st_mode),
                nlink=st.st_nlink,
                inode=st.st_ino,
                device=st.st_dev,
                link_target=link_target,
            )
        if not recursive:
            break
    return entries


def verify_clone(source: pathlib.Path, clone_root: pathlib.Path) -> List[str]:
    """
    Compare a source tree with its clone.

    Returns a list of human-readable mismatches: entries missing from the
    clone, files that do not share an inode with their source, symlinks
    whose target text differs and entries whose type changed.
    """
    expected = scan_hardlinks(source)
    actual = scan_hardlinks(clone_root)
    problems = []
    for rel, src in sorted(expected.items()):
        dst = actual.get(rel)
        if dst is None:
            problems.append(f"{rel}: missing from clone")
        elif dst.type is not src.type:
            problems.append(f"{rel}: {src.type.value} became {dst.type.value}")
        elif src.type is EntryType.FILE and (src.inode, src.device) != (dst.inode, dst.device):
            problems.append(f"{rel}: not hardlinked to source")
        elif src.type is EntryType.SYMLINK and src.link_target != dst.link_target:
            problems.append(f"{rel}: symlink target '{dst.link_target}' != '{src.link_target}'")
        elif src.type is EntryType.DIRECTORY and (src.inode, src.device) == (dst.inode, dst.device):
            problems.append(f"{rel}: directory is the source itself")
    for rel in sorted(set(actual) - set(expected)):
        problems.append(f"{rel}: not present in source")
    return problems
