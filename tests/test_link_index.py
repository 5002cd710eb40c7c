"""
Tests for the hardlink index and clone verification.
"""

import os
import shutil
from pathlib import PurePath

from core import clone
from link_index import scan_hardlinks, verify_clone
from models import EntryType


def test_scan_hardlinks_types_and_counts(photos, dest):
    os.symlink("a.jpg", photos / "alias")
    clone([photos], dest)

    index = scan_hardlinks(dest / "photos")

    assert set(index) == {PurePath("a.jpg"), PurePath("alias"), PurePath("sub"), PurePath("sub/b.jpg")}
    assert index[PurePath("a.jpg")].type is EntryType.FILE
    assert index[PurePath("a.jpg")].is_hardlink
    assert index[PurePath("a.jpg")].nlink == 2
    assert index[PurePath("sub")].type is EntryType.DIRECTORY
    assert not index[PurePath("sub")].is_hardlink
    assert index[PurePath("alias")].type is EntryType.SYMLINK
    assert index[PurePath("alias")].link_target == "a.jpg"


def test_scan_hardlinks_non_recursive(photos):
    index = scan_hardlinks(photos, recursive=False)
    assert set(index) == {PurePath("a.jpg"), PurePath("sub")}


def test_verify_clone_clean(photos, dest):
    clone([photos], dest)
    assert verify_clone(photos, dest / "photos") == []


def test_verify_clone_detects_copies_and_missing(photos, dest):
    clone([photos], dest)
    target = dest / "photos"
    os.unlink(target / "a.jpg")
    shutil.copy2(photos / "a.jpg", target / "a.jpg")
    os.unlink(target / "sub" / "b.jpg")
    (target / "extra").write_text("x")

    problems = verify_clone(photos, target)

    assert "a.jpg: not hardlinked to source" in problems
    assert f"{PurePath('sub/b.jpg')}: missing from clone" in problems
    assert "extra: not present in source" in problems
