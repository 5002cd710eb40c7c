"""
Unit tests for result types and OS error classification.
"""

import errno
import os
from pathlib import Path, PurePath

import pytest

from models import (
    CloneResult,
    CloneStatus,
    EntryFailure,
    EntryType,
    FailureKind,
    classify_os_error,
    entry_type_of,
)


@pytest.mark.parametrize("err, kind", [
    (errno.EXDEV, FailureKind.CROSS_DEVICE),
    (errno.EACCES, FailureKind.PERMISSION_DENIED),
    (errno.EPERM, FailureKind.PERMISSION_DENIED),
    (errno.EROFS, FailureKind.PERMISSION_DENIED),
    (errno.EEXIST, FailureKind.NAME_COLLISION),
    (errno.ENOENT, FailureKind.OTHER),
    (errno.ENOSPC, FailureKind.OTHER),
])
def test_classify_os_error(err, kind):
    assert classify_os_error(OSError(err, "boom")) is kind


def test_classify_os_error_without_errno():
    assert classify_os_error(OSError("no errno")) is FailureKind.OTHER


def make_result(*failures, succeeded=0):
    return CloneResult(Path("/src/photos"), Path("/dst/photos"), succeeded, list(failures))


def test_success_result():
    r = make_result(succeeded=5)
    assert r.status is CloneStatus.SUCCESS
    assert r.ok and not r.aborted and not r.cancelled
    assert r.processed == 5


def test_partial_failure_result():
    r = make_result(
        EntryFailure(PurePath("a"), FailureKind.CROSS_DEVICE, "Invalid cross-device link"),
        EntryFailure(PurePath("b"), FailureKind.CANCELLED, "Cancelled"),
        succeeded=3,
    )
    assert r.status is CloneStatus.PARTIAL_FAILURE
    assert r.processed == 5
    assert r.cancelled
    assert not r.aborted
    assert [f.path for f in r.failures_of(FailureKind.CROSS_DEVICE)] == [PurePath("a")]


@pytest.mark.parametrize("kind", [FailureKind.INVALID_INPUT, FailureKind.DESTINATION_EXISTS])
def test_source_level_failures_abort(kind):
    r = make_result(EntryFailure(PurePath("."), kind, "nope"))
    assert r.aborted


def test_entry_failure_str():
    f = EntryFailure(PurePath("sub/b.jpg"), FailureKind.PERMISSION_DENIED, "Permission denied")
    assert str(f) == "sub/b.jpg: [PermissionDenied] Permission denied"


def test_entry_type_of_uses_lstat_modes(tmp_path):
    (tmp_path / "f").write_text("x")
    (tmp_path / "d").mkdir()
    os.symlink("d", tmp_path / "l")
    assert entry_type_of(os.lstat(tmp_path / "f").st_mode) is EntryType.FILE
    assert entry_type_of(os.lstat(tmp_path / "d").st_mode) is EntryType.DIRECTORY
    assert entry_type_of(os.lstat(tmp_path / "l").st_mode) is EntryType.SYMLINK
