#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Result and entry types produced by the tree cloner."""

import errno
import pathlib
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class EntryType(Enum):
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"


def entry_type_of(mode: int) -> EntryType:
    """Type tag for an lstat() mode; symlinks are never followed."""
    if stat.S_ISDIR(mode):
        return EntryType.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryType.FILE
    if stat.S_ISLNK(mode):
        return EntryType.SYMLINK
    return EntryType.OTHER


class FailureKind(Enum):
    INVALID_INPUT = "InvalidInput"
    DESTINATION_EXISTS = "DestinationExists"
    CROSS_DEVICE = "CrossDevice"
    PERMISSION_DENIED = "PermissionDenied"
    NAME_COLLISION = "NameCollision"
    UNSUPPORTED_TYPE = "UnsupportedType"
    CANCELLED = "Cancelled"
    OTHER = "Other"

    def __str__(self):
        return self.value


# Kinds detected before any mutation; they abort the whole source.
SOURCE_LEVEL_KINDS = frozenset({FailureKind.INVALID_INPUT, FailureKind.DESTINATION_EXISTS})

_PERMISSION_ERRNOS = frozenset({errno.EACCES, errno.EPERM, errno.EROFS})


class CloneStatus(Enum):
    SUCCESS = "Success"
    PARTIAL_FAILURE = "PartialFailure"


@dataclass(frozen=True)
class TreeEntry:
    path: pathlib.PurePath  # relative to the source root
    type: EntryType
    link_target: Optional[str] = None  # symlinks only, verbatim


@dataclass(frozen=True)
class EntryFailure:
    path: pathlib.PurePath
    kind: FailureKind
    reason: str

    def __str__(self):
        return f"{self.path}: [{self.kind}] {self.reason}"


@dataclass
class CloneResult:
    """
    Outcome of cloning one source directory.

    Every entry below the source root is counted exactly once, either in
    ``succeeded`` or as one of ``failures``. Failures never imply that
    already created siblings were removed.
    """
    source: pathlib.Path
    target: pathlib.Path
    succeeded: int = 0
    failures: List[EntryFailure] = field(default_factory=list)

    @property
    def status(self) -> CloneStatus:
        return CloneStatus.PARTIAL_FAILURE if self.failures else CloneStatus.SUCCESS

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def processed(self) -> int:
        return self.succeeded + len(self.failures)

    @property
    def aborted(self) -> bool:
        """True when the source was rejected before anything was created."""
        return any(f.kind in SOURCE_LEVEL_KINDS for f in self.failures)

    @property
    def cancelled(self) -> bool:
        return any(f.kind is FailureKind.CANCELLED for f in self.failures)

    def failures_of(self, kind: FailureKind) -> List[EntryFailure]:
        return [f for f in self.failures if f.kind is kind]


def classify_os_error(exc: OSError) -> FailureKind:
    """Map an OSError raised by mkdir/link/symlink/listing to a failure kind."""
    if exc.errno == errno.EXDEV:
        return FailureKind.CROSS_DEVICE
    if exc.errno in _PERMISSION_ERRNOS:
        return FailureKind.PERMISSION_DENIED
    if exc.errno == errno.EEXIST:
        return FailureKind.NAME_COLLISION
    return FailureKind.OTHER
