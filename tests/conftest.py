"""
Shared fixtures: small source trees built under pytest's tmp_path.
"""

import os
import sys
import tempfile

# Keep test runs out of the user's log file; must happen before config is imported.
os.environ.setdefault("HLCLONE_LOG_PATH", os.path.join(tempfile.gettempdir(), "hlclone_tests.log"))

_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

import pytest


@pytest.fixture
def dest(tmp_path):
    d = tmp_path / "backup"
    d.mkdir()
    return d


@pytest.fixture
def photos(tmp_path):
    """photos/a.jpg and photos/sub/b.jpg"""
    root = tmp_path / "photos"
    (root / "sub").mkdir(parents=True)
    (root / "a.jpg").write_bytes(b"jpeg-a")
    (root / "sub" / "b.jpg").write_bytes(b"jpeg-b")
    return root


@pytest.fixture
def ten_files(tmp_path):
    root = tmp_path / "ten"
    root.mkdir()
    for i in range(10):
        (root / f"f{i}.txt").write_text(f"file {i}")
    return root

