"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest
from PIL import Image

from mediakit.config.context import set_context
from mediakit.models.entry import FileEntry


@pytest.fixture(autouse=True)
def reset_context():
    """Restore the default (dry run) execution context after each test."""
    yield
    set_context(None)


@pytest.fixture
def make_image():
    """Factory writing a real JPEG (or PNG) of a given size."""
    def _make(path: Path, size=(64, 48), color=(200, 30, 30), fmt="JPEG", **kwargs) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color).save(path, fmt, **kwargs)
        return path
    return _make


@pytest.fixture
def make_file():
    """Factory writing a file of an exact byte size, with an optional mtime."""
    def _make(path: Path, size: int = 1024, mtime: float = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\0" * size)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path
    return _make


@pytest.fixture
def entry_for():
    """Build a FileEntry from an existing path."""
    def _entry(path: Path, index: int = 0, total: int = 1) -> FileEntry:
        st = path.stat()
        return FileEntry(
            path=path,
            is_dir=path.is_dir(),
            size=0 if path.is_dir() else st.st_size,
            mtime=st.st_mtime,
            index=index,
            total=total,
        )
    return _entry


@pytest.fixture
def confirm_yes():
    """Confirmation prompt answering yes."""
    return lambda message: True


@pytest.fixture
def confirm_no():
    """Confirmation prompt answering no."""
    return lambda message: False
