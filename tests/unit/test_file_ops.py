"""Tests for file operations."""

from pathlib import Path

from mediakit.filesystem.file_ops import (
    directory_stats,
    discard,
    ensure_dir,
    ensure_unique_destination,
    holding_path,
    move_file,
    purge,
)


class TestEnsureDir:
    """Tests for ensure_dir function."""

    def test_creates_and_is_idempotent(self, tmp_path):
        """Creating twice is not an error."""
        target = tmp_path / "a" / "b"
        ensure_dir(target)
        ensure_dir(target)
        assert target.is_dir()


class TestEnsureUniqueDestination:
    """Tests for ensure_unique_destination function."""

    def test_free_path_unchanged(self, tmp_path):
        """A free destination is returned as is."""
        dest = tmp_path / "x.jpg"
        assert ensure_unique_destination(dest) == dest

    def test_adds_counter(self, tmp_path):
        """An existing destination gets _1, then _2."""
        (tmp_path / "x.jpg").touch()
        (tmp_path / "x_1.jpg").touch()
        assert ensure_unique_destination(tmp_path / "x.jpg") == tmp_path / "x_2.jpg"

    def test_claimed_paths_are_taken(self, tmp_path):
        """Paths claimed by the batch count as taken."""
        dest = tmp_path / "x.jpg"
        assert ensure_unique_destination(dest, claimed={dest}) == tmp_path / "x_1.jpg"

    def test_owner_keeps_its_name(self, tmp_path):
        """A file already carrying the suffixed name is not renamed again."""
        (tmp_path / "x.jpg").touch()
        owner = tmp_path / "x_1.jpg"
        owner.touch()
        assert ensure_unique_destination(tmp_path / "x.jpg", owner=owner) == owner


class TestMoveFile:
    """Tests for move_file function."""

    def test_moves_file(self, tmp_path):
        """Moves file to destination, creating parents."""
        source = tmp_path / "source.jpg"
        source.write_text("content")
        dest = tmp_path / "a" / "b" / "dest.jpg"

        assert move_file(source, dest) is True
        assert not source.exists()
        assert dest.read_text() == "content"

    def test_never_overwrites(self, tmp_path):
        """An existing destination is left alone."""
        source = tmp_path / "source.jpg"
        source.write_text("new")
        dest = tmp_path / "dest.jpg"
        dest.write_text("old")

        assert move_file(source, dest) is False
        assert source.exists()
        assert dest.read_text() == "old"

    def test_returns_false_for_missing_source(self, tmp_path):
        """Returns False when source doesn't exist."""
        assert move_file(tmp_path / "nope.jpg", tmp_path / "dest.jpg") is False


class TestHoldingPath:
    """Tests for holding_path function."""

    def test_mirrors_root(self):
        """The holding layout mirrors the walked root."""
        path = holding_path(Path("/p/root/a/b.jpg"), Path("/p/_deleted"), Path("/p/root"))
        assert path == Path("/p/_deleted/root/a/b.jpg")

    def test_outside_root(self):
        """Paths outside the root keep only their name."""
        assert holding_path(Path("/x/b.jpg"), Path("/h"), Path("/p")) == Path("/h/b.jpg")


class TestPurgeAndDiscard:
    """Tests for purge and discard functions."""

    def test_purge_file_and_dir(self, tmp_path):
        """Files and directory trees are deleted."""
        f = tmp_path / "f.txt"
        f.touch()
        d = tmp_path / "d"
        (d / "sub").mkdir(parents=True)
        (d / "sub" / "x").touch()

        purge(f)
        purge(d)

        assert not f.exists()
        assert not d.exists()

    def test_discard_missing_is_silent(self, tmp_path):
        """Discarding a missing artifact does nothing."""
        discard(tmp_path / "missing.jpg")


class TestDirectoryStats:
    """Tests for directory_stats function."""

    def test_recursive_size_and_count(self, tmp_path):
        """Sizes and counts include nested files."""
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "x").write_bytes(b"1" * 100)
        (tmp_path / "y").write_bytes(b"1" * 50)

        assert directory_stats(tmp_path) == (150, 2)
