"""Tests for task building and destination naming."""

from datetime import datetime
from pathlib import Path

from mediakit.config.presets import get_preset
from mediakit.models.entry import FileEntry, MediaKind
from mediakit.models.task import Decision, Operation, TaskDescriptor
from mediakit.pipeline.builder import (
    ExistsPolicy,
    TaskBuilder,
    compress_destination,
    index_tasks,
    organize_destination,
    rename_destination,
    thumbnail_destination,
    thumbnail_directory,
    transcode_destination,
)

PREFIXES = {MediaKind.IMAGE: "IMG_", MediaKind.RAW: "DSC_", MediaKind.VIDEO: "VID_"}


class TestTaskBuilder:
    """Tests for TaskBuilder collision handling."""

    def test_free_destination(self, tmp_path, make_file, entry_for):
        """A free destination is used as is and claimed."""
        source = make_file(tmp_path / "a.jpg")
        builder = TaskBuilder(Operation.MOVE)
        task = builder.build(entry_for(source), destination=tmp_path / "b.jpg", params={"x": 1})

        assert task.destination == tmp_path / "b.jpg"
        assert task.params == {"x": 1}
        assert tmp_path / "b.jpg" in builder.claimed

    def test_unselected(self, tmp_path, make_file, entry_for):
        """Unselected decisions produce no task."""
        source = make_file(tmp_path / "a.jpg")
        builder = TaskBuilder(Operation.REMOVE)
        assert builder.build(entry_for(source), Decision(0, False)) is None
        assert builder.skipped == []

    def test_purge_has_no_destination(self, tmp_path, make_file, entry_for):
        """Removal without destination builds a purge task."""
        source = make_file(tmp_path / "a.jpg")
        task = TaskBuilder(Operation.REMOVE).build(entry_for(source), Decision(0, True))
        assert task.destination is None

    def test_self_overwrite(self, tmp_path, make_file, entry_for):
        """A destination equal to the source is skipped."""
        source = make_file(tmp_path / "a.jpg")
        builder = TaskBuilder(Operation.RENAME, ExistsPolicy.DISAMBIGUATE)
        assert builder.build(entry_for(source), destination=source) is None
        assert builder.skipped[0][1] == "would overwrite self"

    def test_skip_policy(self, tmp_path, make_file, entry_for):
        """SKIP leaves existing destinations alone."""
        source = make_file(tmp_path / "a.jpg")
        make_file(tmp_path / "b.jpg")
        builder = TaskBuilder(Operation.MOVE, ExistsPolicy.SKIP)
        assert builder.build(entry_for(source), destination=tmp_path / "b.jpg") is None
        assert "destination exists" in builder.skipped[0][1]

    def test_overwrite_policy(self, tmp_path, make_file, entry_for):
        """OVERWRITE reuses an existing file but never a claimed one."""
        first = make_file(tmp_path / "a.jpg")
        second = make_file(tmp_path / "a.png")
        make_file(tmp_path / "out.jpg")
        builder = TaskBuilder(Operation.COMPRESS, ExistsPolicy.OVERWRITE)

        assert builder.build(entry_for(first), destination=tmp_path / "out.jpg") is not None
        assert builder.build(entry_for(second), destination=tmp_path / "out.jpg") is None

    def test_unique_within_batch(self, tmp_path, make_file, entry_for):
        """Two sources for one destination get distinct names."""
        first = make_file(tmp_path / "x" / "a.jpg")
        second = make_file(tmp_path / "y" / "a.jpg")
        builder = TaskBuilder(Operation.REMOVE, ExistsPolicy.UNIQUE)
        target = tmp_path / "held" / "a.jpg"

        one = builder.build(entry_for(first), destination=target)
        two = builder.build(entry_for(second), destination=target)

        assert one.destination == target
        assert two.destination == tmp_path / "held" / "a_1.jpg"

    def test_disambiguate_identical(self, tmp_path, make_file, entry_for):
        """Same-size existing destination is an identical duplicate."""
        source = make_file(tmp_path / "IMG_1.jpg", size=100)
        make_file(tmp_path / "IMG_2023.jpg", size=100)
        builder = TaskBuilder(Operation.RENAME, ExistsPolicy.DISAMBIGUATE)
        assert builder.build(entry_for(source), destination=tmp_path / "IMG_2023.jpg") is None
        assert "identical" in builder.skipped[0][1]

    def test_disambiguate_different(self, tmp_path, make_file, entry_for):
        """Different-size existing destination gets a numeric suffix."""
        source = make_file(tmp_path / "IMG_1.jpg", size=100)
        make_file(tmp_path / "IMG_2023.jpg", size=200)
        builder = TaskBuilder(Operation.RENAME, ExistsPolicy.DISAMBIGUATE)
        task = builder.build(entry_for(source), destination=tmp_path / "IMG_2023.jpg")
        assert task.destination == tmp_path / "IMG_2023_1.jpg"

    def test_already_named(self, tmp_path, make_file, entry_for):
        """A file already carrying the suffixed name is left alone."""
        make_file(tmp_path / "IMG_2023.jpg", size=200)
        source = make_file(tmp_path / "IMG_2023_1.jpg", size=100)
        builder = TaskBuilder(Operation.RENAME, ExistsPolicy.DISAMBIGUATE)
        assert builder.build(entry_for(source), destination=tmp_path / "IMG_2023.jpg") is None
        assert builder.skipped[0][1] == "already named"


class TestIndexTasks:
    """Tests for index_tasks function."""

    def test_indices(self):
        """Indices are contiguous from zero."""
        tasks = [TaskDescriptor(operation=Operation.MOVE, source=Path(str(i))) for i in range(3)]
        index_tasks(tasks)
        assert [(t.index, t.total) for t in tasks] == [(0, 3), (1, 3), (2, 3)]


class TestDestinations:
    """Tests for destination naming helpers."""

    def test_compress(self):
        """Compressed output sits next to the source."""
        assert compress_destination(Path("/p/a.png")) == Path("/p/a_Z4K.jpg")

    def test_thumbnail_directory(self):
        """JPEG or Photos folders become Thumbs, others get a sibling."""
        assert thumbnail_directory(Path("/p/JPEG/2020")) == Path("/p/Thumbs/2020")
        assert thumbnail_directory(Path("/p/photos")) == Path("/p/Thumbs")
        assert thumbnail_directory(Path("/p/trip")) == Path("/p/trip_thumbs")

    def test_thumbnail_destination(self):
        """Thumbnails are named <stem>_thumb.jpg."""
        assert thumbnail_destination(Path("/p/trip/a.png")) == Path("/p/trip_thumbs/a_thumb.jpg")
        assert thumbnail_destination(Path("/p/Photos/相机照片/a.jpg")) == Path("/p/Thumbs/相机小图/a_thumb.jpg")

    def test_thumbnail_output_mirrors(self):
        """With an output root the tree is mirrored."""
        result = thumbnail_destination(Path("/in/a/b/x.jpg"), root=Path("/in"), output=Path("/out"))
        assert result == Path("/out/a/b/x_thumb.jpg")

    def test_rename(self):
        """Prefix per kind plus formatted date plus lowercase extension."""
        entry = FileEntry(path=Path("/p/Photo.JPG"))
        date = datetime(2023, 5, 1, 10, 20, 30)
        result = rename_destination(entry, MediaKind.VIDEO, date, "YYYYMMDD_HHmmss", PREFIXES, "_x")
        assert result == Path("/p/VID_20230501_102030_x.jpg")

    def test_organize(self):
        """Sorting by type, size and month."""
        mtime = datetime(2022, 11, 5, 12, 0).timestamp()
        out = Path("/out")

        png = FileEntry(path=Path("/in/a.png"), size=10**7, mtime=mtime)
        small_jpg = FileEntry(path=Path("/in/b.jpg"), size=1000, mtime=mtime)
        big_jpg = FileEntry(path=Path("/in/c.jpg"), size=2 * 10**6, mtime=mtime)
        video = FileEntry(path=Path("/in/d.mp4"), size=10**8, mtime=mtime)

        assert organize_destination(png, MediaKind.IMAGE, out) == out / "pngs" / "a.png"
        assert organize_destination(small_jpg, MediaKind.IMAGE, out) == out / "pngs" / "b.jpg"
        assert organize_destination(big_jpg, MediaKind.IMAGE, out) == out / "202211" / "c.jpg"
        assert organize_destination(video, MediaKind.VIDEO, out) == out / "vids" / "202211" / "d.mp4"

    def test_transcode(self):
        """Transcoded files carry the preset prefix and format."""
        preset = get_preset("hevc_2k")
        assert transcode_destination(Path("/in/a/clip.mkv"), preset) == Path("/in/a/[SHANA] clip.mp4")
        mirrored = transcode_destination(Path("/in/a/clip.mkv"), preset, Path("/in"), Path("/out"))
        assert mirrored == Path("/out/a/[SHANA] clip.mp4")
