import os
from pathlib import Path
from datetime import datetime, timezone

import pytest

from media_sorter.exceptions import MetadataError
from media_sorter.models import CoarseType, FileDescriptor
from media_sorter.reporting import ProgressReporter


class FakeMetadataReader:
    """
    Stands in for exifread: a file whose content is
    b"captured:<iso datetime>" has that capture date, b"corrupt" fails.
    """

    def parse_capture_date(self, fh):
        data = fh.read()
        if data == b"corrupt":
            raise MetadataError("Unreadable EXIF data: bad marker")
        if data.startswith(b"captured:"):
            return datetime.fromisoformat(data[len(b"captured:"):].decode())
        return None


def utc(year, month, day, hour=12):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


def make_file(directory, name, content=b"", modified=None):
    """Writes a file and pins its modification time (a UTC datetime)."""
    p = directory / name
    p.write_bytes(content)
    if modified is not None:
        ts = modified.timestamp()
        os.utime(p, (ts, ts))
    return p


def make_descriptor(name, coarse_type=None, modified=None, captured=None, group_key=None):
    modified = modified or utc(2023, 1, 1)
    return FileDescriptor(
        group_key=group_key or name.split(".")[0],
        base_name=name,
        extension=name.rsplit(".", 1)[-1] if "." in name else "",
        source_path=Path("/src") / name,
        mime_type=f"{coarse_type.value}/x-test" if coarse_type else None,
        coarse_type=coarse_type,
        created_at=modified,
        modified_at=modified,
        captured_at=captured,
    )


@pytest.fixture
def fake_reader():
    return FakeMetadataReader()


@pytest.fixture
def progress():
    """A progress reporter that counts but never draws."""
    return ProgressReporter(enabled=False)


@pytest.fixture
def media_dir(tmp_path):
    """
    A typical camera dump:
      IMG_0001.jpg / .dng / .edited.jpg  - one shot with RAW and an edit
      clip.mp4, song.mp3, notes.txt      - single files of each other type
      .DS_Store, ._IMG_0001.jpg, old/    - things that must be ignored
    """
    make_file(tmp_path, "IMG_0001.jpg", b"captured:2023-05-01T12:00:00+00:00", utc(2023, 6, 5))
    make_file(tmp_path, "IMG_0001.dng", b"raw", utc(2023, 6, 1))
    make_file(tmp_path, "IMG_0001.edited.jpg", b"", utc(2023, 6, 2))
    make_file(tmp_path, "clip.mp4", b"video", utc(2022, 1, 10))
    make_file(tmp_path, "song.mp3", b"audio", utc(2020, 8, 15))
    make_file(tmp_path, "notes.txt", b"text", utc(2021, 3, 4))
    make_file(tmp_path, ".DS_Store", b"junk")
    make_file(tmp_path, "._IMG_0001.jpg", b"junk")
    (tmp_path / "old").mkdir()
    return tmp_path
