import os
import stat
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, List

from .. import config


@dataclass(frozen=True)
class FileStat:
    is_dir: bool
    created_at: datetime
    modified_at: datetime


def _utc(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


class LocalFileSystem:
    """
    Thin wrapper over the OS calls the pipeline needs.
    Kept as an object so tests can hand the pipeline a different one.
    """

    def list_entries(self, directory: Path) -> List[Path]:
        """Immediate children of directory, sorted for a stable scan order."""
        with os.scandir(directory) as it:
            names = [e.name for e in it]
        names.sort(key=lambda n: (n.lower(), n))
        return [Path(directory) / name for name in names]

    def stat(self, path: Path) -> FileStat:
        st = os.stat(path)
        # st_birthtime exists on macOS/BSD (and Windows since 3.12); ctime elsewhere
        created = getattr(st, 'st_birthtime', None) or st.st_ctime
        return FileStat(
            is_dir=stat.S_ISDIR(st.st_mode),
            created_at=_utc(created),
            modified_at=_utc(st.st_mtime),
        )

    def open_binary(self, path: Path) -> BinaryIO:
        return open(path, 'rb')

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def make_dir(self, path: Path):
        Path(path).mkdir(parents=True, exist_ok=True)

    def rename(self, src: Path, dst: Path):
        os.rename(src, dst)


class DirectoryScanner:
    """Lists the files of a single directory that are worth organizing."""

    def __init__(self, filesystem: LocalFileSystem):
        self.fs = filesystem

    def scan(self, root: Path) -> List[Path]:
        candidates = []
        for path in self.fs.list_entries(root):
            if self.is_eligible(path):
                candidates.append(path)
        logging.info(f"Found {len(candidates)} files in {root}")
        return candidates

    def is_eligible(self, path: Path) -> bool:
        name = path.name
        if name.startswith(config.IGNORED_PREFIXES) or name in config.IGNORED_NAMES:
            logging.debug(f"Ignoring system file {name}")
            return False
        try:
            return not self.fs.stat(path).is_dir
        except OSError:
            # Let extraction report it along with the other failures
            return True
