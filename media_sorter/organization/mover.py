import logging
import threading
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional

from .. import config
from ..exceptions import MoveError
from ..models import Failure, MoveReport, PlanEntry
from ..scanning.filesystem import LocalFileSystem
from ..tasks import run_tasks
from .rules import LayoutPlanner


class FileMover:
    def __init__(self, filesystem: Optional[LocalFileSystem] = None,
                 max_workers: int = config.DEFAULT_MAX_WORKERS):
        self.fs = filesystem or LocalFileSystem()
        self.max_workers = max_workers

    def find_conflicts(self, entries: List[PlanEntry]) -> List[PlanEntry]:
        """Entries whose destination is already taken (e.g. by an earlier run)."""
        return [entry for entry in entries if self.fs.exists(entry.destination_path)]

    def apply(self, entries: List[PlanEntry], progress=None,
              cancel_event: Optional[threading.Event] = None) -> MoveReport:
        """
        Creates the destination directories, then moves every file.

        Failures are collected per file; one bad file never stops the others.
        An existing destination is never overwritten.
        """
        report = MoveReport()
        if not entries:
            logging.info("No files need moving.")
            return report

        # --- Step 1: Directories (all of them before any file moves) ---
        directories = LayoutPlanner.directories(entries)
        created = run_tasks(directories, self._make_dir, max_workers=self.max_workers,
                            cancel_event=cancel_event)
        broken_dirs: Dict[Path, BaseException] = {d: e for d, e in created.failed}
        for directory, error in broken_dirs.items():
            logging.error(f"Failed to create {directory}: {error}")

        by_dir: Dict[Path, List[PlanEntry]] = defaultdict(list)
        for entry in entries:
            error = broken_dirs.get(entry.destination_dir)
            if error is not None:
                report.failed.append(Failure(
                    path=entry.descriptor.source_path,
                    error=MoveError(entry.descriptor.source_path, entry.destination_path, error),
                ))
            elif entry.destination_dir in created.skipped:
                report.skipped.append(entry)
            else:
                by_dir[entry.destination_dir].append(entry)

        # --- Step 2: Files (directories in parallel, files of one directory in sequence) ---
        logging.info(f"Moving {sum(len(v) for v in by_dir.values())} files into {len(by_dir)} folders...")
        lock = threading.Lock()

        def move_batch(directory):
            for entry in by_dir[directory]:
                if cancel_event is not None and cancel_event.is_set():
                    with lock:
                        report.skipped.append(entry)
                    continue
                try:
                    self.move(entry)
                except MoveError as e:
                    logging.error(str(e))
                    with lock:
                        report.failed.append(Failure(path=entry.descriptor.source_path, error=e))
                    continue
                with lock:
                    report.moved.append(entry)
                if progress is not None:
                    progress.increment()

        batches = run_tasks(list(by_dir), move_batch, max_workers=self.max_workers,
                            cancel_event=cancel_event)
        for directory in batches.skipped:
            report.skipped.extend(by_dir[directory])
        if batches.failed:
            # move_batch handles MoveError itself; anything else is a bug
            raise batches.failed[0][1]

        return report

    def move(self, entry: PlanEntry):
        src = entry.descriptor.source_path
        dest = entry.destination_path
        if self.fs.exists(dest):
            raise MoveError(src, dest, "destination already exists")
        try:
            self.fs.rename(src, dest)
        except OSError as e:
            raise MoveError(src, dest, e) from e
        logging.debug(f"Moved {src} -> {dest}")

    def _make_dir(self, directory: Path):
        self.fs.make_dir(directory)
        return directory
