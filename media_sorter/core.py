import logging
import threading
from pathlib import Path
from typing import Optional

from . import config
from .exceptions import ExtractionFailedError, OperationCancelledError
from .metadata.extract import ExifMetadataReader
from .metadata.media_types import MimeTypeLookup
from .models import MoveReport, OrganizationPlan
from .organization.grouping import group_descriptors, reduce_groups
from .organization.mover import FileMover
from .organization.rules import LayoutPlanner
from .reporting import ProgressReporter
from .scanning.extractor import FileInfoExtractor, split_name
from .scanning.filesystem import DirectoryScanner, LocalFileSystem


class SorterApp:
    def __init__(self,
                 root: Path,
                 filesystem: Optional[LocalFileSystem] = None,
                 metadata: Optional[ExifMetadataReader] = None,
                 mime_types: Optional[MimeTypeLookup] = None,
                 progress: Optional[ProgressReporter] = None,
                 max_workers: int = config.DEFAULT_MAX_WORKERS,
                 skip_errors: bool = False):
        self.root = Path(root).absolute()
        self.fs = filesystem or LocalFileSystem()
        self.scanner = DirectoryScanner(self.fs)
        self.extractor = FileInfoExtractor(self.fs, metadata, mime_types, max_workers=max_workers)
        self.planner = LayoutPlanner(self.root)
        self.mover = FileMover(self.fs, max_workers=max_workers)
        self.progress = progress or ProgressReporter()
        self.skip_errors = skip_errors

    def build_plan(self, cancel_event: Optional[threading.Event] = None) -> OrganizationPlan:
        """
        Scan -> Extract -> Group -> Reduce -> Plan. Touches nothing on disk.

        Raises ExtractionFailedError when files could not be inspected (unless
        skip_errors is set) and OperationCancelledError when interrupted.
        """
        # --- Step 1: Scanning ---
        paths = self.scanner.scan(self.root)

        # --- Step 2: Extraction ---
        logging.info("Extracting file information...")
        self.progress.start(len(paths), desc="Inspecting")
        try:
            result = self.extractor.extract_all(paths, progress=self.progress, cancel_event=cancel_event)
        finally:
            self.progress.stop()

        if result.skipped:
            raise OperationCancelledError(f"Cancelled before {len(result.skipped)} files were inspected")

        descriptors = result.descriptors
        left_in_place = []
        if result.failures:
            if not self.skip_errors:
                raise ExtractionFailedError(result.failures)
            # Leave the whole group in place so a primary never loses its sidecars
            bad_keys = {split_name(f.path.name)[0] for f in result.failures}
            left_in_place = [d for d in descriptors if d.group_key in bad_keys]
            descriptors = [d for d in descriptors if d.group_key not in bad_keys]
            logging.warning(f"Skipping {len(bad_keys)} group(s) with unreadable files")

        # --- Step 3: Grouping & Reduction ---
        groups = group_descriptors(descriptors)
        verdicts = reduce_groups(groups)
        logging.info(f"{len(descriptors)} files in {len(groups)} groups")

        # --- Step 4: Planning ---
        entries = self.planner.plan(groups, verdicts)
        return OrganizationPlan(entries=entries, groups=groups, verdicts=verdicts, failures=result.failures,
                                left_in_place=left_in_place)

    def apply(self, plan: OrganizationPlan,
              cancel_event: Optional[threading.Event] = None) -> MoveReport:
        logging.info("Moving files...")
        self.progress.start(len(plan.entries), desc="Moving")
        try:
            report = self.mover.apply(plan.entries, progress=self.progress, cancel_event=cancel_event)
        finally:
            self.progress.stop()

        logging.info(f"Moved {len(report.moved)} of {len(plan.entries)} files.")
        return report
