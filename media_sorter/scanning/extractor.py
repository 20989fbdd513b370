import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .. import config
from ..exceptions import FileAccessError
from ..metadata.extract import ExifMetadataReader
from ..metadata.media_types import MimeTypeLookup
from ..models import CoarseType, Failure, FileDescriptor
from ..tasks import run_tasks
from .filesystem import LocalFileSystem


def split_name(base_name: str) -> Tuple[str, str]:
    """
    Splits a file name into (group_key, extension).

    The key is everything before the first dot, the extension everything
    after the last one: "DSC0001.edited.jpg" -> ("DSC0001", "jpg").
    A single leading dot belongs to the name, so ".profile" keeps its key.
    """
    prefix = ''
    rest = base_name
    if rest.startswith('.') and len(rest) > 1:
        prefix, rest = '.', rest[1:]

    parts = rest.split('.')
    key = prefix + parts[0]
    extension = parts[-1] if len(parts) > 1 else ''
    return key or base_name, extension


@dataclass
class ExtractionResult:
    descriptors: List[FileDescriptor] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


class FileInfoExtractor:
    def __init__(self,
                 filesystem: Optional[LocalFileSystem] = None,
                 metadata: Optional[ExifMetadataReader] = None,
                 mime_types: Optional[MimeTypeLookup] = None,
                 max_workers: int = config.DEFAULT_MAX_WORKERS):
        self.fs = filesystem or LocalFileSystem()
        self.metadata = metadata or ExifMetadataReader()
        self.mime_types = mime_types or MimeTypeLookup()
        self.max_workers = max_workers

    def extract(self, path: Path) -> FileDescriptor:
        """
        Builds the descriptor for one file.

        Raises FileAccessError if the file cannot be statted or read, and
        MetadataError if a JPEG/TIFF carries EXIF data exifread cannot parse.
        """
        path = Path(path).absolute()
        base_name = path.name
        group_key, extension = split_name(base_name)
        mime_type = self.mime_types.mime_for(extension)

        try:
            st = self.fs.stat(path)
        except OSError as e:
            raise FileAccessError(f"Cannot stat {path}: {e}") from e

        captured_at = None
        if mime_type in config.CAPTURE_MIME_TYPES:
            try:
                # exifread seeks to the tag blocks it needs instead of loading the file
                with self.fs.open_binary(path) as fh:
                    captured_at = self.metadata.parse_capture_date(fh)
            except OSError as e:
                raise FileAccessError(f"Cannot read {path}: {e}") from e

        return FileDescriptor(
            group_key=group_key,
            base_name=base_name,
            extension=extension,
            source_path=path,
            mime_type=mime_type,
            coarse_type=CoarseType.from_mime(mime_type),
            created_at=st.created_at,
            modified_at=st.modified_at,
            captured_at=captured_at,
        )

    def extract_all(self, paths: List[Path], progress=None,
                    cancel_event: Optional[threading.Event] = None) -> ExtractionResult:
        """
        Extracts every path in parallel. Failures are collected, not raised;
        descriptors come back in the order of `paths`.
        """
        def work(path):
            try:
                return self.extract(path)
            finally:
                if progress is not None:
                    progress.increment()

        results = run_tasks(paths, work, max_workers=self.max_workers, cancel_event=cancel_event)

        failures = []
        for path, error in results.failed:
            logging.error(f"Failed to inspect {path}: {error}")
            failures.append(Failure(path=Path(path), error=error))

        return ExtractionResult(
            descriptors=results.succeeded,
            failures=failures,
            skipped=[Path(p) for p in results.skipped],
        )
