from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class CoarseType(str, Enum):
    IMAGE = 'image'
    VIDEO = 'video'
    AUDIO = 'audio'
    OTHER = 'other'

    @classmethod
    def from_mime(cls, mime_type: Optional[str]) -> Optional["CoarseType"]:
        """Maps the primary segment of a MIME type ("image/jpeg" -> IMAGE)."""
        if not mime_type:
            return None
        primary = mime_type.split('/', 1)[0].lower()
        try:
            return cls(primary)
        except ValueError:
            return cls.OTHER


def coalesce(*values):
    """Returns the first value that is not None (falsy values count)."""
    for value in values:
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class FileDescriptor:
    """
    Represents a file found in the working directory.
    """
    group_key: str
    base_name: str
    extension: str
    source_path: Path
    mime_type: Optional[str]
    coarse_type: Optional[CoarseType]
    created_at: datetime
    modified_at: datetime

    # Only filled for formats that carry EXIF (JPEG, TIFF)
    captured_at: Optional[datetime] = None

    @property
    def effective_at(self) -> datetime:
        # Capture time survives copies that reset the modification time
        return coalesce(self.captured_at, self.modified_at)


@dataclass(frozen=True)
class GroupVerdict:
    resolved_type: CoarseType
    resolved_date: date


@dataclass(frozen=True)
class PlanEntry:
    descriptor: FileDescriptor
    verdict: GroupVerdict
    destination_dir: Path

    @property
    def destination_path(self) -> Path:
        return self.destination_dir / self.descriptor.base_name


@dataclass(frozen=True)
class Failure:
    path: Path
    error: BaseException

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


@dataclass
class OrganizationPlan:
    entries: List[PlanEntry]
    groups: Dict[str, List[FileDescriptor]]
    verdicts: Dict[str, GroupVerdict]
    # With --skip-errors: the unreadable files, and the readable members of their groups
    failures: List[Failure] = field(default_factory=list)
    left_in_place: List[FileDescriptor] = field(default_factory=list)


@dataclass
class MoveReport:
    moved: List[PlanEntry] = field(default_factory=list)
    failed: List[Failure] = field(default_factory=list)
    skipped: List[PlanEntry] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.skipped
