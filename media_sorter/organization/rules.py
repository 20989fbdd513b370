from pathlib import Path
from typing import Dict, List

from .. import config
from ..exceptions import PlanConflictError
from ..models import FileDescriptor, GroupVerdict, PlanEntry


class LayoutPlanner:
    """
    Maps every group onto <root>/<Type>/<YYYY-MM-DD>/, keeping file names.
    Pure: nothing on disk is looked at or created here.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def destination_dir(self, verdict: GroupVerdict) -> Path:
        type_dir = config.TYPE_DIR_NAMES.get(verdict.resolved_type.value, config.FALLBACK_TYPE_DIR)
        return self.root / type_dir / verdict.resolved_date.strftime(config.DATE_DIR_FORMAT)

    def plan(self,
             groups: Dict[str, List[FileDescriptor]],
             verdicts: Dict[str, GroupVerdict]) -> List[PlanEntry]:
        entries = []
        used: Dict[Path, Path] = {}

        for key, members in groups.items():
            verdict = verdicts[key]
            folder = self.destination_dir(verdict)
            for descriptor in members:
                entry = PlanEntry(descriptor=descriptor, verdict=verdict, destination_dir=folder)
                # File names in one directory are unique, so this only trips on bad input
                target = entry.destination_path
                if target in used:
                    raise PlanConflictError(
                        f"{descriptor.source_path} and {used[target]} both map to {target}"
                    )
                used[target] = descriptor.source_path
                entries.append(entry)

        return entries

    @staticmethod
    def directories(entries: List[PlanEntry]) -> List[Path]:
        """Distinct destination directories in first-seen order."""
        return list(dict.fromkeys(entry.destination_dir for entry in entries))
