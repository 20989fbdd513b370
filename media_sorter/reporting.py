import csv
import logging
import threading
from pathlib import Path
from collections import Counter
from typing import List, Optional

from tqdm import tqdm

from .exceptions import MoveError
from .models import Failure, FileDescriptor, OrganizationPlan, PlanEntry
from . import config


class ProgressReporter:
    """
    Progress bar for one pipeline stage at a time.

    increment() is called from worker threads, so the counter is guarded.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.completed = 0
        self.total = 0
        self._bar: Optional[tqdm] = None
        self._lock = threading.Lock()

    def start(self, total: int, desc: str = ""):
        self.stop()
        with self._lock:
            self.completed = 0
            self.total = total
            self._bar = tqdm(total=total, desc=desc, disable=not self.enabled, leave=False)

    def increment(self):
        with self._lock:
            self.completed += 1
            if self._bar is not None:
                self._bar.update(1)

    def stop(self):
        with self._lock:
            if self._bar is not None:
                self._bar.close()
                self._bar = None


def format_plan_table(entries: List[PlanEntry]) -> str:
    """Fixed-width File | Class | Date table, one row per file."""
    rows = [
        (e.descriptor.base_name, e.verdict.resolved_type.value,
         e.verdict.resolved_date.strftime(config.DATE_DIR_FORMAT))
        for e in entries
    ]
    headers = ("File", "Class", "Date")
    widths = [max([len(h)] + [len(r[i]) for r in rows]) for i, h in enumerate(headers)]

    lines = [
        " | ".join(h.ljust(w) for h, w in zip(headers, widths)),
        "-+-".join("-" * w for w in widths),
    ]
    for row in rows:
        lines.append(" | ".join(col.ljust(w) for col, w in zip(row, widths)))
    return "\n".join(lines)


def format_group_summary(plan: OrganizationPlan) -> str:
    """One line per destination folder: how many groups and files land there."""
    group_counts = Counter()
    file_counts = Counter()
    for key, verdict in plan.verdicts.items():
        folder = (verdict.resolved_type, verdict.resolved_date)
        group_counts[folder] += 1
        file_counts[folder] += len(plan.groups[key])

    lines = [f"{len(plan.groups)} groups, {len(plan.entries)} files:"]
    for resolved_type, resolved_date in sorted(group_counts, key=lambda f: (f[0].value, f[1])):
        folder = (resolved_type, resolved_date)
        type_dir = config.TYPE_DIR_NAMES.get(resolved_type.value, config.FALLBACK_TYPE_DIR)
        lines.append(
            f"  {type_dir}/{resolved_date.strftime(config.DATE_DIR_FORMAT)}: "
            f"{group_counts[folder]} groups, {file_counts[folder]} files"
        )
    return "\n".join(lines)


def format_failures(title: str, failures: List[Failure]) -> str:
    lines = [f"{title} ({len(failures)}):"]
    for failure in failures:
        if isinstance(failure.error, MoveError):
            e = failure.error
            lines.append(f"  {e.source} -> {e.destination}: {e.reason}")
        else:
            lines.append(f"  {failure.path}: {failure.message}")
    return "\n".join(lines)


def format_left_in_place(title: str, descriptors: List[FileDescriptor]) -> str:
    lines = [f"{title} ({len(descriptors)}):"]
    for descriptor in descriptors:
        lines.append(f"  {descriptor.source_path}")
    return "\n".join(lines)


def write_plan_csv(entries: List[PlanEntry], output_csv: Path):
    headers = ["Source Path", "File", "Class", "Date", "Destination Path"]
    with open(output_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        for e in entries:
            writer.writerow([
                str(e.descriptor.source_path),
                e.descriptor.base_name,
                e.verdict.resolved_type.value,
                e.verdict.resolved_date.strftime(config.DATE_DIR_FORMAT),
                str(e.destination_path),
            ])
    logging.info(f"Plan written to {output_csv}")
