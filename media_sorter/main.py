import argparse
import logging
import sys
import threading
from pathlib import Path

from . import config
from .core import SorterApp
from .exceptions import ExtractionFailedError, OperationCancelledError
from .reporting import (ProgressReporter, format_failures, format_group_summary, format_left_in_place,
                        format_plan_table, write_plan_csv)


def setup_logging(verbose: bool):
    """Console logging only: a log file in the working directory would get sorted too."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Media Sorter: sort the current folder into Image/Video/Audio/Other by date",
    )

    p.add_argument("command", nargs="?", choices=["move"],
                   help="Actually move the files (default: only print the plan)")

    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("-j", "--workers", type=int, default=config.DEFAULT_MAX_WORKERS,
                   help=f"Parallel file operations (default: {config.DEFAULT_MAX_WORKERS})")
    p.add_argument("--skip-errors", action="store_true",
                   help="Leave groups with unreadable files in place instead of aborting")
    p.add_argument("--no-progress", action="store_true", help="Hide progress bars")
    p.add_argument("--report-csv", type=Path, default=None, help="Also write the plan to this CSV file")

    args = p.parse_args(argv)
    if args.workers < 1:
        p.error("--workers must be at least 1")
    return args


def run(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    root = Path.cwd()
    cancel_event = threading.Event()
    app = SorterApp(
        root,
        progress=ProgressReporter(enabled=not args.no_progress),
        max_workers=args.workers,
        skip_errors=args.skip_errors,
    )

    try:
        plan = app.build_plan(cancel_event)
    except ExtractionFailedError as e:
        print(format_failures("Files that could not be inspected", e.failures))
        logging.error("Nothing was moved. Fix or remove these files, or rerun with --skip-errors.")
        return 1
    except (KeyboardInterrupt, OperationCancelledError):
        logging.warning("Operation cancelled by user.")
        return 1
    except Exception:
        logging.exception("Fatal error while planning.")
        return 1

    if plan.failures:
        print(format_failures("Left in place (could not be inspected)", plan.failures))
    if plan.left_in_place:
        print(format_left_in_place("Left in place with them (same group)", plan.left_in_place))

    if not plan.entries:
        print("Nothing to organize.")
        return 0

    # Prints table with information about the files being moved
    print(format_plan_table(plan.entries))
    print(format_group_summary(plan))
    if args.report_csv:
        write_plan_csv(plan.entries, args.report_csv)

    conflicts = app.mover.find_conflicts(plan.entries)
    for entry in conflicts:
        logging.warning(f"{entry.destination_path} already exists; {entry.descriptor.base_name} will stay put")

    if args.command != "move":
        print('To actually move the files, add the "move" command.')
        return 0

    try:
        report = app.apply(plan, cancel_event)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user. Some files may already have been moved.")
        return 1
    except Exception:
        # Failures per file are in the report; this is a bug or a dead disk
        logging.exception("Fatal error while moving files.")
        return 1

    if report.failed:
        print(format_failures("Files that could not be moved (still in the working directory)", report.failed))
    if report.skipped:
        print(f"{len(report.skipped)} file(s) were not moved because the run was cancelled.")
    if not report.ok:
        return 1

    print("Files organized successfully!")
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
