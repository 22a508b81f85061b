#!/usr/bin/env python3
"""
Copy (or move) JPEG files into a single export folder with flattened names.

The relative folder path of every file becomes a filename prefix, so files
from different folders don't clash. Remaining name conflicts get a suffix
like '_1', '_2', etc.

Usage examples:
    # Dry run (show what would be copied without actually copying)
    python export_to_folder.py --dry-run "/path/to/photos"

    # Copy into /path/to/photos/EXPORT
    python export_to_folder.py "/path/to/photos"

    # Move instead of copy, into a custom folder
    python export_to_folder.py --move --export-dir /data/flat "/path/to/photos"

Example:
    Before:
        /data/photos/
        ├── 2020/
        │   └── Trip/
        │       └── IMG_5.jpg
        └── IMG_5.jpg

    After:
        /data/photos/EXPORT/
        ├── 2020_Trip_IMG_5.jpg
        └── IMG_5.jpg
"""

import os
import sys
import shutil
import argparse
from pathlib import Path
from colorama import Fore, Style, init
from dotenv import load_dotenv
from tqdm import tqdm

from exif_dates.report import (
    EXPORT_SUMMARY_STATUSES, FileOutcome, OutcomeStatus, RunReport, format_outcome_line
)
from exif_dates.utils import (
    DEFAULT_EXPORT_DIR_NAME, DEFAULT_LOG_FILE, DirectoryAccessError, InvalidInputError,
    build_export_filename, find_image_files, get_unique_filename, is_within_directory,
    parse_log_level, prompt_directory, setup_logging, sort_files_by_directory,
    validate_directory
)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


def resolve_export_dir(directory, export_dir=None) -> Path:
    """Absolute export folders are used as is, names are placed inside directory"""
    export_dir = export_dir or DEFAULT_EXPORT_DIR_NAME
    export_path = Path(export_dir)
    if export_path.is_absolute():
        return export_path
    return Path(directory) / export_path


def export_file(file_path, directory, export_path, used_filenames, move=False, dry_run=False, logger=None) -> FileOutcome:
    """Copy or move one file into export_path under its flattened, conflict-free name"""
    file_path = str(file_path)

    if is_within_directory(file_path, export_path):
        return FileOutcome(OutcomeStatus.SKIPPED, file_path, reason=f"already in {Path(export_path).name}")

    try:
        relative_path = os.path.relpath(file_path, directory)
        target_filename = get_unique_filename(export_path, build_export_filename(relative_path), used_filenames)
        used_filenames.add(target_filename)
        target_path = Path(export_path) / target_filename

        if not dry_run:
            if move:
                shutil.move(file_path, str(target_path))
            else:
                shutil.copy2(file_path, str(target_path))

        if logger:
            action = "MOVE" if move else "COPY"
            prefix = "[DRY RUN] " if dry_run else ""
            logger.info(f"{prefix}EXPORT_{action}: {file_path} -> {target_path}")

        return FileOutcome(OutcomeStatus.EXPORTED, file_path, destination=target_filename)

    except OSError as e:
        if logger:
            logger.error(f"EXPORT_FAILED: {file_path} | Error: {e}")
        return FileOutcome(OutcomeStatus.ERRORED, file_path, reason=str(e))


def export_directory(directory, export_dir=None, move=False, dry_run=False, logger=None, show_progress=True) -> RunReport:
    """
    Export every JPEG below directory into one flat folder.

    Args:
        directory: Scan root; relative paths are computed against it
        export_dir: Folder name (inside directory) or absolute path, default EXPORT
        move: Move files instead of copying them
        dry_run: If True, only show what would be exported

    Raises:
        DirectoryAccessError: If the directory tree can't be enumerated
    """
    directory = Path(directory)
    export_path = resolve_export_dir(directory, export_dir)

    image_files = sort_files_by_directory(find_image_files(directory))
    total = len(image_files)

    print(f"{Fore.BLUE}Found {total} JPG files.{Style.RESET_ALL}")
    print()

    if not export_path.exists():
        if dry_run:
            print(f"{Fore.BLUE}[DRY RUN] Would create export folder: {export_path}{Style.RESET_ALL}")
        else:
            try:
                export_path.mkdir(parents=True)
            except OSError as e:
                raise DirectoryAccessError(f"Cannot create export folder '{export_path}': {e}") from e
            print(f"{Fore.CYAN}Created export folder: {export_path}{Style.RESET_ALL}")
        print()

    report = RunReport()
    used_filenames = set()  # Track filenames we're going to use

    with tqdm(total=total, desc="Exporting files", unit="files", disable=not show_progress) as pbar:
        for index, file_path in enumerate(image_files, 1):
            outcome = report.add(
                export_file(file_path, directory, export_path, used_filenames, move, dry_run, logger)
            )
            tqdm.write(format_outcome_line(outcome, index, total, dry_run))
            pbar.update(1)

    if logger:
        logger.info(f"EXPORT_COMPLETE: {directory} -> {export_path} | {report.summary_line(EXPORT_SUMMARY_STATUSES)}")

    return report


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Copy or move JPEG files into one export folder with flattened names',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        'directory',
        nargs='?',
        help='Directory to export from (prompted if omitted)'
    )

    parser.add_argument(
        '--export-dir',
        metavar='DIR',
        help=f'Export folder name or absolute path (default: $EXIF_SETTER_EXPORT_DIR or {DEFAULT_EXPORT_DIR_NAME})'
    )

    parser.add_argument(
        '--move',
        action='store_true',
        help='Move files instead of copying them'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be exported without actually copying files'
    )

    parser.add_argument(
        '--log-file',
        help=f'Log file path (default: $EXIF_SETTER_LOG_FILE or {DEFAULT_LOG_FILE})'
    )

    parser.add_argument(
        '--log-level',
        help='Log level for the log file (default: $EXIF_SETTER_LOG_LEVEL or INFO)'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable the progress bar'
    )

    args = parser.parse_args(argv)

    load_dotenv()

    export_dir = args.export_dir or os.getenv('EXIF_SETTER_EXPORT_DIR') or DEFAULT_EXPORT_DIR_NAME
    log_file = args.log_file or os.getenv('EXIF_SETTER_LOG_FILE') or DEFAULT_LOG_FILE
    log_level = parse_log_level(args.log_level or os.getenv('EXIF_SETTER_LOG_LEVEL'))

    directory = args.directory if args.directory is not None else prompt_directory()

    try:
        directory = validate_directory(directory)
    except InvalidInputError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}")
        return 1

    logger = setup_logging(log_file, log_level)

    # Show operation mode
    mode_str = "DRY RUN MODE" if args.dry_run else "LIVE MODE"
    mode_color = Fore.BLUE if args.dry_run else Fore.RED
    print(f"\n{mode_color}=== {mode_str} ==={Style.RESET_ALL}")
    if args.dry_run:
        print("Files will NOT be actually exported. Use without --dry-run to perform the export.")
    elif args.move:
        print("Files WILL be moved. Use --dry-run first to preview changes.")
    print(f"{Fore.BLUE}Scanning directory: {directory}{Style.RESET_ALL}")
    print()

    try:
        report = export_directory(directory, export_dir, args.move, args.dry_run, logger,
                                  show_progress=not args.no_progress)
    except DirectoryAccessError as e:
        print(f"{Fore.RED}Error accessing directory: {e}{Style.RESET_ALL}")
        logger.error(f"DIRECTORY_FAILED: {directory} | Error: {e}")
        return 1
    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}Export interrupted by user{Style.RESET_ALL}")
        logger.warning("Export interrupted by user")
        return 1

    report.print_summary(EXPORT_SUMMARY_STATUSES)

    if args.dry_run and report.count(OutcomeStatus.EXPORTED) > 0:
        print(f"\n{Fore.YELLOW}Run without --dry-run to actually export the files{Style.RESET_ALL}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
