#!/usr/bin/env python3
"""
Set EXIF Capture Dates from File Paths

Recursively scans a directory for JPEG files, takes the date from the filename
or the nearest dated parent folder and writes it into DateTime,
DateTimeOriginal and DateTimeDigitized.

Supported patterns (date at the start of a name, followed by space or '_'):
- /photos/2011 Summer/IMG_1.jpg        -> 2011-01-01 00:00:00
- /photos/2013-06 Sea/IMG_1.jpg        -> 2013-06-01 00:00:00
- /photos/2013-09-13 Party/IMG_1.jpg   -> 2013-09-13 00:00:00
- /photos/2015/2015-12-27_walk.jpg     -> 2015-12-27 00:00:00

Files resolving to the same date get consecutive timestamps (00:00:00,
00:00:01, ...) in directory/filename order, so the order of photos is kept in
gallery apps. Files that already carry the expected timestamp are left
untouched, which makes repeated runs idempotent.

Usage:
python set_dates_from_path.py /path/to/photos --dry-run
"""

import os
import sys
import argparse
import time
from colorama import Fore, Style, init
from dotenv import load_dotenv
from tqdm import tqdm

from exif_dates.date_parser import parse_date_from_path
from exif_dates.metadata import MetadataIOError, read_exif_datetime, set_image_exif_datetime
from exif_dates.report import (
    DATE_SUMMARY_STATUSES, FileOutcome, OutcomeStatus, RunReport,
    format_outcome_line, format_timestamp
)
from exif_dates.timestamps import TimestampAllocator, TimestampExhaustedError
from exif_dates.utils import (
    DEFAULT_LOG_FILE, DirectoryAccessError, InvalidInputError, find_image_files,
    parse_log_level, prompt_directory, setup_logging, sort_files_by_directory,
    validate_directory
)

# Colorama init
init(autoreset=True)

NO_DATE_REASON = "No date found in path"


def process_file(file_path: str, allocator: TimestampAllocator, dry_run: bool = False, logger=None) -> FileOutcome:
    """Process single file - resolve its date, assign a unique timestamp and write it if needed"""
    try:
        parsed_date = parse_date_from_path(file_path)

        if parsed_date is None:
            if logger:
                logger.info(f"SKIP_NO_DATE: {file_path}")
            return FileOutcome(OutcomeStatus.SKIPPED, file_path, reason=NO_DATE_REASON)

        timestamp = allocator.assign(parsed_date)

        # Same value already stored: nothing to write
        current_timestamp = read_exif_datetime(file_path)
        if current_timestamp is not None and current_timestamp == timestamp:
            if logger:
                logger.info(f"ALREADY_SET: {file_path} | {format_timestamp(timestamp)}")
            return FileOutcome(OutcomeStatus.ALREADY_SET, file_path, timestamp=timestamp)

        set_image_exif_datetime(file_path, timestamp, dry_run)
        if logger:
            prefix = "[DRY RUN] " if dry_run else ""
            logger.info(
                f"{prefix}SET_DATE: {file_path} | {format_timestamp(current_timestamp)} -> {format_timestamp(timestamp)}"
            )
        return FileOutcome(OutcomeStatus.UPDATED, file_path, timestamp=timestamp)

    except (MetadataIOError, TimestampExhaustedError, OSError) as e:
        if logger:
            logger.error(f"SET_FAILED: {file_path} | Error: {e}")
        return FileOutcome(OutcomeStatus.ERRORED, file_path, reason=str(e))


def process_directory(directory, dry_run: bool = False, logger=None, show_progress: bool = True) -> RunReport:
    """
    Set EXIF dates for every JPEG below directory

    Raises:
        DirectoryAccessError: If the directory tree can't be enumerated
    """
    image_files = sort_files_by_directory(find_image_files(directory))
    total = len(image_files)

    print(f"{Fore.BLUE}Found {total} JPG files.{Style.RESET_ALL}")
    print()

    allocator = TimestampAllocator(logger=logger)
    report = RunReport()

    with tqdm(total=total, desc="Setting dates", unit="files", disable=not show_progress) as pbar:
        for index, file_path in enumerate(image_files, 1):
            outcome = report.add(process_file(file_path, allocator, dry_run, logger))
            tqdm.write(format_outcome_line(outcome, index, total, dry_run))
            pbar.update(1)

    if logger:
        logger.info(
            f"RUN_COMPLETE: {directory} | files: {total} | dates: {allocator.bucket_count()} | "
            f"{report.summary_line(DATE_SUMMARY_STATUSES)}"
        )

    return report


def main(argv=None):
    """Main function"""
    parser = argparse.ArgumentParser(
        description='Set EXIF capture dates from folder and file names'
    )
    parser.add_argument(
        'directory',
        nargs='?',
        help='Directory to scan recursively for JPEG files (prompted if omitted)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Test mode: show what would be changed without making actual changes'
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

    # Load configuration from .env file
    load_dotenv()

    log_file = args.log_file or os.getenv('EXIF_SETTER_LOG_FILE') or DEFAULT_LOG_FILE
    log_level = parse_log_level(args.log_level or os.getenv('EXIF_SETTER_LOG_LEVEL'))

    directory = args.directory if args.directory is not None else prompt_directory()

    try:
        directory = validate_directory(directory)
    except InvalidInputError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}")
        return 1

    logger = setup_logging(log_file, log_level)

    print(f"{Fore.BLUE}Scanning directory: {directory}{Style.RESET_ALL}")
    if args.dry_run:
        print(f"{Fore.CYAN}Running in DRY RUN mode - no changes will be made{Style.RESET_ALL}")
    print()

    start_time = time.time()
    try:
        report = process_directory(directory, args.dry_run, logger, show_progress=not args.no_progress)
    except DirectoryAccessError as e:
        print(f"{Fore.RED}Error accessing directory: {e}{Style.RESET_ALL}")
        logger.error(f"DIRECTORY_FAILED: {directory} | Error: {e}")
        return 1
    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}Processing interrupted by user{Style.RESET_ALL}")
        logger.warning("Processing interrupted by user")
        return 1

    report.print_summary(DATE_SUMMARY_STATUSES)

    elapsed = time.time() - start_time
    print(f"\n{Fore.GREEN}Processing completed in {elapsed:.2f} seconds!{Style.RESET_ALL}")

    if args.dry_run:
        print(f"\n{Fore.CYAN}This was a dry run - no changes were made{Style.RESET_ALL}")
        print(f"{Fore.BLUE}Run without --dry-run to actually update EXIF dates{Style.RESET_ALL}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
