#!/usr/bin/env python3
"""
EXIF Date Setter & File Manager

Interactive entry point for both tools:
  1. Set EXIF dates from folder/file names (set_dates_from_path.py)
  2. Copy and rename files to EXPORT folder (export_to_folder.py)

Anything not given on the command line is asked for on the console.

Usage:
python exif_setter.py
python exif_setter.py --feature 1 /path/to/photos --dry-run
"""

import os
import sys
import argparse
from colorama import Fore, Style, init
from dotenv import load_dotenv

from exif_dates.report import DATE_SUMMARY_STATUSES, EXPORT_SUMMARY_STATUSES
from exif_dates.utils import (
    DEFAULT_EXPORT_DIR_NAME, DEFAULT_LOG_FILE, DirectoryAccessError, InvalidInputError,
    parse_log_level, prompt_directory, setup_logging, validate_directory
)
from export_to_folder import export_directory
from set_dates_from_path import process_directory

init(autoreset=True)

FEATURES = {
    '1': "Set EXIF dates from folder/file names",
    '2': "Copy and rename files to EXPORT folder",
}


def prompt_feature() -> str:
    print("Select feature:")
    for key, title in FEATURES.items():
        print(f"{key}. {title}")
    return input("Enter choice (1 or 2): ")


def validate_feature(choice) -> str:
    choice = (choice or "").strip()
    if choice not in FEATURES:
        raise InvalidInputError("Invalid choice. Please enter 1 or 2.")
    return choice


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Set EXIF dates from folder/file names or export files to one folder',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('directory', nargs='?', help='Directory to process (prompted if omitted)')
    parser.add_argument('--feature', help='1 = set EXIF dates, 2 = export files (prompted if omitted)')
    parser.add_argument('--export-dir', metavar='DIR', help='Export folder name or absolute path')
    parser.add_argument('--move', action='store_true', help='Export: move files instead of copying them')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be done without changing files')
    parser.add_argument('--log-file', help=f'Log file path (default: {DEFAULT_LOG_FILE})')
    parser.add_argument('--log-level', help='Log level for the log file (default: INFO)')
    parser.add_argument('--no-progress', action='store_true', help='Disable the progress bar')

    args = parser.parse_args(argv)

    load_dotenv()

    print("EXIF Date Setter & File Manager")
    print("=================================")
    print()

    try:
        feature = validate_feature(args.feature if args.feature is not None else prompt_feature())
        print()
        directory = validate_directory(args.directory if args.directory is not None else prompt_directory())
    except InvalidInputError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}")
        return 1

    log_file = args.log_file or os.getenv('EXIF_SETTER_LOG_FILE') or DEFAULT_LOG_FILE
    log_level = parse_log_level(args.log_level or os.getenv('EXIF_SETTER_LOG_LEVEL'))
    logger = setup_logging(log_file, log_level)

    print()
    print(f"{Fore.BLUE}Scanning directory: {directory}{Style.RESET_ALL}")
    print()

    try:
        if feature == '1':
            report = process_directory(directory, args.dry_run, logger, show_progress=not args.no_progress)
            statuses = DATE_SUMMARY_STATUSES
        else:
            export_dir = args.export_dir or os.getenv('EXIF_SETTER_EXPORT_DIR') or DEFAULT_EXPORT_DIR_NAME
            report = export_directory(directory, export_dir, args.move, args.dry_run, logger,
                                      show_progress=not args.no_progress)
            statuses = EXPORT_SUMMARY_STATUSES
    except DirectoryAccessError as e:
        print(f"{Fore.RED}Error accessing directory: {e}{Style.RESET_ALL}")
        logger.error(f"DIRECTORY_FAILED: {directory} | Error: {e}")
        return 1
    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}Processing interrupted by user{Style.RESET_ALL}")
        logger.warning("Processing interrupted by user")
        return 1

    report.print_summary(statuses)

    print()
    print(f"{Fore.GREEN}Processing complete!{Style.RESET_ALL}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
