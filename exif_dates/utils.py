#!/usr/bin/env python3
"""
Utility functions for exif_setter
Common helper functions for file discovery, ordering, naming and logging
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Set

# Supported image formats (JPEG only, matched case-insensitively)
IMAGE_EXTENSIONS = {'.jpg', '.jpeg'}

DEFAULT_EXPORT_DIR_NAME = "EXPORT"
DEFAULT_LOG_FILE = "exif_setter.log"


class DirectoryAccessError(Exception):
    """Raised when the source directory tree cannot be enumerated"""
    pass


def setup_logging(log_file=DEFAULT_LOG_FILE, log_level=logging.INFO):
    """Sets up logging to file and console"""
    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Setup main logger
    logger = logging.getLogger('exif_setter')
    logger.setLevel(log_level)

    # Clear existing handlers
    logger.handlers.clear()

    # File handler
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Console handler (WARNING and above only)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def parse_log_level(value: Optional[str]) -> int:
    """Converts a level name like 'debug' to a logging constant, INFO if unknown"""
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def is_image_file(file_path) -> bool:
    return Path(file_path).suffix.lower() in IMAGE_EXTENSIONS


def find_image_files(directory) -> List[str]:
    """
    Recursively find all JPEG files in directory

    Raises:
        DirectoryAccessError: If the directory or any subdirectory can't be listed
    """
    image_files = []

    def _raise_walk_error(error):
        raise DirectoryAccessError(f"Cannot access '{error.filename}': {error.strerror}") from error

    for root, dirs, files in os.walk(directory, onerror=_raise_walk_error):
        for file in files:
            if is_image_file(file):
                image_files.append(os.path.join(root, file))

    return image_files


def sort_files_by_directory(files_list):
    """
    Sorts files grouped by their containing directory

    Ordering rules:
    1. Directories are sorted lexicographically (plain string order)
    2. Within the same directory, files are sorted by filename

    Example output order:
    - /media/A/IMG_1.jpg
    - /media/A/IMG_2.jpg
    - /media/A/sub/IMG_0.jpg
    - /media/B/IMG_1.jpg

    The result is stable for an unchanged file set, which keeps timestamp
    assignment reproducible between runs.
    """
    def sort_key(file_path):
        file_path = str(file_path)
        return (os.path.dirname(file_path), os.path.basename(file_path))

    return sorted(files_list, key=sort_key)


def is_within_directory(file_path, directory) -> bool:
    """True if file_path is located inside directory (at any depth)"""
    try:
        Path(file_path).resolve().relative_to(Path(directory).resolve())
        return True
    except ValueError:
        return False


def build_export_filename(relative_path) -> str:
    """
    Flattens a path relative to the scan root into a single filename

    '2020/Trip/IMG_5.jpg' -> '2020_Trip_IMG_5.jpg'
    'IMG_5.jpg'           -> 'IMG_5.jpg'
    """
    relative_path = Path(relative_path)
    dir_parts = [part for part in relative_path.parent.parts if part not in ('', '.')]
    if not dir_parts:
        return relative_path.name
    return f"{'_'.join(dir_parts)}_{relative_path.name}"


def get_unique_filename(target_dir, filename, used_filenames: Optional[Set[str]] = None) -> str:
    """
    Generate a unique filename in target directory.
    If filename exists, add suffix like '_1', '_2', etc.
    Also checks against used_filenames set to avoid conflicts during batch processing.
    """
    if used_filenames is None:
        used_filenames = set()

    target_path = Path(target_dir) / filename
    if not target_path.exists() and filename not in used_filenames:
        return filename

    # Split filename and extension
    name_part = Path(filename).stem
    ext_part = Path(filename).suffix

    counter = 1
    while True:
        new_filename = f"{name_part}_{counter}{ext_part}"
        new_target_path = Path(target_dir) / new_filename
        if not new_target_path.exists() and new_filename not in used_filenames:
            return new_filename
        counter += 1


class InvalidInputError(Exception):
    """Raised for unusable user input (empty path, missing directory, bad menu choice)"""
    pass


def validate_directory(directory_path) -> Path:
    """
    Checks a user supplied directory path

    Raises:
        InvalidInputError: If the path is empty or isn't an existing directory
    """
    if directory_path is None or not str(directory_path).strip():
        raise InvalidInputError("Directory path cannot be empty.")

    directory_path = str(directory_path).strip()
    if not os.path.isdir(directory_path):
        raise InvalidInputError(f"Directory '{directory_path}' does not exist.")

    return Path(directory_path)


def prompt_directory() -> str:
    return input("Please enter the directory path: ")
