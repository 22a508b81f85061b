#!/usr/bin/env python3
"""
EXIF date reading and writing for JPEG files

Reading goes through Pillow. Writing rebuilds only the EXIF segment with
piexif and splices it into the file, so the compressed image data and every
other tag stay untouched.
"""

import os
import struct
from datetime import datetime
from typing import Optional

import piexif
from piexif import InvalidImageDataError
from PIL import Image

EXIF_DATETIME_FORMAT = '%Y:%m:%d %H:%M:%S'
JPEG_FORMATS = ('JPEG', 'MPO')

# Tag ids as used by Pillow's Exif mapping
EXIF_IFD_POINTER = 0x8769
TAG_DATETIME_ORIGINAL = 36867
TAG_SUBSEC_TIME_ORIGINAL = 37521


class MetadataIOError(Exception):
    """Raised when an image can't be decoded or its metadata can't be saved"""
    pass


def format_exif_datetime(value: datetime) -> str:
    return value.strftime(EXIF_DATETIME_FORMAT)


def format_subsec(value: datetime) -> Optional[str]:
    """Fraction of a second as EXIF SubSecTime digits, None for whole seconds"""
    if not value.microsecond:
        return None
    return f"{value.microsecond:06d}".rstrip('0')


def parse_exif_datetime(date_str, subsec=None) -> Optional[datetime]:
    """Parses 'YYYY:MM:DD HH:MM:SS' plus optional SubSecTime digits"""
    if isinstance(date_str, bytes):
        date_str = date_str.decode('ascii', errors='ignore')
    if not isinstance(date_str, str) or not date_str.strip():
        return None

    try:
        parsed = datetime.strptime(date_str.strip('\x00 '), EXIF_DATETIME_FORMAT)
    except ValueError:
        return None

    if isinstance(subsec, bytes):
        subsec = subsec.decode('ascii', errors='ignore')
    if isinstance(subsec, str):
        digits = subsec.strip('\x00 ')
        if digits.isdigit():
            parsed = parsed.replace(microsecond=int(digits.ljust(6, '0')[:6]))

    return parsed


def read_exif_datetime(file_path: str) -> Optional[datetime]:
    """
    Get the stored capture date (DateTimeOriginal) of an image

    Returns:
        datetime if the tag is present and well formed, None otherwise
        (including files Pillow can't open)
    """
    try:
        with Image.open(file_path) as img:
            exif = img.getexif()
            exif_ifd = exif.get_ifd(EXIF_IFD_POINTER)
            return parse_exif_datetime(
                exif_ifd.get(TAG_DATETIME_ORIGINAL),
                exif_ifd.get(TAG_SUBSEC_TIME_ORIGINAL)
            )
    except Exception:
        return None


def set_image_exif_datetime(file_path: str, creation_time: datetime, dry_run: bool = False) -> None:
    """
    Set EXIF DateTime, DateTimeOriginal and DateTimeDigitized of a JPEG

    Args:
        file_path: Path to the image file
        creation_time: DateTime to set as creation time
        dry_run: If True, only check that the image decodes

    Raises:
        MetadataIOError: If the image can't be decoded or the new EXIF can't be written
    """
    file_path = os.path.abspath(file_path)

    # Make sure the picture itself decodes before touching it
    try:
        with Image.open(file_path) as img:
            # Pillow reports JPEGs with an MPF preview image as MPO
            if img.format not in JPEG_FORMATS:
                raise MetadataIOError(f"Unsupported image format: {img.format}")
            img.load()
    except Image.DecompressionBombError as e:
        raise MetadataIOError(f"Image too large to decode: {e}") from e
    except (OSError, SyntaxError) as e:
        raise MetadataIOError(f"Failed to decode image: {e}") from e

    if dry_run:
        return

    try:
        exif_dict = piexif.load(file_path)
    except (InvalidImageDataError, ValueError, struct.error) as e:
        raise MetadataIOError(f"Failed to read EXIF: {e}") from e

    time_str = format_exif_datetime(creation_time)
    subsec_str = format_subsec(creation_time)

    exif_dict.setdefault("0th", {})[piexif.ImageIFD.DateTime] = time_str
    exif_ifd = exif_dict.setdefault("Exif", {})
    exif_ifd[piexif.ExifIFD.DateTimeOriginal] = time_str
    exif_ifd[piexif.ExifIFD.DateTimeDigitized] = time_str

    subsec_tags = (
        piexif.ExifIFD.SubSecTime,
        piexif.ExifIFD.SubSecTimeOriginal,
        piexif.ExifIFD.SubSecTimeDigitized,
    )
    for tag in subsec_tags:
        if subsec_str:
            exif_ifd[tag] = subsec_str
        else:
            exif_ifd.pop(tag, None)

    try:
        exif_bytes = piexif.dump(exif_dict)
        piexif.insert(exif_bytes, file_path)
    except (InvalidImageDataError, ValueError, TypeError, struct.error) as e:
        raise MetadataIOError(f"Failed to set EXIF date: {e}") from e
    except OSError as e:
        raise MetadataIOError(f"Failed to save image: {e}") from e
