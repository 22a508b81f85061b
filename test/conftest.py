"""Shared fixtures: small JPEG files with or without EXIF dates"""

from pathlib import Path

import piexif
import pytest
from PIL import Image


def create_jpeg(output_path, creation_date=None, make=None, color='black'):
    """
    Create a small JPEG, optionally with an EXIF creation date and camera make.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    img = Image.new('RGB', (32, 24), color=color)

    zeroth = {}
    exif = {}
    if make:
        zeroth[piexif.ImageIFD.Make] = make
    if creation_date:
        date_str = creation_date.strftime('%Y:%m:%d %H:%M:%S')
        zeroth[piexif.ImageIFD.DateTime] = date_str
        exif[piexif.ExifIFD.DateTimeOriginal] = date_str
        exif[piexif.ExifIFD.DateTimeDigitized] = date_str

    if zeroth or exif:
        exif_bytes = piexif.dump({"0th": zeroth, "Exif": exif, "GPS": {}, "1st": {}, "thumbnail": None})
        img.save(output_path, format='JPEG', exif=exif_bytes, quality=95)
    else:
        img.save(output_path, format='JPEG', quality=95)

    return output_path


def create_mpo(output_path, color='black'):
    """
    Create a JPEG carrying a second, MPF-linked image, as many phone cameras do.
    Pillow opens such files as MPO.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    main_img = Image.new('RGB', (32, 24), color=color)
    preview = Image.new('RGB', (16, 12), color='white')
    main_img.save(output_path, format='MPO', save_all=True, append_images=[preview])

    return output_path


def create_corrupted_file(output_path):
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(b"This is not a JPEG image at all")
    return output_path


def scan_data(file_path):
    """Bytes from the start-of-scan marker to the end of the file"""
    data = Path(file_path).read_bytes()
    return data[data.rindex(b'\xff\xda'):]


@pytest.fixture
def jpeg_factory():
    return create_jpeg


@pytest.fixture
def photo_tree(tmp_path):
    """
    root/
      2021-06-01 Party/a.jpg, b.jpg, c.jpg
      2021-06-02 Beach/d.jpg
      2020 Old/broken.jpg   (not a real JPEG)
      misc/e.jpg            (no date anywhere)
    """
    root = tmp_path / "photos"
    for name in ("a.jpg", "b.jpg", "c.jpg"):
        create_jpeg(root / "2021-06-01 Party" / name)
    create_jpeg(root / "2021-06-02 Beach" / "d.jpg")
    create_corrupted_file(root / "2020 Old" / "broken.jpg")
    create_jpeg(root / "misc" / "e.jpg")
    return root
