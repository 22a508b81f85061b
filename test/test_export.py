from pathlib import Path

import pytest

import export_to_folder
from conftest import create_jpeg
from exif_dates.report import OutcomeStatus
from exif_dates.utils import build_export_filename, get_unique_filename
from export_to_folder import export_directory, main, resolve_export_dir


@pytest.mark.parametrize("relative_path, expected", [
    ("2020/Trip/IMG_5.jpg", "2020_Trip_IMG_5.jpg"),
    ("Trip/IMG_5.jpg", "Trip_IMG_5.jpg"),
    ("IMG_5.jpg", "IMG_5.jpg"),
    ("./IMG_5.jpg", "IMG_5.jpg"),
])
def test_build_export_filename(relative_path, expected):
    assert build_export_filename(relative_path) == expected


def test_get_unique_filename_adds_counter(tmp_path):
    (tmp_path / "IMG.jpg").write_bytes(b"x")
    (tmp_path / "IMG_1.jpg").write_bytes(b"x")

    assert get_unique_filename(tmp_path, "IMG.jpg") == "IMG_2.jpg"
    assert get_unique_filename(tmp_path, "OTHER.jpg") == "OTHER.jpg"
    assert get_unique_filename(tmp_path, "OTHER.jpg", {"OTHER.jpg"}) == "OTHER_1.jpg"


def test_resolve_export_dir(tmp_path):
    assert resolve_export_dir(tmp_path) == tmp_path / "EXPORT"
    assert resolve_export_dir(tmp_path, "flat") == tmp_path / "flat"
    assert resolve_export_dir(tmp_path, str(tmp_path / "elsewhere")) == tmp_path / "elsewhere"


def test_export_flattens_and_resolves_conflicts(tmp_path):
    root = tmp_path / "photos"
    create_jpeg(root / "2020" / "Trip" / "IMG_5.jpg", color='red')
    create_jpeg(root / "2020_Trip" / "IMG_5.jpg", color='blue')
    create_jpeg(root / "IMG_5.jpg")

    report = export_directory(root, dry_run=False, show_progress=False)

    export = root / "EXPORT"
    assert sorted(p.name for p in export.iterdir()) == [
        "2020_Trip_IMG_5.jpg", "2020_Trip_IMG_5_1.jpg", "IMG_5.jpg"
    ]
    assert (export / "2020_Trip_IMG_5.jpg").read_bytes() == (root / "2020" / "Trip" / "IMG_5.jpg").read_bytes()
    assert (export / "2020_Trip_IMG_5_1.jpg").read_bytes() == (root / "2020_Trip" / "IMG_5.jpg").read_bytes()
    assert report.count(OutcomeStatus.EXPORTED) == 3
    # Copy keeps the sources
    assert (root / "2020" / "Trip" / "IMG_5.jpg").exists()


def test_existing_export_files_are_skipped_and_not_overwritten(tmp_path):
    root = tmp_path / "photos"
    create_jpeg(root / "2020" / "Trip" / "IMG_5.jpg")
    previous = create_jpeg(root / "EXPORT" / "2020_Trip_IMG_5.jpg", color='white')
    previous_bytes = previous.read_bytes()

    report = export_directory(root, dry_run=False, show_progress=False)

    assert previous.read_bytes() == previous_bytes
    assert (root / "EXPORT" / "2020_Trip_IMG_5_1.jpg").exists()
    assert report.count(OutcomeStatus.SKIPPED) == 1
    assert report.skipped_files == [(str(previous), "already in EXPORT")]


def test_move_removes_sources(tmp_path):
    root = tmp_path / "photos"
    source = create_jpeg(root / "2019 Winter" / "IMG_1.jpg")

    report = export_directory(root, move=True, dry_run=False, show_progress=False)

    assert not source.exists()
    assert (root / "EXPORT" / "2019 Winter_IMG_1.jpg").exists()
    assert report.count(OutcomeStatus.EXPORTED) == 1


def test_dry_run_creates_nothing(tmp_path):
    root = tmp_path / "photos"
    create_jpeg(root / "a" / "IMG.jpg")
    create_jpeg(root / "a_IMG.jpg")

    report = export_directory(root, dry_run=True, show_progress=False)

    assert not (root / "EXPORT").exists()
    assert [o.destination for o in report.outcomes] == ["a_IMG.jpg", "a_IMG_1.jpg"]
    assert report.outcomes[1].file_path == str(root / "a" / "IMG.jpg")


def test_copy_failure_is_recorded(tmp_path, monkeypatch):
    root = tmp_path / "photos"
    create_jpeg(root / "a" / "IMG.jpg")
    create_jpeg(root / "b" / "IMG.jpg")

    calls = []

    def flaky_copy(source, target):
        calls.append(source)
        if len(calls) == 1:
            raise PermissionError(13, "Permission denied")
        Path(target).write_bytes(Path(source).read_bytes())

    monkeypatch.setattr(export_to_folder.shutil, "copy2", flaky_copy)

    report = export_directory(root, dry_run=False, show_progress=False)

    assert report.count(OutcomeStatus.ERRORED) == 1
    assert report.count(OutcomeStatus.EXPORTED) == 1
    assert "Permission denied" in report.error_files[0][1]


def test_main_exports_with_env_folder(tmp_path, monkeypatch, capsys):
    root = tmp_path / "photos"
    create_jpeg(root / "2020" / "IMG.jpg")
    monkeypatch.setenv("EXIF_SETTER_EXPORT_DIR", "FLAT")

    assert main([str(root), "--no-progress", "--log-file", str(tmp_path / "run.log")]) == 0

    assert (root / "FLAT" / "2020_IMG.jpg").exists()
    assert "Summary: 1 exported, 0 skipped, 0 errors" in capsys.readouterr().out


def test_main_rejects_missing_directory(tmp_path, capsys):
    assert main([str(tmp_path / "nope"), "--log-file", str(tmp_path / "run.log")]) == 1
    assert "does not exist" in capsys.readouterr().out


def test_export_copies_unless_dry_run_is_requested(tmp_path):
    root = tmp_path / "photos"
    create_jpeg(root / "2020" / "IMG_1.jpg")

    report = export_directory(root, show_progress=False)

    assert report.count(OutcomeStatus.EXPORTED) == 1
    assert (root / "EXPORT" / "2020_IMG_1.jpg").exists()
    assert (root / "2020" / "IMG_1.jpg").exists()
