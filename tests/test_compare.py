# File: tests/test_compare.py
import json
import os

import pytest

from sitewatch import compare as compare_module
from sitewatch.compare import compare_folders, html_to_text, is_html_line
from sitewatch.report import render_html, render_json


@pytest.fixture()
def run_dirs(tmp_path):
    original = tmp_path / "originalFolder"
    latest = tmp_path / "latestFolder"
    original.mkdir()
    latest.mkdir()

    (original / "example.com.txt").write_text(
        "<h1>Welcome</h1>\nstatic line\nold footer\n", encoding="utf-8"
    )
    (latest / "example.com.txt").write_text(
        "<h1>Welcome back</h1>\nstatic line\n<div></div>\n", encoding="utf-8"
    )
    (original / "example.com{FS}gone.txt").write_text("bye", encoding="utf-8")
    (latest / "example.com{FS}new.txt").write_text("hi", encoding="utf-8")
    (original / "same.css").write_text("a{}", encoding="utf-8")
    (latest / "same.css").write_text("b{}", encoding="utf-8")
    return original, latest


def test_added_and_removed_files(run_dirs):
    report = compare_folders(*run_dirs)

    assert report.complete
    assert report.files_added == ["example.com{FS}new.txt"]
    assert report.files_removed == ["example.com{FS}gone.txt"]
    assert report.pages_added() == ["https://example.com/new"]
    assert report.has_changes


def test_line_changes_for_text_files_only(run_dirs):
    report = compare_folders(*run_dirs)

    assert report.files_changed == ["example.com.txt"]
    assert report.lines_removed == [
        "[example.com.txt]: Welcome",
        "[example.com.txt]: old footer",
    ]
    # an empty element reduces to no text and is dropped
    assert report.lines_added == ["[example.com.txt]: Welcome back"]


def test_identical_folders(tmp_path):
    a, b = tmp_path / "a", tmp_path / "b"
    for folder in (a, b):
        folder.mkdir()
        (folder / "page.txt").write_text("same\n", encoding="utf-8")

    report = compare_folders(a, b)

    assert not report.has_changes
    assert report.lines_added == [] and report.lines_removed == []


def test_missing_folder(tmp_path):
    (tmp_path / "a").mkdir()
    with pytest.raises(FileNotFoundError):
        compare_folders(tmp_path / "a", tmp_path / "missing")


def test_html_line_detection():
    assert is_html_line('<p class="x">text</p>')
    assert not is_html_line("<br>")
    assert not is_html_line("plain words")
    assert html_to_text("<p>Hello <b>world</b></p>") == "Hello world"


def test_render_reports(run_dirs, tmp_path):
    report = compare_folders(*run_dirs)

    json_path = render_json(report, tmp_path / "out" / "report.json")
    html_path = render_html(report, None, tmp_path / "out" / "report.html")

    data = json.loads(json_path.read_text(encoding="utf-8"))
    assert data["files_added"] == ["example.com{FS}new.txt"]
    page = html_path.read_text(encoding="utf-8")
    assert "example.com{FS}gone.txt" in page
    assert "Files changed (1)" in page


def test_newer_first_folder_is_warned_about(run_dirs, monkeypatch):
    original, latest = run_dirs
    os.utime(original, (1_000, 1_000))
    os.utime(latest, (2_000, 2_000))
    warnings = []
    monkeypatch.setattr(compare_module.logger, "warning", lambda msg, *args: warnings.append(msg % args))

    compare_folders(original, latest)
    assert warnings == []

    report = compare_folders(latest, original)
    assert len(warnings) == 1
    assert warnings[0].startswith("latestFolder was modified after originalFolder")
    # the folders are still reported in the order given
    assert report.files_added == ["example.com{FS}gone.txt"]
