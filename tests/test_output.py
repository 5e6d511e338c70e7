"""
Tests for author file writing, console listing and JSON log formatting.
"""

import io
import json
import logging

import pytest

from scripts.authormap.logging_config import JsonFormatter
from scripts.authormap.output import print_detected_users, write_author_file


def test_write_author_file(tmp_path):
    lines = ["CORP\\ann = Ann Ärger <ann@example.org>", "CORP\\bob = Bob <bob@example.org>"]

    path = write_author_file(lines, tmp_path / "Authors.txt")

    assert path == tmp_path / "Authors.txt"
    assert path.read_bytes().decode("utf-8") == "\n".join(lines) + "\n"
    assert not (tmp_path / "Authors.txt.tmp").exists()


def test_write_replaces_existing_file(tmp_path):
    target = tmp_path / "Authors.txt"
    target.write_text("stale\n", encoding="utf-8")

    write_author_file(["D\\x = X <x@x>"], target)

    assert target.read_text(encoding="utf-8") == "D\\x = X <x@x>\n"


def test_failed_write_leaves_no_temp_file(tmp_path):
    target = tmp_path / "Authors.txt"
    target.write_text("previous\n", encoding="utf-8")

    # A lone surrogate cannot be encoded as UTF-8
    with pytest.raises(UnicodeEncodeError):
        write_author_file(["D\\ok = Ok <ok@x>", "D\\bad = \ud800 <bad@x>"], target)

    assert not (tmp_path / "Authors.txt.tmp").exists()
    assert target.read_text(encoding="utf-8") == "previous\n"


def test_write_empty_mapping(tmp_path):
    path = write_author_file([], tmp_path / "Authors.txt")

    assert path.read_text(encoding="utf-8") == ""


def test_print_detected_users():
    stream = io.StringIO()

    print_detected_users(["D\\ann = Ann <ann@x>"], stream)

    assert stream.getvalue() == "\n\nDetected users\n--------------\nD\\ann = Ann <ann@x>\n"


def test_json_formatter_includes_scan_fields():
    record = logging.LogRecord(
        name="authormap.walker",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="The project '%s' throws an exception: %s and will be ignored.",
        args=("Beta", "denied"),
        exc_info=None,
    )
    record.collection = "DefaultCollection"
    record.project = "Beta"

    entry = json.loads(JsonFormatter().format(record))

    assert entry["level"] == "WARNING"
    assert entry["logger"] == "authormap.walker"
    assert entry["message"] == "The project 'Beta' throws an exception: denied and will be ignored."
    assert entry["collection"] == "DefaultCollection"
    assert entry["project"] == "Beta"
    assert "identities" not in entry
