"""Tests for workspace file lookup and properties parsing."""

from __future__ import annotations

import pytest

from shipyard.build_log import BuildLog
from shipyard.errors import MissingFileError
from shipyard.files import lookup_file, parse_properties, read_properties, require_file


@pytest.fixture
def log(log_stream):
    return BuildLog(log_stream)


def test_lookup_picks_shortest_path(tmp_path, log, log_stream):
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "a" / "b" / "Dockerfile").write_text("FROM deep")
    (tmp_path / "a" / "Dockerfile").write_text("FROM shallow")

    found = lookup_file(tmp_path, "Dockerfile", log)
    assert found == tmp_path / "a" / "Dockerfile"
    assert "ambiguous match" in log_stream.getvalue()


def test_lookup_tie_broken_lexicographically(tmp_path, log):
    for name in ("b", "a"):
        (tmp_path / name).mkdir()
        (tmp_path / name / "Dockerfile").write_text("FROM x")
    assert lookup_file(tmp_path, "Dockerfile", log) == tmp_path / "a" / "Dockerfile"


def test_lookup_finds_file_at_root(tmp_path, log):
    (tmp_path / "Dockerfile").write_text("FROM x")
    assert lookup_file(tmp_path, "Dockerfile", log) == tmp_path / "Dockerfile"


def test_lookup_no_match_returns_none(tmp_path, log, log_stream):
    assert lookup_file(tmp_path, "Dockerfile", log) is None
    assert "could not find matching file: Dockerfile" in log_stream.getvalue()


def test_lookup_ignores_directories(tmp_path, log):
    (tmp_path / "Dockerfile").mkdir()
    assert lookup_file(tmp_path, "Dockerfile", log) is None


def test_lookup_missing_workspace(tmp_path, log):
    assert lookup_file(tmp_path / "gone", "Dockerfile", log) is None


def test_require_file_raises(tmp_path, log):
    with pytest.raises(MissingFileError, match="dockerBuildInfo"):
        require_file(tmp_path, "dockerBuildInfo", log)


def test_parse_properties_separators_and_comments():
    text = """\
# comment
! also a comment
APP_NAME=orders
VERSION : 1.2.0
REGISTRY reg.example.com

EMPTY=
"""
    assert parse_properties(text) == {
        "APP_NAME": "orders",
        "VERSION": "1.2.0",
        "REGISTRY": "reg.example.com",
        "EMPTY": "",
    }


def test_parse_properties_continuation_and_escapes():
    text = "JAVA_OPTS=-Xmx512m \\\n    -Xms256m\nPATH_KEY=C\\:\\\\tools\nTAB=a\\tb\n"
    props = parse_properties(text)
    assert props["JAVA_OPTS"] == "-Xmx512m -Xms256m"
    assert props["PATH_KEY"] == "C:\\tools"
    assert props["TAB"] == "a\tb"


def test_parse_properties_value_keeps_equals():
    assert parse_properties("URL=http://x/?a=b") == {"URL": "http://x/?a=b"}


def test_read_properties_utf8(tmp_path):
    path = tmp_path / "git.properties"
    path.write_text("git.commit.user.name=Zoë\n", encoding="utf-8")
    assert read_properties(path) == {"git.commit.user.name": "Zoë"}
