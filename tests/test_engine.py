#!/usr/bin/env python3
"""
JREP ENGINE SUITE
-----------------
Source handling around the pattern engine: file and stdin reading,
inversion, directory discovery, I/O failure reports and summaries.
"""

import io
import logging
import os

import pytest

from jrep.core.engine import STDIN_NAME, SearchEngine
from jrep.matching.pipeline import MatchPipeline


@pytest.fixture
def corpus(tmp_path):
    (tmp_path / "fruits.txt").write_text("apple\nbanana\ncherry\n")
    (tmp_path / "veg.txt").write_text("carrot\npea\n")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "deep.txt").write_text("grape\npeach")
    return tmp_path


def make_engine(pattern, **kwargs):
    return SearchEngine(MatchPipeline.from_pattern(pattern), **kwargs)


def test_search_lines_yields_selected_hits():
    hits = list(make_engine("an").search_lines(["apple\n", "banana\n", "mango"]))
    assert [(h.line_no, h.line) for h in hits] == [(2, "banana"), (3, "mango")]


def test_inversion_selects_non_matching_lines():
    hits = list(make_engine("an", invert=True).search_lines(["apple\n", "banana\n"]))
    assert [h.line for h in hits] == ["apple"]
    assert hits[0].result.matched is False


def test_capture_disabled_when_inverting():
    engine = make_engine("a", invert=True, capture=True)
    assert engine.capture is False


def test_capture_records_span():
    (hit,) = make_engine("[0-9]+", capture=True).search_lines(["id 42 ok\n"])
    assert hit.result.text == "42"


def test_search_source_reports_counts(corpus):
    seen = []
    report = make_engine("an|ch").search_source(
        str(corpus / "fruits.txt"),
        hit_callback=lambda name, hit: seen.append((name, hit.line))
    )
    assert report["status"] == "MATCHED"
    assert report["lines_scanned"] == 3
    assert report["matched"] == 2
    assert report["error"] is None
    assert [line for _, line in seen] == ["banana", "cherry"]


def test_last_line_without_newline_is_read(corpus):
    report = make_engine("peach$").search_source(str(corpus / "nested" / "deep.txt"))
    assert report["matched"] == 1


def test_stdin_source():
    engine = make_engine("b", stdin=io.StringIO("abc\nxyz\n"))
    names = []
    report = engine.search_source("-", hit_callback=lambda name, hit: names.append(name))
    assert report["source"] == STDIN_NAME
    assert report["matched"] == 1
    assert names == [STDIN_NAME]


def test_missing_file_is_reported_not_raised(tmp_path, caplog):
    """
    RESILIENCE TEST: unreadable sources produce an IO_ERROR report.
    """
    missing = str(tmp_path / "nope.txt")
    with caplog.at_level(logging.ERROR, logger="jrep.engine"):
        report = make_engine("x").search_source(missing)
    assert report["status"] == "IO_ERROR"
    assert report["error"]
    assert "nope.txt" in caplog.text


def test_directory_without_recursion_is_an_io_error(corpus):
    report = make_engine("x").search_source(str(corpus))
    assert report["status"] == "IO_ERROR"


def test_collect_sources_defaults_to_stdin():
    assert make_engine("x").collect_sources([]) == ["-"]


def test_collect_sources_walks_directories_sorted(corpus):
    sources = make_engine("x").collect_sources([str(corpus)], recursive=True)
    names = [os.path.relpath(s, corpus) for s in sources]
    assert names == ["fruits.txt", os.path.join("nested", "deep.txt"), "veg.txt"]


def test_collect_sources_skips_symlinks(corpus):
    if os.name == "nt":
        pytest.skip("symlinks need privileges on Windows")
    os.symlink(corpus / "veg.txt", corpus / "link.txt")
    sources = make_engine("x").collect_sources([str(corpus)], recursive=True)
    assert not any(s.endswith("link.txt") for s in sources)


def test_collect_sources_keeps_files_without_recursion(corpus):
    path = str(corpus / "veg.txt")
    assert make_engine("x").collect_sources([path, "-"]) == [path, "-"]


def test_generate_summary(corpus, tmp_path):
    engine = make_engine("a")
    reports = engine.search([str(corpus / "fruits.txt"), str(corpus / "veg.txt"), str(tmp_path / "gone")])
    summary = engine.generate_summary(reports)
    assert summary["total_sources"] == 3
    assert summary["lines_scanned"] == 5
    assert summary["lines_matched"] == 4
    assert summary["sources_matched"] == 2
    assert summary["io_errors"] == 1


def test_file_bytes_are_decoded_with_replacement(tmp_path):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"a\xff\nzz\n")
    seen = []
    report = make_engine("a").search_source(
        str(path), hit_callback=lambda name, hit: seen.append(hit.line)
    )
    assert report["status"] == "MATCHED"
    assert seen == ["a\ufffd"]


def test_stdin_bytes_are_decoded_with_replacement():
    engine = make_engine("a", stdin=io.BytesIO(b"a\xff\nzz\n"))
    seen = []
    report = engine.search_source("-", hit_callback=lambda name, hit: seen.append(hit.line))
    assert report["status"] == "MATCHED"
    assert report["lines_scanned"] == 2
    assert seen == ["a\ufffd"]


def test_stdin_ignores_locale_encoding():
    """
    DECODING TEST: a text stream with its own encoding is re-read as UTF-8,
    so a two-byte character is still one character.
    """
    stream = io.TextIOWrapper(io.BytesIO("é\n".encode("utf-8")), encoding="latin-1")
    report = make_engine("^.$", stdin=stream).search_source("-")
    assert report["matched"] == 1
