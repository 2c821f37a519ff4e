#!/usr/bin/env python3
"""
JREP ENGINE - Source Orchestrator
---------------------------------
Feeds lines from files, directories or standard input through a
MatchPipeline, applies inversion, and keeps per-source tallies. The
engine never formats output itself; selected lines are handed to a
callback as they are found.

Author: jrep maintainers
Date: 2026-10-19
"""

import io
import sys
import time
import logging
from pathlib import Path
from typing import IO, Any, Callable, Dict, Iterable, Iterator, List, Optional

from jrep.core.models import LineHit
from jrep.matching.pipeline import MatchPipeline

logger = logging.getLogger("jrep.engine")

STDIN_MARKER = "-"
STDIN_NAME = "(standard input)"


class SearchEngine:
    """
    Drives one compiled pattern across any number of input sources.
    """

    def __init__(self, pipeline: MatchPipeline, invert: bool = False,
                 capture: bool = False, stdin: Optional[IO] = None):
        """
        Args:
            pipeline: The compiled pattern to apply to every line.
            invert: Select lines that do NOT match.
            capture: Record the matched span of selected lines.
            stdin: Stream used for the '-' source (defaults to sys.stdin).
                Byte streams and text streams backed by a buffer are
                decoded as UTF-8.
        """
        self.pipeline = pipeline
        self.invert = invert
        self.capture = capture and not invert
        self.stdin = stdin

    def collect_sources(self, paths: Iterable[str], recursive: bool = False) -> List[str]:
        """
        Expands the user's path arguments into a flat list of sources.
        Directories are walked only when `recursive` is set; symlinks found
        during the walk are skipped to avoid loops.
        """
        sources = []
        for raw in paths:
            candidate = Path(raw)
            if recursive and raw != STDIN_MARKER and candidate.is_dir():
                found = sorted(
                    f for f in candidate.rglob("*")
                    if f.is_file() and not f.is_symlink()
                )
                logger.debug("Discovered %d file(s) under %s", len(found), raw)
                sources.extend(str(f) for f in found)
            else:
                sources.append(raw)
        return sources or [STDIN_MARKER]

    def display_name(self, source: str) -> str:
        return STDIN_NAME if source == STDIN_MARKER else source

    def read_lines(self, source: str) -> Iterator[str]:
        """Yields the lines of a source, terminators included."""
        if source == STDIN_MARKER:
            yield from self._read_stream(self.stdin or sys.stdin)
            return
        with open(source, "r", encoding="utf-8", errors="replace") as handle:
            yield from handle

    def _read_stream(self, stream: IO) -> Iterator[str]:
        """
        Decodes standard input as UTF-8 with replacement, like files,
        regardless of the locale encoding. Streams without an underlying
        byte buffer (io.StringIO) are already text and pass through.
        """
        if isinstance(stream, io.TextIOBase):
            raw = getattr(stream, "buffer", None)
            if raw is None:
                yield from stream
                return
        else:
            raw = stream

        wrapper = io.TextIOWrapper(raw, encoding="utf-8", errors="replace")
        try:
            yield from wrapper
        finally:
            # Leave sys.stdin.buffer open for the rest of the process
            wrapper.detach()

    def search_lines(self, lines: Iterable[str]) -> Iterator[LineHit]:
        """Yields a LineHit for every selected line, in input order."""
        for line_no, line in enumerate(lines, 1):
            result = self.pipeline.match(line, capture=self.capture)
            if result.matched != self.invert:
                yield LineHit(line_no=line_no, line=result.line, result=result)

    def search_source(self, source: str,
                      hit_callback: Optional[Callable[[str, LineHit], None]] = None) -> Dict[str, Any]:
        """
        Searches a single source and returns its report.
        I/O failures are reported, never raised.
        """
        name = self.display_name(source)
        scanned = 0
        matched = 0

        def counted(lines: Iterable[str]) -> Iterator[str]:
            nonlocal scanned
            for line in lines:
                scanned += 1
                yield line

        try:
            for hit in self.search_lines(counted(self.read_lines(source))):
                matched += 1
                if hit_callback:
                    hit_callback(name, hit)
        except OSError as e:
            logger.error("Unable to read %s: %s", name, e.strerror or e)
            return self._source_error(name, scanned, matched, e.strerror or str(e))

        logger.debug("%s: %d/%d line(s) selected", name, matched, scanned)
        return {
            "source": name,
            "status": "MATCHED" if matched else "NO_MATCH",
            "lines_scanned": scanned,
            "matched": matched,
            "error": None,
        }

    def search(self, sources: Iterable[str],
               hit_callback: Optional[Callable[[str, LineHit], None]] = None) -> List[Dict[str, Any]]:
        """Searches every source in order and returns all reports."""
        return [self.search_source(source, hit_callback) for source in sources]

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Totals across every searched source."""
        return {
            "total_sources": len(reports),
            "lines_scanned": sum(r.get("lines_scanned", 0) for r in reports),
            "lines_matched": sum(r.get("matched", 0) for r in reports),
            "sources_matched": sum(1 for r in reports if r.get("matched", 0) > 0),
            "io_errors": sum(1 for r in reports if r.get("status") == "IO_ERROR"),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _source_error(self, name: str, scanned: int, matched: int, error: str) -> Dict[str, Any]:
        return {
            "source": name, "status": "IO_ERROR", "lines_scanned": scanned,
            "matched": matched, "error": error,
        }
