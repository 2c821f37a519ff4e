#!/usr/bin/env python3
"""
JREP CLI - Just a Regular Expression Parser
-------------------------------------------
Command-line front end: parses flags, loads defaults, compiles the
pattern before any input is read, streams selected lines to stdout and
maps the outcome onto grep's exit codes.

Exit codes:
    0  at least one line was selected
    1  no line was selected
    2  invalid pattern or config, or unreadable input with no selection

Author: jrep maintainers
Date: 2026-10-19
"""

import os
import sys
import logging
import argparse
from typing import IO, List, Optional, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from jrep.cli.formatter import LineFormatter, render_stats
from jrep.core.config import COLOR_CHOICES, JrepConfig, load_config
from jrep.core.engine import SearchEngine
from jrep.core.errors import ConfigError, PatternError
from jrep.core.models import LineHit
from jrep.matching.pipeline import MatchPipeline

VERSION = "1.0.0"

EXIT_MATCH = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2

DIALECT_HELP = """\
pattern syntax:
  ^  $       start / end of line
  .          any character
  [a-z]      character range
  \\x         literal x
  ?  *  +    zero-or-one, zero-or-more, one-or-more
  a|b        match a or b
"""

# Diagnostics only; selected lines are written to the output stream directly
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("jrep.cli")


class JrepCLI:
    """
    CLI wrapper that translates flags into SearchEngine runs.
    """

    def __init__(self, stdout: Optional[TextIO] = None, stdin: Optional[IO] = None):
        """
        Args:
            stdout: Where selected lines go (defaults to sys.stdout at run time).
            stdin: Stream read for the '-' source (defaults to sys.stdin).
        """
        self.stdout = stdout
        self.stdin = stdin
        self.parser = argparse.ArgumentParser(
            prog="jrep",
            description="jrep - search lines for a small regular-expression dialect",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=DIALECT_HELP
        )
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags."""
        self.parser.add_argument("-V", "--version", action="version",
                                 version=f"jrep (Just a Regular Expression Parser) {VERSION}")
        self.parser.add_argument("-c", "--count", action="store_true", help="Print only a count of selected lines")
        self.parser.add_argument("-H", "--with-filename", action="store_true", help="Prefix each line with its source name")
        self.parser.add_argument("-n", "--line-number", action="store_true", help="Prefix each line with its line number")
        self.parser.add_argument("-o", "--only-matching", action="store_true", help="Print only the matched part of a line")
        self.parser.add_argument("-v", "--invert-match", action="store_true", help="Select non-matching lines")
        self.parser.add_argument("-r", "--recursive", action="store_true", help="Search directories recursively")
        self.parser.add_argument("--color", choices=COLOR_CHOICES, default=None, help="Highlight matches (default: auto)")
        self.parser.add_argument("--stats", action="store_true", help="Show a per-source report on stderr")
        self.parser.add_argument("--no-jump-forward", action="store_true", help="Retry every offset after a failed attempt")
        self.parser.add_argument("--config", metavar="PATH", help="Read defaults from this YAML file")
        self.parser.add_argument("--verbose", action="store_true", help="Enable debug logging on stderr")
        self.parser.add_argument("pattern", help="Pattern to search for")
        self.parser.add_argument("files", nargs="*", metavar="FILE", help="Files to search ('-' for stdin)")

    def print_header(self):
        """Renders the splash header shown when run without arguments."""
        console.print(Panel.fit(
            f"[bold cyan]jrep v{VERSION}[/bold cyan]\n"
            "Just a Regular Expression Parser",
            border_style="cyan"
        ))

    def _configure_logging(self, level: str):
        """Routes every 'jrep.*' logger to stderr through rich."""
        package_logger = logging.getLogger("jrep")
        package_logger.setLevel(level)
        if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
            package_logger.addHandler(RichHandler(console=err_console, show_time=False, show_path=False))

    def _use_color(self, when: str, stream: TextIO) -> bool:
        if when == "always":
            return True
        if when == "never":
            return False
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    def _report_error(self, message: str):
        err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary entry point. Returns the process exit code."""
        argv = sys.argv[1:] if argv is None else argv
        if not argv:
            self.print_header()
            self.parser.print_help()
            return EXIT_MATCH

        args = self.parser.parse_args(argv)
        out = self.stdout or sys.stdout

        try:
            config = load_config(args.config)
        except ConfigError as e:
            self._report_error(str(e))
            return EXIT_ERROR

        self._configure_logging("DEBUG" if args.verbose else config.log_level)

        # Compile before touching any input
        try:
            pipeline = MatchPipeline.from_pattern(
                args.pattern,
                jump_forward=config.jump_forward and not args.no_jump_forward
            )
        except PatternError as e:
            self._report_error(str(e))
            return EXIT_ERROR

        return self._search(args, config, pipeline, out)

    def _search(self, args: argparse.Namespace, config: JrepConfig,
                pipeline: MatchPipeline, out: TextIO) -> int:
        color = self._use_color(args.color or config.color, out)
        engine = SearchEngine(
            pipeline,
            invert=args.invert_match,
            capture=args.only_matching or color,
            stdin=self.stdin
        )
        sources = engine.collect_sources(args.files, recursive=args.recursive)
        logger.debug("Searching %d source(s) with %d alternative(s)",
                     len(sources), len(pipeline.alternatives))

        formatter = LineFormatter(
            show_names=args.with_filename or config.with_filename or len(sources) > 1,
            line_numbers=args.line_number or config.line_number,
            only_matching=args.only_matching and not args.invert_match,
            color=color
        )

        def emit(source_name: str, hit: LineHit):
            record = formatter.format_hit(source_name, hit)
            if record is not None:
                out.write(record + "\n")

        reports = []
        for source in sources:
            report = engine.search_source(source, None if args.count else emit)
            reports.append(report)
            if args.count and report["status"] != "IO_ERROR":
                out.write(formatter.format_count(report["source"], report["matched"]) + "\n")
        out.flush()

        summary = engine.generate_summary(reports)
        if args.stats:
            render_stats(err_console, reports, summary)

        if summary["lines_matched"]:
            return EXIT_MATCH
        return EXIT_ERROR if summary["io_errors"] else EXIT_NO_MATCH


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(JrepCLI().run())
    except KeyboardInterrupt:
        err_console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(130)
    except BrokenPipeError:
        # Downstream reader went away (e.g. `jrep ... | head`)
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(EXIT_NO_MATCH)


if __name__ == "__main__":
    main()
