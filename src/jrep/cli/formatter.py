# src/jrep/cli/formatter.py
from typing import Any, Dict, List, Optional

from rich.color import ColorSystem
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.style import Style
from rich.table import Table

from jrep.core.models import LineHit


class LineFormatter:
    """
    LineFormatter: turns selected lines into grep-style output records.

    Records are plain strings. Colour is applied with raw ANSI sequences
    from rich Styles, so line content is never run through markup parsing
    or tab expansion.
    """

    def __init__(self, show_names: bool = False, line_numbers: bool = False,
                 only_matching: bool = False, color: bool = False):
        self.show_names = show_names
        self.line_numbers = line_numbers
        self.only_matching = only_matching
        self.color = color

        self.match_style = Style(color="red", bold=True)
        self.name_style = Style(color="magenta")
        self.number_style = Style(color="green")
        self.separator_style = Style(color="cyan")

    def _paint(self, text: str, style: Style) -> str:
        if not self.color:
            return text
        return style.render(text, color_system=ColorSystem.STANDARD)

    def _prefix(self, source_name: str, line_no: Optional[int] = None) -> str:
        sep = self._paint(":", self.separator_style)
        parts = []
        if self.show_names:
            parts.append(self._paint(source_name, self.name_style) + sep)
        if self.line_numbers and line_no is not None:
            parts.append(self._paint(str(line_no), self.number_style) + sep)
        return "".join(parts)

    def format_hit(self, source_name: str, hit: LineHit) -> Optional[str]:
        """
        Builds '[name:][lineno:]text'. With only_matching the text is the
        captured span; otherwise the whole line, with the span highlighted
        when colour is on. Returns None for an empty only_matching span,
        which produces no output record.
        """
        span = hit.result.span
        if self.only_matching and span is not None:
            if span[0] == span[1]:
                return None
            body = self._paint(hit.result.text, self.match_style)
        elif self.color and span is not None:
            start, end = span
            body = hit.line[:start] + self._paint(hit.line[start:end], self.match_style) + hit.line[end:]
        else:
            body = hit.line
        return self._prefix(source_name, hit.line_no) + body

    def format_count(self, source_name: str, count: int) -> str:
        return self._prefix(source_name) + str(count)


def render_stats(console: Console, reports: List[Dict[str, Any]], summary: Dict[str, Any]):
    """
    Builds the per-source table and summary panel shown with --stats.
    """
    table = Table(title="jrep Search Report", show_lines=True, header_style="bold magenta")
    table.add_column("Source", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Lines", justify="right")
    table.add_column("Selected", justify="right")

    for r in reports:
        status = r.get("status", "UNKNOWN")
        status_color = "green" if status == "MATCHED" else "red" if status == "IO_ERROR" else "yellow"
        table.add_row(
            escape(str(r.get("source"))),
            f"[{status_color}]{status}[/{status_color}]",
            str(r.get("lines_scanned", 0)),
            str(r.get("matched", 0)),
        )

    console.print(table)
    console.print(Panel(
        f"[bold white]Summary Report[/bold white]\n"
        f"════════════════════════════════════════\n"
        f"Sources:        {summary['total_sources']}\n"
        f"Lines Scanned:  {summary['lines_scanned']}\n"
        f"Lines Selected: [green]{summary['lines_matched']}[/green]\n"
        f"I/O Errors:     [red]{summary['io_errors']}[/red]",
        border_style="dim"
    ))
