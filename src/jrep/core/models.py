#!/usr/bin/env python3
"""
JREP CORE MODELS
----------------
Defines the fundamental data structures shared by the compiler, the
matcher and the search engine. Everything here is immutable once built,
so a compiled pattern can be reused across every line and every
alternative without copying.

Author: jrep maintainers
Date: 2026-10-19
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

# The logical line terminator. Every scanned line ends with it.
LINE_TERMINATOR = "\n"


class StateKind(Enum):
    """The four character tests a State can perform."""
    LITERAL = "literal"
    END_OF_LINE = "eol"
    RANGE = "range"
    ANY = "any"


@dataclass(frozen=True)
class State:
    """
    The atomic unit of a compiled pattern.

    A State tests exactly one character. The quantifier flags decide how
    often the matcher may apply it: `optional` allows zero occurrences,
    `repeatable` allows many (and always implies `optional`).
    """
    kind: StateKind
    value: Optional[str] = None   # The literal character (LITERAL only)
    lower: Optional[str] = None   # Inclusive lower bound (RANGE only)
    upper: Optional[str] = None   # Inclusive upper bound (RANGE only)
    optional: bool = False
    repeatable: bool = False

    @classmethod
    def literal(cls, char: str) -> "State":
        return cls(StateKind.LITERAL, value=char)

    @classmethod
    def char_range(cls, lower: str, upper: str) -> "State":
        return cls(StateKind.RANGE, lower=lower, upper=upper)

    @classmethod
    def any_char(cls) -> "State":
        return cls(StateKind.ANY)

    @classmethod
    def end_of_line(cls) -> "State":
        return cls(StateKind.END_OF_LINE)

    def as_optional(self) -> "State":
        return replace(self, optional=True)

    def as_repeatable(self) -> "State":
        return replace(self, optional=True, repeatable=True)

    def as_mandatory(self) -> "State":
        return replace(self, optional=False, repeatable=False)

    def describe(self) -> str:
        """Renders the state back into pattern syntax (used in debug logs)."""
        if self.kind is StateKind.LITERAL:
            body = self.value
        elif self.kind is StateKind.RANGE:
            body = f"[{self.lower}-{self.upper}]"
        elif self.kind is StateKind.ANY:
            body = "."
        else:
            return "$"
        if self.repeatable:
            return body + "*"
        return body + "?" if self.optional else body


@dataclass(frozen=True)
class CompiledPattern:
    """
    One alternative of a pattern, compiled into an ordered run of States.
    """
    states: Tuple[State, ...] = ()
    anchored: bool = False  # Pattern began with '^'
    source: str = ""        # The sub-pattern text it was compiled from

    def __len__(self) -> int:
        return len(self.states)

    def describe(self) -> str:
        head = "^" if self.anchored else ""
        return head + " ".join(s.describe() for s in self.states)


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of matching one line against one pattern.

    `start`/`end` delimit the captured span [start, end) and are only set
    when capture was requested and the line matched. The span never covers
    the line terminator.
    """
    matched: bool
    line: str = ""
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def span(self) -> Optional[Tuple[int, int]]:
        if self.start is None or self.end is None:
            return None
        return self.start, self.end

    @property
    def text(self) -> Optional[str]:
        """The captured substring, or None when nothing was captured."""
        if self.span is None:
            return None
        return self.line[self.start:self.end]


@dataclass(frozen=True)
class LineHit:
    """A selected input line, as handed to the output layer."""
    line_no: int            # 1-based line number within its source
    line: str               # Line content without its terminator
    result: MatchResult     # Outcome of the pipeline (unmatched when inverting)
