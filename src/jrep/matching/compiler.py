#!/usr/bin/env python3
"""
JREP COMPILER - Pattern to State Sequence
-----------------------------------------
Turns a pattern written in jrep's small regex dialect into a linear
run of States. There is no NFA or DFA here: each token either appends a
State or rewrites the most recent one.

Dialect:
    ^        anchor at the start of the line (first token only)
    $        end of line (last token only)
    .        any character except the line terminator
    [x-y]    any character between x and y inclusive
    \\x      the character x, taken literally
    ?  *  +  zero-or-one, zero-or-more, one-or-more of the previous state
    |        whole-pattern alternation

Author: jrep maintainers
Date: 2026-10-19
"""

import logging
from typing import List

from jrep.core.errors import PatternError
from jrep.core.models import CompiledPattern, State

logger = logging.getLogger("jrep.compiler")

ALTERNATION = "|"
ESCAPE = "\\"


class PatternCompiler:
    """
    Compiles patterns into immutable CompiledPatterns.
    Fails fast: the first malformed construct raises PatternError and no
    partial result is ever returned.
    """

    def split_alternatives(self, pattern: str) -> List[str]:
        """
        Splits a raw pattern on top-level '|' separators.
        A '|' that is escaped or sits inside a [x-y] range is kept as text.

        Example:
          "ab|c\\|d|[|-~]" -> ["ab", "c\\|d", "[|-~]"]
        """
        alternatives = []
        start = 0
        escaped = in_range = False
        for i, char in enumerate(pattern):
            if escaped:
                escaped = False
            elif in_range:
                if char == "]":
                    in_range = False
            elif char == ESCAPE:
                escaped = True
            elif char == "[":
                in_range = True
            elif char == ALTERNATION:
                alternatives.append(pattern[start:i])
                start = i + 1
        alternatives.append(pattern[start:])
        return alternatives

    def compile_all(self, pattern: str) -> List[CompiledPattern]:
        """
        Compiles every alternative of a pattern, in declaration order.
        One bad alternative rejects the whole pattern.
        """
        compiled = [self.compile(alt) for alt in self.split_alternatives(pattern)]
        logger.debug("Compiled %d alternative(s) from %r", len(compiled), pattern)
        return compiled

    def compile(self, pattern: str) -> CompiledPattern:
        """Compiles a single alternative (no '|' handling)."""
        states: List[State] = []
        anchored = False
        i = 0
        size = len(pattern)

        while i < size:
            char = pattern[i]

            if char == "^":
                if i != 0:
                    raise PatternError("Leading characters before ^", pattern, i)
                anchored = True

            elif char == "$":
                if i != size - 1:
                    raise PatternError("Trailing characters after $", pattern, i)
                states.append(State.end_of_line())

            elif char in "?*+":
                self._apply_quantifier(states, char, pattern, i)

            elif char == "[":
                state, i = self._read_range(pattern, i)
                states.append(state)

            elif char == "]":
                raise PatternError("Missing opening [", pattern, i)

            elif char == ".":
                states.append(State.any_char())

            elif char == ESCAPE:
                if i + 1 >= size:
                    raise PatternError("Trailing \\", pattern, i)
                i += 1
                states.append(State.literal(pattern[i]))

            else:
                states.append(State.literal(char))

            i += 1

        compiled = CompiledPattern(states=tuple(states), anchored=anchored, source=pattern)
        logger.debug("Pattern %r -> %s", pattern, compiled.describe())
        return compiled

    def _apply_quantifier(self, states: List[State], quantifier: str, pattern: str, pos: int):
        """Rewrites the most recent state for '?', '*' or '+'."""
        if not states:
            raise PatternError(f"Missing state before {quantifier}", pattern, pos)

        last = states[-1]
        if quantifier == "?":
            states[-1] = last.as_optional()
        elif quantifier == "*":
            states[-1] = last.as_repeatable()
        else:
            # One-or-more: a mandatory copy followed by a repeatable copy.
            states[-1] = last.as_mandatory()
            states.append(last.as_repeatable())

    def _read_range(self, pattern: str, pos: int):
        """
        Reads '[x-y]' starting at the '[' at `pos`.
        Returns the RANGE state and the index of the closing ']'.
        """
        size = len(pattern)

        lower_at = pos + 1
        if lower_at >= size or pattern[lower_at] == "]":
            raise PatternError("Malformed range", pattern, pos)

        dash_at = pos + 2
        if dash_at >= size:
            raise PatternError("Unterminated range", pattern, pos)
        if pattern[dash_at] != "-":
            raise PatternError("Range missing separator", pattern, dash_at)

        upper_at = pos + 3
        if upper_at >= size or pattern[upper_at] == "]":
            raise PatternError("Malformed range", pattern, pos)

        close_at = pos + 4
        if close_at >= size:
            raise PatternError("Expected ], got end of pattern", pattern, close_at)
        if pattern[close_at] != "]":
            raise PatternError(f"Expected ], got '{pattern[close_at]}'", pattern, close_at)

        lower, upper = pattern[lower_at], pattern[upper_at]
        if ord(upper) < ord(lower):
            raise PatternError(
                "Least upper bound of range is less than its greatest lower bound",
                pattern, pos
            )
        return State.char_range(lower, upper), close_at


def compile_pattern(pattern: str) -> List[CompiledPattern]:
    """Module-level shortcut for PatternCompiler().compile_all()."""
    return PatternCompiler().compile_all(pattern)
