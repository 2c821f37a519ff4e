#!/usr/bin/env python3
"""
JREP MATCHER - Linear State Walk
--------------------------------
Scans one line against one CompiledPattern. The walk never backtracks
across states: each step either consumes a character, skips an
optional state, or gives up on the current starting offset.

Author: jrep maintainers
Date: 2026-10-19
"""

from typing import Optional, Sequence, Tuple

from jrep.core.models import LINE_TERMINATOR, CompiledPattern, MatchResult, State, StateKind
from jrep.matching.context import ScanCursor


class LineMatcher:
    """
    Stateless line scanner. One instance can serve every pattern and
    every line; all per-attempt state lives in a ScanCursor.
    """

    def __init__(self, jump_forward: bool = True):
        """
        Args:
            jump_forward: Resume a failed scan at the first position where
                state 0 matched instead of at the next character.
        """
        self.jump_forward = jump_forward

    def char_matches(self, char: Optional[str], state: State) -> bool:
        """Tests a single character against a single state. None never matches."""
        if char is None:
            return False
        if state.kind is StateKind.LITERAL:
            return char == state.value
        if state.kind is StateKind.END_OF_LINE:
            return char == LINE_TERMINATOR
        if state.kind is StateKind.RANGE:
            return ord(state.lower) <= ord(char) <= ord(state.upper)
        return char != LINE_TERMINATOR

    def match_start(self, text: str, pattern: CompiledPattern, offset: int) -> Tuple[bool, ScanCursor]:
        """
        Attempts a match that begins exactly at `offset`.

        The line terminator is appended to `text` when it is missing.
        Returns whether every state was satisfied, plus the cursor so the
        caller can read the end of the match or the next offset to try.
        """
        if not text.endswith(LINE_TERMINATOR):
            text += LINE_TERMINATOR
        cursor = ScanCursor(offset)
        states = pattern.states
        count = len(states)
        size = len(text)

        # Only safe when every match must start on a state-0 character.
        track_jump = self.jump_forward and count > 0 and not states[0].optional

        while cursor.position < size and cursor.index < count:
            char = text[cursor.position]

            if (track_jump and cursor.jump is None and cursor.index > 0
                    and cursor.position > offset and self.char_matches(char, states[0])):
                cursor.jump = cursor.position

            state = states[cursor.index]
            if self.char_matches(char, state):
                if not state.repeatable or self._next_accepts(text, states, cursor):
                    cursor.index += 1
                cursor.position += 1
            elif state.optional:
                cursor.index += 1
            else:
                return False, cursor

        return cursor.index == count, cursor

    def _next_accepts(self, text: str, states: Sequence[State], cursor: ScanCursor) -> bool:
        """
        Greedy-but-yielding lookahead for repeatable states: hand over to the
        next state only when it accepts the character after this one.
        """
        nxt = cursor.index + 1
        if nxt >= len(states):
            return False
        ahead = cursor.position + 1
        char = text[ahead] if ahead < len(text) else None
        return self.char_matches(char, states[nxt])

    def match_line(self, line: str, pattern: CompiledPattern, capture: bool = False) -> MatchResult:
        """
        Decides whether `line` matches `pattern` anywhere (or at offset 0
        when anchored). A trailing newline on `line` is taken as its
        terminator; otherwise one is implied.
        """
        content = line[:-1] if line.endswith(LINE_TERMINATOR) else line
        text = content + LINE_TERMINATOR

        offset = 0
        while offset < len(text):
            matched, cursor = self.match_start(text, pattern, offset)
            if matched:
                if not capture:
                    return MatchResult(matched=True, line=content)
                end = min(cursor.position, len(content))
                return MatchResult(matched=True, line=content, start=offset, end=end)
            if pattern.anchored:
                break
            offset = cursor.next_offset()

        return MatchResult(matched=False, line=content)
