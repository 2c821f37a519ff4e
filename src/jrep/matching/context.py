#!/usr/bin/env python3
"""
JREP SCAN CURSOR
----------------
The transient state of one match attempt. It lives for a single
`match_start` call and is never stored on a CompiledPattern, so the
same compiled pattern can be scanned from anywhere at any time.

Author: jrep maintainers
Date: 2026-10-19
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ScanCursor:
    """
    Walks a state index and a text position forward together.
    """
    offset: int                 # Where this attempt started in the text
    index: int = 0              # Current state index
    position: int = -1          # Current text position (defaults to offset)
    jump: Optional[int] = None  # First later position where state 0 matched

    def __post_init__(self):
        if self.position < 0:
            self.position = self.offset

    def next_offset(self) -> int:
        """Where the next attempt should start if this one fails."""
        if self.jump is None:
            return self.offset + 1
        return self.jump
