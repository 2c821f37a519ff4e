#!/usr/bin/env python3
"""
JREP MATCH PIPELINE
-------------------
Holds every compiled alternative of one pattern and answers, line by
line, whether any of them matches. Alternatives are tried in the order
they were written and the first one that matches supplies the captured
span.

Author: jrep maintainers
Date: 2026-10-19
"""

from typing import List, Optional, Sequence

from jrep.core.models import CompiledPattern, MatchResult
from jrep.matching.compiler import PatternCompiler
from jrep.matching.matcher import LineMatcher


class MatchPipeline:
    """
    The Orchestrator: compile once, then match many lines.
    """

    def __init__(self, alternatives: Sequence[CompiledPattern], matcher: Optional[LineMatcher] = None):
        if not alternatives:
            raise ValueError("MatchPipeline needs at least one compiled alternative")
        self.alternatives: List[CompiledPattern] = list(alternatives)
        self.matcher = matcher or LineMatcher()

    @classmethod
    def from_pattern(cls, pattern: str, jump_forward: bool = True) -> "MatchPipeline":
        """
        Compiles `pattern` (splitting on '|') into a ready pipeline.
        Raises PatternError before any line is seen if any alternative is invalid.
        """
        alternatives = PatternCompiler().compile_all(pattern)
        return cls(alternatives, LineMatcher(jump_forward=jump_forward))

    def match(self, line: str, capture: bool = False) -> MatchResult:
        """Logical OR across alternatives; returns the first match found."""
        result = None
        for alternative in self.alternatives:
            result = self.matcher.match_line(line, alternative, capture=capture)
            if result.matched:
                return result
        return result

    def matches(self, line: str) -> bool:
        return self.match(line).matched
