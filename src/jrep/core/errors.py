#!/usr/bin/env python3
"""
JREP ERRORS
-----------
Exceptions raised before any input is read. Matching itself never
raises: "no match" is an ordinary result.

Author: jrep maintainers
Date: 2026-10-19
"""

from typing import Optional


class JrepError(Exception):
    """Base class for every error jrep reports to the user."""


class PatternError(JrepError, ValueError):
    """
    A pattern (or one of its alternatives) failed to compile.

    Carries the offending sub-pattern and the 0-based position of the
    construct that was rejected so the CLI can point at it.
    """

    def __init__(self, message: str, pattern: str = "", position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.pattern = pattern
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position} in '{self.pattern}')"


class ConfigError(JrepError):
    """The configuration file exists but could not be used."""
