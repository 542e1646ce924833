"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple


@dataclass(frozen=True, slots=True)
class Candidate:
    """One unvalidated digit run, local to a single sanitize call."""
    text: str       # matched text, line noise included
    digits: str     # digit-only projection of text
    prefix: str     # text immediately before the match
    postfix: str    # text immediately after the match


class Change(NamedTuple):
    """An applied redaction: ``(original, redacted)``."""
    original: str
    redacted: str


@dataclass(frozen=True, slots=True)
class CardMatch:
    """A validated card number located in the input text."""
    start: int
    end: int
    text: str
    digits: str
    company: str | None


class SanitizeStatus(str, Enum):
    REDACTED = "redacted"
    CLEAN = "clean"
    OVERSIZED = "oversized"     # rejected by the safe-length guard, not scanned


@dataclass(slots=True)
class SanitizeResult:
    """Outcome of one sanitize pass."""
    status: SanitizeStatus
    text: str                                           # redacted (or untouched) text
    changes: list[Change] = field(default_factory=list)
