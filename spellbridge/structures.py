"""Core data structures for the spellbridge checker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Word:
    """A checkable word found inside a text buffer.

    ``text`` is the normalised form handed to the checker; ``start`` and
    ``length`` always describe the span in the original buffer.
    """

    text: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class CheckResult:
    """One misspelled span reported for a checked block."""

    location: int
    length: int


@dataclass(frozen=True)
class Misspelling:
    """The single misspelling reported by a span check."""

    start: int
    length: int
    word: str = ""


@dataclass
class BlockCheckOutcome:
    """Records how an asynchronous block check was settled."""

    cancelled: bool = False
    results: List[CheckResult] = field(default_factory=list)
