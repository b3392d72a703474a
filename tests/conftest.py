from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, List, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from spellbridge.completion import TextCheckingCompletion  # noqa: E402
from spellbridge.structures import CheckResult  # noqa: E402


class FakeChecker:
    """Checker double that accepts a fixed vocabulary and records calls."""

    def __init__(
        self,
        vocabulary: Iterable[str] = (),
        *,
        block_result=None,
        suggestions=None,
    ) -> None:
        self.vocabulary = set(vocabulary)
        self.block_result = [] if block_result is None else block_result
        self.suggestions = dict(suggestions or {})
        self.queried: List[str] = []
        self.block_calls: List[str] = []

    def is_word_correct(self, word: str) -> bool:
        self.queried.append(word)
        return word in self.vocabulary

    def suggest_correction(self, word: str):
        return self.suggestions.get(word)

    def check_block(self, text: str):
        self.block_calls.append(text)
        return self.block_result


class RecordingCompletion(TextCheckingCompletion):
    """Completion double that fails the test on a second signal."""

    def __init__(self) -> None:
        self.finished: List[Sequence[CheckResult]] = []
        self.cancelled = 0

    @property
    def signals(self) -> int:
        return len(self.finished) + self.cancelled

    def did_finish_checking_text(self, results: Sequence[CheckResult]) -> None:
        if self.signals:
            pytest.fail("completion signalled more than once")
        self.finished.append(results)

    def did_cancel_checking_text(self) -> None:
        if self.signals:
            pytest.fail("completion signalled more than once")
        self.cancelled += 1


@pytest.fixture
def completion() -> RecordingCompletion:
    return RecordingCompletion()
