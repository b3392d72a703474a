"""High-level orchestration for checking a text with the bridge."""

from __future__ import annotations

import pathlib
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .checkers import SpellCheckerCapability
from .client import SpellCheckClient
from .completion import CollectingCompletion
from .errors import SpellBridgeError
from .scripts import has_word_characters

NO_CHECKABLE_WORDS = "no checkable words"
CHECKER_FAILED = "the spell checker gave no usable result"


@dataclass
class Finding:
    """A misspelled span located in the checked text."""

    start: int
    length: int
    word: str
    suggestion: Optional[str] = None


@dataclass
class CheckSummary:
    """Report returned after checking a text."""

    source: str
    language: str
    checker_name: str
    mode: str
    total_characters: int
    cancelled: bool
    elapsed_seconds: float
    findings: List[Finding] = field(default_factory=list)
    cancel_reason: Optional[str] = None

    @property
    def total_findings(self) -> int:
        return len(self.findings)


class SpellCheckRunner:
    """Drives a :class:`SpellCheckClient` the way a text engine would."""

    def __init__(
        self,
        *,
        checker: SpellCheckerCapability,
        checker_name: str,
        language: str,
        block: bool,
        suggest: bool,
        verbose: bool,
        debug: bool,
    ) -> None:
        self.checker_name = checker_name
        self.language = language
        self.block = block
        self.suggest = suggest
        self.verbose = verbose
        self.client = SpellCheckClient(language, checker, debug=debug)

    def run(self, text: str, *, source: str = "<text>") -> CheckSummary:
        start_time = time.time()

        if self.block:
            findings, cancel_reason = self._check_block(text)
        else:
            findings, cancel_reason = self._check_spans(text), None

        if self.suggest:
            for finding in findings:
                finding.suggestion = self.client.get_auto_correction(finding.word)

        return CheckSummary(
            source=source,
            language=self.language,
            checker_name=self.checker_name,
            mode="block" if self.block else "span",
            total_characters=len(text),
            cancelled=cancel_reason is not None,
            elapsed_seconds=time.time() - start_time,
            findings=findings,
            cancel_reason=cancel_reason,
        )

    def _check_spans(self, text: str) -> List[Finding]:
        """Report every misspelling by re-checking the remainder after each hit."""

        findings: List[Finding] = []
        offset = 0
        while offset < len(text):
            misspelling = self.client.check_single_span(text[offset:])
            if misspelling is None:
                break
            start = offset + misspelling.start
            findings.append(
                Finding(start=start, length=misspelling.length, word=misspelling.word)
            )
            if self.verbose:
                print(f"Misspelling at {start}: {misspelling.word}")
            offset = start + misspelling.length
        return findings

    def _check_block(self, text: str) -> tuple[List[Finding], Optional[str]]:
        completion = CollectingCompletion()
        self.client.request_block_check(text, completion)
        if not completion.done or completion.outcome is None:
            # Only synchronous checkers are driven from the command line.
            raise SpellBridgeError("The spell checker did not answer the block check.")
        if completion.outcome.cancelled:
            reason = NO_CHECKABLE_WORDS if not has_word_characters(text) else CHECKER_FAILED
            if self.verbose:
                print(f"Block check cancelled: {reason}.")
            return [], reason

        findings = [
            Finding(
                start=result.location,
                length=result.length,
                word=text[result.location:result.location + result.length],
            )
            for result in sorted(completion.results, key=lambda item: item.location)
        ]
        if self.verbose:
            print(f"Block check finished with {len(findings)} misspellings.")
        return findings, None


def read_input(input_path: pathlib.Path) -> str:
    """Read a UTF-8 text file, validating the path first."""

    if not input_path.exists():
        raise FileNotFoundError(
            "Input file not found. Please provide a readable UTF-8 text file."
        )
    if not input_path.is_file():
        raise SpellBridgeError("Input path must be a file.")
    try:
        return input_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SpellBridgeError(f"Input file is not valid UTF-8: {exc}") from exc
