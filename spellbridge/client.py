"""Bridge between a host text engine and an external spell checker."""

from __future__ import annotations

import inspect
import json
import sys
from abc import ABC, abstractmethod
from enum import Flag, auto
from functools import partial
from typing import Any, List, Optional, Sequence, TypeVar

from .attributes import CharacterAttributeProfile
from .completion import PendingRequest, TextCheckingCompletion
from .conversion import Converter, to_bool, to_check_results, to_text
from .errors import ConversionError, ProtocolViolationError
from .scripts import has_word_characters
from .segmenter import WordIterator
from .structures import CheckResult, Misspelling

T = TypeVar("T")

IS_WORD_CORRECT = "is_word_correct"
SUGGEST_CORRECTION = "suggest_correction"
CHECK_BLOCK = "check_block"

_NO_RESULT = object()


class TextCheckingType(Flag):
    """Kinds of checking a host may ask for."""

    SPELLING = auto()
    GRAMMAR = auto()


class SpellChecking(ABC):
    """Capability surface a host text engine expects from a spell checker."""

    @abstractmethod
    def check_single_span(self, text: str) -> Optional[Misspelling]:
        """Return the first misspelling in ``text``, if any."""

    @abstractmethod
    def check_text_of_paragraph(
        self,
        text: str,
        mask: TextCheckingType,
        results: Optional[List[CheckResult]],
    ) -> None:
        """Retired synchronous paragraph check."""

    @abstractmethod
    def request_block_check(
        self,
        text: str,
        completion: TextCheckingCompletion,
        markers: Sequence[int] = (),
        marker_offsets: Sequence[int] = (),
    ) -> PendingRequest:
        """Check a whole block and signal ``completion`` exactly once."""

    @abstractmethod
    def get_auto_correction(self, word: str) -> Optional[str]:
        """Return the checker's correction for ``word``, if it offers one."""

    def show_spelling_ui(self, show: bool) -> None:
        """Spelling panels belong to the UI layer."""

    def is_showing_spelling_ui(self) -> bool:
        return False

    def update_spelling_ui_with_misspelled_word(self, word: str) -> None:
        """Spelling panels belong to the UI layer."""


class SpellCheckClient(SpellChecking):
    """Segments host text and delegates word judgements to a checker object.

    ``checker`` is any object exposing some of ``is_word_correct(word)``,
    ``suggest_correction(word)`` and ``check_block(text)``. Every missing
    method or malformed answer degrades to "correctly spelled" (or to a
    cancelled block check) instead of surfacing an error to the host.
    """

    def __init__(
        self,
        language: str,
        checker: Any = None,
        *,
        debug: bool = False,
    ) -> None:
        self.language = language
        self.debug = debug
        self._checker = checker
        self._character_attributes = CharacterAttributeProfile.for_language(language)

        # Splits host text into words, contractions or concatenated words.
        self._text_iterator = WordIterator()
        # Splits a concatenated word into its components.
        self._contraction_iterator = WordIterator()

        self._pending: Optional[PendingRequest] = None

        # Resolved once for the lifetime of the bridge.
        self._is_word_correct = self._resolve_method(IS_WORD_CORRECT)

    @property
    def character_attributes(self) -> CharacterAttributeProfile:
        return self._character_attributes

    @property
    def pending_request(self) -> Optional[PendingRequest]:
        return self._pending

    def check_single_span(self, text: str) -> Optional[Misspelling]:
        if not text or self._is_word_correct is None:
            return None

        if (
            not self._text_iterator.is_initialized
            and not self._text_iterator.initialize(self._character_attributes, True)
        ):
            self._log_debug(
                "text_iterator.initialize",
                "failed; treating text as correctly spelled",
            )
            return None

        self._text_iterator.set_text(text)
        for word in self._text_iterator:
            if self.query_spelling(word.text):
                continue
            # A concatenation of valid words (e.g. "hello:hello") is valid.
            if self.is_valid_contraction(word.text):
                continue
            return Misspelling(
                start=word.start,
                length=word.length,
                word=text[word.start:word.end],
            )
        return None

    def check_text_of_paragraph(
        self,
        text: str,
        mask: TextCheckingType,
        results: Optional[List[CheckResult]],
    ) -> None:
        if results is None:
            return
        if not mask & TextCheckingType.SPELLING:
            return
        raise ProtocolViolationError("check_text_of_paragraph should never be called.")

    def request_block_check(
        self,
        text: str,
        completion: TextCheckingCompletion,
        markers: Sequence[int] = (),
        marker_offsets: Sequence[int] = (),
    ) -> PendingRequest:
        if self._pending is not None:
            raise ProtocolViolationError(
                "A block check is already in flight; requests must be serialised."
            )

        request = PendingRequest(completion, on_settled=self._release)
        self._pending = request

        if not text or not has_word_characters(text, 0):
            request.cancel()
            return request

        request.mark_requested()
        value = self._invoke_checker_method(CHECK_BLOCK, text)
        if value is _NO_RESULT:
            request.cancel()
        elif _is_future(value):
            value.add_done_callback(partial(self._settle_from_future, request))
        else:
            self._settle(request, value)
        return request

    def get_auto_correction(self, word: str) -> Optional[str]:
        return self.call_checker_method(SUGGEST_CORRECTION, word, to_text)

    def query_spelling(self, word: str) -> bool:
        """Ask the checker whether ``word`` is correct, failing open."""

        if self._is_word_correct is None:
            return True
        try:
            result = self._is_word_correct(word)
        except Exception as exc:
            self._log_debug("checker.is_word_correct.error", f"{word!r}: {exc}")
            return True
        _discard_awaitable(result)
        try:
            return to_bool(result)
        except ConversionError as exc:
            self._log_debug("checker.is_word_correct.unconvertible", f"{word!r}: {exc}")
            return True

    def is_valid_contraction(self, contraction: str) -> bool:
        """Return whether every component of ``contraction`` is a valid word.

        Used as a fallback when the text iterator yields a concatenated word
        that is not in the dictionary (e.g. "in'n'out") but whose parts are.
        """

        if (
            not self._contraction_iterator.is_initialized
            and not self._contraction_iterator.initialize(
                self._character_attributes, False
            )
        ):
            self._log_debug(
                "contraction_iterator.initialize",
                "failed; treating word as correctly spelled",
            )
            return True

        self._contraction_iterator.set_text(contraction)
        for word in self._contraction_iterator:
            if not self.query_spelling(word.text):
                return False
        return True

    def call_checker_method(
        self,
        method: str,
        text: str,
        convert: Converter[T],
    ) -> Optional[T]:
        """Invoke ``method`` on the checker and decode its result.

        Returns None when the checker is unbound, lacks the method, raises, or
        answers with something ``convert`` rejects.
        """

        value = self._invoke_checker_method(method, text)
        if value is _NO_RESULT:
            return None
        return self._convert(method, value, convert)

    def _resolve_method(self, name: str) -> Any:
        if self._checker is None:
            return None
        method = getattr(self._checker, name, None)
        return method if callable(method) else None

    def _invoke_checker_method(self, name: str, text: str) -> Any:
        method = self._resolve_method(name)
        if method is None:
            self._log_debug(f"checker.{name}.missing", "method not available")
            return _NO_RESULT
        try:
            value = method(text)
        except Exception as exc:
            self._log_debug(f"checker.{name}.error", str(exc))
            return _NO_RESULT
        self._log_debug(f"checker.{name}.result", value)
        return value

    def _convert(self, name: str, value: Any, convert: Converter[T]) -> Optional[T]:
        _discard_awaitable(value)
        try:
            return convert(value)
        except ConversionError as exc:
            self._log_debug(f"checker.{name}.unconvertible", str(exc))
            return None
        except Exception as exc:
            # Lazy results run checker code while they are consumed.
            self._log_debug(f"checker.{name}.error", str(exc))
            return None

    def _settle(self, request: PendingRequest, value: Any) -> None:
        results = self._convert(CHECK_BLOCK, value, to_check_results)
        if results is None:
            request.cancel()
        else:
            request.finish(results)

    def _settle_from_future(self, request: PendingRequest, future: Any) -> None:
        if future.cancelled():
            request.cancel()
            return
        error = future.exception()
        if error is not None:
            self._log_debug("checker.check_block.error", str(error))
            request.cancel()
            return
        self._settle(request, future.result())

    def _release(self, request: PendingRequest) -> None:
        if self._pending is request:
            self._pending = None

    def _log_debug(self, label: str, payload: Any) -> None:
        """Emit structured debug information when enabled."""

        if not self.debug:
            return
        try:
            if isinstance(payload, (dict, list)):
                message = json.dumps(payload, ensure_ascii=False, indent=2, default=str)
            else:
                message = str(payload)
        except Exception:
            message = repr(payload)
        print(f"[spellbridge][debug] {label}:\n{message}", file=sys.stderr)


def _is_future(value: Any) -> bool:
    return callable(getattr(value, "add_done_callback", None))


def _discard_awaitable(value: Any) -> None:
    # Coroutines are never awaited on this path; close them to avoid warnings.
    if inspect.iscoroutine(value):
        value.close()
