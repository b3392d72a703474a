"""Exactly-once completion protocol for asynchronous block checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Callable, List, Optional, Sequence

from .errors import ProtocolViolationError
from .structures import BlockCheckOutcome, CheckResult


class TextCheckingCompletion(ABC):
    """Host-side handle notified once when a block check settles."""

    @abstractmethod
    def did_finish_checking_text(self, results: Sequence[CheckResult]) -> None:
        """Receive the misspelled spans found in the checked block."""

    @abstractmethod
    def did_cancel_checking_text(self) -> None:
        """Learn that the block check produced no usable result."""


class RequestState(Enum):
    """Lifecycle of a single asynchronous block check."""

    IDLE = auto()
    REQUESTED = auto()
    COMPLETED = auto()
    CANCELLED = auto()


SettledCallback = Callable[["PendingRequest"], None]


class PendingRequest:
    """Guards a completion handle so that it is signalled exactly once.

    The request leaves the bridge's bookkeeping before the host is notified,
    so the host may start a new request from inside its completion callback.
    Any attempt to signal a settled request is a programming error and raises
    :class:`ProtocolViolationError`.
    """

    def __init__(
        self,
        completion: TextCheckingCompletion,
        *,
        on_settled: Optional[SettledCallback] = None,
    ) -> None:
        self.completion = completion
        self.state = RequestState.IDLE
        self._on_settled = on_settled

    @property
    def settled(self) -> bool:
        return self.state in {RequestState.COMPLETED, RequestState.CANCELLED}

    def mark_requested(self) -> None:
        if self.state is not RequestState.IDLE:
            raise ProtocolViolationError(
                f"Cannot dispatch a block check from state {self.state.name}."
            )
        self.state = RequestState.REQUESTED

    def finish(self, results: Sequence[CheckResult]) -> None:
        if self.state is not RequestState.REQUESTED:
            raise ProtocolViolationError(
                f"Cannot finish a block check from state {self.state.name}."
            )
        self._settle(RequestState.COMPLETED)
        self.completion.did_finish_checking_text(list(results))

    def cancel(self) -> None:
        if self.settled:
            raise ProtocolViolationError(
                f"Block check already settled as {self.state.name}."
            )
        self._settle(RequestState.CANCELLED)
        self.completion.did_cancel_checking_text()

    def _settle(self, state: RequestState) -> None:
        self.state = state
        callback, self._on_settled = self._on_settled, None
        if callback is not None:
            callback(self)


class CollectingCompletion(TextCheckingCompletion):
    """Completion handle that stores the outcome for later inspection."""

    def __init__(self) -> None:
        self.outcome: Optional[BlockCheckOutcome] = None
        self.signals = 0

    @property
    def done(self) -> bool:
        return self.outcome is not None

    def did_finish_checking_text(self, results: Sequence[CheckResult]) -> None:
        self.signals += 1
        self.outcome = BlockCheckOutcome(cancelled=False, results=list(results))

    def did_cancel_checking_text(self) -> None:
        self.signals += 1
        self.outcome = BlockCheckOutcome(cancelled=True)

    @property
    def results(self) -> List[CheckResult]:
        if self.outcome is None:
            return []
        return self.outcome.results
