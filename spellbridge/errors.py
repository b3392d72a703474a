"""Error definitions for the spellbridge checker."""

from __future__ import annotations


class SpellBridgeError(Exception):
    """Base exception for all custom errors."""


class CheckerConfigurationError(SpellBridgeError):
    """Raised when a spell checker is misconfigured."""


class CheckerError(SpellBridgeError):
    """Raised when a spell checker fails permanently."""


class ConversionError(SpellBridgeError):
    """Raised when a checker result cannot be decoded into the expected type."""


class ProtocolViolationError(SpellBridgeError):
    """Raised when the host uses the bridge outside of its contract.

    Unlike checker failures, which are absorbed, these indicate a caller bug
    and must never be silenced.
    """
