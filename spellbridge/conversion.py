"""Decoding of values returned by external spell checkers."""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, TypeVar

from .errors import ConversionError
from .structures import CheckResult

T = TypeVar("T")

Converter = Callable[[Any], T]


def to_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConversionError(f"Expected a boolean, got {type(value).__name__}.")
    return value


def to_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ConversionError(f"Expected a string, got {type(value).__name__}.")
    return value


def _to_int(item: Mapping[str, Any], key: str) -> int:
    value = item.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConversionError(f"Check result field '{key}' must be an integer.")
    return value


def to_check_result(value: Any) -> CheckResult:
    """Decode a single ``{"location": int, "length": int}`` entry."""

    if isinstance(value, CheckResult):
        location, length = value.location, value.length
    elif isinstance(value, Mapping):
        location = _to_int(value, "location")
        length = _to_int(value, "length")
    else:
        raise ConversionError(
            f"Check result must be a mapping, got {type(value).__name__}."
        )
    if location < 0:
        raise ConversionError("Check result location must not be negative.")
    if length <= 0:
        raise ConversionError("Check result length must be positive.")
    return CheckResult(location=location, length=length)


def to_check_results(value: Any) -> List[CheckResult]:
    """Decode a sequence of check results, preserving the producer's order."""

    if isinstance(value, (str, bytes, Mapping)) or value is None:
        raise ConversionError("Check results must be a sequence of mappings.")
    try:
        items = list(value)
    except TypeError as exc:
        raise ConversionError("Check results must be a sequence of mappings.") from exc
    return [to_check_result(item) for item in items]
