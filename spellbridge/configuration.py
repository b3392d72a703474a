"""Prepper-backed configuration loader for spellbridge."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Literal, Mapping

from dotenv import dotenv_values
from prepper import (
    Field,
    IoError,
    SchemaError,
    SchemaModel,
    ValidationError,
    model_validator,
)
from prepper.loaders import _parse_file, _path_to_source, discover_file_paths
from prepper.merge import merge_layer
from prepper.provenance import ProvenanceRecorder

from .errors import CheckerConfigurationError

APP_NAME = "SpellBridge"

CHECKER_SYNONYMS = {
    "word_list": "wordlist",
    "word-list": "wordlist",
    "dictionary": "wordlist",
    "accept_all": "accept",
    "accept-all": "accept",
    "noop": "accept",
    "gpt": "openai",
    "llm": "openai",
}


class SpellBridgeConfig(SchemaModel):
    """Schema describing all supported configuration options."""

    SPELLBRIDGE_LANGUAGE: str = Field(
        default="en-US",
        description="Language tag selecting the word-breaking rules.",
    )
    SPELLBRIDGE_CHECKER: Literal["wordlist", "accept", "openai"] = Field(
        default="wordlist",
        description="External spell checker the bridge delegates to.",
    )
    SPELLBRIDGE_DICTIONARY: str | None = Field(default=None)
    SPELLBRIDGE_OPENAI_MODEL: str | None = Field(default=None)
    SPELLBRIDGE_DEBUG: bool = Field(default=False)
    OPENAI_API_KEY: str | None = Field(default=None, secret=True)

    @model_validator(mode="before")
    def _normalise_checker(data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("SPELLBRIDGE_CHECKER")
            if isinstance(raw_value, str):
                normalized = raw_value.strip().lower()
                normalized = CHECKER_SYNONYMS.get(normalized, normalized)
                if normalized not in {"wordlist", "accept", "openai"}:
                    normalized = "wordlist"
                data["SPELLBRIDGE_CHECKER"] = normalized
        return data


@lru_cache(maxsize=1)
def _load_settings(app_dir: Path | None = None) -> SpellBridgeConfig:
    """Load YAML files, ``.env`` and the environment once; later layers win."""

    base_dir = app_dir or Path.cwd()
    provenance = ProvenanceRecorder()
    try:
        combined: dict[str, Any] = {}
        for path, label in discover_file_paths(
            APP_NAME, "yaml", app_dir=base_dir, extra_paths=None
        ):
            parsed = _parse_file(path, "yaml")
            if not isinstance(parsed, Mapping):
                raise IoError(f"{path}: expected a mapping at the root.")
            merge_layer(
                combined,
                parsed,
                provenance=provenance,
                source=_path_to_source(label, "yaml", path),
                layer="file",
            )
        merge_layer(
            combined,
            _environment_values(base_dir),
            provenance=provenance,
            source="env",
            layer="env",
        )
        return SpellBridgeConfig.validate(combined, provenance=provenance)
    except IoError as exc:
        raise CheckerConfigurationError(f"Configuration files could not be read: {exc}") from exc
    except SchemaError as exc:
        raise CheckerConfigurationError(f"Configuration schema error: {exc}") from exc
    except ValidationError as exc:
        raise CheckerConfigurationError(
            _format_issues(_describe_issue(entry) for entry in exc.to_dict())
        ) from exc


def _environment_values(app_dir: Path) -> dict[str, str]:
    """Settings from ``.env`` overlaid by the process environment."""

    known = set(SpellBridgeConfig.__field_infos__)
    values: dict[str, str] = {}
    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        values.update(
            (key, value)
            for key, value in dotenv_values(dotenv_path).items()
            if key in known and value is not None
        )
    values.update((key, value) for key, value in os.environ.items() if key in known)
    return values


def _describe_issue(entry: Mapping[str, Any]) -> str:
    path = entry.get("path") or ()
    if isinstance(path, (list, tuple)):
        path = ".".join(str(part) for part in path if part)
    message = entry.get("message") or entry.get("msg") or "Invalid value"
    text = f"{path}: {message}" if path else str(message)
    if entry.get("source"):
        text += f" (source: {entry['source']})"
    return text


def _format_issues(issues: Iterable[str]) -> str:
    return "Configuration validation errors detected:\n" + "\n".join(
        f"- {issue}" for issue in issues
    )


def validate_checker_settings(settings: SpellBridgeConfig) -> None:
    """Check that the selected checker has the settings it needs."""

    checker = settings.SPELLBRIDGE_CHECKER
    if checker == "wordlist" and not settings.SPELLBRIDGE_DICTIONARY:
        issue = "SPELLBRIDGE_DICTIONARY is required when SPELLBRIDGE_CHECKER is 'wordlist'."
    elif checker == "openai" and not settings.OPENAI_API_KEY:
        issue = "OPENAI_API_KEY is required when SPELLBRIDGE_CHECKER is 'openai'."
    else:
        return
    raise CheckerConfigurationError(_format_issues([issue]))


def get_settings(app_dir: Path | None = None) -> SpellBridgeConfig:
    """Return the validated settings, loading them on first use."""

    return _load_settings(app_dir=app_dir)
