from __future__ import annotations

from types import SimpleNamespace

import pytest

from spellbridge.configuration import (
    _describe_issue,
    _environment_values,
    _format_issues,
    validate_checker_settings,
)
from spellbridge.errors import CheckerConfigurationError


def settings(**values):
    base = {
        "SPELLBRIDGE_CHECKER": "wordlist",
        "SPELLBRIDGE_DICTIONARY": None,
        "OPENAI_API_KEY": None,
    }
    base.update(values)
    return SimpleNamespace(**base)


def test_word_list_checker_needs_a_dictionary():
    with pytest.raises(CheckerConfigurationError, match="SPELLBRIDGE_DICTIONARY"):
        validate_checker_settings(settings())
    validate_checker_settings(settings(SPELLBRIDGE_DICTIONARY="words.txt"))


def test_openai_checker_needs_an_api_key():
    with pytest.raises(CheckerConfigurationError, match="OPENAI_API_KEY"):
        validate_checker_settings(settings(SPELLBRIDGE_CHECKER="openai"))
    validate_checker_settings(settings(SPELLBRIDGE_CHECKER="openai", OPENAI_API_KEY="k"))


def test_accept_checker_needs_nothing():
    validate_checker_settings(settings(SPELLBRIDGE_CHECKER="accept"))


def test_validation_errors_are_listed_with_their_source():
    message = _format_issues(
        _describe_issue(entry)
        for entry in [
            {
                "path": ["SPELLBRIDGE_DEBUG"],
                "message": "not a boolean",
                "source": "env",
            },
            {"path": [], "msg": "broken"},
        ]
    )
    assert message.splitlines() == [
        "Configuration validation errors detected:",
        "- SPELLBRIDGE_DEBUG: not a boolean (source: env)",
        "- broken",
    ]


def test_environment_overrides_dotenv_and_ignores_unknown_keys(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text(
        "SPELLBRIDGE_LANGUAGE=fr-FR\nSPELLBRIDGE_CHECKER=accept\nUNRELATED=1\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SPELLBRIDGE_LANGUAGE", "de-DE")
    monkeypatch.delenv("SPELLBRIDGE_CHECKER", raising=False)

    values = _environment_values(tmp_path)

    assert values["SPELLBRIDGE_LANGUAGE"] == "de-DE"
    assert values["SPELLBRIDGE_CHECKER"] == "accept"
    assert "UNRELATED" not in values
