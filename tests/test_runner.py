from __future__ import annotations

from types import SimpleNamespace

import pytest

from spellbridge.checkers import AcceptAllChecker, WordListChecker
from spellbridge.cli import execute_check, print_summary
from spellbridge.errors import SpellBridgeError
from spellbridge.runner import (
    CHECKER_FAILED,
    NO_CHECKABLE_WORDS,
    Finding,
    SpellCheckRunner,
    read_input,
)

WORDS = ["the", "cat", "sat", "on", "mat"]


def make_runner(*, block=False, suggest=False, checker=None):
    return SpellCheckRunner(
        checker=checker or WordListChecker(WORDS),
        checker_name="wordlist",
        language="en-US",
        block=block,
        suggest=suggest,
        verbose=False,
        debug=False,
    )


def make_settings(**overrides):
    values = {
        "SPELLBRIDGE_LANGUAGE": "en-US",
        "SPELLBRIDGE_CHECKER": "wordlist",
        "SPELLBRIDGE_DICTIONARY": None,
        "SPELLBRIDGE_OPENAI_MODEL": None,
        "SPELLBRIDGE_DEBUG": False,
        "OPENAI_API_KEY": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_span_mode_reports_every_misspelling_in_order():
    summary = make_runner().run("teh cat sat on teh mta")

    assert summary.mode == "span"
    assert not summary.cancelled
    assert [(f.start, f.length, f.word) for f in summary.findings] == [
        (0, 3, "teh"),
        (15, 3, "teh"),
        (19, 3, "mta"),
    ]


def test_block_mode_sorts_findings_and_adds_suggestions():
    summary = make_runner(block=True, suggest=True).run("the cat sat on teh mta")

    assert summary.mode == "block"
    assert summary.findings == [
        Finding(start=15, length=3, word="teh", suggestion="the"),
        Finding(start=19, length=3, word="mta", suggestion="mat"),
    ]


def test_block_mode_on_script_less_text_is_cancelled():
    summary = make_runner(block=True).run("12 + 30 = 42")

    assert summary.cancelled
    assert summary.cancel_reason == NO_CHECKABLE_WORDS
    assert summary.total_findings == 0


def test_block_mode_requires_a_synchronous_answer():
    class Deferred:
        def check_block(self, text):
            from concurrent.futures import Future

            return Future()

    with pytest.raises(SpellBridgeError):
        make_runner(block=True, checker=Deferred()).run("teh cat")


def test_read_input_validates_the_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_input(tmp_path / "missing.txt")
    with pytest.raises(SpellBridgeError):
        read_input(tmp_path)

    path = tmp_path / "text.txt"
    path.write_text("teh cat", encoding="utf-8")
    assert read_input(path) == "teh cat"


def test_execute_check_exit_codes(tmp_path):
    dictionary = tmp_path / "words.txt"
    dictionary.write_text("\n".join(WORDS), encoding="utf-8")
    settings = make_settings(SPELLBRIDGE_DICTIONARY=str(dictionary))

    options = dict(
        input_file=None,
        settings=settings,
        language=None,
        checker_name=None,
        dictionary=None,
        block=False,
        suggest=False,
        verbose=False,
        debug=False,
    )

    code, summary, message = execute_check(text="the cat sat", **options)
    assert (code, message) == (0, None)
    assert summary is not None and summary.total_findings == 0

    code, summary, _ = execute_check(text="teh cat", **options)
    assert code == 1
    assert summary is not None and summary.findings[0].word == "teh"


def test_execute_check_reads_input_files(tmp_path):
    path = tmp_path / "text.txt"
    path.write_text("anything goes", encoding="utf-8")

    code, summary, message = execute_check(
        text=None,
        input_file=str(path),
        settings=make_settings(),
        language="de-DE",
        checker_name="accept",
        dictionary=None,
        block=True,
        suggest=False,
        verbose=False,
        debug=False,
    )

    assert code == 0 and message is None
    assert summary is not None
    assert summary.source == str(path.resolve())
    assert summary.language == "de-DE"


def test_execute_check_reports_configuration_problems(tmp_path):
    code, summary, message = execute_check(
        text="teh",
        input_file=None,
        settings=make_settings(),
        language=None,
        checker_name=None,
        dictionary=None,
        block=False,
        suggest=False,
        verbose=False,
        debug=False,
    )
    assert code == 2 and summary is None
    assert "dictionary" in message

    code, _, message = execute_check(
        text=None,
        input_file=str(tmp_path / "missing.txt"),
        settings=make_settings(),
        language=None,
        checker_name="accept",
        dictionary=None,
        block=False,
        suggest=False,
        verbose=False,
        debug=False,
    )
    assert code == 2
    assert "not found" in message


def test_print_summary_lists_findings(capsys):
    summary = make_runner(suggest=True, checker=WordListChecker(WORDS)).run("teh cat")
    print_summary(summary)

    output = capsys.readouterr().out
    assert "Misspellings:    1" in output
    assert "'teh' at 0 (length 3) -> 'the'" in output


def test_accept_all_runner_finds_nothing():
    summary = make_runner(checker=AcceptAllChecker()).run("qwzx plmk")
    assert summary.findings == []


class BrokenBlockChecker:
    def is_word_correct(self, word):
        return True

    def check_block(self, text):
        raise RuntimeError("dictionary service offline")


def test_block_mode_tells_checker_failures_from_empty_text():
    summary = make_runner(block=True, checker=BrokenBlockChecker()).run("teh cat")

    assert summary.cancelled
    assert summary.cancel_reason == CHECKER_FAILED
    assert summary.findings == []


def test_print_summary_names_the_cancel_reason(capsys):
    print_summary(make_runner(block=True).run("12 + 30 = 42"))
    print_summary(make_runner(block=True, checker=BrokenBlockChecker()).run("teh cat"))

    output = capsys.readouterr().out
    assert f"cancelled ({NO_CHECKABLE_WORDS})" in output
    assert f"cancelled ({CHECKER_FAILED})" in output
    assert output.count("no checkable words") == 1


def test_execute_check_fails_when_the_checker_gives_no_result(monkeypatch):
    monkeypatch.setattr(
        "spellbridge.cli.build_checker", lambda *args, **kwargs: BrokenBlockChecker()
    )
    options = dict(
        input_file=None,
        settings=make_settings(),
        language=None,
        checker_name="wordlist",
        dictionary=None,
        block=True,
        suggest=False,
        verbose=False,
        debug=False,
    )

    code, summary, message = execute_check(text="teh cat", **options)
    assert code == 2 and message is None
    assert summary is not None and summary.cancel_reason == CHECKER_FAILED

    code, summary, _ = execute_check(text="12 + 30 = 42", **options)
    assert code == 0
    assert summary is not None and summary.cancel_reason == NO_CHECKABLE_WORDS
