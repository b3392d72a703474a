"""Command line interface for the spellbridge checker."""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Iterable, Optional

from .checkers import build_checker
from .configuration import SpellBridgeConfig, get_settings, validate_checker_settings
from .errors import CheckerConfigurationError, ProtocolViolationError, SpellBridgeError
from .runner import CHECKER_FAILED, CheckSummary, SpellCheckRunner, read_input


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spellbridge",
        description="Check the spelling of a text through an external spell checker.",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Text to check. Use --input-file to read it from a file instead.",
    )
    parser.add_argument(
        "-i",
        "--input-file",
        help="Path to a UTF-8 text file to check.",
    )
    parser.add_argument(
        "-l",
        "--language",
        help="Language tag for word breaking (default: SPELLBRIDGE_LANGUAGE or en-US).",
    )
    parser.add_argument(
        "-c",
        "--checker",
        help="Spell checker identifier: wordlist, accept, or openai.",
    )
    parser.add_argument(
        "-d",
        "--dictionary",
        help="Word list file used by the wordlist checker.",
    )
    parser.add_argument(
        "--block",
        action="store_true",
        help="Check the whole text in one asynchronous block request.",
    )
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Ask the checker for an auto-correction of each misspelling.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed progress information.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log checker calls and results to stderr for troubleshooting.",
    )
    return parser


def execute_check(
    *,
    text: str | None,
    input_file: str | None,
    settings: SpellBridgeConfig,
    language: str | None,
    checker_name: str | None,
    dictionary: str | None,
    block: bool,
    suggest: bool,
    verbose: bool,
    debug: bool,
) -> tuple[int, CheckSummary | None, str | None]:
    """Execute a check and return the exit code, summary, and message."""

    language = language or settings.SPELLBRIDGE_LANGUAGE
    checker_name = checker_name or settings.SPELLBRIDGE_CHECKER
    dictionary = dictionary or settings.SPELLBRIDGE_DICTIONARY

    source = "<text>"
    if input_file:
        input_path = pathlib.Path(input_file).expanduser().resolve()
        try:
            text = read_input(input_path)
        except FileNotFoundError as exc:
            return 2, None, str(exc)
        except SpellBridgeError as exc:
            return 2, None, str(exc)
        source = str(input_path)

    try:
        checker = build_checker(
            checker_name,
            language=language,
            dictionary=dictionary,
            api_key=settings.OPENAI_API_KEY,
            model=settings.SPELLBRIDGE_OPENAI_MODEL,
            debug=debug,
        )
    except CheckerConfigurationError as exc:
        return 2, None, str(exc)

    runner = SpellCheckRunner(
        checker=checker,
        checker_name=checker_name,
        language=language,
        block=block,
        suggest=suggest,
        verbose=verbose,
        debug=debug,
    )

    try:
        summary = runner.run(text or "", source=source)
    except ProtocolViolationError as exc:
        return 2, None, f"Internal protocol error: {exc}"
    except SpellBridgeError as exc:
        return 2, None, str(exc)
    except KeyboardInterrupt:
        return 2, None, "Spell check interrupted by user."

    if summary.cancel_reason == CHECKER_FAILED:
        return 2, summary, None
    return (1 if summary.findings else 0), summary, None


def print_summary(summary: CheckSummary) -> None:
    """Output a friendly report once checking completes."""

    print("\nSpell check complete.")
    print(f"  Source:          {summary.source}")
    print(f"  Language:        {summary.language}")
    print(f"  Checker:         {summary.checker_name} ({summary.mode} mode)")
    print(f"  Characters:      {summary.total_characters}")
    if summary.cancelled:
        print(f"  Result:          cancelled ({summary.cancel_reason})")
    else:
        print(f"  Misspellings:    {summary.total_findings}")
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds")
    for finding in summary.findings:
        line = f"    - {finding.word!r} at {finding.start} (length {finding.length})"
        if finding.suggestion:
            line += f" -> {finding.suggestion!r}"
        print(line)


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.text is None and args.input_file is None:
        parser.error("provide the text to check or --input-file")

    try:
        settings = get_settings()
        if args.checker is None and args.dictionary is None:
            validate_checker_settings(settings)
    except CheckerConfigurationError as exc:
        print(exc)
        return 2

    exit_code, summary, message = execute_check(
        text=args.text,
        input_file=args.input_file,
        settings=settings,
        language=args.language,
        checker_name=args.checker,
        dictionary=args.dictionary,
        block=args.block,
        suggest=args.suggest,
        verbose=args.verbose,
        debug=bool(args.debug or settings.SPELLBRIDGE_DEBUG),
    )

    if message:
        print(message)
    if summary:
        print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
