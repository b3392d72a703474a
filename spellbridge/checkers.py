"""Reference spell checker implementations the bridge can delegate to."""

from __future__ import annotations

import json
import os
import pathlib
import sys
from typing import Any, Dict, Iterable, List, Optional, Protocol

from spellchecker import SpellChecker

from .attributes import CharacterAttributeProfile
from .errors import CheckerConfigurationError, CheckerError
from .segmenter import segment_words


class SpellCheckerCapability(Protocol):
    """Shape of the external checker; every method is optional in practice."""

    def is_word_correct(self, word: str) -> Any:
        ...

    def suggest_correction(self, word: str) -> Any:
        ...

    def check_block(self, text: str) -> Any:
        ...


class AcceptAllChecker:
    """A checker that accepts every word (useful for testing)."""

    def is_word_correct(self, word: str) -> bool:
        return True

    def suggest_correction(self, word: str) -> Optional[str]:
        return None

    def check_block(self, text: str) -> List[Dict[str, int]]:
        return []


class WordListChecker:
    """Checker backed by a pyspellchecker frequency list built from a word list.

    Lookups ignore case, so ``Paris``, ``paris`` and ``PARIS`` are all accepted
    once any of them is listed.
    """

    def __init__(self, words: Iterable[str], *, language: str = "en-US") -> None:
        self._spell = SpellChecker(language=None, case_sensitive=False)
        self._spell.word_frequency.load_words(
            [
                entry
                for entry in (raw.strip() for raw in words)
                if entry and not entry.startswith("#")
            ]
        )
        self._attribute = CharacterAttributeProfile.for_language(language)

    @classmethod
    def from_file(
        cls,
        path: str | os.PathLike[str],
        *,
        language: str = "en-US",
    ) -> "WordListChecker":
        dictionary_path = pathlib.Path(path).expanduser()
        try:
            content = dictionary_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CheckerConfigurationError(
                f"Dictionary file could not be read: {dictionary_path} ({exc})"
            ) from exc
        return cls(content.splitlines(), language=language)

    def __len__(self) -> int:
        return len(self._spell.word_frequency.dictionary)

    def is_word_correct(self, word: str) -> bool:
        return bool(self._spell.known([word]))

    def suggest_correction(self, word: str) -> Optional[str]:
        if self.is_word_correct(word):
            return None
        suggestion = self._spell.correction(word)
        if not suggestion or suggestion == word.lower():
            return None
        # Preserve case
        if word.isupper() and len(word) > 1:
            return suggestion.upper()
        if word[:1].isupper():
            return suggestion[:1].upper() + suggestion[1:]
        return suggestion

    def check_block(self, text: str) -> List[Dict[str, int]]:
        results: List[Dict[str, int]] = []
        for word in segment_words(text, self._attribute):
            if self.is_word_correct(word.text):
                continue
            parts = list(
                segment_words(word.text, self._attribute, allow_contraction=False)
            )
            if parts and all(self.is_word_correct(part.text) for part in parts):
                continue
            results.append({"location": word.start, "length": word.length})
        return results


class OpenAISpellChecker:
    """Checker that asks an OpenAI model which words are misspelled."""

    DEFAULT_MODEL = "gpt-5-mini"

    def __init__(
        self,
        *,
        language: str = "en-US",
        api_key: str | None = None,
        model: str | None = None,
        debug: bool = False,
    ) -> None:
        self.language = language
        self.model = model or self.DEFAULT_MODEL
        self.debug = debug
        self._attribute = CharacterAttributeProfile.for_language(language)
        self._client = self._build_client(api_key or os.getenv("OPENAI_API_KEY"))
        self._verdicts: Dict[str, bool] = {}

    def _build_client(self, api_key: str | None) -> Any:
        if not api_key:
            raise CheckerConfigurationError(
                "OpenAI configuration missing. Set OPENAI_API_KEY or choose a "
                "different checker."
            )
        try:
            from openai import OpenAI  # type: ignore
        except ImportError as exc:  # pragma: no cover - import guard
            raise CheckerConfigurationError(
                "OpenAI Python SDK not installed. Install with `pip install openai`."
            ) from exc
        return OpenAI(api_key=api_key)

    def is_word_correct(self, word: str) -> bool:
        if word not in self._verdicts:
            self._verdicts[word] = word not in self._find_misspellings(word)
        return self._verdicts[word]

    def suggest_correction(self, word: str) -> Optional[str]:
        misspellings = self._find_misspellings(word)
        return misspellings.get(word)

    def check_block(self, text: str) -> List[Dict[str, int]]:
        misspellings = self._find_misspellings(text)
        if not misspellings:
            return []
        return [
            {"location": word.start, "length": word.length}
            for word in segment_words(text, self._attribute)
            if word.text in misspellings
        ]

    def _find_misspellings(self, text: str) -> Dict[str, Optional[str]]:
        """Return misspelled words of ``text`` mapped to their corrections."""

        system_prompt = (
            "You are a meticulous proofreader. Return only JSON. "
            "List every misspelled word in the provided text for the given "
            "language. Respond strictly with an object shaped as "
            '{"misspellings": [{"word": "...", "suggestion": "..."}]}. '
            "Copy each misspelled word exactly as it appears. Use null when "
            "no suggestion exists. Do not report grammar or style issues. "
            "Do not wrap the JSON in markdown code fences."
        )
        user_payload = {"language": self.language, "text": text}
        self._log_debug("checker.request.payload", user_payload)

        try:
            response = self._client.responses.create(
                model=self.model,
                input=[
                    {
                        "role": "system",
                        "content": [{"type": "input_text", "text": system_prompt}],
                    },
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "input_text",
                                "text": json.dumps(user_payload, ensure_ascii=False),
                            }
                        ],
                    },
                ],
            )
        except Exception as exc:  # pragma: no cover - network call
            raise CheckerError(f"Spell checking service unavailable: {exc}") from exc

        output_text = getattr(response, "output_text", None)
        if hasattr(output_text, "value"):
            output_text = output_text.value
        if not output_text:
            raise CheckerError("Spell checking response empty or unrecognised.")
        self._log_debug("checker.response.raw", output_text)
        return self._parse_misspellings(str(output_text))

    def _parse_misspellings(self, text: str) -> Dict[str, Optional[str]]:
        try:
            payload = json.loads(_strip_code_fence(text))
        except json.JSONDecodeError as exc:
            raise CheckerError(f"Spell checking service returned invalid JSON: {exc}") from exc

        entries = payload.get("misspellings") if isinstance(payload, dict) else payload
        if not isinstance(entries, list):
            raise CheckerError(
                "Spell checking response malformed: could not find misspellings list."
            )

        mapping: Dict[str, Optional[str]] = {}
        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("word"), str):
                raise CheckerError("Spell checking response malformed: missing fields.")
            suggestion = entry.get("suggestion")
            mapping[entry["word"]] = suggestion if isinstance(suggestion, str) else None
        return mapping

    def _log_debug(self, label: str, payload: Any) -> None:
        if not self.debug:
            return
        if isinstance(payload, (dict, list)):
            message = json.dumps(payload, ensure_ascii=False, indent=2)
        else:
            message = str(payload)
        print(f"[spellbridge][checker-debug] {label}:\n{message}", file=sys.stderr)


def _strip_code_fence(text: str) -> str:
    """Remove leading/trailing markdown code fences if present."""

    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped

    # Drop opening fence and optional language hint.
    first_newline = stripped.find("\n")
    if first_newline == -1:
        return stripped
    body = stripped[first_newline + 1 :]
    closing_index = body.rfind("```")
    if closing_index != -1:
        body = body[:closing_index]
    return body.strip()


def build_checker(
    name: str | None,
    *,
    language: str = "en-US",
    dictionary: str | os.PathLike[str] | None = None,
    api_key: str | None = None,
    model: str | None = None,
    debug: bool = False,
) -> SpellCheckerCapability:
    """Factory to create checkers by name."""

    normalized = (name or "wordlist").strip().lower()
    if normalized in {"wordlist", "word-list", "word_list", "dictionary"}:
        if not dictionary:
            raise CheckerConfigurationError(
                "The word list checker needs a dictionary file. "
                "Set SPELLBRIDGE_DICTIONARY or pass --dictionary."
            )
        return WordListChecker.from_file(dictionary, language=language)
    if normalized in {"openai", "gpt", "llm"}:
        return OpenAISpellChecker(
            language=language, api_key=api_key, model=model, debug=debug
        )
    if normalized in {"accept", "accept-all", "accept_all", "noop", "mock"}:
        return AcceptAllChecker()
    raise CheckerConfigurationError(f"Unknown spell checker '{name}'.")
