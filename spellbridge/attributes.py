"""Locale-specific character attributes driving word segmentation."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Tuple

import regex

from .scripts import scripts_for_language, split_language_tag

# Characters that join two letter runs into a single contraction token.
DEFAULT_MID_LETTERS = "'\u2019:\u00b7"

MID_LETTER_EXTRAS = {
    "he": "\u05f3\u05f4\"",
    "iw": "\u05f3\u05f4\"",
    "yi": "\u05f3\u05f4\"",
}

ARABIC_HARAKAT = r"[\u064b-\u065f\u0670]"
HEBREW_POINTS = r"[\u0591-\u05bd\u05bf\u05c1\u05c2\u05c4\u05c5\u05c7]"

# Marks removed from words before they reach the checker.
IGNORED_MARKS = {
    "ar": ARABIC_HARAKAT,
    "fa": ARABIC_HARAKAT,
    "ur": ARABIC_HARAKAT,
    "he": HEBREW_POINTS,
    "iw": HEBREW_POINTS,
    "yi": HEBREW_POINTS,
}

APOSTROPHE_FOLDS = {"\u2019": "'", "\u02bc": "'"}


@dataclass(frozen=True)
class CharacterAttributeProfile:
    """Immutable description of which characters form words for a locale."""

    language: str
    scripts: Tuple[str, ...]
    mid_letters: str = DEFAULT_MID_LETTERS
    ignored_marks: str | None = None

    @classmethod
    def for_language(cls, language: str) -> "CharacterAttributeProfile":
        primary, _ = split_language_tag(language)
        return cls(
            language=language,
            scripts=scripts_for_language(language),
            mid_letters=DEFAULT_MID_LETTERS + MID_LETTER_EXTRAS.get(primary, ""),
            ignored_marks=IGNORED_MARKS.get(primary),
        )

    def word_pattern(self, allow_contraction: bool) -> str:
        """Build the regular expression source matching one word token.

        A word is a run of letters from the profile's scripts, each optionally
        followed by combining marks. With contractions allowed, runs separated
        by a single mid-letter character are joined into one token.
        """

        script_class = "".join(f"\\p{{Script={name}}}" for name in self.scripts)
        letter = f"[\\p{{L}}&&[{script_class}]]\\p{{M}}*"
        run = f"(?:{letter})+"
        if not allow_contraction or not self.mid_letters:
            return run
        joiners = "".join(regex.escape(char) for char in self.mid_letters)
        return f"{run}(?:[{joiners}]{run})*"

    def compile(self, allow_contraction: bool) -> regex.Pattern:
        """Compile the word pattern; raises ``regex.error`` for unknown scripts."""

        return regex.compile(self.word_pattern(allow_contraction), regex.V1)

    def normalize(self, word: str) -> str:
        """Return the form of ``word`` that is handed to the checker."""

        if self.ignored_marks:
            word = regex.sub(self.ignored_marks, "", word)
        word = "".join(APOSTROPHE_FOLDS.get(char, char) for char in word)
        return unicodedata.normalize("NFC", word)
