"""Unicode script classification helpers."""

from __future__ import annotations

import regex

# Any code point whose script is not Common: letters of every script,
# inherited combining marks and unassigned code points all qualify.
WORD_SCRIPT_PATTERN = regex.compile(r"\P{Script=Common}")

DEFAULT_SCRIPT = "Latin"

# Primary script for language subtags; anything missing falls back to Latin.
LANGUAGE_SCRIPTS = {
    "am": "Ethiopic",
    "ar": "Arabic",
    "be": "Cyrillic",
    "bg": "Cyrillic",
    "bn": "Bengali",
    "el": "Greek",
    "fa": "Arabic",
    "gu": "Gujarati",
    "he": "Hebrew",
    "hi": "Devanagari",
    "hy": "Armenian",
    "iw": "Hebrew",
    "ja": "Han",
    "ka": "Georgian",
    "kk": "Cyrillic",
    "km": "Khmer",
    "kn": "Kannada",
    "ko": "Hangul",
    "lo": "Lao",
    "mk": "Cyrillic",
    "ml": "Malayalam",
    "mn": "Cyrillic",
    "mr": "Devanagari",
    "my": "Myanmar",
    "ne": "Devanagari",
    "pa": "Gurmukhi",
    "ru": "Cyrillic",
    "si": "Sinhala",
    "sr": "Cyrillic",
    "ta": "Tamil",
    "te": "Telugu",
    "tg": "Cyrillic",
    "th": "Thai",
    "uk": "Cyrillic",
    "ur": "Arabic",
    "yi": "Hebrew",
    "zh": "Han",
}

# Languages written with more than one script.
COMPANION_SCRIPTS = {
    "ja": ("Hiragana", "Katakana"),
    "ko": ("Han",),
}

# ISO 15924 codes accepted as explicit script subtags.
SCRIPT_SUBTAGS = {
    "arab": "Arabic",
    "armn": "Armenian",
    "beng": "Bengali",
    "cyrl": "Cyrillic",
    "deva": "Devanagari",
    "ethi": "Ethiopic",
    "geor": "Georgian",
    "grek": "Greek",
    "gujr": "Gujarati",
    "guru": "Gurmukhi",
    "hang": "Hangul",
    "hans": "Han",
    "hant": "Han",
    "hebr": "Hebrew",
    "hira": "Hiragana",
    "kana": "Katakana",
    "khmr": "Khmer",
    "knda": "Kannada",
    "kore": "Hangul",
    "laoo": "Lao",
    "latn": "Latin",
    "mlym": "Malayalam",
    "mymr": "Myanmar",
    "sinh": "Sinhala",
    "taml": "Tamil",
    "telu": "Telugu",
    "thai": "Thai",
}


def has_word_characters(text: str, from_index: int = 0) -> bool:
    """Return True when ``text[from_index:]`` holds a code point outside Common.

    Python strings index whole code points, so astral characters are
    classified as a single unit rather than as surrogate halves.
    """

    if from_index < 0:
        from_index = 0
    return WORD_SCRIPT_PATTERN.search(text, from_index) is not None


def split_language_tag(language: str) -> tuple[str, str | None]:
    """Split a BCP-47 style tag into its language and optional script subtag."""

    parts = [part for part in language.replace("_", "-").split("-") if part]
    if not parts:
        return "", None
    primary = parts[0].lower()
    script = None
    for part in parts[1:]:
        if len(part) == 4 and part.isalpha():
            script = part.lower()
            break
    return primary, script


def script_for_language(language: str) -> str:
    """Resolve the primary script name used for word characters of a language.

    An explicit script subtag wins over the language table. Unknown script
    subtags are passed through title-cased so that a bad tag surfaces when the
    word pattern is compiled rather than silently becoming Latin.
    """

    primary, script = split_language_tag(language)
    if script is not None:
        return SCRIPT_SUBTAGS.get(script, script.title())
    return LANGUAGE_SCRIPTS.get(primary, DEFAULT_SCRIPT)


def scripts_for_language(language: str) -> tuple[str, ...]:
    """Return the primary script followed by any companion scripts."""

    primary, script = split_language_tag(language)
    main = script_for_language(language)
    if script is not None:
        return (main,)
    return (main,) + COMPANION_SCRIPTS.get(primary, ())
