"""Word segmentation over mixed-script text."""

from __future__ import annotations

from typing import Iterator, Optional

import regex

from .attributes import CharacterAttributeProfile
from .errors import ProtocolViolationError
from .structures import Word


class WordIterator:
    """Restartable cursor that yields words from a text buffer.

    The iterator is initialised once with a character attribute profile and
    can then be pointed at any number of texts with :meth:`set_text`. In
    contraction mode, letter runs joined by mid-letter characters (for example
    ``don't`` or ``hello:hello``) form a single token; otherwise those
    characters act as separators.
    """

    def __init__(self) -> None:
        self._attribute: Optional[CharacterAttributeProfile] = None
        self._pattern: Optional[regex.Pattern] = None
        self._text: Optional[str] = None
        self._position = 0

    @property
    def is_initialized(self) -> bool:
        return self._pattern is not None

    def initialize(
        self,
        attribute: CharacterAttributeProfile,
        allow_contraction: bool,
    ) -> bool:
        """Prepare the word rules for ``attribute``; return False on failure."""

        try:
            pattern = attribute.compile(allow_contraction)
        except regex.error:
            return False
        self._attribute = attribute
        self._pattern = pattern
        self._text = None
        self._position = 0
        return True

    def set_text(self, text: str) -> bool:
        """Point the cursor at the start of ``text``.

        Returns False when the iterator has not been initialised. The caller
        keeps ownership of ``text``; a ``None`` buffer is a caller bug.
        """

        if text is None:
            raise ProtocolViolationError("WordIterator.set_text requires a text buffer.")
        if not self.is_initialized:
            return False
        self._text = text
        self._position = 0
        return True

    def get_next_word(self) -> Optional[Word]:
        """Return the next word after the cursor, or None once exhausted."""

        if self._text is None or self._pattern is None or self._attribute is None:
            return None
        match = self._pattern.search(self._text, self._position)
        if match is None:
            self._position = len(self._text)
            return None
        start, end = match.span()
        self._position = end
        return Word(
            text=self._attribute.normalize(match.group()),
            start=start,
            length=end - start,
        )

    def reset(self) -> None:
        """Rewind to the beginning of the current text."""

        self._position = 0

    def __iter__(self) -> Iterator[Word]:
        while True:
            word = self.get_next_word()
            if word is None:
                return
            yield word


def segment_words(
    text: str,
    attribute: CharacterAttributeProfile,
    *,
    allow_contraction: bool = True,
) -> Iterator[Word]:
    """Lazily yield the words of ``text``; yields nothing if rules fail to build."""

    iterator = WordIterator()
    if not iterator.initialize(attribute, allow_contraction):
        return iter(())
    iterator.set_text(text)
    return iter(iterator)
