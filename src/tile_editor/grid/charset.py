"""Allowed character repertoire of the display and per-character classification."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import AbstractSet, Iterator, NamedTuple, Optional

from .dimensions import LINE_SEPARATOR, ConfigurationError

CZECH_LETTERS = "áčďéěíňóřšťúůýž"

ALLOWED_CHARACTERS: frozenset[str] = frozenset(
    string.ascii_letters
    + string.digits
    + " "
    + string.punctuation.replace("`", "")
    + CZECH_LETTERS
    + CZECH_LETTERS.upper()
)


class CharacterValidator:
    """Membership test against a fixed allow-list.

    Validation is advisory: editing never rejects a character, the editor
    only flags it so the host can render it differently.
    """

    __slots__ = ("_allowed",)

    def __init__(self, allowed: AbstractSet[str] = ALLOWED_CHARACTERS) -> None:
        self._allowed = frozenset(allowed)

    @property
    def allowed(self) -> frozenset[str]:
        return self._allowed

    def is_allowed(self, ch: str) -> bool:
        return ch in self._allowed

    def disallowed(self, text: str) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for ch in text:
            if ch in ("\n", "\r") or ch in self._allowed:
                continue
            seen.setdefault(ch, None)
        return tuple(seen)


DEFAULT_VALIDATOR = CharacterValidator()


class CharClass(NamedTuple):
    char: str
    allowed: bool
    row_overflow: bool
    row: int
    column: int


@dataclass(frozen=True, slots=True)
class BufferClassification:
    """Restartable view of a buffer, one ``CharClass`` per character.

    Separators are part of the sequence (always ``allowed``) so a renderer
    can rebuild line structure from it alone. Every ``iter()`` starts over.
    """

    buffer: str
    rows: int
    validator: CharacterValidator = DEFAULT_VALIDATOR

    def __iter__(self) -> Iterator[CharClass]:
        row = 0
        column = 0
        for ch in self.buffer:
            overflow = row >= self.rows
            if ch == LINE_SEPARATOR:
                yield CharClass(ch, True, overflow, row, column)
                row += 1
                column = 0
                continue
            yield CharClass(ch, self.validator.is_allowed(ch), overflow, row, column)
            column += 1

    def lines(self) -> Iterator[list[CharClass]]:
        """Group the classification per buffer line, separators excluded."""

        current: list[CharClass] = []
        for item in self:
            if item.char == LINE_SEPARATOR:
                yield current
                current = []
            else:
                current.append(item)
        yield current

    @property
    def has_disallowed(self) -> bool:
        return any(not item.allowed for item in self)

    @property
    def overflow_rows(self) -> int:
        return max(0, self.buffer.count(LINE_SEPARATOR) + 1 - self.rows)


def classify(
    buffer: str, rows: int, *, validator: Optional[CharacterValidator] = None
) -> BufferClassification:
    if rows <= 0:
        raise ConfigurationError(f"Grid rows must be positive, got {rows!r}", rows=rows)
    return BufferClassification(buffer, rows, validator or DEFAULT_VALIDATOR)


__all__ = [
    "ALLOWED_CHARACTERS",
    "CZECH_LETTERS",
    "CharacterValidator",
    "DEFAULT_VALIDATOR",
    "CharClass",
    "BufferClassification",
    "classify",
]
