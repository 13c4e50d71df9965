"""Invisible numeric tags embedded in menu lines.

A tag is an entry index written in a small radix and wrapped between two
copies of a sentinel marker. The compact codec spells digits with zero-width
code points so the tag is invisible in the picker; the decimal codec uses
ASCII digits for the numbered menu mode.

Example:
>>> from tagmenu.tag import COMPACT
>>> COMPACT.decode("firefox" + COMPACT.encode(7))
(7, 'firefox')

"""

from __future__ import annotations

import dataclasses as dc
import struct

#: Largest index representable in the platform's unsigned pointer-sized int.
USIZE_MAX = 2 ** (struct.calcsize("P") * 8) - 1

#: Pop directional isolate; opens and closes every tag.
MARKER = "\u2069"

ZERO_WIDTH_SPACE = "\u200b"
ZERO_WIDTH_NON_JOINER = "\u200c"
ZERO_WIDTH_JOINER = "\u200d"

_TERNARY_DIGITS = ZERO_WIDTH_SPACE + ZERO_WIDTH_NON_JOINER + ZERO_WIDTH_JOINER
_DECIMAL_DIGITS = "0123456789"
_TAG_CHARS = frozenset(MARKER + _TERNARY_DIGITS)
_MIN_RADIX = 2


@dc.dataclass(frozen=True, slots=True)
class TagCodec:
    """Bidirectional mapping between an index and a tag fragment.

    Attributes
    ----------
    digits:
        Digit alphabet; the position of a character is its digit value and
        the alphabet length is the radix.
    marker:
        Sentinel placed before and after the digits.
    separator:
        Visible text shown after the tag in numbered menus, or ``None``.

    """

    digits: str
    marker: str = MARKER
    separator: str | None = None

    def __post_init__(self) -> None:
        """Validate the alphabet."""
        if len(self.digits) < _MIN_RADIX or len(set(self.digits)) != len(self.digits):
            msg = "TagCodec digits must be at least two distinct characters"
            raise ValueError(msg)
        if not self.marker or self.marker in self.digits:
            msg = "TagCodec marker must be non-empty and cannot double as a digit"
            raise ValueError(msg)

    @property
    def radix(self) -> int:
        """Return the numeric base of the codec."""
        return len(self.digits)

    def encode(self, index: int) -> str:
        """Return the tag fragment for ``index``.

        Raises
        ------
        ValueError
            If ``index`` is negative or exceeds ``USIZE_MAX``.

        """
        if not 0 <= index <= USIZE_MAX:
            msg = f"tag index {index} is outside 0..{USIZE_MAX}"
            raise ValueError(msg)
        symbols: list[str] = []
        remaining = index
        while True:
            remaining, digit = divmod(remaining, self.radix)
            symbols.append(self.digits[digit])
            if remaining == 0:
                break
        symbols.reverse()
        return f"{self.marker}{''.join(symbols)}{self.marker}"

    def decode(self, text: str) -> tuple[int, str] | None:
        """Find the first tag in ``text``.

        The first marker opens the tag and the next marker closes it. Returns
        the index together with ``text`` minus the tag, or ``None`` when no
        well-formed tag is present. Never raises for string input.
        """
        start = text.find(self.marker)
        if start < 0:
            return None
        end = text.find(self.marker, start + len(self.marker))
        if end < 0:
            return None
        value = self._parse(text[start + len(self.marker) : end])
        if value is None:
            return None
        return value, text[:start] + text[end + len(self.marker) :]

    def _parse(self, body: str) -> int | None:
        if not body:
            return None
        # Encoded tags never carry leading zero digits.
        if len(body) > 1 and body[0] == self.digits[0]:
            return None
        value = 0
        for char in body:
            digit = self.digits.find(char)
            if digit < 0:
                return None
            value = value * self.radix + digit
            if value > USIZE_MAX:
                return None
        return value


COMPACT = TagCodec(digits=_TERNARY_DIGITS)
DECIMAL = TagCodec(digits=_DECIMAL_DIGITS, separator=": ")


def strip_tag_chars(text: str) -> str:
    """Remove marker and compact digit code points from ``text``."""
    return "".join(char for char in text if char not in _TAG_CHARS)


__all__ = [
    "COMPACT",
    "DECIMAL",
    "MARKER",
    "USIZE_MAX",
    "TagCodec",
    "strip_tag_chars",
]
