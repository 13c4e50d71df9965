"""Render resolved entries as tagged picker input."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from tagmenu.tag import COMPACT, DECIMAL, TagCodec

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tagmenu.entry import ResolvedEntry


@dc.dataclass(frozen=True, slots=True)
class DisplayConfig:
    """How menu lines are laid out.

    Attributes
    ----------
    numbered:
        Prefix each line with its visible decimal index instead of hiding a
        compact tag after the name.
    separator:
        Visible text between the number and the name. ``True`` selects the
        codec default, ``False`` or ``None`` shows nothing. Ignored in
        compact mode.

    """

    numbered: bool = False
    separator: str | bool | None = True

    @property
    def codec(self) -> TagCodec:
        """Return the codec matching the layout."""
        return DECIMAL if self.numbered else COMPACT

    @property
    def visible_separator(self) -> str:
        """Return the separator text actually written after the tag."""
        if self.separator is True:
            return self.codec.separator or ""
        if not self.separator:
            return ""
        return self.separator


def render_line(index: int, entry: ResolvedEntry, display: DisplayConfig) -> str:
    """Render one menu line carrying the tag for ``index``."""
    tag = display.codec.encode(index)
    if display.numbered:
        return f"{tag}{display.visible_separator}{entry.name}"
    # Keep the visible name first so the picker's own sorting is unaffected.
    return f"{entry.name}{tag}"


def render(
    entries: cabc.Sequence[ResolvedEntry],
    display: DisplayConfig | None = None,
) -> str:
    """Render the whole menu, one newline-terminated line per entry."""
    layout = display or DisplayConfig()
    return "".join(
        f"{render_line(index, entry, layout)}\n" for index, entry in enumerate(entries)
    )


__all__ = ["DisplayConfig", "render", "render_line"]
