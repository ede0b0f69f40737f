"""Repaint gating: compare a freshly computed header against the last publish."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .stack import ContextEntry


@dataclass(frozen=True)
class RenderState:
    """Entries and text of the last published header; the default is the reset state."""

    entries: tuple[ContextEntry, ...] | None = None
    lines: tuple[str, ...] = ()


def lines_changed(previous: Sequence[str], current: Sequence[str]) -> bool:
    """Line-by-line comparison that stops at the first difference."""
    if len(previous) != len(current):
        return True
    for old, new in zip(previous, current):
        if old != new:
            return True
    return False


def diff_render(
    state: RenderState,
    entries: Sequence[ContextEntry],
    lines: Sequence[str],
) -> tuple[RenderState, bool]:
    """Return ``(next_state, should_publish)``.

    Entries are compared by value because every cycle rebuilds the list.
    Nothing needs publishing when both entries and text match the previous
    state, in which case ``state`` is returned unchanged.
    """
    new_entries = tuple(entries)
    if state.entries == new_entries and not lines_changed(state.lines, lines):
        return state, False
    return RenderState(entries=new_entries, lines=tuple(lines)), True
