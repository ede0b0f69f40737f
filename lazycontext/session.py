"""Trigger dispatch, throttling, and the recompute-and-diff cycle.

The host forwards editor events as ``Trigger`` values to
``ContextSession.handle``. Update triggers recompute the context stack and
publish the header only when it changed; leave/save triggers close the
header; resize/restore triggers repaint the last computed header.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .config import THROTTLE_DELAY_SECONDS, ContextConfig
from .context.differ import RenderState, diff_render
from .context.header import ContextView, compose_view, display_lines, header_spans
from .context.stack import ContextEntry, build_context_stack, node_at_cursor
from .document import Document

logger = logging.getLogger(__name__)


class Trigger(Enum):
    """Host events the session reacts to."""

    CURSOR_MOVED_VERTICAL = "cursor_moved_vertical"
    WIN_SCROLLED = "win_scrolled"
    BUF_ENTERED = "buf_entered"
    WIN_ENTERED = "win_entered"
    WIN_LEAVE = "win_leave"
    RESIZED = "resized"
    SESSION_SAVE_PRE = "session_save_pre"
    SESSION_SAVE_POST = "session_save_post"


UPDATE_TRIGGERS = frozenset(
    {
        Trigger.CURSOR_MOVED_VERTICAL,
        Trigger.WIN_SCROLLED,
        Trigger.BUF_ENTERED,
        Trigger.WIN_ENTERED,
    }
)
CLOSE_TRIGGERS = frozenset({Trigger.WIN_LEAVE, Trigger.SESSION_SAVE_PRE})
REOPEN_TRIGGERS = frozenset({Trigger.RESIZED, Trigger.SESSION_SAVE_POST})


@dataclass(frozen=True)
class ViewportState:
    """Cursor and window geometry; ``first_visible_line`` is 1-based."""

    cursor_row: int
    cursor_column: int
    first_visible_line: int
    width: int
    height: int = 0
    gutter_width: int = 0
    special: bool = False


class ContextRenderer(Protocol):
    def show(self, view: ContextView) -> None: ...

    def close(self) -> None: ...


def _timer_schedule(delay: float, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


class Throttle:
    """Run at most one deferred callback at a time; requests made while one is pending are dropped."""

    def __init__(
        self,
        delay: float = THROTTLE_DELAY_SECONDS,
        schedule: Callable[[float, Callable[[], None]], None] | None = None,
    ) -> None:
        self.delay = delay
        self._schedule = schedule or _timer_schedule
        self._lock = threading.Lock()
        self._pending = False

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending

    def request(self, callback: Callable[[], None]) -> bool:
        """Schedule ``callback`` unless a run is already pending."""
        with self._lock:
            if self._pending:
                return False
            self._pending = True

        def run() -> None:
            try:
                callback()
            finally:
                with self._lock:
                    self._pending = False

        self._schedule(self.delay, run)
        return True


class ContextSession:
    """Owns the render state of one window's sticky header."""

    def __init__(
        self,
        config: ContextConfig,
        renderer: ContextRenderer,
        document_provider: Callable[[], Document | None],
        viewport_provider: Callable[[], ViewportState],
        throttle: Throttle | None = None,
    ) -> None:
        self.config = config
        self._renderer = renderer
        self._document_provider = document_provider
        self._viewport_provider = viewport_provider
        self._throttle = throttle or Throttle()
        self._lock = threading.RLock()
        self.enabled = False
        self.state = RenderState()
        self.entries: list[ContextEntry] = []
        self.view: ContextView | None = None
        self._entries_document: Document | None = None
        self._last_cursor_row: int | None = None

    # Enable / disable

    def start(self) -> None:
        """Enable the session when the configuration asks for it."""
        if self.config.enable:
            self.enable()

    def enable(self) -> None:
        self.enabled = True
        self.request_update()

    def disable(self) -> None:
        with self._lock:
            self.enabled = False
            self._clear()
            self._last_cursor_row = None

    def toggle(self) -> None:
        if self.enabled:
            self.disable()
        else:
            self.enable()

    # Dispatch

    def handle(self, trigger: Trigger) -> None:
        if not self.enabled:
            return
        if trigger in CLOSE_TRIGGERS:
            self.close()
        elif trigger in REOPEN_TRIGGERS:
            self.open(force=True)
        else:
            self.request_update()

    def cursor_moved(self) -> bool:
        """Fire ``CURSOR_MOVED_VERTICAL`` when the cursor changed rows."""
        row = self._viewport_provider().cursor_row
        if row == self._last_cursor_row:
            return False
        self._last_cursor_row = row
        self.handle(Trigger.CURSOR_MOVED_VERTICAL)
        return True

    def request_update(self) -> None:
        if self.config.throttle:
            self._throttle.request(self.update_context)
        else:
            self.update_context()

    # Cycle

    def compute_entries(self, document: Document, viewport: ViewportState) -> list[ContextEntry]:
        cursor_node = node_at_cursor(document.arena, viewport.cursor_row, viewport.cursor_column)
        if document.arena is None or cursor_node is None:
            return []
        return build_context_stack(
            document.arena,
            cursor_node,
            viewport.first_visible_line,
            document.language,
            self.config.pattern_set,
            max_lines=self.config.max_lines,
        )

    def update_context(self) -> bool:
        """Recompute the stack and publish it if it changed.

        Returns whether the renderer was handed a new view. A failing cycle is
        logged and leaves the displayed header and render state as they were.
        Cycles that run after ``disable()`` do nothing.
        """
        with self._lock:
            if not self.enabled:
                return False
            try:
                viewport = self._viewport_provider()
                if viewport.special:
                    self._clear()
                    return False
                document = self._document_provider()
                if document is None or document.arena is None:
                    self._clear()
                    return False

                entries = self.compute_entries(document, viewport)
                if not entries:
                    self._clear()
                    return False

                published = self._publish(document, viewport, entries)
                self.entries = entries
                self._entries_document = document
                return published
            except Exception:
                logger.exception("Failed to get context")
                return False

    def open(self, force: bool = False) -> bool:
        """Repaint the last computed entries against the current viewport."""
        with self._lock:
            document = self._entries_document
            if not self.enabled or not self.entries or document is None:
                return False
            try:
                return self._publish(document, self._viewport_provider(), self.entries, force=force)
            except Exception:
                logger.exception("Failed to open context")
                return False

    def close(self) -> None:
        with self._lock:
            self.state = RenderState()
            if self.view is not None:
                self.view = None
                self._renderer.close()

    def _clear(self) -> None:
        """Close the header and forget the entries a repaint would reuse."""
        self.entries = []
        self._entries_document = None
        self.close()

    def _publish(
        self,
        document: Document,
        viewport: ViewportState,
        entries: list[ContextEntry],
        force: bool = False,
    ) -> bool:
        assert document.arena is not None
        displays = display_lines(
            document.arena,
            document.lines,
            entries,
            document.language,
            self.config.pattern_set,
            terminal_types=self.config.terminal_types,
            skip_leading_types=self.config.skip_leading_types,
        )
        state, changed = diff_render(self.state, entries, [display.text for display in displays])
        if not changed and not force:
            logger.debug("context unchanged, skipping repaint")
            return False

        spans = header_spans(entries, displays, document.captures)
        view = compose_view(displays, spans, viewport.width, viewport.gutter_width)
        self._renderer.show(view)
        self.state = state
        self.view = view
        return True
