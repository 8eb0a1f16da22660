from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .richtext import ACTIVE_MARK_STYLE, MARK_STYLE, MATCH_INDEX_PREFIX, Run, overlay, strip_style

logger = logging.getLogger(__name__)

NO_MATCH = -1
FRAME_INTERVAL = 1.0 / 60


@dataclass(frozen=True)
class Match:
    index: int
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class NavigationState:
    matches: Tuple[Match, ...] = ()
    active_index: int = NO_MATCH

    def __post_init__(self):
        if self.matches:
            if not 0 <= self.active_index < len(self.matches):
                raise ValueError(f"active_index {self.active_index} out of range for {len(self.matches)} matches")
        elif self.active_index != NO_MATCH:
            raise ValueError("active_index must be -1 when there are no matches")

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def active(self) -> Optional[Match]:
        if self.active_index == NO_MATCH:
            return None
        return self.matches[self.active_index]


EMPTY_NAVIGATION = NavigationState()


def find_matches(text: str, term: str) -> Tuple[Match, ...]:
    """Case-insensitive literal occurrences of `term` in document order."""
    if not term:
        return ()
    pattern = re.compile(re.escape(term), re.IGNORECASE)
    return tuple(
        Match(i, m.start(), m.end(), m.group(0))
        for i, m in enumerate(pattern.finditer(text))
    )


def clear() -> NavigationState:
    return EMPTY_NAVIGATION


def apply(text: str, term: str) -> NavigationState:
    matches = find_matches(text, term)
    if not matches:
        return EMPTY_NAVIGATION
    logger.debug(f"Search {term!r}: {len(matches)} matches")
    return NavigationState(matches, 0)


def set_active(state: NavigationState, index: int) -> NavigationState:
    if not 0 <= index < state.count:
        return state
    return NavigationState(state.matches, index)


def next_match(state: NavigationState) -> NavigationState:
    if not state.count:
        return state
    return set_active(state, (state.active_index + 1) % state.count)


def previous_match(state: NavigationState) -> NavigationState:
    if not state.count:
        return state
    return set_active(state, (state.active_index - 1 + state.count) % state.count)


def counter_text(state: NavigationState) -> str:
    if not state.count:
        return "0 / 0"
    return f"{state.active_index + 1} / {state.count}"


def highlight_runs(runs: Sequence[Run], state: NavigationState) -> List[Run]:
    """Overlay match marks on already colored runs; any previous marks are removed first."""
    base = strip_style(runs, MARK_STYLE)
    if not state.count:
        return base
    intervals = [(m.start, m.end) for m in state.matches]

    def style_for(i: int) -> Tuple[str, ...]:
        mark = ACTIVE_MARK_STYLE if i == state.active_index else MARK_STYLE
        return (mark, f"{MATCH_INDEX_PREFIX}{i}")

    return overlay(base, intervals, style_for)


# --- geometry -----------------------------------------------------------------

@dataclass(frozen=True)
class Layout:
    """Vertical metrics of the rendered text, in pixels."""
    line_height: int = 18
    padding: int = 0


@dataclass(frozen=True)
class HitMarker:
    index: int
    percent: float
    active: bool


def line_count(text: str) -> int:
    return text.count('\n') + 1


def content_height(text: str, layout: Layout) -> int:
    return line_count(text) * layout.line_height + 2 * layout.padding


def match_offsets(text: str, state: NavigationState, layout: Layout) -> List[int]:
    """Top offset of each match's line, in document order."""
    offsets: List[int] = []
    line = 0
    pos = 0
    for m in state.matches:
        line += text.count('\n', pos, m.start)
        pos = m.start
        offsets.append(layout.padding + line * layout.line_height)
    return offsets


def hitmap_positions(text: str, state: NavigationState, layout: Layout) -> List[HitMarker]:
    height = content_height(text, layout)
    markers: List[HitMarker] = []
    for i, offset in enumerate(match_offsets(text, state, layout)):
        percent = min(100.0, max(0.0, offset / height * 100)) if height else 0.0
        markers.append(HitMarker(i, percent, i == state.active_index))
    return markers


def scroll_target(offset: int, margin: int) -> int:
    """Scroll position that puts `offset` near the top with `margin` pixels above it."""
    return max(0, offset - margin)


def sync_to_scroll(
    state: NavigationState,
    offsets: Sequence[int],
    scroll_top: float,
    tolerance: int = 8,
    margin: int = 0,
) -> NavigationState:
    """Make the first match at or below the viewport top active, without scrolling.

    The viewport top is read the way `scroll_target` writes it: `margin` pixels
    above the match. A position that is exactly where the active match was
    scrolled to keeps that match, even when the target was clamped to zero.
    When every match sits above the viewport the active index is kept.
    """
    if state.active_index != NO_MATCH:
        landed = scroll_target(offsets[state.active_index], margin)
        if abs(scroll_top - landed) <= tolerance:
            return state
    # TODO: bisect over offsets instead of scanning once match lists get large.
    for i, offset in enumerate(offsets):
        if offset >= scroll_top + margin - tolerance:
            return set_active(state, i)
    return state


class FrameThrottle:
    """Lets at most one call through per animation frame.

    A value refused by `admit` is held as pending; `flush` hands back the latest
    one so the end of a burst is never lost.
    """

    def __init__(self, interval: float = FRAME_INTERVAL, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self.clock = clock
        self._last: Optional[float] = None
        self.pending: Optional[float] = None

    def ready(self) -> bool:
        now = self.clock()
        if self._last is not None and now - self._last < self.interval:
            return False
        self._last = now
        return True

    def admit(self, value: float) -> bool:
        if self.ready():
            self.pending = None
            return True
        self.pending = value
        return False

    def flush(self) -> Optional[float]:
        value, self.pending = self.pending, None
        return value

    def reset(self):
        self._last = None
        self.pending = None
