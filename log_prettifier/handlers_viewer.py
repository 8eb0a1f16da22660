from __future__ import annotations

import logging
from typing import Any, Optional

import gradio as gr

from .config import Settings
from .exceptions import HandoffStoreError
from .handoff_store import HandoffStore
from .search import FrameThrottle, Layout
from .trigger import capture_selection
from .viewer import ViewerState, render

logger = logging.getLogger(__name__)


def layout_for(settings: Settings) -> Layout:
    return Layout(line_height=settings.line_height)


def jump_choices(view):
    return [(f"Match {m.index + 1} ({m.percent:.0f}%)", m.index) for m in view.markers]


def build_view_outputs(state: ViewerState, settings: Settings):
    """Shared outputs: state, badge, output html, counter, hit-map, jump dropdown."""
    view = render(state, layout_for(settings), settings.scroll_margin)
    active = state.navigation.active_index if state.navigation.count else None
    return (
        state,
        view.badge,
        view.html,
        view.counter,
        view.hitmap_html,
        gr.update(choices=jump_choices(view), value=active),
    )


def load_viewer(settings: Settings):
    record = HandoffStore(settings.store_path).load()
    return build_view_outputs(ViewerState.from_handoff(record), settings)


def prettify_handler(raw_text: str, settings: Settings):
    """Trigger path: detect, store the handoff record, reopen the viewer from it."""
    store = HandoffStore(settings.store_path)
    try:
        result = capture_selection(raw_text, store)
    except HandoffStoreError as exc:
        logger.error(str(exc))
        return (*build_view_outputs(ViewerState(), settings), "", f"Error saving result: {exc}")

    state = ViewerState.from_handoff(store.load())
    status = f"Detected {result.kind.upper()} ({len(result.formatted)} chars)."
    return (*build_view_outputs(state, settings), "", status)


def search_handler(state: Optional[ViewerState], term: str, settings: Settings):
    state = state or ViewerState()
    return build_view_outputs(state.with_search(term), settings)


def clear_search_handler(state: Optional[ViewerState], settings: Settings):
    state = state or ViewerState()
    return (*build_view_outputs(state.cleared(), settings), "")


def next_match_handler(state: Optional[ViewerState], settings: Settings):
    state = state or ViewerState()
    return build_view_outputs(state.go_next(), settings)


def previous_match_handler(state: Optional[ViewerState], settings: Settings):
    state = state or ViewerState()
    return build_view_outputs(state.go_previous(), settings)


def jump_to_match_handler(state: Optional[ViewerState], index: Any, settings: Settings):
    state = state or ViewerState()
    try:
        target = int(index)
    except (TypeError, ValueError):
        return build_view_outputs(state, settings)
    return build_view_outputs(state.go_to(target, scroll=True), settings)


def _sync_outputs(state: ViewerState, throttle: FrameThrottle, settings: Settings):
    _, _, _, counter, hitmap_html, jump = build_view_outputs(state, settings)
    return state, throttle, counter, hitmap_html, jump


def _synced(state: ViewerState, top: float, settings: Settings) -> ViewerState:
    return state.scrolled(top, layout_for(settings), settings.scroll_tolerance, settings.scroll_margin)


def scroll_handler(
    state: Optional[ViewerState],
    throttle: Optional[FrameThrottle],
    scroll_top: Any,
    settings: Settings,
):
    """Passive sync of the active match while the user scrolls.

    The text pane is left alone so the browser keeps its scroll position; only
    state, counter, hit-map and jump list are refreshed. `throttle` belongs to
    the browser session; a refused position waits for `scroll_settled_handler`.
    """
    state = state or ViewerState()
    throttle = throttle or FrameThrottle()
    try:
        top = float(scroll_top or 0)
    except (TypeError, ValueError):
        top = 0.0
    if state.navigation.count and throttle.admit(top):
        state = _synced(state, top, settings)
    return _sync_outputs(state, throttle, settings)


def scroll_settled_handler(state: Optional[ViewerState], throttle: Optional[FrameThrottle], settings: Settings):
    """Apply the last scroll position the throttle held back, once scrolling stops."""
    state = state or ViewerState()
    throttle = throttle or FrameThrottle()
    top = throttle.flush()
    if top is not None and state.navigation.count:
        state = _synced(state, top, settings)
    return _sync_outputs(state, throttle, settings)
