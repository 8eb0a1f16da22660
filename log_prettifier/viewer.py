from __future__ import annotations

import html
from dataclasses import dataclass, replace
from typing import List, Mapping, Optional

from . import search
from .detection import KIND_TEXT, KINDS
from .handoff_store import DEFAULT_DETECTED, DEFAULT_LOGS, KEY_DETECTED, KEY_LOGS
from .highlight import tokenize
from .richtext import Run, merge_runs, runs_from_tokens, runs_to_html
from .search import EMPTY_NAVIGATION, Layout, NavigationState


@dataclass(frozen=True)
class ViewerState:
    """Everything the viewer shows, replaced wholesale on every transition."""
    kind: str = KIND_TEXT
    formatted: str = DEFAULT_LOGS
    term: str = ''
    navigation: NavigationState = EMPTY_NAVIGATION
    scroll_top: float = 0.0
    scroll_requested: bool = False

    @classmethod
    def from_handoff(cls, record: Optional[Mapping[str, str]]) -> 'ViewerState':
        record = record or {}
        kind = record.get(KEY_DETECTED) or DEFAULT_DETECTED
        if kind not in KINDS:
            kind = KIND_TEXT
        formatted = record.get(KEY_LOGS) or DEFAULT_LOGS
        return cls(kind=kind, formatted=formatted)

    def with_search(self, term: str) -> 'ViewerState':
        term = term or ''
        if not term:
            return self.cleared()
        navigation = search.apply(self.formatted, term)
        return replace(self, term=term, navigation=navigation, scroll_requested=navigation.count > 0)

    def cleared(self) -> 'ViewerState':
        return replace(self, term='', navigation=search.clear(), scroll_requested=False)

    def go_to(self, index: int, scroll: bool = True) -> 'ViewerState':
        if not 0 <= index < self.navigation.count:
            return replace(self, scroll_requested=False)
        return replace(self, navigation=search.set_active(self.navigation, index), scroll_requested=scroll)

    def go_next(self) -> 'ViewerState':
        if not self.navigation.count:
            return replace(self, scroll_requested=False)
        return replace(self, navigation=search.next_match(self.navigation), scroll_requested=True)

    def go_previous(self) -> 'ViewerState':
        if not self.navigation.count:
            return replace(self, scroll_requested=False)
        return replace(self, navigation=search.previous_match(self.navigation), scroll_requested=True)

    def scrolled(self, scroll_top: float, layout: Layout, tolerance: int, margin: int = 0) -> 'ViewerState':
        offsets = search.match_offsets(self.formatted, self.navigation, layout)
        navigation = search.sync_to_scroll(self.navigation, offsets, scroll_top, tolerance, margin)
        return replace(self, navigation=navigation, scroll_top=scroll_top, scroll_requested=False)


@dataclass(frozen=True)
class RenderedView:
    html: str
    counter: str
    badge: str
    hitmap_html: str
    markers: List[search.HitMarker]
    scroll_to: Optional[int]


def badge_text(kind: str) -> str:
    return f"Detected: {kind.upper()}"


def base_runs(state: ViewerState) -> List[Run]:
    return merge_runs(runs_from_tokens(state.formatted, tokenize(state.formatted, state.kind)))


def render_hitmap(markers: List[search.HitMarker]) -> str:
    ticks = []
    for marker in markers:
        cls = 'hit active' if marker.active else 'hit'
        ticks.append(
            f'<div class="{cls}" data-index="{marker.index}" '
            f'style="top: {marker.percent:.2f}%" title="Match {marker.index + 1}"></div>'
        )
    return f'<div class="hitmap">{"".join(ticks)}</div>'


def render(state: ViewerState, layout: Layout, scroll_margin: int = 40) -> RenderedView:
    runs = search.highlight_runs(base_runs(state), state.navigation)
    markers = search.hitmap_positions(state.formatted, state.navigation, layout)

    scroll_to = None
    active = state.navigation.active_index
    if state.scroll_requested and active != search.NO_MATCH:
        offset = search.match_offsets(state.formatted, state.navigation, layout)[active]
        scroll_to = search.scroll_target(offset, scroll_margin)

    body = runs_to_html(runs)
    scroll_attr = '' if scroll_to is None else f' data-scroll-to="{scroll_to}"'
    view_html = (
        f'<pre id="prettifier-output" class="output kind-{html.escape(state.kind)}"'
        f'{scroll_attr}>{body}</pre>'
    )
    return RenderedView(
        html=view_html,
        counter=search.counter_text(state.navigation),
        badge=badge_text(state.kind),
        hitmap_html=render_hitmap(markers),
        markers=markers,
        scroll_to=scroll_to,
    )
