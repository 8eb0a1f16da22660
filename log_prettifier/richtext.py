"""Rich text as a flat list of (text, styles) runs.

Highlighting never mutates runs in place: every pass returns a new list, so
clearing and re-applying a search overlay is a pure function of its inputs.
"""
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple

from .highlight import Token

MARK_STYLE = 'mark'
ACTIVE_MARK_STYLE = 'mark-active'
MATCH_INDEX_PREFIX = 'mark-index-'


@dataclass(frozen=True)
class Run:
    text: str
    styles: Tuple[str, ...] = ()


def plain_text(runs: Iterable[Run]) -> str:
    return ''.join(run.text for run in runs)


def runs_from_tokens(text: str, tokens: Sequence[Token]) -> List[Run]:
    runs: List[Run] = []
    pos = 0
    for token in tokens:
        if token.start > pos:
            runs.append(Run(text[pos:token.start]))
        runs.append(Run(token.text, (f"tok-{token.type.value}",)))
        pos = token.end
    if pos < len(text):
        runs.append(Run(text[pos:]))
    return runs


def merge_runs(runs: Iterable[Run]) -> List[Run]:
    """Join neighbouring runs that carry the same styles and drop empty ones."""
    merged: List[Run] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].styles == run.styles:
            merged[-1] = Run(merged[-1].text + run.text, run.styles)
        else:
            merged.append(run)
    return merged


def overlay(
    runs: Sequence[Run],
    intervals: Sequence[Tuple[int, int]],
    style_for: Callable[[int], Tuple[str, ...]],
) -> List[Run]:
    """Add `style_for(i)` to every piece of text covered by `intervals[i]`.

    Intervals are sorted, non-overlapping offsets into `plain_text(runs)`. Runs
    are split at interval edges, so an interval may straddle any number of runs.
    """
    out: List[Run] = []
    idx = 0
    offset = 0
    for run in runs:
        run_start = offset
        run_end = offset + len(run.text)
        pos = run_start
        while pos < run_end:
            while idx < len(intervals) and intervals[idx][1] <= pos:
                idx += 1
            if idx >= len(intervals) or intervals[idx][0] >= run_end:
                out.append(Run(run.text[pos - run_start:], run.styles))
                break
            start, end = intervals[idx]
            if start > pos:
                out.append(Run(run.text[pos - run_start:start - run_start], run.styles))
                pos = start
            piece_end = min(end, run_end)
            out.append(Run(run.text[pos - run_start:piece_end - run_start], run.styles + style_for(idx)))
            pos = piece_end
        offset = run_end
    return out


def strip_style(runs: Iterable[Run], prefix: str) -> List[Run]:
    """Remove every style starting with `prefix`, then merge the pieces back."""
    cleaned = (Run(run.text, tuple(s for s in run.styles if not s.startswith(prefix))) for run in runs)
    return merge_runs(cleaned)


def _css_classes(styles: Sequence[str]) -> str:
    return ' '.join(s for s in styles if not s.startswith(MARK_STYLE))


def _match_attr(styles: Sequence[str]) -> str:
    for style in styles:
        if style.startswith(MATCH_INDEX_PREFIX):
            return f' data-match="{style[len(MATCH_INDEX_PREFIX):]}"'
    return ''


def runs_to_html(runs: Iterable[Run]) -> str:
    """Escape and wrap runs; search marks become `<mark>` around the token span.

    Marks tagged with a match index carry it as `data-match`.
    """
    parts: List[str] = []
    for run in runs:
        body = html.escape(run.text, quote=False)
        classes = _css_classes(run.styles)
        if classes:
            body = f'<span class="{classes}">{body}</span>'
        if ACTIVE_MARK_STYLE in run.styles:
            body = f'<mark class="mark active"{_match_attr(run.styles)}>{body}</mark>'
        elif MARK_STYLE in run.styles:
            body = f'<mark class="mark"{_match_attr(run.styles)}>{body}</mark>'
        parts.append(body)
    return ''.join(parts)
