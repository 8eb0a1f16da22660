import pytest

from log_prettifier import search
from log_prettifier.highlight import tokenize_json
from log_prettifier.richtext import MARK_STYLE, ACTIVE_MARK_STYLE, Run, merge_runs, plain_text, runs_from_tokens
from log_prettifier.search import EMPTY_NAVIGATION, FrameThrottle, Layout, NavigationState


def test_find_matches_is_case_insensitive():
    matches = search.find_matches('"name": "value"', 'NAME')
    assert len(matches) == 1
    assert (matches[0].start, matches[0].end, matches[0].text) == (1, 5, 'name')


def test_find_matches_document_order():
    matches = search.find_matches('"Name": "surname"', 'name')
    assert [m.text for m in matches] == ['Name', 'name']
    assert [m.index for m in matches] == [0, 1]


def test_find_matches_is_literal():
    assert len(search.find_matches('a.b axb', 'a.b')) == 1
    assert len(search.find_matches('x(y) [z]', '(y) [')) == 1


def test_apply_activates_first_match():
    state = search.apply('a a a', 'a')
    assert state.count == 3
    assert state.active_index == 0


@pytest.mark.parametrize("term", ['', 'missing'])
def test_apply_without_matches_is_empty(term):
    assert search.apply('text', term) == EMPTY_NAVIGATION


def test_next_wraps_around():
    state = search.apply('a a a a', 'a')
    for _ in range(state.count):
        state = search.next_match(state)
    assert state.active_index == 0


def test_previous_from_first_lands_on_last():
    state = search.apply('a a a', 'a')
    assert search.previous_match(state).active_index == 2


def test_navigation_is_noop_without_matches():
    assert search.next_match(EMPTY_NAVIGATION) is EMPTY_NAVIGATION
    assert search.previous_match(EMPTY_NAVIGATION) is EMPTY_NAVIGATION


def test_set_active_out_of_range_is_noop():
    state = search.apply('a a', 'a')
    assert search.set_active(state, 5) is state
    assert search.set_active(state, -1) is state
    assert search.set_active(state, 1).active_index == 1


def test_counter_text():
    assert search.counter_text(EMPTY_NAVIGATION) == '0 / 0'
    assert search.counter_text(search.next_match(search.apply('a a', 'a'))) == '2 / 2'


def test_navigation_state_rejects_bad_active_index():
    with pytest.raises(ValueError):
        NavigationState((), 0)
    match = search.Match(0, 0, 1, 'a')
    with pytest.raises(ValueError):
        NavigationState((match,), -1)


def _base_runs(text):
    return merge_runs(runs_from_tokens(text, tokenize_json(text)))


def test_highlight_then_clear_restores_base_runs():
    text = '{\n  "name": "value",\n  "other": "name"\n}'
    base = _base_runs(text)
    highlighted = search.highlight_runs(base, search.apply(text, 'name'))
    assert plain_text(highlighted) == text
    assert search.highlight_runs(highlighted, search.clear()) == base


def test_highlight_is_idempotent():
    text = '{\n  "name": "value",\n  "other": "name"\n}'
    base = _base_runs(text)
    first = search.highlight_runs(base, search.apply(text, 'name'))
    cleared = search.highlight_runs(first, search.clear())
    second = search.highlight_runs(cleared, search.apply(text, 'name'))
    assert first == second

    def marked(runs):
        return [r.text for r in runs if MARK_STYLE in r.styles or ACTIVE_MARK_STYLE in r.styles]

    assert marked(first) == marked(second) == ['name', 'name']


def test_match_straddling_token_boundary_is_fully_marked():
    text = '{"ab": 1}'
    runs = search.highlight_runs(_base_runs(text), search.apply(text, '": 1'))
    marked = [r for r in runs if ACTIVE_MARK_STYLE in r.styles]
    assert ''.join(r.text for r in marked) == '": 1'
    assert len(marked) > 1


def test_hitmap_positions():
    text = 'a\nb\nc a'
    layout = Layout(line_height=10)
    state = search.apply(text, 'a')
    assert search.match_offsets(text, state, layout) == [0, 20]
    markers = search.hitmap_positions(text, state, layout)
    assert [m.index for m in markers] == [0, 1]
    assert markers[0].percent == 0
    assert markers[1].percent == pytest.approx(66.666, rel=1e-3)
    assert [m.active for m in markers] == [True, False]


def test_scroll_target_keeps_margin_and_floors_at_zero():
    assert search.scroll_target(100, 40) == 60
    assert search.scroll_target(10, 40) == 0


def test_sync_to_scroll_picks_first_match_below_top():
    state = search.apply('a a a', 'a')
    offsets = [0, 100, 200]
    assert search.sync_to_scroll(state, offsets, 95, tolerance=8).active_index == 1
    assert search.sync_to_scroll(state, offsets, 150, tolerance=8).active_index == 2
    assert search.sync_to_scroll(state, offsets, 500, tolerance=8) is state


def test_frame_throttle(clock):
    throttle = FrameThrottle(interval=0.016, clock=clock)
    assert throttle.ready()
    clock.advance(0.005)
    assert not throttle.ready()
    clock.advance(0.015)
    assert throttle.ready()
    throttle.reset()
    assert throttle.ready()


def test_sync_to_scroll_reads_viewport_with_scroll_margin():
    state = search.set_active(search.apply('a a a', 'a'), 2)
    offsets = [360, 378, 900]
    assert search.sync_to_scroll(state, offsets, 320, tolerance=8, margin=40).active_index == 0
    assert search.sync_to_scroll(state, offsets, 338, tolerance=8, margin=40).active_index == 1


def test_sync_to_scroll_keeps_match_scrolled_to_clamped_target():
    state = search.set_active(search.apply('a a a', 'a'), 1)
    offsets = [0, 18, 36]
    assert search.scroll_target(offsets[1], 40) == 0
    assert search.sync_to_scroll(state, offsets, 0, tolerance=8, margin=40) is state


def test_frame_throttle_holds_refused_value_until_flushed(clock):
    throttle = FrameThrottle(interval=0.016, clock=clock)
    assert throttle.admit(10)
    assert not throttle.admit(20)
    assert not throttle.admit(30)
    assert throttle.flush() == 30
    assert throttle.flush() is None
    clock.advance(0.02)
    assert throttle.admit(40)
    assert throttle.pending is None


def test_highlight_tags_runs_with_match_index():
    text = '"a" "a"'
    runs = search.highlight_runs([Run(text)], search.apply(text, 'a'))
    tagged = [r.styles for r in runs if MARK_STYLE in r.styles or ACTIVE_MARK_STYLE in r.styles]
    assert tagged == [(ACTIVE_MARK_STYLE, 'mark-index-0'), (MARK_STYLE, 'mark-index-1')]
