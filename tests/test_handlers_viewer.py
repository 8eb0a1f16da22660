from log_prettifier.handlers_viewer import (
    clear_search_handler,
    jump_to_match_handler,
    load_viewer,
    next_match_handler,
    prettify_handler,
    previous_match_handler,
    scroll_handler,
    scroll_settled_handler,
    search_handler,
)
from log_prettifier.handoff_store import DEFAULT_LOGS
from log_prettifier.search import FrameThrottle


def test_load_viewer_without_stored_result(settings):
    state, badge, html, counter, hitmap, jump = load_viewer(settings)
    assert badge == 'Detected: TEXT'
    assert DEFAULT_LOGS in html
    assert counter == '0 / 0'
    assert jump['choices'] == []


def test_prettify_stores_and_displays(settings):
    outputs = prettify_handler('ts=1 {"id": 7, "tags": ["a", "b"]} done', settings)
    state, badge, html, counter, hitmap, jump, search_text, status = outputs
    assert badge == 'Detected: JSON'
    assert 'tok-key' in html
    assert search_text == ''
    assert status.startswith('Detected JSON')

    reloaded = load_viewer(settings)
    assert reloaded[0].formatted == state.formatted


def test_search_next_previous_and_clear(settings):
    state = prettify_handler('{"a": "a", "b": "A"}', settings)[0]

    state, _, html, counter, _, jump = search_handler(state, 'a', settings)
    assert counter == '1 / 3'
    assert jump['value'] == 0
    assert len(jump['choices']) == 3

    state, *_rest = next_match_handler(state, settings)
    assert state.navigation.active_index == 1

    state, *_rest = previous_match_handler(state, settings)
    state, *_rest = previous_match_handler(state, settings)
    assert state.navigation.active_index == 2

    outputs = clear_search_handler(state, settings)
    assert outputs[3] == '0 / 0'
    assert outputs[-1] == ''
    assert '<mark' not in outputs[2]


def test_jump_to_match(settings):
    state = prettify_handler('{"a": "a", "b": "A"}', settings)[0]
    state = search_handler(state, 'a', settings)[0]
    assert jump_to_match_handler(state, 2, settings)[3] == '3 / 3'
    assert jump_to_match_handler(state, 2.0, settings)[3] == '3 / 3'
    assert jump_to_match_handler(state, None, settings)[3] == '1 / 3'
    assert jump_to_match_handler(state, -1, settings)[3] == '1 / 3'


def lines_with_hits(settings):
    text = '\n'.join(f"line {i} hit" if i in (5, 20, 21) else f"line {i}" for i in range(40))
    state = prettify_handler(text, settings)[0]
    return search_handler(state, 'hit', settings)[0]


def test_scroll_handler_is_throttled_and_keeps_the_trailing_position(settings, clock):
    state = lines_with_hits(settings)
    throttle = FrameThrottle(interval=0.016, clock=clock)

    state, throttle, counter, hitmap, jump = scroll_handler(state, throttle, 320, settings)
    assert counter == '2 / 3'
    assert 'hit active' in hitmap

    state, throttle, counter, _, _ = scroll_handler(state, throttle, 340, settings)
    assert counter == '2 / 3'

    state, throttle, counter, _, jump = scroll_settled_handler(state, throttle, settings)
    assert counter == '3 / 3'
    assert jump['value'] == 2

    state, throttle, counter, _, _ = scroll_settled_handler(state, throttle, settings)
    assert counter == '3 / 3'

    clock.advance(0.02)
    state, throttle, counter, _, _ = scroll_handler(state, throttle, 0, settings)
    assert counter == '1 / 3'


def test_scroll_throttles_are_per_session(settings, clock):
    state = lines_with_hits(settings)
    first = FrameThrottle(interval=0.016, clock=clock)
    second = FrameThrottle(interval=0.016, clock=clock)

    scroll_handler(state, first, 320, settings)
    _, _, counter, _, _ = scroll_handler(state, second, 320, settings)
    assert counter == '2 / 3'


def test_scroll_after_next_keeps_the_navigated_match(settings):
    state = lines_with_hits(settings)
    state, _, html, *_rest = next_match_handler(state, settings)
    assert 'data-scroll-to="320"' in html

    state, _, counter, _, _ = scroll_handler(state, FrameThrottle(), 320, settings)
    assert counter == '2 / 3'

    state = next_match_handler(state, settings)[0]
    _, _, counter, _, _ = scroll_handler(state, FrameThrottle(), 338, settings)
    assert counter == '3 / 3'


def test_handlers_accept_missing_state(settings):
    assert search_handler(None, 'x', settings)[3] == '0 / 0'
    assert next_match_handler(None, settings)[3] == '0 / 0'
    assert scroll_handler(None, None, 100, settings)[2] == '0 / 0'
    assert scroll_settled_handler(None, None, settings)[2] == '0 / 0'
