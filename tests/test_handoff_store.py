import pytest

from log_prettifier.exceptions import HandoffStoreError
from log_prettifier.handoff_store import DEFAULT_DETECTED, DEFAULT_LOGS, HandoffStore


def test_save_then_load(store):
    store.save('{\n  "a": 1\n}', 'json')
    assert store.load() == {'lastLogs': '{\n  "a": 1\n}', 'lastDetected': 'json'}


def test_missing_file_gives_defaults(store):
    assert store.load() == {'lastLogs': DEFAULT_LOGS, 'lastDetected': DEFAULT_DETECTED}


def test_missing_key_gives_default(store_path):
    with open(store_path, 'w', encoding='utf-8') as f:
        f.write('{"lastDetected": "xml"}')
    assert HandoffStore(store_path).load() == {'lastLogs': DEFAULT_LOGS, 'lastDetected': 'xml'}


def test_corrupt_file_gives_defaults(store_path):
    with open(store_path, 'w', encoding='utf-8') as f:
        f.write('{not json')
    assert HandoffStore(store_path).load()['lastLogs'] == DEFAULT_LOGS


def test_last_write_wins(store):
    store.save('first', 'text')
    store.save('second', 'error')
    assert store.load() == {'lastLogs': 'second', 'lastDetected': 'error'}


def test_unwritable_location_raises(tmp_path):
    blocker = tmp_path / 'file'
    blocker.write_text('x')
    with pytest.raises(HandoffStoreError):
        HandoffStore(str(blocker / 'handoff.json')).save('x', 'text')
