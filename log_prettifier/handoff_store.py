from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Dict

from .exceptions import HandoffStoreError

logger = logging.getLogger(__name__)

KEY_LOGS = 'lastLogs'
KEY_DETECTED = 'lastDetected'
DEFAULT_LOGS = "No logs captured yet."
DEFAULT_DETECTED = 'text'


class HandoffStore:
    """Key-value file used to pass the last result from the trigger to the viewer.

    Writes replace the whole file, so concurrent writers resolve last-write-wins.
    """

    def __init__(self, path: str):
        self.path = path

    def save(self, formatted: str, detected: str) -> None:
        payload = {KEY_LOGS: formatted, KEY_DETECTED: detected}
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.handoff-', suffix='.json')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(payload, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except OSError:
                os.unlink(tmp_path)
                raise
        except OSError as exc:
            raise HandoffStoreError(f"Could not write {self.path}: {exc}") from exc
        logger.info(f"Stored {detected} result ({len(formatted)} chars) in {self.path}")

    def load(self) -> Dict[str, str]:
        data = {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug(f"No handoff file at {self.path}")
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable handoff file {self.path}: {exc}")
        if not isinstance(data, dict):
            data = {}

        logs = data.get(KEY_LOGS)
        detected = data.get(KEY_DETECTED)
        return {
            KEY_LOGS: logs if isinstance(logs, str) and logs else DEFAULT_LOGS,
            KEY_DETECTED: detected if isinstance(detected, str) and detected else DEFAULT_DETECTED,
        }
