from __future__ import annotations

import logging
from typing import Callable, Optional

from .detection import KIND_ERROR, KIND_TEXT, DetectionResult, detect_format
from .exceptions import HostFailure
from .handoff_store import HandoffStore

logger = logging.getLogger(__name__)

NO_SELECTION_MESSAGE = "No selection found. Select some text and try again."
NO_CONTENT_MESSAGE = "No content"

Extractor = Callable[[str], Optional[DetectionResult]]


def prettify_selection(raw_text: str, extractor: Extractor = detect_format) -> DetectionResult:
    """Run `extractor` on a selection; never raises.

    `extractor` stands for the isolated execution context. Anything it raises
    becomes an `error` result carrying the message.
    """
    selected = (raw_text or '').strip()
    if not selected:
        return DetectionResult(KIND_TEXT, NO_SELECTION_MESSAGE)

    try:
        result = extractor(selected)
    except HostFailure as exc:
        logger.error(f"Extraction context unavailable: {exc}")
        return DetectionResult(KIND_ERROR, f"Prettify failed: {exc}")
    except Exception as exc:
        logger.exception("Prettify failed")
        return DetectionResult(KIND_ERROR, f"Prettify failed: {exc}")

    if result is None:
        return DetectionResult(KIND_TEXT, NO_CONTENT_MESSAGE)
    return result


def capture_selection(raw_text: str, store: HandoffStore, extractor: Extractor = detect_format) -> DetectionResult:
    result = prettify_selection(raw_text, extractor)
    store.save(result.formatted, result.kind)
    return result
