"""Runtime settings read from the environment (and a `.env` file when present)."""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_STORE_NAME = 'log_prettifier_handoff.json'


@dataclass(frozen=True)
class Settings:
    store_path: str
    log_level: str = 'INFO'
    line_height: int = 18
    scroll_margin: int = 40
    scroll_tolerance: int = 8
    server_port: Optional[int] = None


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer; using {default}")
        return default


def load_settings(env_file: Optional[str] = None) -> Settings:
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    store_path = os.getenv('PRETTIFIER_STORE_PATH') or os.path.join(tempfile.gettempdir(), DEFAULT_STORE_NAME)
    return Settings(
        store_path=store_path,
        log_level=(os.getenv('PRETTIFIER_LOG_LEVEL') or 'INFO').upper(),
        line_height=_int_env('PRETTIFIER_LINE_HEIGHT', 18),
        scroll_margin=_int_env('PRETTIFIER_SCROLL_MARGIN', 40),
        scroll_tolerance=_int_env('PRETTIFIER_SCROLL_TOLERANCE', 8),
        server_port=_int_env('PRETTIFIER_SERVER_PORT', None),
    )
