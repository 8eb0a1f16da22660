from __future__ import annotations

import logging
from typing import Optional

from .scanner import NAME_START_CHARS, extract_balanced, extract_balanced_tag

logger = logging.getLogger(__name__)


def find_first_real_tag(text: str) -> int:
    """Index of the first tag start that is not a `<?` PI or a `<!` declaration."""
    pos = text.find('<')
    while pos != -1:
        nxt = text[pos + 1:pos + 2]
        if nxt and nxt in NAME_START_CHARS:
            return pos
        pos = text.find('<', pos + 1)
    return -1


def extract_xml_fragment(text: str) -> Optional[str]:
    text = (text or '').strip()
    start = find_first_real_tag(text)
    if start == -1:
        return None
    return extract_balanced_tag(text[start:])


def is_exact_json(text: str) -> bool:
    return (text.startswith('{') and text.endswith('}')) or (text.startswith('[') and text.endswith(']'))


def extract_candidate(text: str) -> Optional[str]:
    """Best structured fragment inside noisy text, or None.

    JSON wins over XML: exact JSON, balanced object, balanced array, then a
    balanced XML fragment.
    """
    t = (text or '').strip()
    if not t:
        return None

    if is_exact_json(t):
        return t

    for open_ch, close_ch in (('{', '}'), ('[', ']')):
        fragment = extract_balanced(t, open_ch, close_ch)
        if fragment:
            logger.debug(f"Balanced JSON candidate found ({open_ch}{close_ch}, {len(fragment)} chars)")
            return fragment

    fragment = extract_xml_fragment(t)
    if fragment:
        logger.debug(f"Balanced XML candidate found ({len(fragment)} chars)")
        return fragment

    return None
