from __future__ import annotations

import json
import re
from typing import Any, List

INDENT = '  '

_BETWEEN_TAGS = re.compile(r'>\s*<')
_CLOSING = re.compile(r'^</[^>]+>')
_SELF_CLOSING = re.compile(r'^<[^>]+/>$')
_PROCESSING_INSTRUCTION = re.compile(r'^<\?[^>]+\?>$')
_DECLARATION = re.compile(r'^<![^>]+>$')
_OPENING = re.compile(r'^<[^/!][^>]*>$')


def pretty_json(value: Any) -> str:
    """2-space JSON in the parsed value's own key order."""
    return json.dumps(value, indent=2, ensure_ascii=False)


def pretty_xml(serialized: str) -> str:
    """Indent a flat serialized tag stream, one tag per line.

    Closing tags dedent before printing, opening tags indent after printing,
    self-closing tags, PIs and declarations leave the level alone. The level
    never drops below zero.
    """
    lines = _BETWEEN_TAGS.sub('>\n<', serialized).split('\n')
    indent = 0
    out: List[str] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        if _CLOSING.match(line):
            indent = max(indent - 1, 0)
            out.append(INDENT * indent + line)
        elif _SELF_CLOSING.match(line) or _PROCESSING_INSTRUCTION.match(line) or _DECLARATION.match(line):
            out.append(INDENT * indent + line)
        elif _OPENING.match(line):
            out.append(INDENT * indent + line)
            indent += 1
        else:
            out.append(INDENT * indent + line)
    return '\n'.join(out)
