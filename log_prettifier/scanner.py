from __future__ import annotations

from typing import Optional, Tuple

NAME_START_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_"
NAME_CHARS = NAME_START_CHARS + "0123456789.-:"


def extract_balanced(text: str, open_ch: str, close_ch: str) -> Optional[str]:
    """Return text from the first `open_ch` through its matching `close_ch`.

    Characters inside double-quoted strings (with backslash escapes) never
    change the depth. Returns None when the input ends before depth is back to 0.
    """
    if not text:
        return None
    start = text.find(open_ch)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaping = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaping:
                escaping = False
            elif ch == '\\':
                escaping = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def read_name(text: str, pos: int) -> Tuple[str, int]:
    """Read an XML name starting at `pos`; returns (name, end). Empty if none."""
    if pos >= len(text) or text[pos] not in NAME_START_CHARS:
        return '', pos
    end = pos + 1
    while end < len(text) and text[end] in NAME_CHARS:
        end += 1
    return text[pos:end], end


def _scan_tag(text: str, pos: int) -> Optional[Tuple[str, bool, bool, int]]:
    """Scan a `<name ...>`, `<name .../>` or `</name>` tag at `pos`.

    Returns (name, is_closing, self_closing, end) or None when `pos` does not
    start such a tag. Quoted attribute values may contain `>`.
    """
    i = pos + 1
    is_closing = i < len(text) and text[i] == '/'
    if is_closing:
        i += 1
    name, i = read_name(text, i)
    if not name:
        return None

    quote = ''
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == quote:
                quote = ''
        elif ch in ('"', "'"):
            quote = ch
        elif ch == '<':
            # A new tag starts before this one closed; not a tag.
            return None
        elif ch == '>':
            self_closing = not is_closing and text[i - 1] == '/'
            return name, is_closing, self_closing, i + 1
        i += 1
    return None


def extract_balanced_tag(text: str) -> Optional[str]:
    """Return the balanced element starting at the root tag at the start of `text`.

    Depth is tracked by tag name: only tags named like the root count, and a
    self-closing root tag does not change depth. The scan stops as soon as the
    root depth returns to zero after the root was opened once.
    """
    if not text or text[0] != '<':
        return None
    first = _scan_tag(text, 0)
    if first is None or first[1]:
        return None
    root = first[0]

    depth = 0
    saw_root = False
    pos = 0
    while pos < len(text):
        lt = text.find('<', pos)
        if lt == -1:
            break
        tag = _scan_tag(text, lt)
        if tag is None:
            pos = lt + 1
            continue
        name, is_closing, self_closing, end = tag
        if name == root:
            if is_closing:
                depth -= 1
            elif not self_closing:
                depth += 1
                saw_root = True
            if saw_root and depth == 0:
                return text[:end]
        pos = end
    return None
