"""Single-pass lexers that annotate pretty-printed JSON and XML with typed tokens.

Tokens carry offsets into the unescaped text; HTML escaping is left to the
renderer so offsets stay valid for search overlays.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from .scanner import NAME_CHARS, NAME_START_CHARS, read_name


class TokenType(str, Enum):
    PUNC = 'punc'
    KEY = 'key'
    STRING = 'string'
    NUMBER = 'number'
    BOOL = 'bool'
    NULL = 'null'
    TAG = 'tag'
    ATTR = 'attr'
    EQ = 'eq'
    VAL = 'val'
    COMMENT = 'comment'


@dataclass(frozen=True)
class Token:
    start: int
    end: int
    text: str
    type: TokenType


JSON_PUNCTUATION = '{}[]:,'
JSON_LITERALS = (('true', TokenType.BOOL), ('false', TokenType.BOOL), ('null', TokenType.NULL))
DIGITS = '0123456789'


def _token(text: str, start: int, end: int, token_type: TokenType) -> Token:
    return Token(start, end, text[start:end], token_type)


def _scan_json_string(text: str, pos: int) -> int:
    """End offset of the string starting at `pos` (unterminated runs to the end)."""
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == '\\':
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    return len(text)


def _scan_digits(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in DIGITS:
        pos += 1
    return pos


def _scan_json_number(text: str, pos: int) -> int:
    """End offset of a number at `pos`, or `pos` when there is none."""
    i = pos
    if i < len(text) and text[i] == '-':
        i += 1
    int_end = _scan_digits(text, i)
    if int_end == i:
        return pos
    i = int_end
    if i < len(text) and text[i] == '.':
        frac_end = _scan_digits(text, i + 1)
        if frac_end > i + 1:
            i = frac_end
    if i < len(text) and text[i] in 'eE':
        j = i + 1
        if j < len(text) and text[j] in '+-':
            j += 1
        exp_end = _scan_digits(text, j)
        if exp_end > j:
            i = exp_end
    return i


def _next_significant(text: str, pos: int) -> str:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return text[pos] if pos < len(text) else ''


def tokenize_json(text: str) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = _scan_json_string(text, i)
            token_type = TokenType.KEY if _next_significant(text, end) == ':' else TokenType.STRING
            tokens.append(_token(text, i, end, token_type))
            i = end
            continue

        literal = next(((word, t) for word, t in JSON_LITERALS if text.startswith(word, i)), None)
        if literal is not None:
            word, token_type = literal
            tokens.append(_token(text, i, i + len(word), token_type))
            i += len(word)
            continue

        if ch == '-' or ch in DIGITS:
            end = _scan_json_number(text, i)
            if end > i:
                tokens.append(_token(text, i, end, TokenType.NUMBER))
                i = end
                continue

        if ch in JSON_PUNCTUATION:
            tokens.append(_token(text, i, i + 1, TokenType.PUNC))
        i += 1
    return tokens


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _lex_attributes(text: str, pos: int, tokens: List[Token]) -> int:
    """Lex `name`, `name=value`, `name="value"` pairs until `>` or `/>`; returns the offset of the closer."""
    n = len(text)
    while pos < n:
        pos = _skip_spaces(text, pos)
        if pos >= n or text[pos] == '>' or text.startswith('/>', pos) or text[pos] == '<':
            return pos

        name, end = read_name(text, pos)
        if not name:
            # Stray character inside the tag; leave it plain.
            pos += 1
            continue
        tokens.append(_token(text, pos, end, TokenType.ATTR))
        pos = end

        after = _skip_spaces(text, pos)
        if after >= n or text[after] != '=':
            continue
        tokens.append(_token(text, after, after + 1, TokenType.EQ))
        pos = _skip_spaces(text, after + 1)
        if pos >= n:
            return pos

        quote = text[pos]
        if quote in ('"', "'"):
            close = text.find(quote, pos + 1)
            if close == -1:
                close = n
            tokens.append(_token(text, pos, pos + 1, TokenType.PUNC))
            if close > pos + 1:
                tokens.append(_token(text, pos + 1, close, TokenType.VAL))
            if close < n:
                tokens.append(_token(text, close, close + 1, TokenType.PUNC))
                pos = close + 1
            else:
                pos = close
        else:
            end = pos
            while end < n and not text[end].isspace() and text[end] != '>' and not text.startswith('/>', end):
                end += 1
            if end > pos:
                tokens.append(_token(text, pos, end, TokenType.VAL))
            pos = end
    return pos


def tokenize_xml(text: str) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    n = len(text)
    while i < n:
        lt = text.find('<', i)
        if lt == -1:
            break

        if text.startswith('<!--', lt):
            close = text.find('-->', lt + 4)
            end = n if close == -1 else close + 3
            tokens.append(_token(text, lt, end, TokenType.COMMENT))
            i = end
            continue

        name_start = lt + 2 if text.startswith('</', lt) else lt + 1
        if name_start >= n or text[name_start] not in NAME_START_CHARS:
            i = lt + 1
            continue

        tokens.append(_token(text, lt, name_start, TokenType.PUNC))
        name_end = name_start
        while name_end < n and text[name_end] in NAME_CHARS:
            name_end += 1
        tokens.append(_token(text, name_start, name_end, TokenType.TAG))

        pos = _lex_attributes(text, name_end, tokens)
        if text.startswith('/>', pos):
            tokens.append(_token(text, pos, pos + 2, TokenType.PUNC))
            pos += 2
        elif pos < n and text[pos] == '>':
            tokens.append(_token(text, pos, pos + 1, TokenType.PUNC))
            pos += 1
        i = pos
    return tokens


def tokenize(text: str, kind: str) -> List[Token]:
    if kind == 'json':
        return tokenize_json(text)
    if kind == 'xml':
        return tokenize_xml(text)
    return []
