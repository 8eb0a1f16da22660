from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple
from xml.dom import minidom
from xml.parsers.expat import ExpatError

from .candidates import extract_candidate, extract_xml_fragment, find_first_real_tag
from .exceptions import ParseFailure
from .pretty import pretty_json, pretty_xml

logger = logging.getLogger(__name__)

KIND_JSON = 'json'
KIND_XML = 'xml'
KIND_TEXT = 'text'
KIND_ERROR = 'error'
KINDS = (KIND_JSON, KIND_XML, KIND_TEXT, KIND_ERROR)

_DOCTYPE = re.compile(r'<!DOCTYPE[\s\S]*?>', re.IGNORECASE)


@dataclass(frozen=True)
class DetectionResult:
    kind: str
    formatted: str

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unknown kind: {self.kind!r}")


def strip_doctype(text: str) -> str:
    return _DOCTYPE.sub('', str(text), count=1)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_json_strict(text: str) -> Any:
    """Standard JSON only: NaN and Infinity are rejected, deep nesting fails cleanly."""
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise ParseFailure('JSON', str(exc)) from exc


def parse_xml_root(text: str) -> str:
    """Parse `text` as XML and return the serialized document element."""
    try:
        doc = minidom.parseString(text)
    except (ExpatError, ValueError) as exc:
        raise ParseFailure('XML', str(exc)) from exc
    # toxml() recurses once per nesting level
    try:
        return doc.documentElement.toxml()
    except RecursionError as exc:
        raise ParseFailure('XML', "document nested too deeply") from exc


def try_parse_json(text: str) -> Tuple[bool, Any]:
    try:
        return True, parse_json_strict(text)
    except ParseFailure as exc:
        logger.debug(str(exc))
        return False, None


def try_parse_xml(text: str) -> Tuple[bool, Optional[str]]:
    """Tolerant XML parse; returns (ok, pretty-printed xml).

    Noise before the first real tag and any DOCTYPE are dropped. When the
    remainder still fails to parse, the balanced root fragment is tried instead.
    """
    start = find_first_real_tag(text)
    candidate_text = text[start:] if start >= 0 else text
    try:
        serialized = parse_xml_root(strip_doctype(candidate_text))
    except ParseFailure as exc:
        logger.debug(f"{exc}; retrying with balanced fragment")
        fragment = extract_xml_fragment(text)
        if not fragment:
            return False, None
        try:
            serialized = parse_xml_root(strip_doctype(fragment))
        except ParseFailure as exc2:
            logger.debug(str(exc2))
            return False, None
    return True, pretty_xml(serialized)


def detect_format(raw_text: str) -> DetectionResult:
    """Classify `raw_text` as json, xml or text and pretty-print it.

    Order: JSON on the candidate, XML on the candidate, XML on the whole text,
    then the trimmed text unchanged.
    """
    trimmed = raw_text.strip() if isinstance(raw_text, str) else ''
    candidate = extract_candidate(trimmed)

    if candidate:
        ok, value = try_parse_json(candidate)
        if ok:
            try:
                formatted = pretty_json(value)
            except RecursionError:
                logger.debug("JSON value nested too deeply to print")
            else:
                logger.info(f"Detected JSON ({len(candidate)} chars)")
                return DetectionResult(KIND_JSON, formatted)
        ok, formatted = try_parse_xml(candidate)
        if ok:
            logger.info(f"Detected XML from candidate ({len(candidate)} chars)")
            return DetectionResult(KIND_XML, formatted)

    ok, formatted = try_parse_xml(trimmed)
    if ok:
        logger.info("Detected XML from whole text")
        return DetectionResult(KIND_XML, formatted)

    logger.info("No structured content detected; keeping plain text")
    return DetectionResult(KIND_TEXT, trimmed)
