"""
Incremental parser for the Lingxi event stream.

Lingxi answers with Server-Sent Events whose ``data`` field holds a JSON
object such as ``{"type": "reasoning", "data": "..."}``. Parsing happens in
two phases: the byte stream is split into blank-line delimited frames, then
each frame's payload is decoded strictly as JSON and classified into a
``SemanticPart``.

Frames that cannot be decoded are returned as ``FrameDecodeError`` values so
that the consumer decides what to do with them; nothing here raises on bad
input.
"""

from __future__ import annotations

import codecs
import json
from typing import Any, Dict, List, Union

from ..core import FrameDecodeError
from ..models import OTHER_PART, REASONING_END_PART, PartKind, SemanticPart


FrameOutcome = Union[SemanticPart, FrameDecodeError]

FRAME_SEPARATOR = "\n\n"

IGNORED_TYPES = frozenset({"recommend", "recommend_start", "recommend_end", "ping", "end"})
TEXT_TYPES = frozenset({"text", "text_start", "text_end"})

# SSE fields other than "data" that may precede the payload
_FIELD_PREFIXES = ("event:", "id:", "retry:", ":")


def _extract_payload(frame: str) -> str:
    data_lines = []
    other_lines = []
    for line in frame.split("\n"):
        if line.startswith("data:"):
            value = line[5:]
            data_lines.append(value[1:] if value.startswith(" ") else value)
        elif not line.startswith(_FIELD_PREFIXES):
            other_lines.append(line)

    if data_lines:
        return "\n".join(data_lines).strip()
    return "\n".join(other_lines).strip()


def decode_frame(frame: str) -> Union[Dict[str, Any], FrameDecodeError]:
    """
    Decode the JSON object carried by one frame.

    Args:
        frame: Frame text without the trailing blank line

    Returns:
        The decoded object, or a FrameDecodeError describing why there is none
    """
    payload = _extract_payload(frame)
    if not payload.startswith("{"):
        return FrameDecodeError("Frame carries no JSON object", frame=frame)

    try:
        obj = json.loads(payload)
    except json.JSONDecodeError as e:
        return FrameDecodeError(f"Malformed JSON in frame: {e.msg}", frame=frame)

    if not isinstance(obj, dict):
        return FrameDecodeError("Frame payload is not a JSON object", frame=frame)
    return obj


def _part_text(obj: Dict[str, Any]) -> str:
    data = obj.get("data")
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        text = data.get("text")
        if isinstance(text, str):
            return text
    return ""


def classify_event(obj: Dict[str, Any]) -> SemanticPart:
    """Map a decoded Lingxi event onto a semantic part."""
    event_type = obj.get("type")
    if not isinstance(event_type, str) or event_type in IGNORED_TYPES:
        return OTHER_PART
    if event_type == "reasoning":
        return SemanticPart(PartKind.REASONING, _part_text(obj))
    if event_type == "reasoning_end":
        return REASONING_END_PART
    if event_type in TEXT_TYPES:
        return SemanticPart(PartKind.TEXT, _part_text(obj))
    return OTHER_PART


def parse_frame(frame: str) -> FrameOutcome:
    decoded = decode_frame(frame)
    if isinstance(decoded, FrameDecodeError):
        return decoded
    return classify_event(decoded)


class SSEFrameParser:
    """
    Buffering frame parser fed with raw network reads.

    Frames may be split across reads at any byte, including inside a
    multi-byte UTF-8 sequence; incomplete input stays buffered until the
    next ``feed``.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a blank line."""
        return self._buffer

    def feed(self, data: Union[bytes, str]) -> List[FrameOutcome]:
        """
        Add one read to the buffer and parse every complete frame.

        Args:
            data: Raw bytes (or already decoded text)

        Returns:
            One outcome per complete, non-blank frame, in stream order
        """
        text = self._decoder.decode(data) if isinstance(data, bytes) else data
        self._buffer += text
        if "\r" in self._buffer:
            self._buffer = self._buffer.replace("\r\n", "\n")

        outcomes: List[FrameOutcome] = []
        while True:
            idx = self._buffer.find(FRAME_SEPARATOR)
            if idx == -1:
                break
            frame = self._buffer[:idx].strip()
            self._buffer = self._buffer[idx + len(FRAME_SEPARATOR):]
            if frame:
                outcomes.append(parse_frame(frame))
        return outcomes
