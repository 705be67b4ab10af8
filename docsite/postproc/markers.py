"""Managed marker spans for regenerable document regions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Union

OPEN_FMT = "<!-- {key}_open -->"
CLOSE_FMT = "<!-- {key}_close -->"
_OPEN_RE = re.compile(r"<!-- ([A-Za-z0-9_.-]+?)_open -->")


class DuplicateMarkerError(RuntimeError):
    """Raised when a document carries more than one span for the same key."""


class MarkerPolicy(str, Enum):
    """How repeated marker pairs in one document are handled."""

    STRICT = "strict"
    GREEDY = "greedy"


@dataclass
class Region:
    """A marker-delimited span, markers included."""

    key: str
    text: str

    @property
    def body(self) -> str:
        start = len(OPEN_FMT.format(key=self.key))
        end = len(self.text) - len(CLOSE_FMT.format(key=self.key))
        return self.text[start:end]


class MarkedDocument:
    """A document split into plain text segments and uniquely named regions."""

    def __init__(self, segments: List[Union[str, Region]]) -> None:
        self._segments = segments

    @classmethod
    def parse(cls, text: str) -> "MarkedDocument":
        segments: List[Union[str, Region]] = []
        position = 0
        search_from = 0
        while True:
            match = _OPEN_RE.search(text, search_from)
            if match is None:
                break
            key = match.group(1)
            close = CLOSE_FMT.format(key=key)
            end = text.find(close, match.end())
            if end == -1:
                # Unterminated open markers stay plain text.
                search_from = match.end()
                continue
            end += len(close)
            if match.start() > position:
                segments.append(text[position:match.start()])
            segments.append(Region(key=key, text=text[match.start():end]))
            position = search_from = end
        if position < len(text):
            segments.append(text[position:])

        for region in [segment for segment in segments if isinstance(segment, Region)]:
            opens = text.count(OPEN_FMT.format(key=region.key))
            closes = text.count(CLOSE_FMT.format(key=region.key))
            if opens > 1 or closes > 1:
                raise DuplicateMarkerError(
                    f"Marker pair '{region.key}' appears more than once "
                    f"({opens} open, {closes} close markers)"
                )
        return cls(segments)

    def regions(self) -> List[str]:
        return [segment.key for segment in self._segments if isinstance(segment, Region)]

    def body(self, key: str) -> str:
        return self._region(key).body

    def replace(self, key: str, body: str) -> None:
        """Replace the text between the markers of ``key``."""
        self.replace_span(key, f"{OPEN_FMT.format(key=key)}{body}{CLOSE_FMT.format(key=key)}")

    def replace_span(self, key: str, text: str) -> None:
        """Replace the whole span of ``key``, markers included."""
        for index, segment in enumerate(self._segments):
            if isinstance(segment, Region) and segment.key == key:
                self._segments[index] = Region(key=key, text=text)
                return
        raise KeyError(key)

    def render(self) -> str:
        return "".join(
            segment.text if isinstance(segment, Region) else segment
            for segment in self._segments
        )

    def _region(self, key: str) -> Region:
        for segment in self._segments:
            if isinstance(segment, Region) and segment.key == key:
                return segment
        raise KeyError(key)


class MarkerManager:
    """Applies marker spans for idempotent region replacement."""

    def __init__(self, policy: MarkerPolicy | str = MarkerPolicy.STRICT) -> None:
        self.policy = MarkerPolicy(policy)

    @staticmethod
    def open_marker(key: str) -> str:
        return OPEN_FMT.format(key=key)

    @staticmethod
    def close_marker(key: str) -> str:
        return CLOSE_FMT.format(key=key)

    def wrap(self, key: str, body: str) -> str:
        """Wrap body text with the markers for ``key``."""
        return f"{self.open_marker(key)}\n{body.rstrip()}\n{self.close_marker(key)}"

    def splice(self, markdown: str, key: str, replacement: str) -> str:
        """Replace the span of ``key`` (markers included) with ``replacement``.

        Documents without the span are returned unchanged. Under the greedy
        policy the span runs from the first open marker to the last close
        marker; under the strict policy the span runs to the first close
        marker after the open marker, and a repeated marker for ``key`` is an
        error. Markers of other keys, nested or repeated, are left alone.
        """
        if self.policy is MarkerPolicy.GREEDY:
            return self._splice_greedy(markdown, key, replacement)
        return self._splice_strict(markdown, key, replacement)

    def extract(self, markdown: str) -> Dict[str, str]:
        """Return a mapping of region key to current content (without markers)."""
        document = MarkedDocument.parse(markdown)
        return {key: document.body(key).strip() for key in document.regions()}

    def _splice_greedy(self, markdown: str, key: str, replacement: str) -> str:
        begin = self.open_marker(key)
        end = self.close_marker(key)
        start = markdown.find(begin)
        if start == -1:
            return markdown
        stop = markdown.rfind(end)
        if stop < start + len(begin):
            return markdown
        return f"{markdown[:start]}{replacement}{markdown[stop + len(end):]}"

    def _splice_strict(self, markdown: str, key: str, replacement: str) -> str:
        begin = self.open_marker(key)
        end = self.close_marker(key)
        start = markdown.find(begin)
        if start == -1:
            return markdown
        stop = markdown.find(end, start + len(begin))
        if stop == -1:
            return markdown
        opens = markdown.count(begin)
        closes = markdown.count(end)
        if opens > 1 or closes > 1:
            raise DuplicateMarkerError(
                f"Marker pair '{key}' appears more than once "
                f"({opens} open, {closes} close markers)"
            )
        return f"{markdown[:start]}{replacement}{markdown[stop + len(end):]}"


__all__ = [
    "DuplicateMarkerError",
    "MarkedDocument",
    "MarkerManager",
    "MarkerPolicy",
    "Region",
]
