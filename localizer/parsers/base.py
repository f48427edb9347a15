"""
Extraction result types and the candidate collector used by every parser.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Tuple

from localizer.kinds import DEFAULT_KIND
from localizer.validation import IgnoreConfig, should_translate

ITEM_TYPES = ("text", "string", "attribute-value")


@dataclass(frozen=True)
class SourceRange:
    """Half-open character offsets of the candidate text inside the parsed buffer."""

    start: int
    end: int

    def shifted(self, offset: int) -> "SourceRange":
        return SourceRange(self.start + offset, self.end + offset)


@dataclass(frozen=True)
class ExtractedItem:
    text: str
    type: str
    kind: str
    source_range: SourceRange

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "type": self.type,
            "kind": self.kind,
            "start": self.source_range.start,
            "end": self.source_range.end,
        }


@dataclass(frozen=True)
class ExtractionStats:
    extracted_count: int = 0
    skipped_count: int = 0


@dataclass(frozen=True)
class ExtractionResult:
    items: Tuple[ExtractedItem, ...] = ()
    stats: ExtractionStats = field(default_factory=ExtractionStats)

    def texts(self) -> List[str]:
        return [item.text for item in self.items]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "stats": {
                "extracted_count": self.stats.extracted_count,
                "skipped_count": self.stats.skipped_count,
            },
        }


@dataclass(frozen=True)
class ParseOptions:
    ignore_config: Optional[IgnoreConfig] = None
    key_pattern: Optional[Pattern] = None


class Collector:
    """Accumulates validated candidates for one parse call.

    Candidates are deduplicated by source range so overlapping recognizers
    never report the same span twice.
    """

    def __init__(self, options: Optional[ParseOptions] = None, offset: int = 0):
        self.options = options or ParseOptions()
        self.offset = offset
        self._items: List[ExtractedItem] = []
        self._claimed: List[Tuple[int, int]] = []
        self.skipped = 0

    def overlaps(self, start: int, end: int) -> bool:
        return any(start < c_end and c_start < end for c_start, c_end in self._claimed)

    def claim(self, start: int, end: int) -> None:
        """Reserve a span without emitting an item (e.g. a rejected candidate)."""
        self._claimed.append((start, end))

    def add(self, text: str, item_type: str, kind: Optional[str], start: int, end: int) -> bool:
        if self.overlaps(start, end):
            return False
        self.claim(start, end)
        candidate = text.strip()
        if not should_translate(candidate, self.options.ignore_config, self.options.key_pattern):
            self.skipped += 1
            return False
        if candidate and len(text) == end - start:
            start += len(text) - len(text.lstrip())
            end = start + len(candidate)
        self._items.append(
            ExtractedItem(
                text=candidate,
                type=item_type,
                kind=kind or DEFAULT_KIND,
                source_range=SourceRange(start + self.offset, end + self.offset),
            )
        )
        return True

    def extend(self, result: ExtractionResult, offset: int = 0) -> None:
        for item in result.items:
            self._items.append(
                ExtractedItem(item.text, item.type, item.kind, item.source_range.shifted(offset))
            )
        self.skipped += result.stats.skipped_count

    def result(self) -> ExtractionResult:
        items = tuple(sorted(self._items, key=lambda item: item.source_range.start))
        return ExtractionResult(
            items=items,
            stats=ExtractionStats(extracted_count=len(items), skipped_count=self.skipped),
        )
