"""Parser for plain-text selections."""

from typing import Optional

from localizer.patterns import COMMON
from localizer.parsers.base import Collector, ExtractionResult, ParseOptions


def parse_generic(text: str, options: Optional[ParseOptions] = None) -> ExtractionResult:
    """
    Treat the whole input as a single candidate.

    A selection that is itself one quoted literal is unwrapped first. The
    selection is rejected outright when it is punctuation-only, has no
    letters, or carries code markers; otherwise it goes through the
    validator like any other candidate.
    """
    collector = Collector(options)
    stripped = text.strip() if text else ""
    if not stripped:
        return collector.result()

    start = text.index(stripped)
    literal = COMMON.quoted_string.fullmatch(stripped)
    if literal:
        stripped = literal.group("text")
        start += literal.start("text")

    if COMMON.punctuation_only.match(stripped) or not any(ch.isalpha() for ch in stripped):
        collector.skipped += 1
        return collector.result()
    if any(p.search(stripped) for p in COMMON.selection_code_markers):
        collector.skipped += 1
        return collector.result()

    collector.add(stripped, "text", "text", start, start + len(stripped))
    return collector.result()
