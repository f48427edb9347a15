"""
Blade template parser

Blade comments are blanked out first (offsets are preserved). Echo
expressions are never searched for prose; inside a text run they become
{placeholders} of the surrounding message. Recognized shapes:
- ``@section('title', 'Dashboard')`` style directive arguments
- ``'key' => 'value'`` array pairs
- ``{{ 'Literal text' }}`` echoes whose whole body is one string
- markup text runs
"""

from typing import Optional

from localizer.kinds import DEFAULT_KIND, infer_kind_from_property, infer_kind_from_tag
from localizer.patterns import BLADE
from localizer.parsers.base import Collector, ExtractionResult, ParseOptions
from localizer.text_utils import analyze_template_literal

_SKIPPED_TAGS = frozenset({"script", "style"})


def mask_comments(content: str) -> str:
    """Replace ``{{-- ... --}}`` with spaces of the same length."""
    return BLADE.comment.sub(lambda m: " " * len(m.group(0)), content)


def is_translated_markup(text: str) -> bool:
    return any(marker.search(text) for marker in BLADE.translation_markers)


def parse_blade(content: str, options: Optional[ParseOptions] = None) -> ExtractionResult:
    collector = Collector(options)
    source = mask_comments(content)

    for match in BLADE.directive_argument.finditer(source):
        collector.add(
            match.group("text"), "string", infer_kind_from_property(match.group("name")),
            match.start("text"), match.end("text"),
        )

    for match in BLADE.array_pair.finditer(source):
        collector.add(
            match.group("text"), "string", infer_kind_from_property(match.group("name")),
            match.start("text"), match.end("text"),
        )

    for match in BLADE.echo_literal.finditer(source):
        collector.add(match.group("text"), "string", DEFAULT_KIND, match.start("text"), match.end("text"))

    for match in BLADE.text_run.finditer(source):
        text = match.group("text")
        start, end = match.start("text"), match.end("text")
        if not text.strip() or match.group("tag").lower() in _SKIPPED_TAGS:
            continue
        if is_translated_markup(text) or BLADE.directive.search(text) or BLADE.raw_echo.search(text):
            collector.claim(start, end)
            continue
        if BLADE.echo.search(text):
            static = BLADE.echo.sub(" ", text)
            if not any(ch.isalpha() for ch in static):
                continue
            pattern = analyze_template_literal(text.strip(), BLADE.echo)
            collector.add(pattern.base_text, "text", infer_kind_from_tag(match.group("tag")), start, end)
            continue
        collector.add(text, "text", infer_kind_from_tag(match.group("tag")), start, end)

    return collector.result()
