"""SMS segment measurement and the segment cap."""

import math
from typing import Optional

from infrastructure.templates.models import Language, SegmentEncoding, SegmentInfo

PLAIN_SEGMENT_CHARS = 153
UNICODE_SEGMENT_CHARS = 67
DEFAULT_MAX_SEGMENTS = 5


def needs_unicode(text: str, language: Optional[Language] = None) -> bool:
    """True if the text has a character outside 7-bit ASCII or the language
    is always sent as unicode."""
    if language is not None and language.extended_charset:
        return True
    return any(ord(char) > 127 for char in text)


def measure(text: str, language: Optional[Language] = None) -> SegmentInfo:
    """Measure a rendered SMS.

    Lengths are counted in code points.
    """
    if needs_unicode(text, language):
        encoding = SegmentEncoding.UNICODE
        max_per_segment = UNICODE_SEGMENT_CHARS
    else:
        encoding = SegmentEncoding.PLAIN
        max_per_segment = PLAIN_SEGMENT_CHARS

    total = len(text)
    return SegmentInfo(
        total_chars=total,
        max_per_segment=max_per_segment,
        segments=math.ceil(total / max_per_segment),
        encoding=encoding,
    )


def check_segment_limit(
    info: SegmentInfo, max_segments: int = DEFAULT_MAX_SEGMENTS
) -> Optional[str]:
    """Return an error message when the message needs too many segments."""
    if info.segments > max_segments:
        return f"Message too long: {info.segments} parts (max {max_segments} allowed)"
    return None
