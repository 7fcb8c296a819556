"""HTTP Range header parsing for audio streaming (needed for <audio> seeking)."""

import re
from typing import Optional, Tuple

from audioviewer.exceptions import AudioViewerError


_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*(\d*)\s*-\s*(\d*)\s*$")


class RangeNotSatisfiable(AudioViewerError):
    """The requested range lies entirely outside the payload."""

    def __init__(self, size: int):
        self.size = size
        super().__init__(f"Range not satisfiable for {size} byte payload")


def parse_range_header(header: Optional[str], size: int) -> Optional[Tuple[int, int]]:
    """
    Parse a single-range "bytes=" header into an inclusive (start, end) pair.

    Supports "bytes=a-b", "bytes=a-" and the suffix form "bytes=-n". Headers
    that are absent, malformed, or ask for several ranges return None, and
    the caller serves the whole payload.

    Args:
        header: Raw Range header value
        size: Payload length in bytes

    Returns:
        (start, end) with end inclusive, or None for a full response

    Raises:
        RangeNotSatisfiable: If the range starts past the end of the payload

    Example:
        >>> parse_range_header("bytes=0-99", 1000)
        (0, 99)
        >>> parse_range_header("bytes=-100", 1000)
        (900, 999)
    """
    if not header:
        return None

    match = _RANGE_RE.match(header)
    if not match:
        return None

    first, last = match.group(1), match.group(2)

    if not first and not last:
        return None

    if not first:
        # Suffix range: the final N bytes
        suffix = int(last)
        if suffix == 0 or size == 0:
            raise RangeNotSatisfiable(size)
        return max(0, size - suffix), size - 1

    start = int(first)
    if last and int(last) < start:
        return None
    if start >= size:
        raise RangeNotSatisfiable(size)

    end = int(last) if last else size - 1

    return start, min(end, size - 1)
