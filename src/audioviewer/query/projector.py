"""
Row projection: turn dataset records into render-ready records.

Formats durations as mm:ss.mmm, truncates transcripts for previews, and
passes the audio handle through untouched so pages never copy audio bytes.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Any, Dict

from audioviewer.dataset.models import AudioHandle, AudioRecord


DEFAULT_PREVIEW_LENGTH = 120
ELLIPSIS = "…"


def format_duration(seconds: float) -> str:
    """
    Format a duration in seconds as mm:ss.mmm.

    Milliseconds are truncated, never rounded up. The value goes through its
    shortest decimal representation first so that 6.02 is treated as 6.020
    rather than 6.0199999...

    Minutes are not wrapped into hours: 3600 seconds is "60:00.000".

    Args:
        seconds: Non-negative duration

    Returns:
        Formatted duration string

    Raises:
        ValueError: If seconds is negative, NaN or infinite

    Example:
        >>> format_duration(65.5)
        '01:05.500'
        >>> format_duration(6.02)
        '00:06.020'
    """
    if math.isnan(seconds) or math.isinf(seconds):
        raise ValueError(f"Duration must be finite, got {seconds}")
    if seconds < 0:
        raise ValueError(f"Duration must be non-negative, got {seconds}")

    total_ms = int((Decimal(repr(float(seconds))) * 1000).to_integral_value(rounding=ROUND_FLOOR))
    minutes, remainder_ms = divmod(total_ms, 60_000)
    secs, millis = divmod(remainder_ms, 1000)
    return f"{minutes:02d}:{secs:02d}.{millis:03d}"


def truncate_transcript(text: str, limit: int = DEFAULT_PREVIEW_LENGTH, ellipsis: str = ELLIPSIS) -> str:
    """
    Cut a transcript to its first `limit` characters.

    The ellipsis is appended only when characters were actually dropped.

    Example:
        >>> truncate_transcript("hello world", limit=5)
        'hello…'
        >>> truncate_transcript("hello", limit=5)
        'hello'
    """
    if limit <= 0:
        raise ValueError(f"Preview limit must be positive, got {limit}")
    if len(text) <= limit:
        return text
    return text[:limit] + ellipsis


@dataclass(frozen=True)
class RenderedRecord:
    """A record in display form, with the audio left behind its handle."""

    index: int
    duration: str
    duration_seconds: float
    preview: str
    truncated: bool
    audio: AudioHandle
    _transcript: str

    @property
    def full_transcript(self) -> str:
        return self._transcript

    def to_dict(self, include_full_transcript: bool = False) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary; audio is described, not embedded."""
        data = {
            "index": self.index,
            "duration": self.duration,
            "duration_seconds": self.duration_seconds,
            "preview": self.preview,
            "truncated": self.truncated,
            "audio_size": self.audio.size,
            "audio_mime_type": self.audio.mime_type,
        }
        if include_full_transcript:
            data["transcript"] = self._transcript
        return data


class RowProjector:
    """Projects AudioRecords with a fixed preview length."""

    def __init__(self, preview_length: int = DEFAULT_PREVIEW_LENGTH, ellipsis: str = ELLIPSIS):
        if preview_length <= 0:
            raise ValueError(f"preview_length must be positive, got {preview_length}")
        self.preview_length = preview_length
        self.ellipsis = ellipsis

    def project(self, record: AudioRecord) -> RenderedRecord:
        preview = truncate_transcript(record.transcript, self.preview_length, self.ellipsis)
        return RenderedRecord(
            index=record.index,
            duration=format_duration(record.duration_seconds),
            duration_seconds=record.duration_seconds,
            preview=preview,
            truncated=len(record.transcript) > self.preview_length,
            audio=record.audio,
            _transcript=record.transcript,
        )


_default_projector = RowProjector()


def project(record: AudioRecord) -> RenderedRecord:
    """Project a record with the default preview length."""
    return _default_projector.project(record)
