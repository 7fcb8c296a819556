"""
In-memory data model for loaded audio datasets.

A Dataset wraps an immutable pyarrow Table normalized to AUDIO_RECORD_SCHEMA.
Records expose their audio through an AudioHandle that reads from the Arrow
buffer on demand, so a page of records never carries the audio bytes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

import pyarrow as pa
import pyarrow.compute as pc

from audioviewer.schemas import AUDIO_RECORD_SCHEMA


DEFAULT_CHUNK_SIZE = 65536

# (magic prefix, offset, mime type)
AUDIO_SIGNATURES = [
    (b"RIFF", 0, "audio/wav"),
    (b"fLaC", 0, "audio/flac"),
    (b"OggS", 0, "audio/ogg"),
    (b"ID3", 0, "audio/mpeg"),
    (b"ftyp", 4, "audio/mp4"),
]


def sniff_mime_type(header: bytes) -> str:
    """
    Guess an audio MIME type from the first bytes of a payload.

    Example:
        >>> sniff_mime_type(b"RIFF\\x24\\x00\\x00\\x00WAVE")
        'audio/wav'
    """
    for magic, offset, mime_type in AUDIO_SIGNATURES:
        if header[offset:offset + len(magic)] == magic:
            return mime_type
    # MPEG audio frame sync without an ID3 tag
    if len(header) >= 2 and header[0] == 0xFF and (header[1] & 0xE0) == 0xE0:
        return "audio/mpeg"
    return "application/octet-stream"


@dataclass(frozen=True)
class AudioHandle:
    """
    Lazy reference to one row's audio payload.

    Holds only the owning dataset and the row index; bytes are sliced out of
    the Arrow buffer when read.
    """

    dataset: "Dataset"
    index: int

    def _buffer(self) -> pa.Buffer:
        return self.dataset.audio_buffer(self.index)

    @property
    def size(self) -> int:
        return self._buffer().size

    @property
    def mime_type(self) -> str:
        return sniff_mime_type(self.read(0, 12))

    def read(self, start: int = 0, end: Optional[int] = None) -> bytes:
        """
        Read the byte range [start, end) of the payload.

        Args:
            start: First byte offset (clamped to the payload)
            end: Exclusive end offset, or None for the end of the payload

        Returns:
            The requested bytes; empty when the range is empty
        """
        buffer = self._buffer()
        size = buffer.size
        start = max(0, min(start, size))
        end = size if end is None else max(start, min(end, size))
        if start == end:
            return b""
        return buffer.slice(start, end - start).to_pybytes()

    def iter_chunks(
        self,
        start: int = 0,
        end: Optional[int] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> Iterator[bytes]:
        """
        Yield the byte range [start, end) in chunks of at most chunk_size.

        Example:
            >>> b"".join(handle.iter_chunks(0, 1024, chunk_size=256))
        """
        buffer = self._buffer()
        size = buffer.size
        position = max(0, min(start, size))
        stop = size if end is None else max(position, min(end, size))
        while position < stop:
            length = min(chunk_size, stop - position)
            yield buffer.slice(position, length).to_pybytes()
            position += length


@dataclass(frozen=True)
class AudioRecord:
    """One row of a dataset: audio handle, duration in seconds, transcript."""

    index: int
    duration_seconds: float
    transcript: str
    audio: AudioHandle


class Dataset:
    """
    Ordered, immutable sequence of audio records backed by a pyarrow Table.

    Only read accessors are exposed; the table itself is immutable, so a
    Dataset can be shared across request threads without locking.
    """

    __slots__ = ("_name", "_path", "_table")

    def __init__(self, table: pa.Table, name: str, path: Optional[Union[str, Path]] = None):
        if not table.schema.equals(AUDIO_RECORD_SCHEMA):
            raise ValueError(
                "Dataset table must match AUDIO_RECORD_SCHEMA, "
                f"got {table.schema}"
            )
        self._table = table
        self._name = name
        self._path = Path(path) if path is not None else None

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def table(self) -> pa.Table:
        return self._table

    @property
    def transcripts(self) -> pa.ChunkedArray:
        return self._table.column("transcript")

    @property
    def total_duration(self) -> float:
        total = pc.sum(self._table.column("duration")).as_py()
        return float(total) if total is not None else 0.0

    def __len__(self) -> int:
        return self._table.num_rows

    def __iter__(self) -> Iterator[AudioRecord]:
        return iter(self.records(range(len(self))))

    def __repr__(self) -> str:
        return f"Dataset(name={self._name!r}, rows={len(self)})"

    def _check_index(self, index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Row index must be an integer, got {type(index).__name__}")
        if index < 0 or index >= len(self):
            raise IndexError(f"Row index {index} out of range for {len(self)} rows")
        return index

    def audio_buffer(self, index: int) -> pa.Buffer:
        """Zero-copy view of one row's audio bytes (empty for null audio)."""
        scalar = self._table.column("audio")[self._check_index(index)]
        if not scalar.is_valid:
            return pa.py_buffer(b"")
        return scalar.as_buffer()

    def record(self, index: int) -> AudioRecord:
        index = self._check_index(index)
        return AudioRecord(
            index=index,
            duration_seconds=self._table.column("duration")[index].as_py(),
            transcript=self._table.column("transcript")[index].as_py(),
            audio=AudioHandle(self, index),
        )

    def records(self, indices: Sequence[int]) -> List[AudioRecord]:
        """
        Build records for the given row indices, in the given order.

        Only the duration and transcript columns are gathered; audio stays in
        the table behind each record's handle.
        """
        indices = [self._check_index(i) for i in indices]
        if not indices:
            return []
        selector = pa.array(indices, type=pa.int64())
        durations = self._table.column("duration").take(selector).to_pylist()
        transcripts = self._table.column("transcript").take(selector).to_pylist()
        return [
            AudioRecord(
                index=index,
                duration_seconds=duration,
                transcript=transcript,
                audio=AudioHandle(self, index),
            )
            for index, duration, transcript in zip(indices, durations, transcripts)
        ]
