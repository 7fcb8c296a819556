"""
Shared fixtures: small audio Parquet files built with pyarrow.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from audioviewer.dataset.loader import load
from audioviewer.schemas import HF_AUDIO_STRUCT


def fake_wav(index: int, size: int = 64) -> bytes:
    """RIFF-prefixed payload whose body identifies the row."""
    body = f"row-{index:04d}|".encode("ascii")
    body = (body * (size // len(body) + 1))[:size]
    return b"RIFF" + len(body).to_bytes(4, "little") + b"WAVE" + body


def make_rows(count: int) -> List[Dict]:
    """Rows with varied transcripts; every fifth mentions a cat."""
    rows = []
    for i in range(count):
        if i % 5 == 0:
            transcript = f"Catalog entry {i}: the cat sat on the mat."
        elif i % 5 == 1:
            transcript = f"Entry {i} talks about the WEATHER in spring."
        else:
            transcript = f"Entry {i} is an ordinary sentence."
        rows.append({
            "audio": fake_wav(i),
            "duration": round(0.5 + i * 0.25, 3),
            "transcription": transcript,
        })
    return rows


def write_rows(
    path: Path,
    rows: List[Dict],
    audio_layout: str = "binary",
    schema_overrides: Optional[Dict[str, pa.DataType]] = None,
    drop: Optional[List[str]] = None,
) -> Path:
    """Write rows to Parquet, with the audio column as plain binary or an HF struct."""
    columns = {
        "audio": [row["audio"] for row in rows],
        "duration": [row["duration"] for row in rows],
        "transcription": [row["transcription"] for row in rows],
    }
    types = {
        "audio": pa.binary(),
        "duration": pa.float64(),
        "transcription": pa.string(),
    }

    if audio_layout == "struct":
        columns["audio"] = [
            None if payload is None else {"bytes": payload, "path": f"{i}.wav"}
            for i, payload in enumerate(columns["audio"])
        ]
        types["audio"] = HF_AUDIO_STRUCT

    types.update(schema_overrides or {})
    arrays = {
        name: pa.array(values, type=types[name])
        for name, values in columns.items()
        if name not in (drop or [])
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(pa.table(arrays), path)
    return path


@pytest.fixture
def parquet_factory(tmp_path) -> Callable[..., Path]:
    """Build a Parquet file under tmp_path: factory(name, rows=..., **options)."""

    def factory(name: str = "sample.parquet", rows: Optional[List[Dict]] = None, count: int = 37, **options) -> Path:
        return write_rows(tmp_path / name, rows if rows is not None else make_rows(count), **options)

    return factory


@pytest.fixture
def sample_rows() -> List[Dict]:
    return make_rows(37)


@pytest.fixture
def sample_parquet(parquet_factory, sample_rows) -> Path:
    return parquet_factory("sample.parquet", rows=sample_rows)


@pytest.fixture
def sample_dataset(sample_parquet):
    return load(sample_parquet)
