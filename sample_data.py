#!/usr/bin/env python3
"""
Generate a small sample audio Parquet file for trying out the viewer.

Writes sine-tone WAV clips in the Hugging Face `Audio` layout
({bytes, path} struct) with duration and transcription columns:

    python sample_data.py data/sample.parquet --rows 37
    audioviewer serve data/
"""

import argparse
import io
import wave
from pathlib import Path

import numpy as np
import pyarrow as pa
import pyarrow.parquet as pq

from audioviewer.schemas import HF_AUDIO_STRUCT


SAMPLE_RATE = 16000

PHRASES = [
    "The catalog of recordings opens with a short greeting.",
    "Weather today is mild with a light breeze from the west.",
    "Please remember to bring the cat inside before dark.",
    "Numbers one through ten, spoken slowly and clearly.",
    "A longer passage follows, describing the harbour at dawn, the gulls over the water, "
    "the fishing boats returning one by one, and the market stalls opening along the quay.",
]


def make_wav(duration: float, frequency: float) -> bytes:
    t = np.arange(int(duration * SAMPLE_RATE)) / SAMPLE_RATE
    samples = (0.3 * np.sin(2 * np.pi * frequency * t) * 32767).astype("<i2")

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(SAMPLE_RATE)
        wav.writeframes(samples.tobytes())
    return buffer.getvalue()


def build_table(rows: int) -> pa.Table:
    audio, durations, transcripts = [], [], []
    for i in range(rows):
        duration = round(0.5 + (i % 7) * 0.37, 3)
        audio.append({"bytes": make_wav(duration, 220.0 + 20 * (i % 12)), "path": f"{i}.wav"})
        durations.append(duration)
        transcripts.append(f"[{i}] {PHRASES[i % len(PHRASES)]}")

    return pa.table({
        "audio": pa.array(audio, type=HF_AUDIO_STRUCT),
        "duration": pa.array(durations, type=pa.float64()),
        "transcription": pa.array(transcripts, type=pa.string()),
    })


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("output", type=Path, help="Output Parquet file")
    parser.add_argument("--rows", type=int, default=37, help="Number of rows (default: 37)")
    args = parser.parse_args()

    args.output.parent.mkdir(parents=True, exist_ok=True)
    table = build_table(args.rows)
    pq.write_table(table, args.output, compression="snappy")
    print(f"Wrote {table.num_rows} rows to {args.output}")


if __name__ == "__main__":
    main()
