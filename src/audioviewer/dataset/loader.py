"""
Parquet dataset loader with schema validation.

Reads an audio Parquet file once, checks the audio/duration/transcript
columns by name and type, and normalizes them into an immutable Dataset.
Any problem raises LoadError; no partially loaded Dataset is ever returned.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.parquet as pq

from audioviewer.config import DEFAULT_VIEWER_CONFIG
from audioviewer.dataset.models import Dataset
from audioviewer.exceptions import LoadError
from audioviewer.logger import get_default_logger
from audioviewer.schemas import (
    AUDIO_RECORD_SCHEMA,
    audio_struct_bytes_field,
    is_binary_type,
    is_text_type,
    source_schema_summary,
)


logger = get_default_logger()


class ParquetAudioLoader:
    """
    Loader for audio Parquet files.

    Maps configured source column names onto the normalized
    audio/duration/transcript layout.
    """

    def __init__(self, columns: Optional[Mapping[str, str]] = None):
        """
        Initialize loader.

        Args:
            columns: Mapping of logical field ("audio", "duration",
                     "transcript") to source column name. Missing keys fall
                     back to the defaults.
        """
        self.columns: Dict[str, str] = dict(DEFAULT_VIEWER_CONFIG["columns"])
        if columns:
            self.columns.update(columns)

    def load(self, path: Union[str, Path]) -> Dataset:
        """
        Load and validate a Parquet file.

        Args:
            path: Path to the Parquet file

        Returns:
            Immutable Dataset

        Raises:
            LoadError: If the file is missing or unreadable, or a required
                column is missing or mistyped

        Example:
            >>> dataset = ParquetAudioLoader().load("train-00000.parquet")
            >>> len(dataset)
            1200
        """
        path = Path(path)

        if not path.exists():
            raise LoadError("file not found", path)
        if not path.is_file():
            raise LoadError("not a file", path)

        columns = list(dict.fromkeys(self.columns.values()))
        try:
            schema = pq.read_schema(path)
        except (pa.ArrowException, OSError) as e:
            logger.error(f"Failed to read Parquet schema from {path}: {e}")
            raise LoadError(f"unreadable Parquet file: {e}", path) from e

        missing = [name for name in columns if name not in schema.names]
        if missing:
            logger.error(f"{path} is missing required columns: {missing}")
            raise LoadError(
                f"missing required column(s) {missing}; found {source_schema_summary(schema)}",
                path,
            )

        try:
            table = pq.read_table(path, columns=columns)
        except (pa.ArrowException, OSError) as e:
            logger.error(f"Failed to read Parquet data from {path}: {e}")
            raise LoadError(f"unreadable Parquet file: {e}", path) from e

        normalized = self._normalize(table, path)
        dataset = Dataset(normalized, name=path.name, path=path)
        logger.info(f"Loaded {len(dataset)} rows from {path}")
        return dataset

    def _normalize(self, table: pa.Table, path: Path) -> pa.Table:
        audio = self._audio_column(table.column(self.columns["audio"]), path)
        duration = self._duration_column(table.column(self.columns["duration"]), path)
        transcript = self._transcript_column(table.column(self.columns["transcript"]), path)

        return pa.Table.from_arrays(
            [audio, duration, transcript],
            schema=AUDIO_RECORD_SCHEMA,
        )

    def _audio_column(self, column: pa.ChunkedArray, path: Path) -> pa.ChunkedArray:
        name = self.columns["audio"]
        data_type = column.type

        if audio_struct_bytes_field(data_type) is not None:
            # Struct audio (e.g. {bytes, path}); a null struct reads as null bytes
            index = data_type.get_field_index("bytes")
            chunks = [chunk.flatten()[index] for chunk in column.chunks]
            column = pa.chunked_array(chunks, type=data_type.field("bytes").type)
        elif not is_binary_type(data_type):
            raise LoadError(
                f"column '{name}' must be binary or a struct with a binary 'bytes' "
                f"field, got {data_type}",
                path,
            )

        return column.cast(pa.large_binary())

    def _duration_column(self, column: pa.ChunkedArray, path: Path) -> pa.ChunkedArray:
        name = self.columns["duration"]
        if not pa.types.is_floating(column.type):
            raise LoadError(f"column '{name}' must be floating point, got {column.type}", path)

        column = column.cast(pa.float64())
        if column.null_count:
            raise LoadError(f"column '{name}' contains {column.null_count} null value(s)", path)

        if len(column):
            invalid = pc.sum(pc.invert(pc.greater_equal(column, 0.0))).as_py()
            if invalid:
                # NaN compares false, so it is counted here too
                raise LoadError(
                    f"column '{name}' contains {invalid} negative or NaN value(s)",
                    path,
                )
        return column

    def _transcript_column(self, column: pa.ChunkedArray, path: Path) -> pa.ChunkedArray:
        name = self.columns["transcript"]
        if not is_text_type(column.type):
            raise LoadError(f"column '{name}' must be a string column, got {column.type}", path)
        if column.null_count:
            raise LoadError(f"column '{name}' contains {column.null_count} null value(s)", path)
        return column.cast(pa.string())


def load(path: Union[str, Path], columns: Optional[Mapping[str, str]] = None) -> Dataset:
    """
    Convenience function to load one audio Parquet file.

    Args:
        path: Path to the Parquet file
        columns: Optional logical-field to source-column mapping

    Returns:
        Immutable Dataset

    Example:
        >>> dataset = load("data/train.parquet")
    """
    return ParquetAudioLoader(columns).load(path)


def get_parquet_file_info(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Get metadata information about a Parquet file without loading its rows.

    Args:
        path: Path to Parquet file

    Returns:
        Dictionary with file information

    Raises:
        LoadError: If the file is missing or unreadable
    """
    path = Path(path)

    if not path.exists():
        raise LoadError("file not found", path)

    try:
        parquet_file = pq.ParquetFile(path)
    except (pa.ArrowException, OSError) as e:
        raise LoadError(f"unreadable Parquet file: {e}", path) from e

    metadata = parquet_file.metadata
    return {
        "file_path": str(path),
        "file_size_bytes": path.stat().st_size,
        "num_rows": metadata.num_rows,
        "num_columns": metadata.num_columns,
        "num_row_groups": metadata.num_row_groups,
        "created_by": metadata.created_by,
        "column_names": parquet_file.schema_arrow.names,
    }

