"""
PyArrow schema definitions for audio datasets.

The loader normalizes every input file to AUDIO_RECORD_SCHEMA so the rest of
the package can rely on fixed column names and types.
"""

from typing import Dict, Optional

import pyarrow as pa


# Normalized in-memory layout of a loaded dataset
AUDIO_RECORD_SCHEMA = pa.schema([
    pa.field("audio", pa.large_binary(), nullable=True),
    pa.field("duration", pa.float64(), nullable=False),
    pa.field("transcript", pa.string(), nullable=False),
])

# Hugging Face `Audio` feature layout, stored as a struct column
HF_AUDIO_STRUCT = pa.struct([
    pa.field("bytes", pa.binary()),
    pa.field("path", pa.string()),
])

# Logical field -> config key under "columns"
LOGICAL_FIELDS = ("audio", "duration", "transcript")


def is_binary_type(data_type: pa.DataType) -> bool:
    """Check for binary or large_binary."""
    return pa.types.is_binary(data_type) or pa.types.is_large_binary(data_type)


def is_text_type(data_type: pa.DataType) -> bool:
    """Check for string or large_string."""
    return pa.types.is_string(data_type) or pa.types.is_large_string(data_type)


def audio_struct_bytes_field(data_type: pa.DataType) -> Optional[str]:
    """
    Find the binary payload field inside a struct-typed audio column.

    Args:
        data_type: Type of the audio column

    Returns:
        "bytes" when the column is a struct with a binary "bytes" child,
        otherwise None

    Example:
        >>> audio_struct_bytes_field(HF_AUDIO_STRUCT)
        'bytes'
    """
    if not pa.types.is_struct(data_type):
        return None
    index = data_type.get_field_index("bytes")
    if index < 0:
        return None
    if not is_binary_type(data_type.field(index).type):
        return None
    return "bytes"


def source_schema_summary(schema: pa.Schema) -> Dict[str, str]:
    """
    Map column names to readable type names, for diagnostics.

    Example:
        >>> source_schema_summary(AUDIO_RECORD_SCHEMA)["duration"]
        'double'
    """
    return {field.name: str(field.type) for field in schema}
