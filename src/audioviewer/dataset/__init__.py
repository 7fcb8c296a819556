"""
Dataset loading: Parquet reading, schema validation, and the in-memory model.
"""

from audioviewer.dataset.catalog import DatasetCatalog, find_parquet_files, load_catalog
from audioviewer.dataset.loader import ParquetAudioLoader, get_parquet_file_info, load
from audioviewer.dataset.models import AudioHandle, AudioRecord, Dataset, sniff_mime_type

__all__ = [
    "AudioHandle",
    "AudioRecord",
    "Dataset",
    "DatasetCatalog",
    "ParquetAudioLoader",
    "find_parquet_files",
    "get_parquet_file_info",
    "load",
    "load_catalog",
    "sniff_mime_type",
]
