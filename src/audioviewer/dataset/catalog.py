"""
Catalog of datasets loaded at startup.

The viewer serves either a single Parquet file or every Parquet file in a
folder. All files are loaded up front; if any one of them fails, the whole
catalog fails and nothing is served.
"""

from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Union

from audioviewer.dataset.loader import ParquetAudioLoader
from audioviewer.dataset.models import Dataset
from audioviewer.exceptions import LoadError
from audioviewer.logger import get_default_logger


logger = get_default_logger()


PARQUET_PATTERN = "*.parquet"


class DatasetCatalog:
    """Read-only mapping of file name to loaded Dataset, in file-name order."""

    def __init__(self, datasets: List[Dataset]):
        self._datasets: Dict[str, Dataset] = {}
        for dataset in sorted(datasets, key=lambda d: d.name):
            if dataset.name in self._datasets:
                raise ValueError(f"Duplicate dataset name: {dataset.name}")
            self._datasets[dataset.name] = dataset

    def __len__(self) -> int:
        return len(self._datasets)

    def __iter__(self) -> Iterator[Dataset]:
        return iter(self._datasets.values())

    def __contains__(self, name: object) -> bool:
        return name in self._datasets

    @property
    def names(self) -> List[str]:
        return list(self._datasets)

    @property
    def total_rows(self) -> int:
        return sum(len(dataset) for dataset in self._datasets.values())

    def get(self, name: str) -> Optional[Dataset]:
        return self._datasets.get(name)


def find_parquet_files(path: Union[str, Path], pattern: str = PARQUET_PATTERN) -> List[Path]:
    """
    Resolve a file or folder argument to the Parquet files it names.

    Args:
        path: A single Parquet file, or a folder of them
        pattern: Glob pattern used when path is a folder

    Returns:
        Sorted list of file paths

    Raises:
        LoadError: If the path does not exist, or a folder holds no matching files
    """
    path = Path(path)

    if path.is_file():
        return [path]
    if not path.is_dir():
        raise LoadError("path does not exist or is not a file or directory", path)

    files = sorted(p for p in path.glob(pattern) if p.is_file())
    logger.info(f"Found {len(files)} Parquet file(s) in {path}")

    if not files:
        raise LoadError(f"no files matching {pattern}", path)
    return files


def load_catalog(
    path: Union[str, Path],
    columns: Optional[Mapping[str, str]] = None,
    pattern: str = PARQUET_PATTERN,
) -> DatasetCatalog:
    """
    Load every Parquet file named by path into a catalog.

    Args:
        path: A Parquet file or a folder of Parquet files
        columns: Optional logical-field to source-column mapping
        pattern: Glob pattern used when path is a folder

    Returns:
        DatasetCatalog with one Dataset per file

    Raises:
        LoadError: If no files are found or any file fails to load

    Example:
        >>> catalog = load_catalog("data/")
        >>> catalog.names
        ['test.parquet', 'train.parquet']
    """
    loader = ParquetAudioLoader(columns)
    datasets = [loader.load(file_path) for file_path in find_parquet_files(path, pattern)]

    catalog = DatasetCatalog(datasets)
    logger.info(f"Catalog ready: {len(catalog)} file(s), {catalog.total_rows} rows")
    return catalog
