"""
Paginated, filterable retrieval over a loaded Dataset.

Filtering is a case-insensitive substring match on the transcript, run as a
single pyarrow compute scan. Matching rows keep their dataset order and are
sliced into fixed-size pages. A page past the end is an empty result, not an
error.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

import pyarrow as pa
import pyarrow.compute as pc

from audioviewer.dataset.models import Dataset
from audioviewer.exceptions import InvalidRequest
from audioviewer.logger import get_default_logger
from audioviewer.query.projector import RenderedRecord, RowProjector


logger = get_default_logger()


DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_PAGE_SIZE = 100


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index, page size, and optional transcript filter."""

    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    filter: Optional[str] = None

    @property
    def normalized_filter(self) -> Optional[str]:
        """The filter text, or None when absent or blank."""
        if self.filter is None or not self.filter.strip():
            return None
        return self.filter

    @property
    def offset(self) -> int:
        return self.page_index * self.page_size

    def validate(self, max_page_size: int = DEFAULT_MAX_PAGE_SIZE) -> None:
        """
        Check the request against the configured maximum page size.

        Raises:
            InvalidRequest: If page_size is not in [1, max_page_size] or
                page_index is negative
        """
        if not _is_int(self.page_size):
            raise InvalidRequest(f"page_size must be an integer, got {self.page_size!r}", field="page_size")
        if self.page_size <= 0:
            raise InvalidRequest(f"page_size must be positive, got {self.page_size}", field="page_size")
        if self.page_size > max_page_size:
            raise InvalidRequest(
                f"page_size {self.page_size} exceeds the maximum of {max_page_size}",
                field="page_size",
            )
        if not _is_int(self.page_index):
            raise InvalidRequest(f"page_index must be an integer, got {self.page_index!r}", field="page_index")
        if self.page_index < 0:
            raise InvalidRequest(f"page_index must be non-negative, got {self.page_index}", field="page_index")
        if self.filter is not None and not isinstance(self.filter, str):
            raise InvalidRequest(f"filter must be text, got {type(self.filter).__name__}", field="filter")


@dataclass(frozen=True)
class PageResult:
    """One page of rendered records and the size of the full match set."""

    items: List[RenderedRecord]
    total_matching: int
    page_index: int
    page_size: int
    filter: Optional[str] = None

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_matching / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return (self.page_index + 1) * self.page_size < self.total_matching

    @property
    def start_position(self) -> int:
        """1-based position of the first item, or 0 for an empty page."""
        return self.page_index * self.page_size + 1 if self.items else 0

    @property
    def end_position(self) -> int:
        return self.page_index * self.page_size + len(self.items)


def matching_indices(dataset: Dataset, filter_text: Optional[str]) -> pa.Array:
    """
    Return the row indices whose transcript contains filter_text, in order.

    A None filter matches every row.

    Example:
        >>> matching_indices(dataset, "cat").to_pylist()
        [0, 4, 7]
    """
    if filter_text is None:
        return pa.array(range(len(dataset)), type=pa.uint64())
    mask = pc.match_substring(dataset.transcripts, pattern=filter_text, ignore_case=True)
    return pc.indices_nonzero(mask.combine_chunks())


class QueryEngine:
    """Runs page requests against a dataset with a fixed page size limit."""

    def __init__(self, max_page_size: int = DEFAULT_MAX_PAGE_SIZE, projector: Optional[RowProjector] = None):
        if max_page_size <= 0:
            raise ValueError(f"max_page_size must be positive, got {max_page_size}")
        self.max_page_size = max_page_size
        self.projector = projector or RowProjector()

    def query(self, dataset: Dataset, request: PageRequest) -> PageResult:
        """
        Compute one page of filtered records.

        Args:
            dataset: The dataset to read
            request: Page index, page size and optional filter

        Returns:
            PageResult; items is empty when the page lies past the last match

        Raises:
            InvalidRequest: If the request fails validation
        """
        request.validate(self.max_page_size)
        filter_text = request.normalized_filter

        indices = matching_indices(dataset, filter_text)
        total_matching = len(indices)

        if request.offset < total_matching:
            window = indices.slice(request.offset, request.page_size)
        else:
            window = indices.slice(0, 0)
        records = dataset.records(window.to_pylist())
        items = [self.projector.project(record) for record in records]

        logger.debug(
            f"Query on {dataset.name}: filter={filter_text!r} page={request.page_index} "
            f"size={request.page_size} -> {len(items)}/{total_matching}"
        )

        return PageResult(
            items=items,
            total_matching=total_matching,
            page_index=request.page_index,
            page_size=request.page_size,
            filter=filter_text,
        )


def query(
    dataset: Dataset,
    request: PageRequest,
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> PageResult:
    """
    Convenience function to run one page request.

    Example:
        >>> result = query(dataset, PageRequest(page_index=0, page_size=10, filter="cat"))
        >>> result.total_matching
        3
    """
    return QueryEngine(max_page_size=max_page_size).query(dataset, request)
