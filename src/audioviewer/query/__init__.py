"""
Query layer: pagination, transcript filtering, and row projection.
"""

from audioviewer.query.pagination import (
    DEFAULT_MAX_PAGE_SIZE,
    DEFAULT_PAGE_SIZE,
    PageRequest,
    PageResult,
    QueryEngine,
    matching_indices,
    query,
)
from audioviewer.query.projector import (
    RenderedRecord,
    RowProjector,
    format_duration,
    project,
    truncate_transcript,
)

__all__ = [
    "DEFAULT_MAX_PAGE_SIZE",
    "DEFAULT_PAGE_SIZE",
    "PageRequest",
    "PageResult",
    "QueryEngine",
    "RenderedRecord",
    "RowProjector",
    "format_duration",
    "matching_indices",
    "project",
    "query",
    "truncate_transcript",
]
