"""Pydantic schemas for the JSON API."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from audioviewer.query.pagination import PageResult
from audioviewer.query.projector import RenderedRecord


class FileSummary(BaseModel):
    name: str
    rows: int
    total_duration_seconds: float


class FileListResponse(BaseModel):
    count: int
    files: List[FileSummary]


class RecordResponse(BaseModel):
    index: int
    duration: str
    duration_seconds: float
    preview: str
    truncated: bool
    audio_url: str
    audio_size: int
    audio_mime_type: str


class RecordDetailResponse(RecordResponse):
    transcript: str


class PageResponse(BaseModel):
    file: str
    page: int = Field(description="1-based page number")
    page_size: int
    filter: str | None = None
    total_matching: int
    total_pages: int
    has_previous: bool
    has_next: bool
    items: List[RecordResponse]


class HealthResponse(BaseModel):
    ok: bool
    files: int
    rows: int


def record_response(record: RenderedRecord, audio_url: str) -> RecordResponse:
    return RecordResponse(audio_url=audio_url, **record.to_dict())


def record_detail_response(record: RenderedRecord, audio_url: str) -> RecordDetailResponse:
    return RecordDetailResponse(audio_url=audio_url, **record.to_dict(include_full_transcript=True))


def page_response(filename: str, result: PageResult, audio_urls: List[str]) -> PageResponse:
    return PageResponse(
        file=filename,
        page=result.page_index + 1,
        page_size=result.page_size,
        filter=result.filter,
        total_matching=result.total_matching,
        total_pages=result.total_pages,
        has_previous=result.has_previous,
        has_next=result.has_next,
        items=[
            record_response(record, url)
            for record, url in zip(result.items, audio_urls)
        ],
    )
