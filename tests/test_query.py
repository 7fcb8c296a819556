"""
Unit tests for the query layer: pagination, filtering, and row projection.
"""

import pytest

from audioviewer.exceptions import InvalidRequest
from audioviewer.query.pagination import (
    PageRequest,
    QueryEngine,
    matching_indices,
    query,
)
from audioviewer.query.projector import (
    RowProjector,
    format_duration,
    project,
    truncate_transcript,
)


# ============================================================================
# Duration Formatting Tests
# ============================================================================

class TestFormatDuration:
    """Test mm:ss.mmm formatting."""

    @pytest.mark.parametrize("seconds,expected", [
        (0.0, "00:00.000"),
        (65.5, "01:05.500"),
        (6.02, "00:06.020"),
        (3599.999, "59:59.999"),
        (59.9999, "00:59.999"),
        (0.001, "00:00.001"),
        (3600.0, "60:00.000"),
    ])
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_truncates_instead_of_rounding(self):
        """Test that sub-millisecond parts never round up across a boundary."""
        assert format_duration(1.9999) == "00:01.999"

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            format_duration(-0.5)

    def test_nan_duration_rejected(self):
        with pytest.raises(ValueError):
            format_duration(float("nan"))


# ============================================================================
# Transcript Truncation Tests
# ============================================================================

class TestTruncateTranscript:
    """Test preview truncation."""

    def test_short_text_unchanged(self):
        assert truncate_transcript("hello", limit=5) == "hello"

    def test_long_text_truncated_with_ellipsis(self):
        assert truncate_transcript("hello world", limit=5) == "hello…"

    def test_default_limit(self):
        text = "x" * 200
        preview = truncate_transcript(text)
        assert preview == "x" * 120 + "…"

    def test_empty_text(self):
        assert truncate_transcript("") == ""

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            truncate_transcript("abc", limit=0)


# ============================================================================
# Row Projector Tests
# ============================================================================

class TestRowProjector:
    """Test converting records into render-ready form."""

    def test_project_record(self, sample_dataset):
        record = sample_dataset.record(0)
        rendered = project(record)

        assert rendered.index == 0
        assert rendered.duration == "00:00.500"
        assert rendered.full_transcript == record.transcript
        assert rendered.preview == record.transcript
        assert rendered.truncated is False

    def test_audio_handle_passed_through(self, sample_dataset):
        """Test that projection keeps the handle rather than copying bytes."""
        record = sample_dataset.record(3)
        rendered = project(record)

        assert rendered.audio is record.audio

    def test_preview_length_configurable(self, sample_dataset):
        record = sample_dataset.record(0)
        rendered = RowProjector(preview_length=7).project(record)

        assert rendered.preview == record.transcript[:7] + "…"
        assert rendered.truncated is True
        assert rendered.full_transcript == record.transcript

    def test_to_dict_has_no_audio_bytes(self, sample_dataset):
        data = project(sample_dataset.record(1)).to_dict()

        assert data["audio_mime_type"] == "audio/wav"
        assert data["audio_size"] > 0
        assert "transcript" not in data
        assert all(not isinstance(value, bytes) for value in data.values())

    def test_to_dict_with_full_transcript(self, sample_dataset):
        record = sample_dataset.record(1)
        data = project(record).to_dict(include_full_transcript=True)
        assert data["transcript"] == record.transcript


# ============================================================================
# Pagination Tests
# ============================================================================

class TestPagination:
    """Test page windows over the dataset."""

    def test_first_page(self, sample_dataset):
        result = query(sample_dataset, PageRequest(page_index=0, page_size=10))

        assert [item.index for item in result.items] == list(range(10))
        assert result.total_matching == 37
        assert result.total_pages == 4
        assert result.has_previous is False
        assert result.has_next is True

    def test_last_partial_page(self, sample_dataset):
        result = query(sample_dataset, PageRequest(page_index=3, page_size=10))

        assert [item.index for item in result.items] == list(range(30, 37))
        assert result.has_next is False
        assert result.start_position == 31
        assert result.end_position == 37

    def test_page_beyond_end_is_empty(self, sample_dataset):
        """Test that a page past the end is an empty result, not an error."""
        result = query(sample_dataset, PageRequest(page_index=5, page_size=10))

        assert result.items == []
        assert result.total_matching == 37
        assert result.start_position == 0

    def test_items_never_exceed_page_size(self, sample_dataset):
        for page_size in (1, 3, 10, 37, 100):
            for page_index in range(0, 40 // page_size + 2):
                result = query(sample_dataset, PageRequest(page_index, page_size))
                assert len(result.items) <= page_size

    @pytest.mark.parametrize("filter_text", [None, "cat", "weather", "ordinary"])
    @pytest.mark.parametrize("page_size", [1, 4, 10])
    def test_pages_partition_filtered_set(self, sample_dataset, filter_text, page_size):
        """Test that consecutive pages cover the filtered set without gaps or overlap."""
        expected = matching_indices(sample_dataset, filter_text).to_pylist()

        collected = []
        totals = set()
        page_index = 0
        while True:
            result = query(sample_dataset, PageRequest(page_index, page_size, filter_text))
            totals.add(result.total_matching)
            if not result.items:
                break
            collected.extend(item.index for item in result.items)
            page_index += 1

        assert collected == expected
        assert totals == {len(expected)}

    def test_empty_dataset(self, parquet_factory):
        from audioviewer.dataset.loader import load

        dataset = load(parquet_factory("empty.parquet", rows=[]))
        result = query(dataset, PageRequest(0, 10))

        assert result.items == []
        assert result.total_matching == 0
        assert result.total_pages == 0


# ============================================================================
# Filter Tests
# ============================================================================

class TestFiltering:
    """Test transcript substring filtering."""

    def test_filter_is_case_insensitive(self, sample_dataset):
        """Test that "cat" matches a transcript containing "Catalog"."""
        result = query(sample_dataset, PageRequest(0, 100, "cat"))

        assert result.total_matching == 8
        assert all("catalog" in item.full_transcript.lower() for item in result.items)

    def test_uppercase_filter(self, sample_dataset):
        result = query(sample_dataset, PageRequest(0, 100, "weather"))
        assert result.total_matching == 8

        result_upper = query(sample_dataset, PageRequest(0, 100, "WEATHER"))
        assert [i.index for i in result_upper.items] == [i.index for i in result.items]

    def test_filter_keeps_dataset_order(self, sample_dataset):
        result = query(sample_dataset, PageRequest(0, 100, "cat"))
        assert [item.index for item in result.items] == [0, 5, 10, 15, 20, 25, 30, 35]

    def test_filter_no_match(self, sample_dataset):
        result = query(sample_dataset, PageRequest(0, 10, "zebra"))
        assert result.items == []
        assert result.total_matching == 0

    def test_blank_filter_matches_all(self, sample_dataset):
        result = query(sample_dataset, PageRequest(0, 10, "   "))
        assert result.total_matching == 37
        assert result.filter is None

    def test_filter_is_literal(self, sample_dataset):
        """Test that regex metacharacters are matched literally."""
        result = query(sample_dataset, PageRequest(0, 10, "e.t"))
        assert result.total_matching == 0

    def test_filter_ignores_other_fields(self, sample_dataset):
        """Test that the filter does not look at audio bytes."""
        result = query(sample_dataset, PageRequest(0, 10, "RIFF"))
        assert result.total_matching == 0

    def test_filtered_page_beyond_end(self, sample_dataset):
        result = query(sample_dataset, PageRequest(3, 5, "cat"))
        assert result.items == []
        assert result.total_matching == 8


# ============================================================================
# Validation Tests
# ============================================================================

class TestRequestValidation:
    """Test InvalidRequest for malformed page requests."""

    def test_zero_page_size(self, sample_dataset):
        with pytest.raises(InvalidRequest) as exc_info:
            query(sample_dataset, PageRequest(0, 0))
        assert exc_info.value.field == "page_size"

    def test_page_size_above_maximum(self, sample_dataset):
        with pytest.raises(InvalidRequest):
            query(sample_dataset, PageRequest(0, 101))

    def test_page_size_at_maximum(self, sample_dataset):
        result = query(sample_dataset, PageRequest(0, 100))
        assert len(result.items) == 37

    def test_configured_maximum(self, sample_dataset):
        engine = QueryEngine(max_page_size=5)
        with pytest.raises(InvalidRequest):
            engine.query(sample_dataset, PageRequest(0, 6))
        assert len(engine.query(sample_dataset, PageRequest(0, 5)).items) == 5

    def test_negative_page_index(self, sample_dataset):
        with pytest.raises(InvalidRequest) as exc_info:
            query(sample_dataset, PageRequest(-1, 10))
        assert exc_info.value.field == "page_index"

    def test_non_integer_values(self, sample_dataset):
        with pytest.raises(InvalidRequest):
            query(sample_dataset, PageRequest(0, 2.5))
        with pytest.raises(InvalidRequest):
            query(sample_dataset, PageRequest("1", 10))

    def test_invalid_engine_maximum(self):
        with pytest.raises(ValueError):
            QueryEngine(max_page_size=0)
