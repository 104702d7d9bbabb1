"""Tests for data models."""

import dataclasses

import pytest
from datetime import timedelta

from video_timeline_editor.models import (
    VideoSegment,
    TimelineSelection,
    TimelineMetrics,
)


class TestVideoSegment:
    """Test VideoSegment class."""

    def test_create_segment(self):
        """Test creating a segment with start and end time."""
        segment = VideoSegment(
            source_start=timedelta(seconds=10),
            source_end=timedelta(seconds=30)
        )

        assert segment.source_start == timedelta(seconds=10)
        assert segment.source_end == timedelta(seconds=30)
        assert segment.duration == timedelta(seconds=20)

    def test_end_must_be_after_start(self):
        """Zero-length and reversed segments are rejected."""
        with pytest.raises(ValueError):
            VideoSegment(timedelta(seconds=5), timedelta(seconds=5))
        with pytest.raises(ValueError):
            VideoSegment(timedelta(seconds=5), timedelta(seconds=1))

    def test_contains_is_inclusive(self):
        segment = VideoSegment(timedelta(seconds=1), timedelta(seconds=5))

        assert segment.contains(timedelta(seconds=1))
        assert segment.contains(timedelta(seconds=3))
        assert segment.contains(timedelta(seconds=5))
        assert not segment.contains(timedelta(milliseconds=999))
        assert not segment.contains(timedelta(seconds=5, microseconds=1))

    def test_segment_is_immutable(self):
        segment = VideoSegment(timedelta(seconds=1), timedelta(seconds=5))

        with pytest.raises(dataclasses.FrozenInstanceError):
            segment.source_start = timedelta()

    def test_segment_repr(self):
        segment = VideoSegment(timedelta(seconds=10), timedelta(seconds=30))
        assert "duration=" in repr(segment)

    def test_segment_equality(self):
        """Test segment equality comparison."""
        segment1 = VideoSegment(timedelta(seconds=10), timedelta(seconds=30))
        segment2 = VideoSegment(timedelta(seconds=10), timedelta(seconds=30))
        segment3 = VideoSegment(timedelta(seconds=10), timedelta(seconds=40))

        assert segment1 == segment2
        assert segment1 != segment3


class TestTimelineSelection:
    """Test TimelineSelection class."""

    def test_initial_state(self):
        selection = TimelineSelection()

        assert not selection.is_active
        assert not selection.is_valid
        assert selection.duration == timedelta()

    def test_forward_drag(self):
        selection = TimelineSelection()
        selection.start_selection(timedelta(seconds=2))
        selection.update_selection(timedelta(seconds=7))

        assert selection.is_valid
        assert selection.normalized_start == timedelta(seconds=2)
        assert selection.normalized_end == timedelta(seconds=7)
        assert selection.duration == timedelta(seconds=5)

    def test_backward_drag_is_normalized(self):
        selection = TimelineSelection()
        selection.start_selection(timedelta(seconds=7))
        selection.update_selection(timedelta(seconds=2))

        assert selection.selection_start == timedelta(seconds=7)
        assert selection.normalized_start == timedelta(seconds=2)
        assert selection.normalized_end == timedelta(seconds=7)
        assert selection.duration == timedelta(seconds=5)

    def test_tiny_selection_is_invalid(self):
        """Selections of 10ms or less cannot be deleted."""
        selection = TimelineSelection()
        selection.start_selection(timedelta(seconds=1))
        selection.update_selection(timedelta(seconds=1, milliseconds=10))

        assert selection.is_active
        assert not selection.is_valid

    def test_clear_selection(self):
        selection = TimelineSelection()
        selection.start_selection(timedelta(seconds=1))
        selection.update_selection(timedelta(seconds=3))
        selection.clear_selection()

        assert not selection.is_active
        assert selection.selection_start == timedelta()
        assert selection.selection_end == timedelta()


class TestTimelineMetrics:
    """Test TimelineMetrics class."""

    def test_time_pixel_conversion(self):
        metrics = TimelineMetrics(
            total_duration=timedelta(seconds=60),
            timeline_width=600.0
        )

        assert metrics.pixels_per_second == 10.0
        assert metrics.time_to_pixel(timedelta(seconds=15)) == 150.0
        assert metrics.pixel_to_time(150.0) == timedelta(seconds=15)

    def test_zero_duration(self):
        metrics = TimelineMetrics(total_duration=timedelta(), timeline_width=600.0)

        assert metrics.pixels_per_second == 0.0
        assert metrics.time_to_pixel(timedelta(seconds=5)) == 0.0
        assert metrics.pixel_to_time(100.0) is None
