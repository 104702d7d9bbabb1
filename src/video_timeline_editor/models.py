"""Data models for video timeline editor."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


MIN_SELECTION_DURATION = timedelta(milliseconds=10)


@dataclass(frozen=True)
class VideoSegment:
    """A kept portion of the source video, in source-time coordinates."""
    source_start: timedelta
    source_end: timedelta

    def __post_init__(self):
        if self.source_end <= self.source_start:
            raise ValueError(
                f"Invalid segment: source_end ({self.source_end}) must be "
                f"greater than source_start ({self.source_start})"
            )

    @property
    def duration(self) -> timedelta:
        """Length of the segment."""
        return self.source_end - self.source_start

    def contains(self, source_time: timedelta) -> bool:
        """Check if a source timestamp lies within this segment (inclusive)."""
        return self.source_start <= source_time <= self.source_end

    def __repr__(self) -> str:
        return (
            f"VideoSegment(source_start={self.source_start}, "
            f"source_end={self.source_end}, duration={self.duration})"
        )


class TimelineSelection:
    """
    A drag selection on the virtual timeline.

    The end point may lie before the start point depending on drag
    direction; use ``normalized_start`` / ``normalized_end`` for deletion.
    """

    def __init__(self):
        self.is_active = False
        self.selection_start = timedelta()
        self.selection_end = timedelta()

    @property
    def duration(self) -> timedelta:
        return abs(self.selection_end - self.selection_start)

    @property
    def normalized_start(self) -> timedelta:
        return min(self.selection_start, self.selection_end)

    @property
    def normalized_end(self) -> timedelta:
        return max(self.selection_start, self.selection_end)

    @property
    def is_valid(self) -> bool:
        """Active and longer than the minimum selectable duration."""
        return self.is_active and self.duration > MIN_SELECTION_DURATION

    def start_selection(self, time: timedelta) -> None:
        self.is_active = True
        self.selection_start = time
        self.selection_end = time

    def update_selection(self, time: timedelta) -> None:
        self.selection_end = time

    def clear_selection(self) -> None:
        self.is_active = False
        self.selection_start = timedelta()
        self.selection_end = timedelta()


@dataclass(frozen=True)
class TimelineMetrics:
    """Scale between timeline time and on-screen pixels."""
    total_duration: timedelta
    timeline_width: float
    timeline_height: float = 0.0

    @property
    def pixels_per_second(self) -> float:
        seconds = self.total_duration.total_seconds()
        if seconds <= 0:
            return 0.0
        return self.timeline_width / seconds

    def time_to_pixel(self, time: timedelta) -> float:
        """Convert a timeline position to a horizontal pixel offset."""
        return time.total_seconds() * self.pixels_per_second

    def pixel_to_time(self, pixel: float) -> Optional[timedelta]:
        """
        Convert a horizontal pixel offset to a timeline position.

        Returns None when the timeline has no width to map against.
        """
        pps = self.pixels_per_second
        if pps <= 0:
            return None
        return timedelta(seconds=pixel / pps)
