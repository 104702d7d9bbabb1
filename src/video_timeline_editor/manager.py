"""Segment manager: the single edit entry point for a loaded video."""

import logging
import threading
from datetime import timedelta
from typing import List, Optional, Tuple

from .history import DEFAULT_MAX_HISTORY_DEPTH, EditHistory
from .models import TimelineSelection, VideoSegment
from .segment_list import SegmentList

logger = logging.getLogger(__name__)


class SegmentManager:
    """
    Owns the live segment list and its edit history.

    Create one per loaded source video and hand it to every consumer.
    Edits are serialized by an internal lock and each one publishes a new
    list by swapping a single reference, so a reader holding
    ``current_segments`` (e.g. a playback monitor thread) always sees a
    complete list.
    """

    def __init__(self, max_history_depth: Optional[int] = DEFAULT_MAX_HISTORY_DEPTH):
        """
        Initialize SegmentManager.

        Args:
            max_history_depth: Undo depth passed to EditHistory
        """
        self._lock = threading.RLock()
        self._history = EditHistory(max_history_depth=max_history_depth)
        self._current: Optional[SegmentList] = None
        self._source_duration = timedelta()

    def initialize(self, total_source_duration: timedelta) -> None:
        """
        Reset to the full source as a single kept segment.

        Args:
            total_source_duration: Length of the loaded source video

        Raises:
            ValueError: If the duration is not positive
        """
        if total_source_duration <= timedelta():
            raise ValueError(
                f"Source duration must be positive, got {total_source_duration}"
            )

        with self._lock:
            self._source_duration = total_source_duration
            self._current = SegmentList.from_duration(total_source_duration)
            self._history.clear()
        logger.debug(f"Initialized timeline with duration {total_source_duration}")

    def _require_initialized(self) -> SegmentList:
        current = self._current
        if current is None:
            raise RuntimeError("SegmentManager is not initialized; call initialize() first")
        return current

    @property
    def current_segments(self) -> SegmentList:
        """The live segment list (virtual timeline)."""
        return self._require_initialized()

    @property
    def history(self) -> EditHistory:
        return self._history

    @property
    def source_duration(self) -> timedelta:
        return self._source_duration

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def delete_segment(self, virtual_start: timedelta, virtual_end: timedelta) -> None:
        """
        Delete a range of the virtual timeline, recording it for undo.

        Raises:
            InvalidRange: If virtual_end <= virtual_start
            OutOfBounds: If virtual_start is outside the virtual timeline
        """
        with self._lock:
            current = self._require_initialized()
            working = current.clone()
            working.delete(virtual_start, virtual_end)

            self._history.push_state(current)
            self._current = working

        logger.debug(
            f"Deleted {virtual_start}-{virtual_end}; "
            f"{working.segment_count} segments, {working.total_duration} remaining"
        )

    def delete_selection(self, selection: TimelineSelection) -> bool:
        """
        Delete the range covered by a timeline selection.

        Returns:
            True if the selection was valid and deleted, False otherwise
        """
        if not selection.is_valid:
            return False
        self.delete_segment(selection.normalized_start, selection.normalized_end)
        return True

    def undo(self) -> None:
        with self._lock:
            current = self._require_initialized()
            self._current = self._history.undo(current)
        logger.debug(f"Undo -> {self._current.segment_count} segments")

    def redo(self) -> None:
        with self._lock:
            current = self._require_initialized()
            self._current = self._history.redo(current)
        logger.debug(f"Redo -> {self._current.segment_count} segments")

    def segment_at_virtual_time(self, virtual_time: timedelta) -> Optional[VideoSegment]:
        """
        Find the kept segment playing at a virtual timeline position.

        Segment ranges are half-open, except that the exact end of the
        timeline belongs to the last segment.
        """
        if virtual_time < timedelta():
            return None

        segments = self.current_segments.segments
        accumulated = timedelta()

        for segment in segments:
            next_accumulated = accumulated + segment.duration
            if accumulated <= virtual_time < next_accumulated:
                return segment
            accumulated = next_accumulated

        if segments and virtual_time == accumulated:
            return segments[-1]

        return None

    def segment_at_source_time(self, source_time: timedelta) -> Optional[VideoSegment]:
        """Find the kept segment containing a source position, if any."""
        if source_time < timedelta():
            return None

        for segment in self.current_segments:
            if segment.contains(source_time):
                return segment

        return None

    def deleted_regions(self) -> List[Tuple[timedelta, timedelta]]:
        """Deleted gaps in source time, for timeline rendering."""
        return self.current_segments.deleted_regions(self._source_duration)
