"""Kept-segment list and virtual timeline mapping."""

import logging
from datetime import timedelta
from typing import Iterable, Iterator, List, Optional, Tuple

from .exceptions import InvalidRange, OutOfBounds
from .models import VideoSegment

logger = logging.getLogger(__name__)


class SegmentList:
    """
    Ordered kept segments of a source video.

    Concatenating the segments in order gives the virtual timeline.
    Segments are sorted by ``source_start``, never overlap and always have
    a positive duration. The list is only changed by :meth:`delete`, which
    rebuilds it and swaps it in with a single assignment.
    """

    def __init__(self, segments: Optional[Iterable[VideoSegment]] = None):
        """
        Initialize SegmentList.

        Args:
            segments: Kept segments in source order (default: empty)

        Raises:
            ValueError: If segments are unsorted or overlap
        """
        kept = list(segments) if segments is not None else []
        self._validate(kept)
        self._segments: List[VideoSegment] = kept

    @classmethod
    def from_duration(cls, duration: timedelta) -> 'SegmentList':
        """Create a list holding the whole source as a single segment."""
        return cls([VideoSegment(timedelta(), duration)])

    @staticmethod
    def _validate(segments: List[VideoSegment]) -> None:
        for previous, current in zip(segments, segments[1:]):
            if current.source_start < previous.source_end:
                raise ValueError(
                    f"Segments must be sorted and non-overlapping: "
                    f"{previous} followed by {current}"
                )

    @property
    def segments(self) -> Tuple[VideoSegment, ...]:
        """Kept segments in source order."""
        return tuple(self._segments)

    @property
    def total_duration(self) -> timedelta:
        """Length of the virtual timeline."""
        return sum((s.duration for s in self._segments), timedelta())

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[VideoSegment]:
        return iter(self._segments)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SegmentList):
            return NotImplemented
        return self._segments == other._segments

    def __repr__(self) -> str:
        return f"SegmentList({self._segments!r})"

    def clone(self) -> 'SegmentList':
        """Deep copy for undo history."""
        return SegmentList(
            VideoSegment(s.source_start, s.source_end) for s in self._segments
        )

    def virtual_to_source(self, virtual_time: timedelta) -> timedelta:
        """
        Convert a virtual timeline position to a source file position.

        A position exactly on the boundary between two segments belongs to
        the later segment; the end of the last segment maps to its own
        ``source_end``. Positions past the end clamp to the last segment's
        end.

        Args:
            virtual_time: Position in the virtual timeline

        Returns:
            Position in the source video
        """
        if not self._segments:
            return timedelta()

        accumulated = timedelta()
        last_index = len(self._segments) - 1

        for i, segment in enumerate(self._segments):
            next_accumulated = accumulated + segment.duration

            if i == last_index:
                in_range = virtual_time <= next_accumulated
            else:
                in_range = virtual_time < next_accumulated

            if in_range:
                return segment.source_start + (virtual_time - accumulated)

            accumulated = next_accumulated

        return self._segments[-1].source_end

    def source_to_virtual(self, source_time: timedelta) -> Optional[timedelta]:
        """
        Convert a source file position to a virtual timeline position.

        Args:
            source_time: Position in the source video

        Returns:
            Position in the virtual timeline, or None if the position lies
            in a deleted region
        """
        accumulated = timedelta()

        for segment in self._segments:
            if segment.contains(source_time):
                return accumulated + (source_time - segment.source_start)
            accumulated += segment.duration

        return None

    def delete(self, virtual_start: timedelta, virtual_end: timedelta) -> None:
        """
        Delete a range of the virtual timeline.

        A range that exactly touches a segment boundary trims that segment;
        only a range strictly inside a segment splits it in two.

        Args:
            virtual_start: Start of the range in the virtual timeline
            virtual_end: End of the range in the virtual timeline

        Raises:
            InvalidRange: If virtual_end <= virtual_start
            OutOfBounds: If virtual_start is negative or not before the
                end of the virtual timeline
        """
        if virtual_end <= virtual_start:
            raise InvalidRange(
                f"Invalid range: end ({virtual_end}) must be greater than "
                f"start ({virtual_start})"
            )

        total = self.total_duration
        if virtual_start < timedelta() or virtual_start >= total:
            raise OutOfBounds(
                f"Range start ({virtual_start}) is outside the timeline "
                f"(0, {total})"
            )

        source_start = self.virtual_to_source(virtual_start)
        source_end = self.virtual_to_source(virtual_end)

        logger.debug(
            f"Deleting virtual {virtual_start}-{virtual_end} "
            f"(source {source_start}-{source_end})"
        )

        rebuilt: List[VideoSegment] = []

        for segment in self._segments:
            if segment.source_end <= source_start:
                # Entirely before the deleted range
                rebuilt.append(segment)
            elif segment.source_start >= source_end:
                # Entirely after
                rebuilt.append(segment)
            elif source_start > segment.source_start and source_end < segment.source_end:
                # Strictly inside: split
                rebuilt.append(VideoSegment(segment.source_start, source_start))
                rebuilt.append(VideoSegment(source_end, segment.source_end))
            elif source_start <= segment.source_start and source_end < segment.source_end:
                rebuilt.append(VideoSegment(source_end, segment.source_end))
            elif source_start > segment.source_start and source_end >= segment.source_end:
                rebuilt.append(VideoSegment(segment.source_start, source_start))
            # Otherwise the segment is fully covered and dropped

        self._segments = rebuilt

    def next_segment_after(self, source_time: timedelta) -> Optional[VideoSegment]:
        """First kept segment starting strictly after a source position."""
        for segment in self._segments:
            if segment.source_start > source_time:
                return segment
        return None

    def deleted_regions(self, source_duration: timedelta) -> List[Tuple[timedelta, timedelta]]:
        """
        Get the deleted gaps between kept segments.

        Args:
            source_duration: Full length of the source video

        Returns:
            List of (source_start, source_end) tuples in source order
        """
        regions: List[Tuple[timedelta, timedelta]] = []

        if not self._segments:
            if source_duration > timedelta():
                regions.append((timedelta(), source_duration))
            return regions

        if self._segments[0].source_start > timedelta():
            regions.append((timedelta(), self._segments[0].source_start))

        for current, following in zip(self._segments, self._segments[1:]):
            if following.source_start > current.source_end:
                regions.append((current.source_end, following.source_start))

        if source_duration > self._segments[-1].source_end:
            regions.append((self._segments[-1].source_end, source_duration))

        return regions
