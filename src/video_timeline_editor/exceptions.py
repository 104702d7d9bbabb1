"""Exceptions raised by timeline edit operations."""


class TimelineError(ValueError):
    """Base class for rejected timeline edits."""


class InvalidRange(TimelineError):
    """Deletion range is empty or reversed (end <= start)."""


class OutOfBounds(TimelineError):
    """Deletion starts outside the virtual timeline."""
