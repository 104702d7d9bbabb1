"""Undo/redo history of segment list snapshots."""

import logging
from typing import List, Optional

from .segment_list import SegmentList

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY_DEPTH = 50


class EditHistory:
    """
    Two-stack undo/redo log.

    Every entry is an independent clone, so later edits to the live list
    never reach a stored snapshot. Undo and redo on an empty stack return
    the given state unchanged; check ``can_undo`` / ``can_redo`` to know
    whether the action will do anything.
    """

    def __init__(self, max_history_depth: Optional[int] = DEFAULT_MAX_HISTORY_DEPTH):
        """
        Initialize EditHistory.

        Args:
            max_history_depth: Maximum number of undo entries kept, oldest
                evicted first (None for unbounded)
        """
        self._undo_stack: List[SegmentList] = []
        self._redo_stack: List[SegmentList] = []
        self._max_history_depth: Optional[int] = None
        self.max_history_depth = max_history_depth

    @property
    def max_history_depth(self) -> Optional[int]:
        return self._max_history_depth

    @max_history_depth.setter
    def max_history_depth(self, value: Optional[int]) -> None:
        if value is not None and value < 0:
            raise ValueError(f"max_history_depth must be >= 0, got {value}")
        self._max_history_depth = value
        self._evict()

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    def _evict(self) -> None:
        if self._max_history_depth is None:
            return
        excess = len(self._undo_stack) - self._max_history_depth
        if excess > 0:
            # Bottom of the stack is the front of the list
            del self._undo_stack[:excess]
            logger.debug(f"Evicted {excess} oldest undo entries")

    def push_state(self, state: SegmentList) -> None:
        """Record a state before it is changed. Invalidates redo."""
        self._undo_stack.append(state.clone())
        self._redo_stack.clear()
        self._evict()

    def undo(self, current_state: SegmentList) -> SegmentList:
        """
        Step back one edit.

        Args:
            current_state: The live state, saved for redo

        Returns:
            The previous state, or current_state if there is nothing to undo
        """
        if not self._undo_stack:
            return current_state

        self._redo_stack.append(current_state.clone())
        return self._undo_stack.pop()

    def redo(self, current_state: SegmentList) -> SegmentList:
        """Step forward one undone edit; symmetric to :meth:`undo`."""
        if not self._redo_stack:
            return current_state

        self._undo_stack.append(current_state.clone())
        self._evict()
        return self._redo_stack.pop()

    def clear(self) -> None:
        """Drop all undo and redo entries."""
        self._undo_stack.clear()
        self._redo_stack.clear()
