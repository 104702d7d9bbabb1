"""Edit script parser for video timeline editor."""

import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Iterable, List, Optional

from .exceptions import TimelineError
from .manager import SegmentManager
from .utils import TimeParser


@dataclass
class EditCommand:
    """A single edit replayed against a SegmentManager."""
    action: str
    start: Optional[timedelta] = None
    end: Optional[timedelta] = None
    line: Optional[int] = field(default=None, compare=False)

    def apply(self, manager: SegmentManager) -> None:
        """
        Dispatch this command to the manager.

        Raises:
            InvalidRange, OutOfBounds: If the delete is rejected; the
                message starts with the script line when it is known
        """
        try:
            if self.action == 'delete':
                manager.delete_segment(self.start, self.end)
            elif self.action == 'undo':
                manager.undo()
            elif self.action == 'redo':
                manager.redo()
            else:
                raise ValueError(f"Unknown action: {self.action}")
        except TimelineError as e:
            if self.line is None:
                raise
            raise type(e)(f"Error at line {self.line}: {e}") from e


class EditScriptParser:
    """
    Parser for edit script files.

    One command per line, times in virtual-timeline coordinates::

        delete 0:00:10.000 0:00:20.000
        delete 5 7.5
        undo
        redo

    Blank lines and lines starting with '#' are ignored.
    """

    DELETE_PATTERN = re.compile(r'^delete\s+(\S+)\s+(\S+)$', re.IGNORECASE)
    SIMPLE_ACTIONS = ('undo', 'redo')

    def parse_file(self, filepath: Path) -> List[EditCommand]:
        """
        Parse an edit script file.

        Args:
            filepath: Path to edit script

        Returns:
            Commands in file order

        Raises:
            FileNotFoundError: If the script doesn't exist
            ValueError: If the path is not a file or a line is invalid
        """
        if not filepath.exists():
            raise FileNotFoundError(f"Edit script not found: {filepath}")

        if not filepath.is_file():
            raise ValueError(f"Path is not a file: {filepath}")

        with open(filepath, 'r', encoding='utf-8') as f:
            return self.parse_lines(f)

    def parse_lines(self, lines: Iterable[str]) -> List[EditCommand]:
        """Parse script lines; line numbers in errors are 1-based."""
        commands = []

        for i, raw in enumerate(lines, 1):
            line = raw.strip()
            if not line or line.startswith('#'):
                continue
            try:
                command = self._parse_line(line)
            except ValueError as e:
                raise ValueError(f"Error at line {i}: {e}")
            command.line = i
            commands.append(command)

        return commands

    def _parse_line(self, line: str) -> EditCommand:
        lowered = line.lower()
        if lowered in self.SIMPLE_ACTIONS:
            return EditCommand(action=lowered)

        match = self.DELETE_PATTERN.match(line)
        if not match:
            raise ValueError(
                f"Invalid line format: '{line}'. "
                f"Expected 'delete START END', 'undo' or 'redo'"
            )

        start, end = (TimeParser.parse_time(t) for t in match.groups())
        return EditCommand(action='delete', start=start, end=end)
