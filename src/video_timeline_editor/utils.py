"""Utility functions for video timeline editor."""

import re
from datetime import timedelta
from decimal import Decimal


class TimeParser:
    """Utility class for parsing and formatting time strings."""

    TIME_PATTERN = re.compile(r'^(\d+):(\d{2}):(\d{2})\.(\d{3})$')
    SECONDS_PATTERN = re.compile(r'^\d+(\.\d{1,6})?$')

    @classmethod
    def parse_timestamp(cls, time_str: str) -> timedelta:
        """
        Parse time string in format H:MM:SS.mmm to timedelta.

        Args:
            time_str: Time string in format "H:MM:SS.mmm"

        Returns:
            timedelta object

        Raises:
            ValueError: If time string format is invalid

        Examples:
            >>> TimeParser.parse_timestamp("0:00:05.151")
            datetime.timedelta(seconds=5, microseconds=151000)
        """
        match = cls.TIME_PATTERN.match(time_str)

        if not match:
            raise ValueError(
                f"Invalid time format: {time_str}. "
                f"Expected format: H:MM:SS.mmm (e.g., 0:00:05.151)"
            )

        hours, minutes, seconds, milliseconds = map(int, match.groups())

        if minutes >= 60 or seconds >= 60:
            raise ValueError(
                f"Invalid time values in {time_str}: "
                f"minutes and seconds must be < 60"
            )

        return timedelta(
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            milliseconds=milliseconds
        )

    @classmethod
    def parse_time(cls, text: str) -> timedelta:
        """
        Parse either an H:MM:SS.mmm timestamp or a plain number of seconds.

        Plain seconds are parsed as a decimal so "0.1" is exactly 100ms
        rather than the nearest binary float.

        Raises:
            ValueError: If the text is neither format

        Examples:
            >>> TimeParser.parse_time("12.5")
            datetime.timedelta(seconds=12, microseconds=500000)
        """
        text = text.strip()
        if ':' in text:
            return cls.parse_timestamp(text)

        if not cls.SECONDS_PATTERN.match(text):
            raise ValueError(
                f"Invalid time value: '{text}'. "
                f"Expected seconds (e.g., 12.5) or H:MM:SS.mmm"
            )
        micros = int(Decimal(text) * 1_000_000)
        return timedelta(microseconds=micros)

    @staticmethod
    def _split(td: timedelta):
        total_us = td // timedelta(microseconds=1)
        hours, rem = divmod(total_us, 3_600_000_000)
        minutes, rem = divmod(rem, 60_000_000)
        seconds, micros = divmod(rem, 1_000_000)
        return hours, minutes, seconds, micros

    @classmethod
    def format_for_ffmpeg(cls, td: timedelta) -> str:
        """
        Format timedelta for ffmpeg command (HH:MM:SS.ffffff).

        Sub-second precision is kept to the microsecond.

        Examples:
            >>> TimeParser.format_for_ffmpeg(timedelta(hours=1, minutes=30, seconds=45, milliseconds=500))
            '01:30:45.500000'
        """
        hours, minutes, seconds, micros = cls._split(td)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{micros:06d}"

    @classmethod
    def format_for_display(cls, td: timedelta) -> str:
        """
        Format timedelta for logs and edit scripts (H:MM:SS.mmm).

        Examples:
            >>> TimeParser.format_for_display(timedelta(minutes=5, seconds=30, milliseconds=151))
            '0:05:30.151'
        """
        hours, minutes, seconds, micros = cls._split(td)
        millis = micros // 1000
        return f"{hours}:{minutes:02d}:{seconds:02d}.{millis:03d}"
