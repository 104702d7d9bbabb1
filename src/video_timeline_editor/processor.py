"""Export of kept segments using ffmpeg."""

import json
import logging
import subprocess
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .models import VideoSegment
from .utils import TimeParser

logger = logging.getLogger(__name__)


class ExportProcessor:
    """Builds and runs the ffmpeg trim/concat step for an edited timeline."""

    def __init__(self, verbose: bool = False, dry_run: bool = False,
                 reencode: bool = False):
        """
        Initialize ExportProcessor.

        Args:
            verbose: Show detailed ffmpeg output
            dry_run: Log commands without executing
            reencode: Re-encode segments for frame-accurate cuts
        """
        self.verbose = verbose
        self.dry_run = dry_run
        self.reencode = reencode
        self._check_ffmpeg()

    def _check_ffmpeg(self):
        """Check if ffmpeg is available."""
        if self.dry_run:
            return

        try:
            result = subprocess.run(
                ['ffmpeg', '-version'],
                capture_output=True,
                check=True,
                text=True
            )
            if self.verbose:
                first_line = result.stdout.split('\n')[0]
                logger.debug(f"Using {first_line}")
        except subprocess.CalledProcessError:
            raise RuntimeError(
                "ffmpeg returned an error. Please check your installation."
            )
        except FileNotFoundError:
            raise RuntimeError(
                "ffmpeg not found. Please install ffmpeg and ensure it's in your PATH.\n"
                "Installation instructions: https://ffmpeg.org/download.html"
            )

    def build_extract_command(self, input_file: Path, output_file: Path,
                              segment: VideoSegment) -> List[str]:
        """
        Build the ffmpeg command extracting one kept segment.

        Args:
            input_file: Source video
            output_file: Segment file to write
            segment: Kept segment in source time

        Returns:
            ffmpeg command list
        """
        start = TimeParser.format_for_ffmpeg(segment.source_start)
        duration = TimeParser.format_for_ffmpeg(segment.duration)

        if self.reencode:
            # Seek after input for frame accuracy
            cmd = [
                'ffmpeg',
                '-i', str(input_file),
                '-ss', start,
                '-t', duration,
                '-c:v', 'libx264',
                '-crf', '18',
                '-preset', 'fast',
                '-c:a', 'aac',
                '-b:a', '192k',
            ]
        else:
            cmd = [
                'ffmpeg',
                '-ss', start,
                '-i', str(input_file),
                '-t', duration,
                '-c', 'copy',
                '-avoid_negative_ts', 'make_zero',
            ]

        cmd.extend(['-movflags', '+faststart', str(output_file), '-y'])

        if not self.verbose:
            cmd.extend(['-loglevel', 'error'])

        return cmd

    def build_concat_command(self, concat_file: Path, output_file: Path) -> List[str]:
        """Build the ffmpeg command joining extracted segment files."""
        cmd = [
            'ffmpeg',
            '-f', 'concat',
            '-safe', '0',
            '-i', str(concat_file),
            '-c', 'copy',
            '-movflags', '+faststart',
            str(output_file),
            '-y'
        ]

        if not self.verbose:
            cmd.extend(['-loglevel', 'error'])

        return cmd

    def merge_segments(self, segment_files: List[Path], output_file: Path,
                       work_dir: Optional[Path] = None,
                       cleanup_concat: bool = True) -> None:
        """
        Merge extracted segment files into one video.

        The concat list is written to work_dir, which defaults to the
        directory holding the first segment file.

        Raises:
            subprocess.CalledProcessError: If ffmpeg fails
            ValueError: If no segment files provided
        """
        if not segment_files:
            raise ValueError("No segment files provided for merging")

        concat_content = '\n'.join(f"file '{f.absolute()}'" for f in segment_files)
        if work_dir is None:
            work_dir = segment_files[0].parent
        concat_file = work_dir / 'concat_list.txt'

        try:
            if not self.dry_run:
                with open(concat_file, 'w', encoding='utf-8') as f:
                    f.write(concat_content)

            self._run_command(
                self.build_concat_command(concat_file, output_file),
                f"Merging {len(segment_files)} segments"
            )
        finally:
            if cleanup_concat and concat_file.exists():
                concat_file.unlink()

    def export(self, input_file: Path, output_file: Path,
               segments: Iterable[VideoSegment], temp_dir: Path) -> List[Path]:
        """
        Render the kept segments of a source video into one output file.

        Args:
            input_file: Source video
            output_file: Edited video to write
            segments: Kept segments in source order
            temp_dir: Directory for intermediate segment files

        Returns:
            Paths of the intermediate segment files

        Raises:
            ValueError: If there are no segments to export
            subprocess.CalledProcessError: If ffmpeg fails
        """
        segments = list(segments)
        if not segments:
            raise ValueError("No segments to export")

        segment_files = []
        for i, segment in enumerate(segments):
            logger.info(f"Extracting segment {i+1}/{len(segments)}")
            segment_file = temp_dir / f"segment_{i:03d}{input_file.suffix or '.mp4'}"
            self._run_command(
                self.build_extract_command(input_file, segment_file, segment),
                f"Extracting segment to {segment_file.name}"
            )
            segment_files.append(segment_file)

        logger.info("Merging segments...")
        self.merge_segments(segment_files, output_file, work_dir=temp_dir)
        return segment_files

    def get_video_info(self, video_file: Path) -> Optional[Dict[str, Any]]:
        """
        Get basic video information using ffprobe.

        Returns:
            Dictionary with video information or None if ffprobe fails
        """
        try:
            cmd = [
                'ffprobe',
                '-v', 'error',
                '-print_format', 'json',
                '-show_streams',
                '-show_format',
                str(video_file)
            ]

            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True
            )

            return json.loads(result.stdout)

        except (subprocess.CalledProcessError, FileNotFoundError, json.JSONDecodeError):
            return None

    def get_duration(self, video_file: Path) -> Optional[timedelta]:
        """Source duration from ffprobe's format section, or None."""
        info = self.get_video_info(video_file)
        if not info:
            return None

        raw = info.get('format', {}).get('duration')
        if raw is None:
            return None
        try:
            return timedelta(microseconds=int(Decimal(str(raw)) * 1_000_000))
        except InvalidOperation:
            logger.warning(f"Unreadable duration from ffprobe: {raw}")
            return None

    def _run_command(self, cmd: List[str], description: str = "") -> None:
        """
        Run a command, respecting dry_run mode.

        Raises:
            subprocess.CalledProcessError: If command fails
        """
        if self.dry_run:
            logger.info(f"[DRY RUN] {description}")
            logger.info(f"[DRY RUN] Command: {' '.join(cmd)}")
            return

        if description and self.verbose:
            logger.debug(f"{description}")
            logger.debug(f"Command: {' '.join(cmd)}")

        subprocess.run(cmd, check=True, capture_output=not self.verbose, text=True)
