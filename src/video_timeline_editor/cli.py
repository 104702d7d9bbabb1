"""Command-line interface for video timeline editor."""

import sys
import logging
import shutil
import tempfile
from pathlib import Path
import argparse

from . import __version__, __description__
from .manager import SegmentManager
from .parser import EditScriptParser
from .processor import ExportProcessor
from .utils import TimeParser

logger = logging.getLogger(__name__)


class TimelineEditorApp:
    """Replays an edit script on a source video and exports the result."""

    def __init__(self, args: argparse.Namespace):
        """
        Initialize TimelineEditorApp.

        Args:
            args: Parsed command-line arguments
        """
        self.args = args
        self.parser = EditScriptParser()
        self.processor = ExportProcessor(
            verbose=args.verbose,
            dry_run=args.dry_run or args.list_only,
            reencode=args.reencode
        )
        self.manager = SegmentManager(max_history_depth=args.history_depth)

        self.script_file = Path(args.script_file)
        self.input_video = Path(args.video_file)
        self._setup_output_path()
        self._setup_temp_dir()

    def _setup_output_path(self):
        """Setup output file path."""
        if self.args.output:
            self.output_video = Path(self.args.output)
        else:
            stem = self.input_video.stem
            suffix = self.input_video.suffix
            self.output_video = self.input_video.parent / f"{stem}_edited{suffix}"

    def _setup_temp_dir(self):
        """Setup temporary directory."""
        if self.args.temp_dir:
            self.temp_dir = Path(self.args.temp_dir)
            self.temp_dir.mkdir(exist_ok=True)
            self._temp_created = False
        else:
            self.temp_dir = Path(tempfile.mkdtemp(prefix="timeline_editor_"))
            self._temp_created = True

    def run(self) -> int:
        """
        Execute the edit and export workflow.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            if not self.script_file.exists():
                logger.error(f"Edit script not found: {self.script_file}")
                return 1

            if not self.input_video.exists():
                logger.error(f"Video file not found: {self.input_video}")
                return 1

            duration = self._source_duration()
            if duration is None:
                logger.error(
                    "Could not determine video duration. Use --duration to set it."
                )
                return 1

            self.manager.initialize(duration)

            commands = self.parser.parse_file(self.script_file)
            logger.info(f"Applying {len(commands)} edits from {self.script_file}")
            for i, command in enumerate(commands, 1):
                logger.debug(f"  Edit {i}: {command}")
                command.apply(self.manager)

            self._report()

            segments = self.manager.current_segments
            if not segments.segment_count:
                logger.warning("Nothing left to export: every segment was deleted.")
                return 1

            if self.args.list_only:
                return 0

            if self.output_video.exists() and not self.args.dry_run:
                if not self._confirm_overwrite():
                    logger.info("Operation cancelled.")
                    return 0

            self.processor.export(
                self.input_video, self.output_video, segments, self.temp_dir
            )

            logger.info(f"Success! Output saved to: {self.output_video}")
            return 0

        except KeyboardInterrupt:
            logger.info("\nOperation cancelled by user.")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if self.args.verbose:
                logger.exception("Detailed error information:")
            return 1
        finally:
            self._cleanup()

    def _source_duration(self):
        if self.args.duration:
            return TimeParser.parse_time(self.args.duration)
        return self.processor.get_duration(self.input_video)

    def _report(self):
        """Log the kept segments and deleted regions."""
        segments = self.manager.current_segments
        fmt = TimeParser.format_for_display

        logger.info(
            f"Edited duration: {fmt(segments.total_duration)} "
            f"(source {fmt(self.manager.source_duration)}), "
            f"{segments.segment_count} segments kept"
        )
        for i, segment in enumerate(segments, 1):
            logger.info(
                f"  Keep {i}: {fmt(segment.source_start)} - {fmt(segment.source_end)}"
            )
        if self.args.verbose:
            for start, end in self.manager.deleted_regions():
                logger.debug(f"  Deleted: {fmt(start)} - {fmt(end)}")

    def _confirm_overwrite(self) -> bool:
        """Ask user for confirmation to overwrite existing file."""
        response = input(f"Output file '{self.output_video}' already exists. Overwrite? [y/N]: ")
        return response.lower() in ('y', 'yes')

    def _cleanup(self):
        """Clean up temporary files."""
        if self._temp_created and not self.args.keep_temp:
            if self.temp_dir.exists():
                shutil.rmtree(self.temp_dir)
                if self.args.verbose:
                    logger.debug(f"Cleaned up temporary directory: {self.temp_dir}")


def non_negative_int(value: str) -> int:
    """argparse type for counts that may be zero but not negative."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='video-timeline-editor',
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s edits.txt video.mp4
  %(prog)s edits.txt video.mp4 -o edited.mp4
  %(prog)s edits.txt video.mp4 --list-only
  %(prog)s edits.txt video.mp4 --duration 0:10:00.000 --dry-run
  %(prog)s edits.txt video.mp4 --reencode  # Frame-accurate (slow)

Edit script format (times on the edited timeline):
  delete 0:00:10.000 0:00:20.000
  delete 5 7.5
  undo
  redo
        """
    )

    parser.add_argument('script_file',
                        help='Edit script with delete/undo/redo commands')
    parser.add_argument('video_file',
                        help='Input video file')

    parser.add_argument('-o', '--output',
                        help='Output filename (default: <input>_edited.<ext>)')
    parser.add_argument('-d', '--duration',
                        help='Source duration in seconds or H:MM:SS.mmm (default: ffprobe)')
    parser.add_argument('-t', '--temp-dir',
                        help='Temporary directory (default: auto-generated)')
    parser.add_argument('-k', '--keep-temp',
                        action='store_true',
                        help='Keep temporary files after processing')

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument('-q', '--quiet',
                              action='store_true',
                              help='Suppress progress messages')
    output_group.add_argument('-v', '--verbose',
                              action='store_true',
                              help='Show detailed output')

    parser.add_argument('--dry-run',
                        action='store_true',
                        help='Show what would be done without executing')
    parser.add_argument('--list-only',
                        action='store_true',
                        help='Only print the kept segments, do not export')
    parser.add_argument('--reencode',
                        action='store_true',
                        help='Re-encode segments for precise cuts')
    parser.add_argument('--history-depth',
                        type=non_negative_int,
                        default=50,
                        help='Maximum undo depth (default: 50)')

    parser.add_argument('--version',
                        action='version',
                        version=f'%(prog)s {__version__}')

    return parser


def setup_logging(quiet: bool, verbose: bool):
    """Configure logging based on verbosity settings."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        if verbose else '%(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    setup_logging(args.quiet, args.verbose)

    try:
        app = TimelineEditorApp(args)
    except (RuntimeError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    sys.exit(app.run())


if __name__ == "__main__":
    main()
