"""Tests for export processor."""

import pytest
from pathlib import Path
from datetime import timedelta
import tempfile
import subprocess
from unittest.mock import Mock, patch

from video_timeline_editor.processor import ExportProcessor
from video_timeline_editor.models import VideoSegment


def segment(start, end):
    return VideoSegment(timedelta(seconds=start), timedelta(seconds=end))


class TestExportProcessor:
    """Test ExportProcessor class."""

    @pytest.fixture
    def mock_subprocess_run(self):
        """Mock subprocess.run for testing."""
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(
                returncode=0,
                stdout="ffmpeg version 6.0",
                stderr=""
            )
            yield mock_run

    @pytest.fixture
    def processor(self, mock_subprocess_run):
        return ExportProcessor(verbose=False, dry_run=False)

    @pytest.fixture
    def dry_run_processor(self, mock_subprocess_run):
        return ExportProcessor(verbose=False, dry_run=True)

    def test_check_ffmpeg_not_found(self):
        with patch('subprocess.run') as mock_run:
            mock_run.side_effect = FileNotFoundError()

            with pytest.raises(RuntimeError) as exc_info:
                ExportProcessor()
            assert "ffmpeg not found" in str(exc_info.value)

    def test_check_ffmpeg_error(self):
        with patch('subprocess.run') as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(1, 'ffmpeg')

            with pytest.raises(RuntimeError) as exc_info:
                ExportProcessor()
            assert "ffmpeg returned an error" in str(exc_info.value)

    def test_dry_run_skips_ffmpeg_check(self, mock_subprocess_run):
        ExportProcessor(dry_run=True)
        assert mock_subprocess_run.call_count == 0

    def test_fast_extract_command(self, processor):
        cmd = processor.build_extract_command(
            Path("input.mp4"), Path("seg.mp4"), segment(20, 60)
        )

        assert cmd[0] == 'ffmpeg'
        assert cmd.index('-ss') < cmd.index('-i')
        assert cmd[cmd.index('-ss') + 1] == '00:00:20.000000'
        assert cmd[cmd.index('-t') + 1] == '00:00:40.000000'
        assert 'copy' in cmd
        assert 'seg.mp4' in cmd
        assert '-loglevel' in cmd

    def test_extract_command_keeps_microseconds(self, processor):
        """A cut point off the millisecond grid is not moved earlier."""
        kept = VideoSegment(
            timedelta(seconds=10, microseconds=500),
            timedelta(seconds=20)
        )
        cmd = processor.build_extract_command(Path("input.mp4"), Path("seg.mp4"), kept)

        assert cmd[cmd.index('-ss') + 1] == '00:00:10.000500'
        assert cmd[cmd.index('-t') + 1] == '00:00:09.999500'

    def test_reencode_extract_command(self, mock_subprocess_run):
        processor = ExportProcessor(reencode=True, verbose=True)
        cmd = processor.build_extract_command(
            Path("input.mp4"), Path("seg.mp4"), segment(20, 60)
        )

        assert cmd.index('-i') < cmd.index('-ss')
        assert 'libx264' in cmd
        assert '-loglevel' not in cmd

    def test_export(self, processor, mock_subprocess_run):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)
            output_file = temp_path / "output.mp4"

            files = processor.export(
                Path("input.mp4"),
                output_file,
                [segment(0, 10), segment(20, 60)],
                temp_path
            )

            assert [f.name for f in files] == ["segment_000.mp4", "segment_001.mp4"]
            assert not (temp_path / 'concat_list.txt').exists()

            # ffmpeg check + two extracts + concat
            calls = mock_subprocess_run.call_args_list
            assert len(calls) == 4
            concat_args = calls[3][0][0]
            assert 'concat' in concat_args
            assert str(output_file) in concat_args

    def test_export_leaves_output_directory_alone(self, processor, mock_subprocess_run):
        """A user file named like the concat list survives an export."""
        with tempfile.TemporaryDirectory() as out_dir, \
                tempfile.TemporaryDirectory() as work_dir:
            out_path = Path(out_dir)
            work_path = Path(work_dir)
            user_file = out_path / 'concat_list.txt'
            user_file.write_text("my own notes")

            processor.export(
                Path("input.mp4"),
                out_path / "edited.mp4",
                [segment(0, 5)],
                work_path
            )

            assert user_file.read_text() == "my own notes"
            assert not (work_path / 'concat_list.txt').exists()

            concat_args = mock_subprocess_run.call_args_list[-1][0][0]
            assert str(work_path / 'concat_list.txt') in concat_args

    def test_export_no_segments(self, processor):
        with pytest.raises(ValueError) as exc_info:
            processor.export(Path("input.mp4"), Path("out.mp4"), [], Path("."))
        assert "No segments" in str(exc_info.value)

    def test_merge_segments_empty_list(self, processor):
        with pytest.raises(ValueError) as exc_info:
            processor.merge_segments([], Path("output.mp4"))
        assert "No segment files" in str(exc_info.value)

    def test_dry_run_export(self, dry_run_processor, mock_subprocess_run):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)
            dry_run_processor.export(
                Path("input.mp4"), temp_path / "out.mp4", [segment(0, 10)], temp_path
            )

            assert mock_subprocess_run.call_count == 0
            assert not (temp_path / 'concat_list.txt').exists()

    def test_get_duration(self, processor, mock_subprocess_run):
        mock_subprocess_run.return_value = Mock(
            returncode=0,
            stdout='{"streams": [], "format": {"duration": "63.250000"}}',
            stderr=""
        )

        assert processor.get_duration(Path("video.mp4")) == timedelta(seconds=63, milliseconds=250)

    def test_get_duration_missing(self, processor, mock_subprocess_run):
        mock_subprocess_run.return_value = Mock(
            returncode=0,
            stdout='{"streams": [], "format": {}}',
            stderr=""
        )

        assert processor.get_duration(Path("video.mp4")) is None

    def test_get_video_info_error(self, processor, mock_subprocess_run):
        mock_subprocess_run.side_effect = subprocess.CalledProcessError(1, 'ffprobe')

        assert processor.get_video_info(Path("video.mp4")) is None
        assert processor.get_duration(Path("video.mp4")) is None
