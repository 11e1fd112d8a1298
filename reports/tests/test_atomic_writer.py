"""
Tests for atomic writer - temp write → fsync → rename.
"""

import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from reports.atomic_writer import AtomicWriteError, write_json_atomic, write_text_atomic


class TestWriteTextAtomic:
    """Tests for write_text_atomic."""

    def test_success(self, tmp_path):
        output_path = tmp_path / 'summary.txt'

        result = write_text_atomic("BTC up 4.2%\n", output_path)

        assert result['status'] == 'completed'
        assert result['bytes_written'] == len("BTC up 4.2%\n")
        assert output_path.read_text() == "BTC up 4.2%\n"

    def test_creates_parent_directories(self, tmp_path):
        output_path = tmp_path / 'analysis' / 'BTC' / 'out.txt'

        result = write_text_atomic("x", output_path)

        assert result['status'] == 'completed'
        assert output_path.exists()

    def test_overwrites_existing(self, tmp_path):
        output_path = tmp_path / 'out.txt'
        output_path.write_text("old")

        write_text_atomic("new", output_path)

        assert output_path.read_text() == "new"

    def test_no_temp_files_left(self, tmp_path):
        write_text_atomic("content", tmp_path / 'out.txt')

        assert list(tmp_path.glob('*.tmp')) == []

    def test_accepts_string_path(self, tmp_path):
        result = write_text_atomic("x", str(tmp_path / 'out.txt'))

        assert result['output_path'] == str(tmp_path / 'out.txt')

    @patch('reports.atomic_writer.os.fsync')
    def test_fsync_called(self, mock_fsync, tmp_path):
        write_text_atomic("content", tmp_path / 'out.txt')

        mock_fsync.assert_called_once()

    @patch('reports.atomic_writer.os.replace', side_effect=OSError("disk full"))
    def test_rename_failure_cleans_up(self, mock_replace, tmp_path):
        output_path = tmp_path / 'out.txt'

        result = write_text_atomic("content", output_path)

        assert result['status'] == 'failed'
        assert 'disk full' in result['error']
        assert not output_path.exists()
        assert list(tmp_path.glob('*.tmp')) == []

    def test_rejects_non_string(self, tmp_path):
        with pytest.raises(AtomicWriteError):
            write_text_atomic(b"bytes", tmp_path / 'out.txt')


class TestWriteJsonAtomic:
    """Tests for write_json_atomic."""

    def test_round_trip_with_dates(self, tmp_path):
        output_path = tmp_path / 'BTC_analysis.json'
        payload = {'symbol': 'BTC', 'start': date(2024, 1, 1), 'returns': [1.5, None]}

        result = write_json_atomic(payload, output_path)

        assert result['status'] == 'completed'
        loaded = json.loads(output_path.read_text())
        assert loaded == {'symbol': 'BTC', 'start': '2024-01-01', 'returns': [1.5, None]}

    def test_serialization_failure(self, tmp_path):
        output_path = tmp_path / 'bad.json'

        # Tuple keys cannot be JSON object keys
        result = write_json_atomic({('BTC', 'ETH'): 1}, output_path)

        assert result['status'] == 'failed'
        assert 'serialization' in result['error'].lower()
        assert not output_path.exists()
