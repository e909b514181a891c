"""
Tests for loading round CSV files.
"""

import tempfile
import unittest
from pathlib import Path

import pandas as pd

from region_coder.data_loader import DataLoader, OPTIONAL_ROUND_COLUMNS
from region_coder.exceptions import DatasetLoadError, FileAccessError, ValidationError
from region_coder.utils.error_handler import RetryConfig


class TestDataLoader(unittest.TestCase):
    """Test cases for DataLoader."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.loader = DataLoader(retry_config=RetryConfig(max_attempts=1, base_delay=0.0))

    def _write(self, name, text):
        path = Path(self.temp_dir.name) / name
        path.write_text(text, encoding='utf-8')
        return str(path)

    def test_load_valid_file(self):
        path = self._write('rounds.csv', (
            "game_id,round_number,guess_lat,guess_lng,actual_lat,actual_lng,score,distance\n"
            "g1,1,46.0,2.0,47.0,3.0,4500,50.2\n"
            "g1,2,40.0,-100.0,46.0,2.0,100,7000\n"
        ))
        df = self.loader.load_rounds(path)
        self.assertEqual(len(df), 2)
        self.assertEqual(df.loc[0, 'guess_lat'], 46.0)
        self.assertEqual(df.loc[1, 'score'], 100)
        self.assertEqual(list(df['game_id']), ['g1', 'g1'])

    def test_optional_columns_are_added(self):
        path = self._write('rounds.csv', (
            "guess_lat,guess_lng,actual_lat,actual_lng\n"
            "46.0,2.0,47.0,3.0\n"
        ))
        df = self.loader.load_rounds(path)
        for col in OPTIONAL_ROUND_COLUMNS:
            self.assertIn(col, df.columns)
        self.assertTrue(pd.isna(df.loc[0, 'score']))
        self.assertEqual(df.loc[0, 'game_id'], '')

    def test_non_numeric_values_become_missing(self):
        path = self._write('rounds.csv', (
            "guess_lat,guess_lng,actual_lat,actual_lng,score\n"
            "north,2.0,47.0,3.0,lots\n"
            "46.0,2.0,95.0,3.0,10\n"
        ))
        with self.assertLogs('region_coder', level='WARNING') as logs:
            df = self.loader.load_rounds(path)
        self.assertTrue(pd.isna(df.loc[0, 'guess_lat']))
        self.assertTrue(pd.isna(df.loc[0, 'score']))
        self.assertEqual(df.loc[1, 'actual_lat'], 95.0)
        self.assertTrue(any('DATA QUALITY' in line for line in logs.output))

    def test_missing_columns(self):
        path = self._write('rounds.csv', "guess_lat,guess_lng\n1,2\n")
        with self.assertRaises(ValidationError) as ctx:
            self.loader.load_rounds(path)
        self.assertIn('actual_lat', str(ctx.exception))

    def test_missing_file(self):
        with self.assertRaises(FileAccessError):
            self.loader.load_rounds(str(Path(self.temp_dir.name) / 'absent.csv'))

    def test_directory_is_not_a_file(self):
        with self.assertRaises(FileAccessError):
            self.loader.load_rounds(self.temp_dir.name)

    def test_zero_byte_file(self):
        with self.assertRaises(DatasetLoadError):
            self.loader.load_rounds(self._write('empty.csv', ''))

    def test_header_only_file(self):
        path = self._write('header.csv', "guess_lat,guess_lng,actual_lat,actual_lng\n")
        with self.assertRaises(DatasetLoadError):
            self.loader.load_rounds(path)


if __name__ == '__main__':
    unittest.main()
