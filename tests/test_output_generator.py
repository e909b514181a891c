"""
Tests for batch output files.
"""

import os
import tempfile
import unittest

import pandas as pd

from region_coder.config import CoderConfig
from region_coder.exceptions import OutputGenerationError
from region_coder.logging_config import CoderLogger
from region_coder.output import OutputGenerator
from region_coder.rounds import CountryStatsAggregator, RoundAnnotator
from tests.fixtures import sample_coder, sample_rounds


class TestOutputGenerator(unittest.TestCase):
    """Test cases for OutputGenerator."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.output_dir = os.path.join(self.temp_dir.name, 'results')
        self.config = CoderConfig(config_dir=None, output_directory=self.output_dir)
        self.logger = CoderLogger(name='region_coder.tests.output', level='WARNING')

    def _outputs(self):
        coder = sample_coder()
        annotated, stats = RoundAnnotator(coder, show_progress=False).annotate(sample_rounds())
        aggregator = CountryStatsAggregator(coder)
        return (
            annotated,
            aggregator.country_stats(annotated),
            aggregator.confusion_pairs(annotated),
            aggregator.summary(annotated),
            stats,
            aggregator.score_distribution(annotated),
        )

    def test_generates_all_files(self):
        generator = OutputGenerator(self.config, self.logger)
        files = generator.generate_all_outputs(*self._outputs())

        self.assertEqual(set(files), {'annotated_rounds', 'country_stats',
                                      'confusion_pairs', 'summary_report'})
        for path in files.values():
            self.assertTrue(os.path.isfile(path))
            self.assertTrue(path.startswith(self.output_dir))

        annotated = pd.read_csv(files['annotated_rounds'], keep_default_na=False)
        self.assertEqual(len(annotated), 6)
        self.assertIn('actual_country_code', annotated.columns)

        stats = pd.read_csv(files['country_stats'])
        self.assertEqual(list(stats['country_code']), ['us', 'fr'])

    def test_summary_report_contents(self):
        generator = OutputGenerator(self.config, self.logger)
        files = generator.generate_all_outputs(*self._outputs())

        with open(files['summary_report'], encoding='utf-8') as f:
            report = f.read()
        self.assertTrue(report.startswith("ROUND ANNOTATION SUMMARY REPORT"))
        self.assertIn("Total Rounds Processed: 6", report)
        self.assertIn("Most Played Country: France", report)
        self.assertIn("0-1000: 3", report)

    def test_timestamped_names(self):
        generator = OutputGenerator(self.config, self.logger)
        self.assertRegex(generator.timestamp, r'^\d{8}_\d{6}$')
        self.assertTrue(os.path.isdir(self.output_dir))

    def test_requires_output_directory(self):
        with self.assertRaises(OutputGenerationError):
            OutputGenerator(CoderConfig(config_dir=None), self.logger)


if __name__ == '__main__':
    unittest.main()
