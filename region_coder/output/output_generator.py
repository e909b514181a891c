"""
Output generation and file management for batch round annotation.

This module provides the OutputGenerator class, which writes annotated rounds,
per-country statistics, country confusion pairs and a text summary report
into the configured output directory with timestamped file names.
"""

import os
from datetime import datetime
from typing import Any, Dict, Optional

import pandas as pd

from ..config import CoderConfig, ProcessingStats
from ..exceptions import OutputGenerationError
from ..logging_config import CoderLogger


class OutputGenerator:
    """
    Generates organized output files for annotated rounds.
    """

    def __init__(self, config: CoderConfig, logger: Optional[CoderLogger] = None):
        """
        Initialize the OutputGenerator.

        Args:
            config: Configuration object with the output directory
            logger: Optional logger instance for logging operations

        Raises:
            OutputGenerationError: If no output directory is configured
        """
        if not config.output_directory:
            raise OutputGenerationError(
                "An output directory is required to write batch results",
                output_type='directory'
            )

        self.config = config
        self.logger = logger or CoderLogger()
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        self.config.ensure_output_directory()

        self.file_patterns = {
            'annotated_rounds': 'annotated_rounds_{timestamp}.csv',
            'country_stats': 'country_stats_{timestamp}.csv',
            'confusion_pairs': 'country_confusion_{timestamp}.csv',
            'summary_report': 'round_summary_report_{timestamp}.txt'
        }

    def generate_all_outputs(self, annotated_df: pd.DataFrame, country_stats: pd.DataFrame,
                             confusion_pairs: pd.DataFrame, summary: Dict[str, Any],
                             processing_stats: ProcessingStats,
                             score_distribution: Optional[Dict[str, int]] = None) -> Dict[str, str]:
        """
        Generate all output files for a batch run.

        Args:
            annotated_df: Rounds with country annotation columns
            country_stats: Per-country statistics
            confusion_pairs: Guessed/actual confusion pairs
            summary: Headline figures from CountryStatsAggregator.summary
            processing_stats: Processing statistics object
            score_distribution: Optional score bucket counts

        Returns:
            Dictionary mapping output type to generated file path

        Raises:
            OutputGenerationError: If a file cannot be written
        """
        self.logger.info("Starting output file generation")

        generated_files = {
            'annotated_rounds': self._write_csv('annotated_rounds', annotated_df),
            'country_stats': self._write_csv('country_stats', country_stats),
            'confusion_pairs': self._write_csv('confusion_pairs', confusion_pairs),
        }
        generated_files['summary_report'] = self._generate_summary_report(
            summary, processing_stats, score_distribution or {}
        )

        self.logger.info(f"Generated {len(generated_files)} output files")
        return generated_files

    def _output_path(self, output_type: str) -> str:
        filename = self.file_patterns[output_type].format(timestamp=self.timestamp)
        return os.path.join(self.config.output_directory, filename)

    def _write_csv(self, output_type: str, df: pd.DataFrame) -> str:
        """
        Write one DataFrame to its timestamped CSV file.

        Returns:
            Path to generated file
        """
        file_path = self._output_path(output_type)
        try:
            df.to_csv(file_path, index=False, encoding='utf-8')
        except OSError as e:
            raise OutputGenerationError(
                f"Failed to write {output_type} file: {e}",
                output_type=output_type,
                output_path=file_path,
                record_count=len(df),
                original_error=e
            )

        self.logger.log_file_operation(f"Generated {output_type} file", file_path, len(df))
        return file_path

    def _generate_summary_report(self, summary: Dict[str, Any],
                                 processing_stats: ProcessingStats,
                                 score_distribution: Dict[str, int]) -> str:
        """
        Generate the text summary report.

        Returns:
            Path to generated summary report file
        """
        file_path = self._output_path('summary_report')
        total = processing_stats.total_rounds

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write("ROUND ANNOTATION SUMMARY REPORT\n")
                f.write("=" * 50 + "\n\n")

                f.write(f"Report Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write(f"Processing Time: {processing_stats.processing_time:.2f} seconds\n")
                f.write("Configuration:\n")
                f.write(f"  Config Directory: {self.config.config_dir}\n")
                f.write(f"  Dataset Override: {self.config.dataset_path or 'Not specified'}\n\n")

                f.write("PROCESSING SUMMARY\n")
                f.write("-" * 18 + "\n")
                f.write(f"Total Rounds Processed: {total:,}\n")
                f.write(f"Guesses Resolved: {processing_stats.resolved_guesses:,}\n")
                f.write(f"Answers Resolved: {processing_stats.resolved_answers:,}\n")
                f.write(f"Resolution Rate: {processing_stats.get_resolution_rate():.2f}%\n")
                f.write(f"Correct Country Guesses: {processing_stats.correct_guesses:,} "
                        f"({processing_stats.get_accuracy():.2f}%)\n\n")

                f.write("PLAYER SUMMARY\n")
                f.write("-" * 14 + "\n")
                f.write(f"Average Score: {summary.get('avg_score', 0.0):.0f}\n")
                f.write(f"Average Distance: {summary.get('avg_distance', 0.0):.1f} km\n")
                f.write(f"Most Played Country: {summary.get('favourite_country') or 'n/a'}\n")
                f.write(f"Best Country: {summary.get('best_country') or 'n/a'}\n")
                f.write(f"Worst Country: {summary.get('worst_country') or 'n/a'}\n\n")

                if score_distribution:
                    f.write("SCORE DISTRIBUTION\n")
                    f.write("-" * 18 + "\n")
                    for label, count in score_distribution.items():
                        rate = (count / total * 100) if total > 0 else 0
                        f.write(f"{label}: {count:,} ({rate:.2f}%)\n")
                    f.write("\n")

                rounds_per_second = total / processing_stats.processing_time \
                    if processing_stats.processing_time > 0 else 0
                f.write("PERFORMANCE\n")
                f.write("-" * 11 + "\n")
                f.write(f"Processing Rate: {rounds_per_second:.0f} rounds/second\n")

                f.write(f"\nReport completed at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        except OSError as e:
            raise OutputGenerationError(
                f"Failed to write summary report: {e}",
                output_type='summary_report',
                output_path=file_path,
                record_count=total,
                original_error=e
            )

        self.logger.info(f"Generated summary report: {file_path}")
        return file_path
