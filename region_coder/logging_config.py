"""
Logging configuration for the region coder.

This module provides the CoderLogger wrapper used by the command line
interface and the batch pipeline: console output, an optional log file, and
helpers that report catalog loading and round annotation in a uniform layout.
Library modules log through ``logging.getLogger(__name__)``, so everything
under the ``region_coder`` namespace ends up in the same handlers.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

BANNER_WIDTH = 60
SECTION_WIDTH = 40


class CoderLogger:
    """Logger wrapper for region coder operations."""

    def __init__(self, name: str = "region_coder", level: str = "INFO",
                 log_file: Optional[str] = None):
        """
        Configure the named logger.

        Existing handlers on the logger are replaced, so building a second
        CoderLogger for the same name does not duplicate output.

        Args:
            name: Logger name, normally the package namespace
            level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Also append to this file when given
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.upper())
        self.logger.handlers.clear()
        self.log_file = log_file

        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        handlers = [logging.StreamHandler(sys.stdout)]
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

        for handler in handlers:
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def info(self, message: str):
        self.logger.info(message)

    def debug(self, message: str):
        self.logger.debug(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def critical(self, message: str):
        self.logger.critical(message)

    def _banner(self, title: str):
        self.info("=" * BANNER_WIDTH)
        self.info(title)
        self.info("=" * BANNER_WIDTH)

    def log_catalog_loaded(self, source: str, region_count: int, geometry_count: int,
                           identifier_count: int):
        """Log a summary of the loaded region catalog."""
        self.info(f"Region catalog loaded from: {source}")
        self.info(f"Regions: {region_count:,} ({geometry_count:,} with geometry)")
        self.info(f"Identifiers indexed: {identifier_count:,}")

    def log_processing_start(self, round_count: int, region_count: int):
        """Log the start of a batch run with data counts."""
        self._banner("ROUND ANNOTATION STARTED")
        self.info(f"Rounds to annotate: {round_count:,}")
        self.info(f"Regions available: {region_count:,}")
        self.info(f"Started at: {datetime.now().strftime(LOG_DATE_FORMAT)}")

    def log_processing_complete(self, stats):
        """Log batch completion with a ProcessingStats summary."""
        self._banner("ROUND ANNOTATION COMPLETED")
        self.info(f"Total rounds processed: {stats.total_rounds:,}")
        self.log_resolution_statistics("Guesses", stats.resolved_guesses, stats.total_rounds)
        self.log_resolution_statistics("Answers", stats.resolved_answers, stats.total_rounds)
        self.info(f"Correct country guesses: {stats.correct_guesses:,} "
                  f"({stats.get_accuracy():.2f}%)")
        self.info(f"Processing time: {stats.processing_time:.2f} seconds")
        self.info(f"Completed at: {datetime.now().strftime(LOG_DATE_FORMAT)}")

    def log_resolution_statistics(self, label: str, resolved: int, total: int):
        """Log how many positions of one kind resolved to a country."""
        rate = (resolved / total * 100) if total else 0.0
        self.info(f"{label} resolved to a country: {resolved:,}/{total:,} ({rate:.2f}%)")

    def log_phase_start(self, phase_name: str):
        """Log the start of a processing phase."""
        self.info("-" * SECTION_WIDTH)
        self.info(f"Phase: {phase_name}")
        self.info("-" * SECTION_WIDTH)

    def log_phase_complete(self, phase_name: str, count: int, duration: float):
        """Log the completion of a processing phase."""
        self.info(f"Phase {phase_name} finished: {count:,} records in {duration:.2f} seconds")

    def log_file_operation(self, operation: str, file_path: str, record_count: int):
        self.info(f"{operation}: {file_path} ({record_count:,} records)")


def setup_logging(config) -> CoderLogger:
    """
    Build the application logger from a CoderConfig.

    An explicit ``log_file`` wins. Otherwise batch runs, which have an output
    directory, log to a timestamped file inside it; lookups log to the
    console only.
    """
    log_file = config.log_file
    if not log_file and config.output_directory:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = str(Path(config.output_directory) / f"region_coder_log_{stamp}.txt")

    return CoderLogger(name="region_coder", level=config.log_level, log_file=log_file)
