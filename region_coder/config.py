"""
Configuration management for the region coder.

This module provides dataclasses for the coder's configuration (dataset
location, level order, logging) and for statistics gathered during batch
round annotation.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from pathlib import Path

from .exceptions import ConfigurationError
from .hierarchy.level_config import DEFAULT_LEVELS


EMBEDDED_DATASET_PATH = Path(__file__).parent / "data" / "countries.json"

# File looked up inside the configuration directory
DATASET_FILE_NAME = "countries.json"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class CoderConfig:
    """Configuration class for the region coder."""

    # Directory searched for an external countries.json
    config_dir: Optional[str] = "./"

    # Explicit dataset file, tried before the configuration directory
    dataset_path: Optional[str] = None

    # Administrative levels from most to least granular
    levels: Tuple[str, ...] = field(default_factory=lambda: tuple(DEFAULT_LEVELS))

    # Output directory for batch runs
    output_directory: Optional[str] = None

    # Logging configuration
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.levels = tuple(self.levels)
        self._validate_levels()
        self._validate_log_level()

    def _validate_levels(self):
        """Validate the administrative level order."""
        if not self.levels:
            raise ConfigurationError(
                "At least one administrative level must be configured",
                config_key='levels',
                config_value=list(self.levels)
            )

        duplicates = sorted({level for level in self.levels if self.levels.count(level) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate administrative levels: {duplicates}",
                config_key='levels',
                config_value=list(self.levels)
            )

    def _validate_log_level(self):
        """Validate the logging level name."""
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}",
                config_key='log_level',
                config_value=self.log_level,
                valid_values=VALID_LOG_LEVELS
            )
        self.log_level = self.log_level.upper()

    def dataset_candidates(self) -> List[Path]:
        """
        External dataset locations in priority order.

        The embedded dataset is not included; it is the fallback when none of
        these can be read.
        """
        candidates = []
        if self.dataset_path:
            candidates.append(Path(self.dataset_path))
        if self.config_dir:
            candidates.append(Path(self.config_dir) / DATASET_FILE_NAME)
        return candidates

    def ensure_output_directory(self) -> Optional[Path]:
        """Create the output directory if one is configured."""
        if not self.output_directory:
            return None
        path = Path(self.output_directory)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary."""
        return {
            'config_dir': self.config_dir,
            'dataset_path': self.dataset_path,
            'levels': list(self.levels),
            'output_directory': self.output_directory,
            'log_level': self.log_level,
            'log_file': self.log_file
        }


@dataclass
class ProcessingStats:
    """Statistics tracking for batch round annotation."""

    total_rounds: int = 0
    resolved_guesses: int = 0
    resolved_answers: int = 0
    correct_guesses: int = 0
    processing_time: float = 0.0

    @property
    def unresolved_guesses(self) -> int:
        return self.total_rounds - self.resolved_guesses

    @property
    def unresolved_answers(self) -> int:
        return self.total_rounds - self.resolved_answers

    def get_resolution_rate(self) -> float:
        """Percentage of guess and answer positions resolved to a country."""
        if self.total_rounds == 0:
            return 0.0

        resolved = self.resolved_guesses + self.resolved_answers
        return (resolved / (2 * self.total_rounds)) * 100

    def get_accuracy(self) -> float:
        """Percentage of rounds whose guess landed in the answer's country."""
        if self.total_rounds == 0:
            return 0.0

        return (self.correct_guesses / self.total_rounds) * 100
