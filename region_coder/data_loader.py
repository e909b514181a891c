"""
Data loading and validation module.

This module provides the DataLoader class for loading recorded game rounds
from CSV files with column validation and error handling.
"""

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .exceptions import DatasetLoadError, ValidationError, FileAccessError
from .utils.error_handler import (
    RetryConfig, safe_file_operation, create_error_context, log_error_details
)


REQUIRED_ROUND_COLUMNS = ['guess_lat', 'guess_lng', 'actual_lat', 'actual_lng']
OPTIONAL_ROUND_COLUMNS = ['score', 'distance', 'game_id', 'round_number']
COORDINATE_RANGES = {
    'guess_lat': (-90.0, 90.0),
    'guess_lng': (-180.0, 180.0),
    'actual_lat': (-90.0, 90.0),
    'actual_lng': (-180.0, 180.0),
}


class DataLoader:
    """
    Handles loading and validation of round CSV files.

    Coordinates that are missing or cannot be parsed are kept as NaN: such a
    round is still reported, its positions simply resolve to no country.
    """

    def __init__(self, logger: Optional[logging.Logger] = None,
                 retry_config: Optional[RetryConfig] = None):
        """
        Initialize the DataLoader.

        Args:
            logger: Optional logger instance for logging operations
            retry_config: Optional retry configuration for file operations
        """
        self.logger = logger or logging.getLogger(__name__)
        self.retry_config = retry_config or RetryConfig(max_attempts=3, base_delay=1.0)

    def load_rounds(self, file_path: str) -> pd.DataFrame:
        """
        Load game rounds from a CSV file with validation.

        Args:
            file_path: Path to the rounds CSV file

        Returns:
            DataFrame with numeric coordinate, score and distance columns and
            every optional column present

        Raises:
            FileAccessError: If the file is missing or cannot be read
            DatasetLoadError: If the file is empty or cannot be parsed
            ValidationError: If required columns are missing
        """
        self.logger.info(f"Loading rounds from: {file_path}")

        try:
            file_path_obj = Path(file_path)
            if not file_path_obj.exists():
                raise FileAccessError(
                    f"Rounds file not found: {file_path}",
                    file_path=file_path,
                    operation="read"
                )

            if not file_path_obj.is_file():
                raise FileAccessError(
                    f"Path is not a file: {file_path}",
                    file_path=file_path,
                    operation="read"
                )

            df = safe_file_operation(
                operation=lambda: pd.read_csv(file_path),
                file_path=file_path,
                operation_name="read CSV",
                retry_config=self.retry_config,
                logger=self.logger
            )

            self.logger.info(f"Loaded {len(df)} round records")

            if df.empty:
                raise DatasetLoadError(
                    "Rounds file contains no data",
                    file_path=file_path
                )

            self._validate_columns(df, REQUIRED_ROUND_COLUMNS, 'rounds', file_path)
            return self._process_round_data(df)

        except (FileAccessError, DatasetLoadError, ValidationError):
            raise
        except pd.errors.EmptyDataError as e:
            raise DatasetLoadError(
                "Rounds file is empty or contains no valid data",
                file_path=file_path,
                original_error=e
            )
        except pd.errors.ParserError as e:
            raise DatasetLoadError(
                f"Error parsing rounds CSV file: {str(e)}",
                file_path=file_path,
                original_error=e
            )
        except Exception as e:
            context = create_error_context(
                operation="load_rounds",
                file_path=file_path,
                error_type=type(e).__name__
            )
            log_error_details(self.logger, e, context)

            raise DatasetLoadError(
                f"Unexpected error loading rounds from {file_path}: {str(e)}",
                file_path=file_path,
                original_error=e
            )

    def _validate_columns(self, df: pd.DataFrame, required_columns: List[str],
                          data_type: str, file_path: str):
        """
        Validate that all required columns are present.

        Raises:
            ValidationError: If any required column is missing
        """
        missing = [col for col in required_columns if col not in df.columns]
        if missing:
            raise ValidationError(
                f"Missing required columns in {data_type} file {file_path}: {missing}",
                field_name='columns',
                invalid_value=list(df.columns),
                validation_rules=[f"Required columns: {required_columns}"]
            )

    def _process_round_data(self, df: pd.DataFrame) -> pd.DataFrame:
        """Convert numeric columns, add missing optional ones and flag bad values."""
        df = df.copy()

        for col in REQUIRED_ROUND_COLUMNS + ['score', 'distance', 'round_number']:
            if col not in df.columns:
                df[col] = float('nan')
                continue

            original_nulls = df[col].isna().sum()
            df[col] = pd.to_numeric(df[col], errors='coerce')
            coerced = df[col].isna().sum() - original_nulls
            if coerced > 0:
                self.logger.warning(f"DATA QUALITY: {coerced} non-numeric values in '{col}'")

        if 'game_id' not in df.columns:
            df['game_id'] = ''
        df['game_id'] = df['game_id'].fillna('').astype(str)

        for col, (low, high) in COORDINATE_RANGES.items():
            out_of_range = df[col].notna() & ~df[col].between(low, high)
            if out_of_range.any():
                self.logger.warning(
                    f"DATA QUALITY: {int(out_of_range.sum())} values in '{col}' "
                    f"outside [{low}, {high}]"
                )

        missing_positions = df[REQUIRED_ROUND_COLUMNS].isna().any(axis=1).sum()
        if missing_positions > 0:
            self.logger.warning(
                f"DATA QUALITY: {missing_positions} rounds have missing coordinates"
            )

        return df
