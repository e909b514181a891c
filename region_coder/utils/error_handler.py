"""
Error handling utilities for the region coder.

Region datasets and round files are read through ``safe_file_operation``,
which retries transient I/O failures and turns every failure into a
``FileAccessError``. A path that does not exist, is a directory or is not
readable fails on the first attempt: retrying cannot fix it, and the catalog
loader wants to move on to its next candidate straight away.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from ..exceptions import FileAccessError, create_file_error, get_error_severity


# Failures that a retry cannot fix
PERMANENT_FILE_ERRORS = (FileNotFoundError, IsADirectoryError, PermissionError)

SEVERITY_LOG_LEVELS = {
    'critical': logging.CRITICAL,
    'high': logging.ERROR,
    'medium': logging.WARNING,
    'low': logging.INFO,
}


@dataclass(frozen=True)
class RetryConfig:
    """
    Retry policy for file reads.

    Attributes:
        max_attempts: Number of attempts before giving up
        base_delay: Seconds to wait after the first failed attempt
        max_delay: Upper bound on any single wait
        backoff_factor: Multiplier applied to the wait after each failure
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    backoff_factor: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before the attempt that follows ``attempt``."""
        return min(self.base_delay * self.backoff_factor ** (attempt - 1), self.max_delay)


def safe_file_operation(operation: Callable[[], Any], file_path: Union[str, Path],
                        operation_name: str, retry_config: Optional[RetryConfig] = None,
                        logger: Optional[logging.Logger] = None) -> Any:
    """
    Run a file read, retrying transient OS errors.

    Args:
        operation: Zero-argument callable performing the read
        file_path: File being read, for messages and error context
        operation_name: Short description such as "read region dataset"
        retry_config: Retry policy (defaults to ``RetryConfig()``)
        logger: Optional logger instance

    Returns:
        Whatever ``operation`` returns

    Raises:
        FileAccessError: On a permanent failure, or once every attempt failed
    """
    logger = logger or logging.getLogger(__name__)
    retry_config = retry_config or RetryConfig()
    path = str(file_path)
    last_error: Optional[OSError] = None

    for attempt in range(1, retry_config.max_attempts + 1):
        logger.debug(f"{operation_name}: {path} (attempt {attempt}/{retry_config.max_attempts})")
        try:
            return operation()
        except PERMANENT_FILE_ERRORS as e:
            raise create_file_error(operation_name, path, e)
        except OSError as e:
            last_error = e
            if attempt < retry_config.max_attempts:
                delay = retry_config.delay_for(attempt)
                logger.warning(f"Could not {operation_name} {path}: {e}; retrying in {delay:.2f}s")
                time.sleep(delay)

    logger.error(f"Giving up on {operation_name} for {path} after {retry_config.max_attempts} attempts")
    raise FileAccessError(
        f"Failed to {operation_name} file after {retry_config.max_attempts} attempts",
        file_path=path,
        operation=operation_name,
        original_error=last_error
    )


def create_error_context(operation: str, **kwargs) -> Dict[str, Any]:
    """Context dictionary attached to logged errors: operation, time and extras."""
    return {'operation': operation, 'timestamp': time.time(), **kwargs}


def log_error_details(logger: logging.Logger, error: Exception,
                      context: Optional[Dict[str, Any]] = None):
    """
    Log an error with its structured details.

    The log level follows ``get_error_severity``: critical errors log at
    CRITICAL, high at ERROR, medium at WARNING and low at INFO.

    Args:
        logger: Logger to write to
        error: Exception to describe
        context: Optional extra context, e.g. from ``create_error_context``
    """
    severity = get_error_severity(error)
    details = error.to_dict() if hasattr(error, 'to_dict') else {
        'error_type': type(error).__name__,
        'message': str(error),
    }
    details['severity'] = severity
    if context:
        details['operation_context'] = context

    logger.log(
        SEVERITY_LOG_LEVELS.get(severity, logging.WARNING),
        f"{details['error_type']} ({severity}): {details}"
    )
