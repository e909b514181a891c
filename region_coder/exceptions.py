"""
Custom exception classes for the region coder.

This module defines the exception hierarchy used while loading the region
dataset and running batch round annotation. Lookups themselves never raise:
a point or identifier that cannot be resolved is reported as ``None``.
"""

from typing import Any, Dict, List, Optional


def _cause(original_error: Optional[Exception]) -> Dict[str, Optional[str]]:
    """Context entries describing the exception that triggered another."""
    if original_error is None:
        return {'original_error': None, 'original_error_type': None}
    return {
        'original_error': str(original_error),
        'original_error_type': type(original_error).__name__,
    }


class RegionCoderError(Exception):
    """Base exception class for all region coder errors."""

    default_error_code: Optional[str] = None

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        """
        Initialize the base error.

        Args:
            message: Human-readable error message
            error_code: Code for programmatic handling (defaults per class)
            context: Structured details about the failure
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used in log records."""
        return {
            'error_type': type(self).__name__,
            'message': self.message,
            'error_code': self.error_code,
            'context': self.context,
        }


class ValidationError(RegionCoderError):
    """A rounds file or value does not have the expected shape."""

    default_error_code = 'VALIDATION_ERROR'

    def __init__(self, message: str, field_name: Optional[str] = None,
                 invalid_value: Any = None, validation_rules: Optional[List[str]] = None):
        self.field_name = field_name
        self.invalid_value = invalid_value
        self.validation_rules = list(validation_rules or [])
        super().__init__(message, context={
            'field_name': field_name,
            'invalid_value': None if invalid_value is None else str(invalid_value),
            'validation_rules': self.validation_rules,
        })


class DatasetLoadError(RegionCoderError):
    """
    A region dataset or rounds file was read but could not be used.

    Raised for undecodable JSON, a payload that is not a feature collection,
    or a CSV that pandas cannot parse. Unlike ``FileAccessError`` this is not
    recoverable by trying another source: the content itself is wrong.
    """

    default_error_code = 'DATASET_LOAD_ERROR'

    def __init__(self, message: str, file_path: Optional[str] = None,
                 feature_index: Optional[int] = None, original_error: Optional[Exception] = None):
        """
        Args:
            message: Human-readable error message
            file_path: File whose content was rejected
            feature_index: Position of the offending feature, when one is to blame
            original_error: Decoder or parser exception
        """
        self.file_path = file_path
        self.feature_index = feature_index
        self.original_error = original_error
        super().__init__(message, context={
            'file_path': file_path,
            'feature_index': feature_index,
            **_cause(original_error),
        })


class FileAccessError(RegionCoderError):
    """A file could not be opened or read."""

    default_error_code = 'FILE_ACCESS_ERROR'

    def __init__(self, message: str, file_path: str, operation: str,
                 original_error: Optional[Exception] = None):
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
        super().__init__(message, context={
            'file_path': file_path,
            'operation': operation,
            **_cause(original_error),
        })


class GeometryError(RegionCoderError):
    """A feature's geometry object is not a usable GeoJSON geometry."""

    default_error_code = 'GEOMETRY_ERROR'

    def __init__(self, message: str, geometry_type: Optional[str] = None,
                 region_id: Optional[str] = None):
        self.geometry_type = geometry_type
        self.region_id = region_id
        super().__init__(message, context={
            'geometry_type': geometry_type,
            'region_id': region_id,
        })


class ConfigurationError(RegionCoderError):
    """Invalid coder configuration, such as an unknown log level."""

    default_error_code = 'CONFIGURATION_ERROR'

    def __init__(self, message: str, config_key: Optional[str] = None,
                 config_value: Any = None, valid_values: Optional[List[Any]] = None):
        self.config_key = config_key
        self.config_value = config_value
        self.valid_values = list(valid_values or [])
        super().__init__(message, context={
            'config_key': config_key,
            'config_value': None if config_value is None else str(config_value),
            'valid_values': [str(v) for v in self.valid_values] or None,
        })


class OutputGenerationError(RegionCoderError):
    """A batch result file could not be written."""

    default_error_code = 'OUTPUT_GENERATION_ERROR'

    def __init__(self, message: str, output_type: Optional[str] = None,
                 output_path: Optional[str] = None, record_count: Optional[int] = None,
                 original_error: Optional[Exception] = None):
        self.output_type = output_type
        self.output_path = output_path
        self.record_count = record_count
        self.original_error = original_error
        super().__init__(message, context={
            'output_type': output_type,
            'output_path': output_path,
            'record_count': record_count,
            **_cause(original_error),
        })


# Severity per error type, checked in order
_SEVERITIES = (
    ((ConfigurationError, DatasetLoadError), 'critical'),
    ((FileAccessError,), 'high'),
    ((OutputGenerationError,), 'medium'),
    ((ValidationError, GeometryError), 'low'),
)


def create_file_error(operation: str, file_path: str, original_error: Exception) -> FileAccessError:
    """
    Wrap an OS error raised while touching a file.

    Args:
        operation: What was being done, e.g. "read region dataset"
        file_path: File involved
        original_error: The OS error

    Returns:
        FileAccessError carrying the original error
    """
    return FileAccessError(
        f"Failed to {operation} file '{file_path}': {original_error}",
        file_path=file_path,
        operation=operation,
        original_error=original_error
    )


def is_recoverable_error(error: Exception) -> bool:
    """
    Whether loading can carry on past this error.

    A bad geometry costs one feature and an unreadable override costs one
    data source; invalid configuration or dataset content stops the process.
    """
    return not isinstance(error, (ConfigurationError, DatasetLoadError))


def get_error_severity(error: Exception) -> str:
    """
    Severity of an error: 'low', 'medium', 'high' or 'critical'.

    Exceptions from outside the hierarchy are 'medium'.
    """
    for error_types, severity in _SEVERITIES:
        if isinstance(error, error_types):
            return severity
    return 'medium'
