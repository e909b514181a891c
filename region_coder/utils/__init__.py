"""
Utility functions and helpers.
"""

from .data_utils import (
    canonical_id,
    is_number,
    safe_float_conversion,
    safe_string_conversion,
    is_null_or_empty,
    has_property
)

__all__ = [
    'canonical_id',
    'is_number',
    'safe_float_conversion',
    'safe_string_conversion',
    'is_null_or_empty',
    'has_property'
]
