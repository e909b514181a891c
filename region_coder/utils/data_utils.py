"""
Data utility functions for identifier normalization, type conversions and
null handling.

``canonical_id`` is the single normalization rule used both when the catalog
registers identifiers and when callers look them up, so any change here
changes which strings resolve.
"""

import numbers
import re
from typing import Any, Optional

import numpy as np
import pandas as pd


# Whole-word stop words and separator characters dropped from identifiers
ID_FILTER_PATTERN = re.compile(
    r"\b(?:and|the|of|el|la|de)\b|[-_ .,'()&\[\]/]",
    re.IGNORECASE
)

# An identifier that is nothing but a stop word is a code ("DE", "LA"), not filler
STOP_WORD_PATTERN = re.compile(r"(?:and|the|of|el|la|de)", re.IGNORECASE)


def canonical_id(value: Any) -> str:
    """
    Normalize an identifying string to its canonical lookup key.

    Rules:
        - empty (or non-string) input gives an empty key, which never matches
        - input with a leading '.' (ccTLD style, e.g. '.de') is only upper-cased
        - input that is a single stop word ('de', 'LA') is only upper-cased
        - otherwise the stop words and separator characters of
          ``ID_FILTER_PATTERN`` are removed and the remainder upper-cased

    Removal is repeated until nothing more matches or only a stop word is
    left, so the result normalizes to itself.

    Args:
        value: Identifier to normalize (code, name, alias)

    Returns:
        Canonical key

    Example:
        canonical_id("The United States") == canonical_id("united-states") == "UNITEDSTATES"
        canonical_id(".de") == ".DE"
    """
    if not isinstance(value, str) or not value:
        return ""

    if value.startswith('.'):
        return value.upper()

    current = value
    while not STOP_WORD_PATTERN.fullmatch(current):
        reduced = ID_FILTER_PATTERN.sub('', current)
        if reduced == current:
            break
        current = reduced

    return current.upper()


def is_number(value: Any) -> bool:
    """Check that a value is a finite real number (booleans excluded)."""
    if isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, numbers.Real):
        return False
    return bool(np.isfinite(value))


def safe_float_conversion(value: Any) -> Optional[float]:
    """
    Safely convert a value to a finite float, handling nulls and invalid values.

    Args:
        value: Value to convert (number or numeric string)

    Returns:
        Float value or None if conversion fails or the value is not finite
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return None

    try:
        result = float(value)
    except (ValueError, TypeError):
        return None

    return result if np.isfinite(result) else None


def safe_string_conversion(value: Any) -> str:
    """
    Safely convert a value to string, handling nulls and cleaning whitespace.

    Args:
        value: Value to convert to string

    Returns:
        Cleaned string value or empty string if null
    """
    if value is None:
        return ""

    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass

    return str(value).strip()


def is_null_or_empty(value: Any) -> bool:
    """
    Check if a value is null, empty, or contains only whitespace.

    Args:
        value: Value to check

    Returns:
        True if value is null/empty, False otherwise
    """
    if value is None:
        return True

    if isinstance(value, str):
        return not value.strip()

    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def has_property(region: Any, prop: str) -> bool:
    """
    Check whether a region carries a populated property.

    A string property counts only when non-empty. Any other property counts
    whenever it is set, so an explicit empty list is present.

    Args:
        region: Region to inspect
        prop: Dataset property key (e.g. 'iso1A2', 'nameEn', 'callingCodes')

    Returns:
        True if the property is present and populated
    """
    if region is None or not prop:
        return False

    value = region.get_property(prop)
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True
