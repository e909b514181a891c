"""
Hierarchy module for the region coder.

This module provides the administrative level order and the walker that
ascends from the smallest region containing a point to the region at a
requested level.
"""

from region_coder.hierarchy.level_config import (
    DEFAULT_LEVELS,
    AdministrativeLevels
)
from region_coder.hierarchy.walker import HierarchyWalker

__all__ = [
    'DEFAULT_LEVELS',
    'AdministrativeLevels',
    'HierarchyWalker'
]
