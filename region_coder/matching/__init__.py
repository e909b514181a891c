"""
Location and identifier matching components.
"""

from .point_resolver import PointResolver
from .fuzzy_matcher import FuzzyMatcher

__all__ = ['PointResolver', 'FuzzyMatcher']
