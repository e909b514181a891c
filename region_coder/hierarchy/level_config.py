"""
Administrative level configuration for the region coder.

This module defines the fixed rank order of administrative levels used when
walking from a region up to its groups. The order runs from most granular to
least granular; a lower index means a finer level.
"""

from dataclasses import dataclass, field
from typing import Tuple


DEFAULT_LEVELS = (
    'subterritory',
    'territory',
    'subcountryGroup',
    'country',
    'sharedLandform',
    'intermediateRegion',
    'subregion',
    'region',
    'subunion',
    'union',
    'unitedNations',
    'world',
)


@dataclass(frozen=True)
class AdministrativeLevels:
    """
    Ranked list of administrative levels.

    Attributes:
        levels: Level names ordered from most granular to least granular
    """
    levels: Tuple[str, ...] = field(default=DEFAULT_LEVELS)

    def __post_init__(self):
        """Validate level configuration."""
        if not self.levels:
            raise ValueError("At least one administrative level must be defined")
        if len(set(self.levels)) != len(self.levels):
            raise ValueError(f"Administrative levels must be unique: {list(self.levels)}")

    def index(self, level: str) -> int:
        """
        Get the rank of a level.

        Args:
            level: Level name

        Returns:
            Position in the rank list, or -1 if the level is unknown
        """
        try:
            return self.levels.index(level)
        except ValueError:
            return -1

    def is_known(self, level: str) -> bool:
        return self.index(level) != -1

    def is_valid_range(self, target_level: str, max_level: str) -> bool:
        """
        Check a lookup range: both levels known and max no finer than target.
        """
        if not (self.is_known(target_level) and self.is_known(max_level)):
            return False
        return self.index(max_level) >= self.index(target_level)

    def matches_level(self, level: str, target_level: str, max_level: str) -> bool:
        """
        Check whether a region level satisfies a lookup.

        A level matches when it equals the target, or when it is strictly
        coarser than the target but no coarser than ``max_level``. Unknown
        levels never match.

        Args:
            level: Level of the candidate region
            target_level: Requested level
            max_level: Coarsest acceptable level

        Returns:
            True if the candidate is acceptable
        """
        if not self.is_known(level):
            return False

        if level == target_level:
            return True

        return self.index(target_level) < self.index(level) <= self.index(max_level)
