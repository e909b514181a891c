"""
Hierarchy walking for leveled region lookups.

This module provides the HierarchyWalker class, which takes the smallest
region containing a point and ascends through its groups to the region at a
requested administrative level.
"""

import logging
from typing import Any, Optional, TYPE_CHECKING

from ..models import CodingOptions, Region
from ..utils.data_utils import has_property
from .level_config import AdministrativeLevels

if TYPE_CHECKING:
    from ..catalog import RegionCatalog
    from ..matching.point_resolver import PointResolver


class HierarchyWalker:
    """
    Resolves a location to the region at a requested administrative level.

    Two paths are provided:
        - ``country_region``: the country containing a point, following the
          smallest region's ``country`` reference or its ISO alpha-2 code
        - ``region_at_level``: the general walk from the smallest region up
          through its ``groups``, bounded by a target and a maximum level
    """

    def __init__(self, catalog: 'RegionCatalog', resolver: 'PointResolver',
                 levels: Optional[AdministrativeLevels] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the HierarchyWalker.

        Args:
            catalog: Loaded region catalog, used to fetch groups by ID
            resolver: Point resolver over the same catalog
            levels: Administrative level order (defaults to the standard order)
            logger: Optional logger instance
        """
        self.catalog = catalog
        self.resolver = resolver
        self.levels = levels or AdministrativeLevels()
        self.logger = logger or logging.getLogger(__name__)

    def country_region(self, lat: Any, lng: Any) -> Optional[Region]:
        """
        Return the country containing the location.

        A region with a ``country`` reference resolves to that country; a
        region carrying an ISO alpha-2 code is treated as a country itself and
        re-fetched by that code; anything else is returned as found.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            Country region, or None if no region contains the point
        """
        region = self.resolver.smallest_region(lat, lng)
        if region is None:
            return None

        if region.country:
            self.logger.debug(f"Region '{region.id}' belongs to country '{region.country}'")
            return self.catalog.feature_for_id(region.country)

        if region.iso1a2:
            return self.catalog.feature_for_id(region.iso1a2)

        return region

    def region_at_level(self, lat: Any, lng: Any,
                        options: Optional[CodingOptions] = None) -> Optional[Region]:
        """
        Return the region containing the location at the requested level.

        For a country target the country path is tried first. Otherwise, or
        if that result is outside the level range or lacks the required
        property, the smallest region is
        accepted when it matches the level range, and failing that its groups
        are scanned in order for the first one that does.

        Args:
            lat: Latitude
            lng: Longitude
            options: Target level, maximum level and required property

        Returns:
            Matching region, or None. Unknown level names, or a maximum level
            finer than the target, give None.
        """
        options = options or CodingOptions()
        target_level = options.level or "country"
        max_level = options.max_level or "world"
        with_prop = options.with_prop

        if not self.levels.is_valid_range(target_level, max_level):
            self.logger.debug(
                f"Rejecting level range target={target_level!r}, max={max_level!r}"
            )
            return None

        if target_level == "country":
            country = self.country_region(lat, lng)
            if country is not None and self._accepts(country, target_level, max_level, with_prop):
                return country

        smallest = self.resolver.smallest_region(lat, lng)
        if smallest is None:
            return None

        if self._accepts(smallest, target_level, max_level, with_prop):
            return smallest

        for group_id in smallest.groups or ():
            group = self.catalog.feature_for_id(group_id)
            if group is None:
                self.logger.debug(f"Group '{group_id}' of region '{smallest.id}' is not in the catalog")
                continue
            if self._accepts(group, target_level, max_level, with_prop):
                return group

        return None

    def _accepts(self, region: Region, target_level: str, max_level: str, with_prop: str) -> bool:
        return (self.levels.matches_level(region.level, target_level, max_level)
                and self._has_required_property(region, with_prop))

    @staticmethod
    def _has_required_property(region: Region, with_prop: str) -> bool:
        return not with_prop or has_property(region, with_prop)
