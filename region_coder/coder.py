"""
Public lookup interface of the region coder.

This module provides the RegionCoder class, which ties together the region
catalog, the point resolver and the hierarchy walker, and exposes the
lookups used by the rest of the application: country code and name for a
point, name for a code, region by identifier, and region at a given
administrative level.

All lookups are read-only. A point or identifier that resolves to nothing
gives None (or an empty string) rather than an exception, since ocean
coordinates and unknown codes are routine.
"""

import logging
from typing import Any, List, Optional, Tuple

import numpy as np

from .catalog import RegionCatalog, load_catalog
from .config import CoderConfig
from .hierarchy.level_config import AdministrativeLevels
from .hierarchy.walker import HierarchyWalker
from .matching.fuzzy_matcher import FuzzyMatcher
from .matching.point_resolver import PointResolver
from .models import CodingOptions, Region


# Stored in place of a country code when no region contains a position
UNKNOWN_COUNTRY_CODE = "??"


class RegionCoder:
    """
    Reverse geocoder from coordinates and identifiers to regions.

    Construct one per process and share it; nothing is mutated after
    construction, so concurrent callers need no locking.
    """

    def __init__(self, catalog: RegionCatalog, levels: Optional[AdministrativeLevels] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the RegionCoder.

        Args:
            catalog: Loaded region catalog
            levels: Administrative level order (defaults to the standard order)
            logger: Optional logger instance
        """
        self.catalog = catalog
        self.logger = logger or logging.getLogger(__name__)
        self.levels = levels or AdministrativeLevels()
        self.resolver = PointResolver(catalog, logger=self.logger)
        self.walker = HierarchyWalker(catalog, self.resolver, levels=self.levels, logger=self.logger)
        self.fuzzy_matcher = FuzzyMatcher(catalog, logger=self.logger)

    @classmethod
    def from_config(cls, config: Optional[CoderConfig] = None,
                    logger: Optional[logging.Logger] = None) -> 'RegionCoder':
        """
        Load the catalog described by a configuration and build a coder.

        Raises:
            DatasetLoadError: If no region dataset can be loaded
        """
        config = config or CoderConfig()
        catalog = load_catalog(config, logger=logger)
        return cls(catalog, levels=AdministrativeLevels(config.levels), logger=logger)

    def resolve_by_identifier(self, identifier: Any) -> Optional[Region]:
        """
        Look up a region by code, name, alias, flag or ccTLD.

        Example:
            coder.resolve_by_identifier("fr") is coder.resolve_by_identifier("France")
        """
        return self.catalog.feature_for_id(identifier)

    def smallest_region(self, lat: Any, lng: Any) -> Optional[Region]:
        """Return the most specific region containing the location."""
        return self.resolver.smallest_region(lat, lng)

    def resolve_at_level(self, lat: Any, lng: Any, target_level: str = "country",
                         max_level: str = "world",
                         required_property: str = "") -> Optional[Region]:
        """
        Return the region containing the location at an administrative level.

        Args:
            lat: Latitude
            lng: Longitude
            target_level: Requested level
            max_level: Coarsest level accepted while walking up the groups
            required_property: Dataset property key the result must carry

        Returns:
            Matching region, or None
        """
        options = CodingOptions(level=target_level, max_level=max_level,
                                with_prop=required_property)
        return self.walker.region_at_level(lat, lng, options)

    def feature(self, query: Any, options: Optional[CodingOptions] = None) -> Optional[Region]:
        """
        Return the region for an identifier or a ``[lng, lat]`` position.

        Args:
            query: Identifier string, or a sequence whose first two items are
                longitude and latitude
            options: Leveled lookup options for positions (country by default)

        Returns:
            Matching region, or None for misses and unsupported queries
        """
        if isinstance(query, str):
            return self.resolve_by_identifier(query)

        if isinstance(query, (list, tuple, np.ndarray)) and len(query) >= 2:
            lng, lat = query[0], query[1]
            return self.walker.region_at_level(lat, lng, options or CodingOptions())

        return None

    def resolve_country_code_for_point(self, lat: Any, lng: Any) -> str:
        """
        Return the ISO 3166-1 alpha-2 code of the country at a location.

        Returns:
            Upper-case code, or an empty string if no country is found
        """
        region = self.walker.region_at_level(lat, lng, CodingOptions(with_prop="iso1A2"))
        if region is None:
            return ""
        return region.iso1a2.upper()

    def resolve_display_name_for_point(self, lat: Any, lng: Any) -> str:
        """
        Return the English name of the country at a location.

        Returns:
            Country name, or an empty string if no country is found
        """
        region = self.walker.region_at_level(lat, lng, CodingOptions(level="country"))
        if region is None:
            return ""
        return region.name_en

    def resolve_display_name_for_code(self, code: Any) -> str:
        """
        Return the English name for a code.

        Unknown codes, and regions without a name, fall back to the code
        itself in upper case so callers always have something to display.

        Example:
            coder.resolve_display_name_for_code("zz") == "ZZ"
        """
        code = code if isinstance(code, str) else ""
        region = self.resolve_by_identifier(code)
        if region is None or not region.name_en:
            return code.upper()
        return region.name_en

    def code_by_location(self, lat: Any, lng: Any) -> str:
        """
        Return the lower-case country key stored for a round position.

        The ISO alpha-2 code of the country is used when there is one.
        Otherwise the first region containing the point supplies its
        ``country``, English name or ISO code, in that order, and a position
        no region contains gives ``UNKNOWN_COUNTRY_CODE``.
        """
        code = self.resolve_country_code_for_point(lat, lng)
        if code:
            return code.lower()

        region = self.resolver.smallest_region(lat, lng)
        if region is None:
            return UNKNOWN_COUNTRY_CODE

        for value in (region.country, region.name_en, region.iso1a2):
            if value:
                return value.lower()
        return UNKNOWN_COUNTRY_CODE

    def suggest_identifiers(self, text: str, limit: int = 5) -> List[Tuple[str, Region, float]]:
        """
        Suggest regions for an identifier that does not resolve.

        Returns:
            List of (matched name, region, score) tuples, best first
        """
        return self.fuzzy_matcher.suggest(text, limit=limit)
