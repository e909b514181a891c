"""
Point resolution strategy for the region coder.

This module provides the PointResolver class that finds the smallest region
containing a latitude/longitude by scanning the catalog in dataset order.
"""

import logging
from typing import Any, Optional, TYPE_CHECKING

from ..models import Region
from ..utils.data_utils import is_number

if TYPE_CHECKING:
    from ..catalog import RegionCatalog


class PointResolver:
    """
    Finds the first region, in dataset order, whose geometry contains a point.

    The scan is linear and does not sort by area or level: dataset order
    decides which of two overlapping regions is "smallest". Regions without
    geometry are skipped.
    """

    def __init__(self, catalog: 'RegionCatalog', logger: Optional[logging.Logger] = None):
        """
        Initialize the PointResolver.

        Args:
            catalog: Loaded region catalog
            logger: Optional logger instance
        """
        self.catalog = catalog
        self.logger = logger or logging.getLogger(__name__)

    def smallest_region(self, lat: Any, lng: Any) -> Optional[Region]:
        """
        Return the smallest region containing the location.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            The first containing region, or None when no region contains the
            point or the coordinates are not finite numbers
        """
        if not (is_number(lat) and is_number(lng)):
            self.logger.debug(f"Ignoring malformed coordinates lat={lat!r}, lng={lng!r}")
            return None

        lat = float(lat)
        lng = float(lng)

        for region in self.catalog:
            if region.geometry is None:
                continue
            if region.geometry.contains(lng, lat):
                self.logger.debug(f"Point ({lat}, {lng}) is in region '{region.id}'")
                return region

        self.logger.debug(f"No region contains point ({lat}, {lng})")
        return None
