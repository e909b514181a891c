"""
Region catalog loading and indexing.

This module provides the RegionCatalog class, which parses a GeoJSON feature
collection of regions into an ordered, read-only list plus a canonical-ID
index. The catalog is built once at startup and shared by every lookup.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from .config import CoderConfig, EMBEDDED_DATASET_PATH
from .exceptions import DatasetLoadError, FileAccessError, GeometryError, is_recoverable_error
from .geometry import parse_geometry
from .models import Region
from .utils.data_utils import canonical_id
from .utils.error_handler import (
    RetryConfig, safe_file_operation, create_error_context, log_error_details
)


class RegionCatalog:
    """
    Immutable collection of regions with an identifier index.

    Regions keep their dataset order, which the point resolver relies on:
    the first region whose geometry contains a point wins, so datasets list
    smaller regions before the larger ones that enclose them.
    """

    def __init__(self, regions: Iterable[Region], logger: Optional[logging.Logger] = None):
        """
        Build the catalog and its identifier index.

        Every identifying string of every region is registered under its
        canonical form; when two regions share a key the later one wins.

        Args:
            regions: Regions in dataset order
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self._regions: Tuple[Region, ...] = tuple(regions)

        index: Dict[str, Region] = {}
        for region in self._regions:
            for identifier in region.identifiers():
                key = canonical_id(identifier)
                if not key:
                    continue
                previous = index.get(key)
                if previous is not None and previous is not region:
                    self.logger.debug(
                        f"Identifier '{identifier}' ({key}) moves from region "
                        f"'{previous.id}' to '{region.id}'"
                    )
                index[key] = region

        self._by_code: Mapping[str, Region] = MappingProxyType(index)

    @classmethod
    def from_feature_collection(cls, data: Any, logger: Optional[logging.Logger] = None,
                                source: Optional[str] = None) -> 'RegionCatalog':
        """
        Parse a decoded feature collection.

        Args:
            data: Decoded GeoJSON object with a ``features`` list
            logger: Optional logger instance
            source: Where the data came from, for diagnostics

        Returns:
            RegionCatalog built from the features

        Raises:
            DatasetLoadError: If the payload is not a feature collection
        """
        logger = logger or logging.getLogger(__name__)

        if not isinstance(data, dict) or not isinstance(data.get('features'), list):
            raise DatasetLoadError(
                "Region dataset is not a feature collection with a 'features' list",
                file_path=source
            )

        regions = []
        skipped = 0
        without_geometry = 0
        for feature_index, feature in enumerate(data['features']):
            region = _parse_feature(feature, feature_index, logger)
            if region is None:
                skipped += 1
                continue
            if not region.has_geometry:
                without_geometry += 1
            regions.append(region)

        if skipped:
            logger.warning(f"Skipped {skipped} malformed features in {source or 'region dataset'}")

        logger.debug(
            f"Parsed {len(regions)} features, {len(regions) - without_geometry} with geometry"
        )
        return cls(regions, logger=logger)

    @classmethod
    def from_json(cls, payload: Union[str, bytes], logger: Optional[logging.Logger] = None,
                  source: Optional[str] = None) -> 'RegionCatalog':
        """
        Decode and parse a GeoJSON document.

        Raises:
            DatasetLoadError: If the document is not valid JSON or not a feature collection
        """
        try:
            data = json.loads(payload)
        except (ValueError, TypeError) as e:
            raise DatasetLoadError(
                f"Region dataset is not valid GeoJSON: {e}",
                file_path=source,
                original_error=e
            )
        return cls.from_feature_collection(data, logger=logger, source=source)

    @classmethod
    def from_file(cls, path: Union[str, Path], logger: Optional[logging.Logger] = None,
                  retry_config: Optional[RetryConfig] = None) -> 'RegionCatalog':
        """
        Read and parse a GeoJSON dataset file.

        Raises:
            FileAccessError: If the file cannot be read
            DatasetLoadError: If the content cannot be parsed
        """
        logger = logger or logging.getLogger(__name__)
        path = Path(path)

        payload = safe_file_operation(
            operation=lambda: path.read_bytes(),
            file_path=path,
            operation_name="read region dataset",
            retry_config=retry_config or RetryConfig(max_attempts=2, base_delay=0.5),
            logger=logger
        )
        return cls.from_json(payload, logger=logger, source=str(path))

    @property
    def regions(self) -> Tuple[Region, ...]:
        return self._regions

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(self._regions)

    def feature_for_id(self, identifier: Any) -> Optional[Region]:
        """
        Look up a region by any identifying string.

        Args:
            identifier: Code, name, alias, flag or ccTLD

        Returns:
            The indexed region, or None if nothing is registered under it
        """
        key = canonical_id(identifier)
        if not key:
            return None
        return self._by_code.get(key)

    def identifiers(self) -> Tuple[str, ...]:
        """All registered canonical keys."""
        return tuple(self._by_code.keys())

    def geometry_count(self) -> int:
        """Number of regions that can be found by location."""
        return sum(1 for region in self._regions if region.has_geometry)


def _parse_feature(feature: Any, feature_index: int,
                   logger: logging.Logger) -> Optional[Region]:
    """
    Parse one feature into a region.

    A feature that is not an object is skipped. A bad geometry only drops the
    geometry: the region is still indexed and can be found by identifier.
    """
    if not isinstance(feature, dict):
        logger.debug(f"Feature {feature_index} is not an object, skipping")
        return None

    properties = feature.get('properties')
    if not isinstance(properties, dict):
        properties = {}

    region_id = properties.get('id') if isinstance(properties.get('id'), str) else None
    label = properties.get('nameEn') or region_id or f"#{feature_index}"

    geometry = None
    try:
        geometry = parse_geometry(feature.get('geometry'), region_id=region_id)
    except GeometryError as e:
        logger.debug(f"Dropping geometry of feature {feature_index} ({label}): {e}")
    else:
        if feature.get('geometry') is not None and geometry is None:
            logger.debug(f"Feature {feature_index} ({label}) has no usable geometry")

    return Region.from_properties(properties, geometry=geometry)


def load_catalog(config: Optional[CoderConfig] = None,
                 logger: Optional[logging.Logger] = None) -> RegionCatalog:
    """
    Load the region catalog at startup.

    Override locations from the configuration are tried first. An override
    that is missing or unreadable is logged and skipped, falling back to the
    embedded dataset; an override that is readable but not a valid dataset is
    an error. Failure to load the embedded dataset is fatal.

    Args:
        config: Coder configuration (defaults to the embedded dataset only)
        logger: Optional logger instance

    Returns:
        Loaded RegionCatalog

    Raises:
        DatasetLoadError: If no dataset can be loaded
    """
    logger = logger or logging.getLogger(__name__)
    config = config or CoderConfig()

    for candidate in config.dataset_candidates():
        if not candidate.exists():
            logger.debug(f"No region dataset at {candidate}")
            continue
        try:
            catalog = RegionCatalog.from_file(candidate, logger=logger)
        except (FileAccessError, DatasetLoadError) as e:
            if not is_recoverable_error(e):
                raise
            logger.warning(f"Failed to read external region dataset {candidate}: {e}")
            continue
        logger.info(f"Loaded region dataset from {candidate} ({len(catalog)} regions)")
        return catalog

    try:
        catalog = RegionCatalog.from_file(EMBEDDED_DATASET_PATH, logger=logger)
    except (FileAccessError, DatasetLoadError) as e:
        context = create_error_context(
            operation="load_embedded_dataset",
            file_path=str(EMBEDDED_DATASET_PATH)
        )
        log_error_details(logger, e, context)
        raise DatasetLoadError(
            f"Embedded region dataset could not be loaded: {e}",
            file_path=str(EMBEDDED_DATASET_PATH),
            original_error=e
        )

    logger.info(f"Loaded embedded region dataset ({len(catalog)} regions)")
    return catalog
