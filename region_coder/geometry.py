"""
Region geometry parsing and point containment.

A region's geometry is one of three kinds (point, polygon, multipolygon) or
absent. Coordinates arrive in GeoJSON order, ``[longitude, latitude]``, and
containment is planar on the raw lon/lat values (x = longitude,
y = latitude) using shapely.

Containment is closed-set (shapely ``covers``): a point lying on a ring
boundary counts as contained, including the boundary of a hole; a point
strictly inside a hole does not. Point geometries never contain a query.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Union

import shapely
from shapely.errors import ShapelyError
from shapely.geometry import Point, Polygon

from .exceptions import GeometryError
from .utils.data_utils import is_number


logger = logging.getLogger(__name__)

Position = Tuple[float, float]
Ring = Tuple[Position, ...]

# Fewest distinct positions that can enclose an area
MIN_RING_POSITIONS = 3


@dataclass(frozen=True)
class PointGeometry:
    """A single position. Identifies a region but never contains a query."""

    lng: float
    lat: float

    kind = 'Point'

    def contains(self, lng: float, lat: float) -> bool:
        return False


@dataclass(frozen=True)
class PolygonGeometry:
    """
    One polygon: the first ring is the outer boundary, the rest are holes.

    ``rings`` keeps the parsed positions as read from the dataset; ``shape``
    is the shapely polygon used for containment, or None when the outer ring
    is too short to enclose anything.
    """

    rings: Tuple[Ring, ...]
    shape: Optional[Polygon] = field(default=None, compare=False, repr=False)

    kind = 'Polygon'

    @property
    def exterior(self) -> Ring:
        return self.rings[0]

    @property
    def holes(self) -> Tuple[Ring, ...]:
        return self.rings[1:]

    def contains(self, lng: float, lat: float) -> bool:
        if self.shape is None:
            return False
        return self.shape.covers(Point(lng, lat))


@dataclass(frozen=True)
class MultiPolygonGeometry:
    """A union of polygons. A point inside any member is contained."""

    polygons: Tuple[PolygonGeometry, ...]

    kind = 'MultiPolygon'

    def contains(self, lng: float, lat: float) -> bool:
        return any(polygon.contains(lng, lat) for polygon in self.polygons)


Geometry = Union[PointGeometry, PolygonGeometry, MultiPolygonGeometry]


def parse_position(value: Any) -> Optional[Position]:
    """
    Parse a ``[longitude, latitude]`` pair.

    Extra components (altitude) are ignored; fewer than two components or a
    non-numeric component voids the position.
    """
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return None

    lng, lat = value[0], value[1]
    if not (is_number(lng) and is_number(lat)):
        return None

    return float(lng), float(lat)


def parse_ring(value: Any) -> Optional[Ring]:
    """Parse a ring, keeping its valid positions. Returns None if none survive."""
    if not isinstance(value, (list, tuple)):
        return None

    positions = []
    for item in value:
        position = parse_position(item)
        if position is not None:
            positions.append(position)

    return tuple(positions) if positions else None


def _is_enclosing(ring: Ring) -> bool:
    return len(set(ring)) >= MIN_RING_POSITIONS


def _build_shape(rings: Sequence[Ring]) -> Optional[Polygon]:
    """Build the shapely polygon for parsed rings; degenerate holes are left out."""
    exterior = rings[0]
    if not _is_enclosing(exterior):
        return None

    holes = [hole for hole in rings[1:] if _is_enclosing(hole)]
    try:
        polygon = Polygon(exterior, holes)
    except (ValueError, ShapelyError) as e:
        logger.debug(f"Could not build polygon from {len(rings)} rings: {e}")
        return None

    shapely.prepare(polygon)
    return polygon


def parse_polygon(value: Any) -> Optional[PolygonGeometry]:
    """
    Parse Polygon coordinates: a list of rings, outer ring first.

    Rings that yield no valid position are dropped; a polygon left without
    rings is treated as no geometry.
    """
    if not isinstance(value, (list, tuple)):
        return None

    rings: List[Ring] = []
    for ring_value in value:
        ring = parse_ring(ring_value)
        if ring is not None:
            rings.append(ring)

    if not rings:
        return None

    return PolygonGeometry(rings=tuple(rings), shape=_build_shape(rings))


def parse_multipolygon(value: Any) -> Optional[MultiPolygonGeometry]:
    """Parse MultiPolygon coordinates. No valid member polygon means no geometry."""
    if not isinstance(value, (list, tuple)):
        return None

    polygons = []
    for polygon_value in value:
        polygon = parse_polygon(polygon_value)
        if polygon is not None:
            polygons.append(polygon)

    if not polygons:
        return None

    return MultiPolygonGeometry(polygons=tuple(polygons))


def parse_point(value: Any) -> Optional[PointGeometry]:
    position = parse_position(value)
    if position is None:
        return None
    return PointGeometry(lng=position[0], lat=position[1])


_PARSERS = {
    'Point': parse_point,
    'Polygon': parse_polygon,
    'MultiPolygon': parse_multipolygon,
}


def parse_geometry(geometry: Any, region_id: Optional[str] = None) -> Optional[Geometry]:
    """
    Parse a GeoJSON geometry object into a region geometry.

    Args:
        geometry: Decoded ``geometry`` member of a feature (may be None)
        region_id: Identifier of the owning region, for diagnostics

    Returns:
        Parsed geometry, or None when the feature has no usable geometry

    Raises:
        GeometryError: If the geometry object is present but malformed or of
            an unsupported type. Callers drop the geometry and keep the region.
    """
    if geometry is None:
        return None

    if not isinstance(geometry, dict):
        raise GeometryError(
            f"Geometry of region '{region_id}' is not an object",
            region_id=region_id
        )

    geometry_type = geometry.get('type')
    parser = _PARSERS.get(geometry_type)
    if parser is None:
        raise GeometryError(
            f"Unsupported geometry type {geometry_type!r} for region '{region_id}'",
            geometry_type=geometry_type,
            region_id=region_id
        )

    if 'coordinates' not in geometry:
        raise GeometryError(
            f"No coordinates found in {geometry_type} geometry for region '{region_id}'",
            geometry_type=geometry_type,
            region_id=region_id
        )

    return parser(geometry['coordinates'])


def geometry_to_dict(geometry: Optional[Geometry]) -> Optional[dict]:
    """Serialize a parsed geometry back to a GeoJSON geometry object."""
    if geometry is None:
        return None

    if isinstance(geometry, PointGeometry):
        return {'type': 'Point', 'coordinates': [geometry.lng, geometry.lat]}

    if isinstance(geometry, PolygonGeometry):
        return {'type': 'Polygon', 'coordinates': _rings_to_list(geometry.rings)}

    return {
        'type': 'MultiPolygon',
        'coordinates': [_rings_to_list(polygon.rings) for polygon in geometry.polygons]
    }


def _rings_to_list(rings: Sequence[Ring]) -> list:
    return [[list(position) for position in ring] for ring in rings]
