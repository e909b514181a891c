"""
Data models for the region coder.

This module defines the region record loaded from the dataset, the options
accepted by leveled lookups, and the round record handled by the batch
annotation pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

from .geometry import Geometry, geometry_to_dict
from .utils.data_utils import safe_float_conversion, safe_string_conversion


def _string_tuple(value: Any) -> Optional[Tuple[str, ...]]:
    """Read a list property, keeping only string members; None when unset."""
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class Region:
    """
    A country, territory or grouping from the region dataset.

    Attribute names are the Python spelling of the dataset property keys;
    ``PROPERTY_KEYS`` maps each dataset key to its attribute.
    """

    id: str
    iso1a2: str = ""
    iso1a3: str = ""
    iso1n3: str = ""
    m49: str = ""
    wikidata: str = ""
    emoji_flag: str = ""
    cctld: str = ""
    name_en: str = ""
    aliases: Optional[Tuple[str, ...]] = None
    country: str = ""
    groups: Optional[Tuple[str, ...]] = None
    members: Optional[Tuple[str, ...]] = None
    level: str = ""
    iso_status: str = ""
    drive_side: str = ""
    calling_codes: Optional[Tuple[str, ...]] = None
    geometry: Optional[Geometry] = field(default=None, repr=False)

    PROPERTY_KEYS = {
        'id': 'id',
        'iso1A2': 'iso1a2',
        'iso1A3': 'iso1a3',
        'iso1N3': 'iso1n3',
        'm49': 'm49',
        'wikidata': 'wikidata',
        'emojiFlag': 'emoji_flag',
        'ccTLD': 'cctld',
        'nameEn': 'name_en',
        'aliases': 'aliases',
        'country': 'country',
        'groups': 'groups',
        'members': 'members',
        'level': 'level',
        'isoStatus': 'iso_status',
        'driveSide': 'drive_side',
        'callingCodes': 'calling_codes',
    }

    # Single-valued identifying properties, in registration order
    IDENTIFIER_KEYS = (
        'id', 'iso1A2', 'iso1A3', 'iso1N3', 'm49',
        'wikidata', 'emojiFlag', 'ccTLD', 'nameEn'
    )

    LIST_KEYS = ('aliases', 'groups', 'members', 'callingCodes')

    @classmethod
    def from_properties(cls, properties: Dict[str, Any],
                        geometry: Optional[Geometry] = None) -> 'Region':
        """
        Build a region from a feature's properties block.

        Missing or wrongly-typed properties become empty values, except that
        an unset list property stays None so it can be told apart from an
        explicit empty list.
        """
        values = {}
        for key, attribute in cls.PROPERTY_KEYS.items():
            raw = properties.get(key)
            if key in cls.LIST_KEYS:
                values[attribute] = _string_tuple(raw)
            else:
                values[attribute] = _string(raw)
        return cls(geometry=geometry, **values)

    def get_property(self, key: str) -> Any:
        """
        Read a property by its dataset key (e.g. 'iso1A2', 'nameEn').

        Returns:
            The property value, or None for keys that are not region properties
        """
        attribute = self.PROPERTY_KEYS.get(key)
        if attribute is None:
            return None
        return getattr(self, attribute)

    def identifiers(self) -> Iterator[str]:
        """Yield every non-empty identifying string, aliases last."""
        for key in self.IDENTIFIER_KEYS:
            value = self.get_property(key)
            if value:
                yield value
        for alias in self.aliases or ():
            if alias:
                yield alias

    @property
    def has_geometry(self) -> bool:
        return self.geometry is not None

    @property
    def display_name(self) -> str:
        return self.name_en or self.id

    def contains(self, lng: float, lat: float) -> bool:
        """Check whether the region's geometry contains the position."""
        return self.geometry is not None and self.geometry.contains(lng, lat)

    def to_dict(self, include_geometry: bool = False) -> Dict[str, Any]:
        """Serialize to dataset-key properties."""
        result = {}
        for key, attribute in self.PROPERTY_KEYS.items():
            value = getattr(self, attribute)
            if key in self.LIST_KEYS and value is not None:
                value = list(value)
            result[key] = value
        if include_geometry:
            result['geometry'] = geometry_to_dict(self.geometry)
        return result


@dataclass(frozen=True)
class CodingOptions:
    """
    Options for a leveled location lookup.

    Attributes:
        level: Target administrative level
        max_level: Coarsest level acceptable when walking up the groups
        with_prop: Dataset property key the result must carry (empty for none)
    """
    level: str = "country"
    max_level: str = "world"
    with_prop: str = ""


@dataclass
class RoundRecord:
    """A single game round: where the player guessed and where the answer was."""

    guess_lat: Optional[float]
    guess_lng: Optional[float]
    actual_lat: Optional[float]
    actual_lng: Optional[float]
    score: Optional[float] = None
    distance: Optional[float] = None
    game_id: str = ""
    round_number: Optional[int] = None

    def __post_init__(self):
        """Clean and validate data after initialization."""
        self.guess_lat = safe_float_conversion(self.guess_lat)
        self.guess_lng = safe_float_conversion(self.guess_lng)
        self.actual_lat = safe_float_conversion(self.actual_lat)
        self.actual_lng = safe_float_conversion(self.actual_lng)
        self.score = safe_float_conversion(self.score)
        self.distance = safe_float_conversion(self.distance)
        self.game_id = safe_string_conversion(self.game_id)

        round_number = safe_float_conversion(self.round_number)
        self.round_number = int(round_number) if round_number is not None else None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'RoundRecord':
        return cls(
            guess_lat=row.get('guess_lat'),
            guess_lng=row.get('guess_lng'),
            actual_lat=row.get('actual_lat'),
            actual_lng=row.get('actual_lng'),
            score=row.get('score'),
            distance=row.get('distance'),
            game_id=row.get('game_id', ''),
            round_number=row.get('round_number')
        )

    def has_guess(self) -> bool:
        return self.guess_lat is not None and self.guess_lng is not None

    def has_answer(self) -> bool:
        return self.actual_lat is not None and self.actual_lng is not None
