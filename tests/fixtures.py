"""
Small in-memory region datasets shared by the test modules.

Coordinates are GeoJSON ``[longitude, latitude]``; query helpers in the
tests take ``(lat, lng)`` like the public API.
"""

import json
from pathlib import Path

import numpy as np
import pandas as pd

from region_coder.catalog import RegionCatalog
from region_coder.coder import RegionCoder


def box(west, south, east, north):
    """Closed rectangular ring."""
    return [[west, south], [east, south], [east, north], [west, north], [west, south]]


def polygon(*rings):
    return {'type': 'Polygon', 'coordinates': [list(ring) for ring in rings]}


def multipolygon(*polygons):
    return {'type': 'MultiPolygon', 'coordinates': [list(rings) for rings in polygons]}


def feature(properties, geometry=None):
    return {'type': 'Feature', 'properties': properties, 'geometry': geometry}


def collection(*features):
    return {'type': 'FeatureCollection', 'features': list(features)}


def sample_collection():
    """
    A miniature world.

    Guadeloupe is a territory of France listed before it; "Nowhere Land" has
    neither a country nor an ISO code; the point-geometry region can only be
    found by identifier.
    """
    return collection(
        feature({
            'id': 'GP', 'iso1A2': 'GP', 'iso1A3': 'GLP', 'nameEn': 'Guadeloupe',
            'country': 'FR', 'groups': ['EU', '150', '001'], 'level': 'territory',
            'ccTLD': '.gp'
        }, polygon(box(-62.0, 15.8, -61.0, 16.6))),
        feature({
            'id': 'US', 'iso1A2': 'US', 'iso1A3': 'USA', 'iso1N3': '840',
            'wikidata': 'Q30', 'emojiFlag': '🇺🇸', 'ccTLD': '.us',
            'nameEn': 'United States', 'aliases': ['USA', 'United States of America'],
            'groups': ['001'], 'level': 'country', 'callingCodes': ['1']
        }, polygon(box(-130.0, 20.0, -60.0, 50.0))),
        feature({
            'id': 'FR', 'iso1A2': 'FR', 'iso1A3': 'FRA', 'iso1N3': '250',
            'wikidata': 'Q142', 'emojiFlag': '🇫🇷', 'ccTLD': '.fr',
            'nameEn': 'France', 'groups': ['EU', '150', '001'], 'level': 'country',
            'callingCodes': ['33']
        }, polygon(box(-5.0, 42.0, 8.0, 51.0))),
        feature({
            'id': 'NOWHERE', 'nameEn': 'Nowhere Land', 'level': 'territory'
        }, polygon(box(50.0, -80.0, 60.0, -70.0))),
        feature({
            'id': 'MYSTERY', 'iso1A2': 'XM', 'nameEn': 'Mystery Land', 'level': 'moon'
        }, polygon(box(100.0, 0.0, 110.0, 10.0))),
        feature({
            'id': 'POINTLAND', 'iso1A2': 'XP', 'nameEn': 'Pointland', 'level': 'country'
        }, {'type': 'Point', 'coordinates': [10.0, 10.0]}),
        feature({
            'id': 'EU', 'iso1A2': 'EU', 'nameEn': 'European Union', 'ccTLD': '.eu',
            'members': ['FR'], 'level': 'union'
        }),
        feature({
            'id': '150', 'm49': '150', 'nameEn': 'Europe', 'groups': ['001'], 'level': 'region'
        }),
        feature({
            'id': '001', 'm49': '001', 'nameEn': 'World', 'aliases': ['Earth'], 'level': 'world'
        }),
    )


def sample_catalog():
    return RegionCatalog.from_feature_collection(sample_collection())


def sample_coder():
    return RegionCoder(sample_catalog())


def sample_rounds():
    """Six rounds covering hits, misses, the ocean, missing data and a nameless region."""
    nan = np.nan
    return pd.DataFrame({
        'guess_lat':  [46.0, 40.0, 39.0, 0.0, nan, -75.0],
        'guess_lng':  [2.0, -100.0, -90.0, -30.0, nan, 55.0],
        'actual_lat': [47.0, 46.0, 45.0, 35.0, nan, 16.2],
        'actual_lng': [3.0, 2.0, 1.0, -95.0, nan, -61.5],
        'score':      [4500, 100, 200, 0, 2500, 1000],
        'distance':   [50.0, 7000.0, 6800.0, 9000.0, nan, 3000.0],
    })


def write_dataset(directory, data, file_name="countries.json"):
    """Write a dataset into a directory and return its path."""
    path = Path(directory) / file_name
    path.write_text(json.dumps(data), encoding='utf-8')
    return path


# (lat, lng) positions inside the sample regions
IN_FRANCE = (46.0, 2.0)
IN_US = (40.0, -100.0)
IN_GUADELOUPE = (16.2, -61.5)
IN_NOWHERE = (-75.0, 55.0)
IN_MYSTERY = (5.0, 105.0)
IN_OCEAN = (0.0, -30.0)
