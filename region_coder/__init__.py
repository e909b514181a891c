"""
Region Coder - reverse geocoding for geography game rounds.

This package resolves latitude/longitude positions and free-form identifiers
(ISO codes, names, aliases, flags, ccTLDs) to countries and other
administrative regions, and annotates recorded game rounds with the countries
that were guessed and the countries that were the answer.
"""

__version__ = "1.0.0"
__author__ = "Data Analytics Team"
