"""
Fuzzy identifier suggestions for the region coder.

Identifier lookups are exact on the canonical key. When a name does not
resolve, the FuzzyMatcher offers the closest region names and aliases so a
caller can report "did you mean ...". Suggestions never change what an exact
lookup returns.
"""

import logging
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from rapidfuzz import fuzz, process

from ..models import Region
from ..utils.data_utils import is_null_or_empty

if TYPE_CHECKING:
    from ..catalog import RegionCatalog


class FuzzyMatcher:
    """
    Suggests regions whose names or aliases resemble an unresolved identifier.
    """

    def __init__(self, catalog: 'RegionCatalog', threshold: int = 70,
                 max_alternatives: int = 5, logger: Optional[logging.Logger] = None):
        """
        Initialize the FuzzyMatcher.

        Args:
            catalog: Loaded region catalog
            threshold: Minimum similarity score for a suggestion (0-100)
            max_alternatives: Default number of suggestions returned
            logger: Optional logger instance
        """
        if not 0 <= threshold <= 100:
            raise ValueError("Threshold must be between 0 and 100")

        self.catalog = catalog
        self.threshold = threshold
        self.max_alternatives = max_alternatives
        self.logger = logger or logging.getLogger(__name__)
        self._choices = self._create_choices()

    def _create_choices(self) -> Dict[str, Region]:
        """Map each English name and alias to its region, first occurrence kept."""
        choices: Dict[str, Region] = {}
        for region in self.catalog:
            for name in (region.name_en,) + (region.aliases or ()):
                if name and name not in choices:
                    choices[name] = region
        return choices

    def suggest(self, text: str, limit: Optional[int] = None) -> List[Tuple[str, Region, float]]:
        """
        Suggest regions for an identifier.

        Args:
            text: Identifier that did not resolve
            limit: Maximum number of suggestions

        Returns:
            List of (matched name, region, score) tuples, best first, one entry
            per region
        """
        if not isinstance(text, str) or is_null_or_empty(text) or not self._choices:
            return []

        limit = limit or self.max_alternatives
        matches = process.extract(
            text,
            list(self._choices.keys()),
            scorer=fuzz.WRatio,
            score_cutoff=self.threshold,
            limit=limit * 3
        )

        suggestions = []
        seen = set()
        for name, score, _ in matches:
            region = self._choices[name]
            if region.id in seen:
                continue
            seen.add(region.id)
            suggestions.append((name, region, score))
            if len(suggestions) >= limit:
                break

        self.logger.debug(f"Suggestions for '{text}': {[name for name, _, _ in suggestions]}")
        return suggestions
