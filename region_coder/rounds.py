"""
Round annotation and per-country analytics.

This module provides the RoundAnnotator, which tags every recorded round with
the country that was guessed and the country that was the answer, and the
CountryStatsAggregator, which summarizes annotated rounds per country.

Country keys are the lower-case values produced by
``RegionCoder.code_by_location``; ``"??"`` marks a position that no region
contains and is left out of every per-country figure.
"""

import logging
import time
from typing import Any, Dict, Optional, Tuple

import pandas as pd
from tqdm import tqdm

from .coder import RegionCoder, UNKNOWN_COUNTRY_CODE
from .config import ProcessingStats
from .models import RoundRecord


MAX_ROUND_SCORE = 5000

SCORE_BUCKETS = [
    ("0-1000", 1000),
    ("1000-2000", 2000),
    ("2000-3000", 3000),
    ("3000-4000", 4000),
    ("4000-5000", None),
]

ANNOTATION_COLUMNS = [
    'country_code', 'actual_country_code', 'guessed_country', 'actual_country', 'is_correct'
]


class RoundAnnotator:
    """
    Adds guessed and actual country columns to a rounds DataFrame.
    """

    def __init__(self, coder: RegionCoder, logger: Optional[logging.Logger] = None,
                 show_progress: bool = True):
        """
        Initialize the RoundAnnotator.

        Args:
            coder: Region coder used to resolve positions
            logger: Optional logger instance
            show_progress: Whether to display a tqdm progress bar
        """
        self.coder = coder
        self.logger = logger or logging.getLogger(__name__)
        self.show_progress = show_progress

    def annotate(self, rounds_df: pd.DataFrame) -> Tuple[pd.DataFrame, ProcessingStats]:
        """
        Resolve the guess and answer position of every round.

        Args:
            rounds_df: Rounds with guess_lat, guess_lng, actual_lat and
                actual_lng columns

        Returns:
            Tuple of (copy of the DataFrame with the annotation columns added,
            processing statistics)
        """
        start_time = time.time()
        stats = ProcessingStats(total_rounds=len(rounds_df))
        annotations = []

        self.logger.info(f"Annotating {len(rounds_df)} rounds")

        with tqdm(total=len(rounds_df), desc="Round annotation",
                  disable=not self.show_progress) as pbar:
            for row in rounds_df.to_dict('records'):
                annotation = self.annotate_record(RoundRecord.from_row(row))

                if annotation['country_code'] != UNKNOWN_COUNTRY_CODE:
                    stats.resolved_guesses += 1
                if annotation['actual_country_code'] != UNKNOWN_COUNTRY_CODE:
                    stats.resolved_answers += 1
                if annotation['is_correct']:
                    stats.correct_guesses += 1

                annotations.append(annotation)
                pbar.update(1)

        result_df = rounds_df.copy()
        annotation_df = pd.DataFrame(annotations, columns=ANNOTATION_COLUMNS, index=rounds_df.index)
        for col in ANNOTATION_COLUMNS:
            result_df[col] = annotation_df[col]

        stats.processing_time = time.time() - start_time

        if stats.unresolved_guesses:
            self.logger.warning(
                f"DATA QUALITY: {stats.unresolved_guesses} guesses are outside every region"
            )
        if stats.unresolved_answers:
            self.logger.warning(
                f"DATA QUALITY: {stats.unresolved_answers} answers are outside every region"
            )

        return result_df, stats

    def annotate_record(self, record: RoundRecord) -> Dict[str, Any]:
        """
        Resolve a single round.

        Returns:
            Dictionary with the guessed and actual country keys, their display
            names, and whether the guess landed in the answer's country
        """
        guessed_code = (self.coder.code_by_location(record.guess_lat, record.guess_lng)
                        if record.has_guess() else UNKNOWN_COUNTRY_CODE)
        actual_code = (self.coder.code_by_location(record.actual_lat, record.actual_lng)
                       if record.has_answer() else UNKNOWN_COUNTRY_CODE)

        return {
            'country_code': guessed_code,
            'actual_country_code': actual_code,
            'guessed_country': self._name_for(guessed_code),
            'actual_country': self._name_for(actual_code),
            'is_correct': guessed_code != UNKNOWN_COUNTRY_CODE and guessed_code == actual_code,
        }

    def _name_for(self, code: str) -> str:
        if code == UNKNOWN_COUNTRY_CODE:
            return ""
        return self.coder.resolve_display_name_for_code(code)


class CountryStatsAggregator:
    """
    Per-country statistics over annotated rounds.

    A round is attributed to its answer country, or to the guessed country
    when the answer country is missing.
    """

    def __init__(self, coder: RegionCoder, logger: Optional[logging.Logger] = None):
        self.coder = coder
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def display_country(df: pd.DataFrame) -> pd.Series:
        """Country key each round is attributed to."""
        actual = df['actual_country_code']
        has_actual = actual.notna() & (actual != '')
        return actual.where(has_actual, df['country_code'])

    def country_stats(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Average points lost, distance and score per country.

        Args:
            df: Annotated rounds

        Returns:
            DataFrame with country_code, country, points_lost, avg_distance,
            count and avg_score columns, ordered by points lost (worst first)
        """
        columns = ['country_code', 'country', 'points_lost', 'avg_distance', 'count', 'avg_score']
        if df.empty:
            return pd.DataFrame(columns=columns)

        work = pd.DataFrame({
            'country_code': self.display_country(df),
            'score': _numeric_column(df, 'score'),
            'distance': _numeric_column(df, 'distance'),
        })
        work = work[work['country_code'] != UNKNOWN_COUNTRY_CODE]
        if work.empty:
            return pd.DataFrame(columns=columns)

        work['points_lost'] = MAX_ROUND_SCORE - work['score']

        stats = work.groupby('country_code').agg(
            points_lost=('points_lost', 'mean'),
            avg_distance=('distance', 'mean'),
            count=('score', 'size'),
            avg_score=('score', 'mean'),
        ).reset_index()

        stats['country'] = stats['country_code'].map(self.coder.resolve_display_name_for_code)
        stats = stats.sort_values(['points_lost', 'country_code'], ascending=[False, True],
                                  na_position='last')
        return stats[columns].reset_index(drop=True)

    def confusion_pairs(self, df: pd.DataFrame, min_count: int = 2,
                        limit: Optional[int] = 10) -> pd.DataFrame:
        """
        Most frequent (guessed, actual) country pairs among wrong guesses.

        Args:
            df: Annotated rounds
            min_count: Minimum number of rounds for a pair to be reported
            limit: Maximum number of pairs, or None for all

        Returns:
            DataFrame with guessed, actual, guessed_country, actual_country,
            count and avg_distance columns, most frequent first
        """
        columns = ['guessed', 'actual', 'guessed_country', 'actual_country', 'count', 'avg_distance']
        if df.empty:
            return pd.DataFrame(columns=columns)

        guessed = df['country_code']
        actual = df['actual_country_code']
        mask = (
            (guessed != UNKNOWN_COUNTRY_CODE)
            & (actual != UNKNOWN_COUNTRY_CODE)
            & (guessed != actual)
        )
        work = pd.DataFrame({
            'guessed': guessed[mask],
            'actual': actual[mask],
            'distance': _numeric_column(df, 'distance')[mask],
        })
        if work.empty:
            return pd.DataFrame(columns=columns)

        pairs = work.groupby(['guessed', 'actual']).agg(
            count=('distance', 'size'),
            avg_distance=('distance', 'mean'),
        ).reset_index()
        pairs = pairs[pairs['count'] >= min_count]
        pairs = pairs.sort_values(['count', 'guessed', 'actual'], ascending=[False, True, True])
        if limit is not None:
            pairs = pairs.head(limit)

        pairs['guessed_country'] = pairs['guessed'].map(self.coder.resolve_display_name_for_code)
        pairs['actual_country'] = pairs['actual'].map(self.coder.resolve_display_name_for_code)
        return pairs[columns].reset_index(drop=True)

    def score_distribution(self, df: pd.DataFrame) -> Dict[str, int]:
        """Count rounds per 1000-point score bucket."""
        distribution = {label: 0 for label, _ in SCORE_BUCKETS}
        for score in _numeric_column(df, 'score').dropna():
            for label, upper in SCORE_BUCKETS:
                if upper is None or score < upper:
                    distribution[label] += 1
                    break
        return distribution

    def summary(self, df: pd.DataFrame) -> Dict[str, Any]:
        """
        Headline figures over annotated rounds.

        Returns:
            Dictionary with total_rounds, avg_score, avg_distance,
            favourite_country (most played), best_country and worst_country
            (highest and lowest average score), the latter three as display
            names or empty strings
        """
        summary = {
            'total_rounds': int(len(df)),
            'avg_score': 0.0,
            'avg_distance': 0.0,
            'favourite_country': '',
            'best_country': '',
            'worst_country': '',
        }
        if df.empty:
            return summary

        scores = _numeric_column(df, 'score')
        distances = _numeric_column(df, 'distance')
        if scores.notna().any():
            summary['avg_score'] = float(scores.mean())
        if distances.notna().any():
            summary['avg_distance'] = float(distances.mean())

        countries = self.display_country(df)
        counts = countries.value_counts()
        if not counts.empty:
            summary['favourite_country'] = self._display_name(counts.index[0])

        known = (countries != UNKNOWN_COUNTRY_CODE) & (countries != '')
        if known.any():
            avg_scores = scores[known].groupby(countries[known]).mean().dropna()
            if not avg_scores.empty:
                summary['best_country'] = self._display_name(avg_scores.idxmax())
                summary['worst_country'] = self._display_name(avg_scores.idxmin())

        return summary

    def _display_name(self, code: str) -> str:
        if code == UNKNOWN_COUNTRY_CODE:
            return UNKNOWN_COUNTRY_CODE
        return self.coder.resolve_display_name_for_code(code)


def _numeric_column(df: pd.DataFrame, column: str) -> pd.Series:
    """Column as floats, or all-NaN when the column is absent."""
    if column not in df.columns:
        return pd.Series(float('nan'), index=df.index, dtype=float)
    return pd.to_numeric(df[column], errors='coerce')
