"""Threshold filtering and ranking of grouped occurrences.

A group survives when it was seen often enough (``minimum_occurrence``) and
convincingly enough (``minimum_score_occurrence`` occurrences scoring at least
``minimum_score``). Each survivor is represented by its best occurrence, and
survivors are ranked by that score and optionally capped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from darkvision.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ScoreFn = Callable[[T], float]


@dataclass(frozen=True)
class ThresholdConfig:
    """Minimums and cap applied to one kind of occurrence group."""

    minimum_occurrence: int
    minimum_score: float
    minimum_score_occurrence: int
    maximum_occurrence_count: int | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.minimum_occurrence <= 0:
            raise ConfigurationError(
                "minimum_occurrence", f"must be >= 1, got {self.minimum_occurrence}"
            )
        if self.minimum_score_occurrence <= 0:
            raise ConfigurationError(
                "minimum_score_occurrence",
                f"must be >= 1, got {self.minimum_score_occurrence}",
            )
        if self.minimum_score_occurrence > self.minimum_occurrence:
            raise ConfigurationError(
                "minimum_score_occurrence",
                f"must not exceed minimum_occurrence ({self.minimum_score_occurrence} > "
                f"{self.minimum_occurrence})",
            )
        if self.maximum_occurrence_count is not None and self.maximum_occurrence_count < 0:
            raise ConfigurationError(
                "maximum_occurrence_count",
                f"must be >= 0, got {self.maximum_occurrence_count}",
            )


@dataclass(frozen=True)
class RankedEntry(Generic[T]):
    """A kept group key and its single best occurrence."""

    key: str
    occurrence: T


class RankedFilter(Generic[T]):
    """Keep the groups that clear both thresholds, best first."""

    def __init__(self, thresholds: ThresholdConfig, score: ScoreFn, label: str = "groups") -> None:
        thresholds.validate()
        self._thresholds = thresholds
        self._score = score
        self._label = label

    def apply(self, groups: Mapping[str, Sequence[T]]) -> list[RankedEntry[T]]:
        t = self._thresholds
        kept: list[RankedEntry[T]] = []
        rare = 0
        unconvincing = 0

        for key, occurrences in groups.items():
            if len(occurrences) < t.minimum_occurrence:
                rare += 1
                continue

            convincing = sum(1 for o in occurrences if self._score(o) >= t.minimum_score)
            if convincing < t.minimum_score_occurrence:
                unconvincing += 1
                continue

            # max() returns the first maximal item, so ties go to the earliest frame
            kept.append(RankedEntry(key=key, occurrence=max(occurrences, key=self._score)))

        # list.sort is stable with reverse=True: equal scores keep first-encounter order
        kept.sort(key=lambda entry: self._score(entry.occurrence), reverse=True)

        truncated = 0
        if t.maximum_occurrence_count is not None and len(kept) > t.maximum_occurrence_count:
            truncated = len(kept) - t.maximum_occurrence_count
            kept = kept[: t.maximum_occurrence_count]

        if rare or unconvincing or truncated:
            logger.info(
                "RankedFilter(%s): kept %d/%d (rare=%d, unconvincing=%d, truncated=%d)",
                self._label,
                len(kept),
                len(groups),
                rare,
                unconvincing,
                truncated,
            )
        return kept


def rank_occurrences(
    groups: Mapping[str, Sequence[T]],
    score: ScoreFn,
    thresholds: ThresholdConfig,
    *,
    label: str = "groups",
) -> list[RankedEntry[T]]:
    """Filter ``groups`` by ``thresholds`` and return the survivors ranked by best score."""
    return RankedFilter(thresholds, score, label).apply(groups)
