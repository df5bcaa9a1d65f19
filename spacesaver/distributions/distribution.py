"""Rank/probability capability used for capacity planning."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class Distribution(Protocol):
    """Maps an element's true rank to the probability mass it receives.

    Rank 0 is the most frequent element. Only consulted while planning a
    table's capacity, never while recording.
    """

    def probability_of_rank(self, k: int) -> float: ...


RankProbability = Callable[[int], float]


def as_rank_probability(distribution: Distribution | RankProbability) -> RankProbability:
    """Accept either a Distribution or a plain ``rank -> probability`` function."""
    if isinstance(distribution, Distribution):
        return distribution.probability_of_rank
    if callable(distribution):
        return distribution
    raise TypeError(
        f"Expected a Distribution or a callable, got {type(distribution).__name__}"
    )
