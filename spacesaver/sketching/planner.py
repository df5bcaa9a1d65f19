"""Capacity planning for CounterTable.

Space-Saving bounds every count's error by N / capacity, where N is the
stream's total weight. To keep the element of a target rank inside the
low-error region, size the table so that rank's expected count is at least
N / capacity, with a safety factor of 2:

    capacity = (2 * N) // estimate

``estimate`` is the expected number of observations landing on the target
rank, either given directly or derived as ``int(p(rank) * N)`` from a
Distribution.

Example:
    table = (
        CounterTableBuilder()
        .pareto_distribution(scale=50, shape=0.5)
        .observations(1_000_000)
        .top(10)
        .build()
    )
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from spacesaver.distributions import Distribution, ParetoDistribution, RankProbability, as_rank_probability
from spacesaver.errors import InvalidArgumentError
from spacesaver.sketching.counter_table import CounterTable

logger = logging.getLogger(__name__)

T = TypeVar("T")

SAFETY_FACTOR = 2


def required_capacity(observations: int, estimate: int) -> int:
    """Counters needed so an element expected ``estimate`` times stays accurate.

    Raises:
        InvalidArgumentError: If estimate is zero or either input is negative.
    """
    if observations < 0:
        raise InvalidArgumentError(f"observations must be non-negative, got {observations}")
    if estimate < 0:
        raise InvalidArgumentError(f"estimate must be non-negative, got {estimate}")
    if estimate == 0:
        raise InvalidArgumentError("top k observation estimate is zero")
    return SAFETY_FACTOR * observations // estimate


class CounterTableBuilder(Generic[T]):
    """Fluent planner that sizes a CounterTable for a target rank.

    Provide either a distribution (plus observations and rank) or a literal
    estimate via ``top(k, estimate=...)``. An explicit estimate wins over the
    distribution.
    """

    def __init__(self) -> None:
        self._distribution: RankProbability | None = None
        self._observations = 0
        self._rank = 0
        self._estimate: int | None = None

    def distribution(self, distribution: Distribution | RankProbability) -> CounterTableBuilder[T]:
        """Use a Distribution, or any ``rank -> probability`` callable."""
        if distribution is None:
            raise InvalidArgumentError("distribution must not be None")
        self._distribution = as_rank_probability(distribution)
        return self

    def pareto_distribution(self, scale: float, shape: float) -> CounterTableBuilder[T]:
        return self.distribution(ParetoDistribution(scale, shape))

    def observations(self, n: int) -> CounterTableBuilder[T]:
        """Total observations expected over the planning horizon."""
        if n < 0:
            raise InvalidArgumentError(f"observations must be non-negative, got {n}")
        self._observations = n
        return self

    def top(self, k: int, estimate: int | None = None) -> CounterTableBuilder[T]:
        """Target rank ``k``, optionally with a literal estimate of its observations."""
        if k < 0:
            raise InvalidArgumentError(f"rank must be non-negative, got {k}")
        self._rank = k
        self._estimate = estimate
        return self

    def estimate(self) -> int:
        """Expected observations landing on the target rank."""
        if self._estimate is not None:
            return self._estimate
        if self._distribution is None:
            raise InvalidArgumentError(
                "missing either top k observation estimate or distribution"
            )
        probability = self._distribution(self._rank)
        return int(probability * self._observations)

    def capacity(self) -> int:
        return required_capacity(self._observations, self.estimate())

    def build(self) -> CounterTable[T]:
        """Create a CounterTable sized for the configured workload.

        Raises:
            InvalidArgumentError: If the estimate is zero or missing, or the
                resulting capacity is not positive.
        """
        estimate = self.estimate()
        capacity = required_capacity(self._observations, estimate)
        logger.debug(
            "Planned capacity=%d for rank=%d (estimate=%d, observations=%d)",
            capacity,
            self._rank,
            estimate,
            self._observations,
        )
        return CounterTable(capacity)
