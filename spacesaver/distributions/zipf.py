"""Finite Zipf distribution over ranks 0..n-1.

P(rank = k) = (1 / (k + 1) ** s) / H(n, s), where H(n, s) is the
generalized harmonic number. With s = 1 the second element is half as
frequent as the first, the third a third, and so on.
"""

from __future__ import annotations

import bisect
import logging
import random
from dataclasses import dataclass, field
from itertools import accumulate

from spacesaver.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZipfDistribution:
    """Zipf distribution over ``n`` ranked elements.

    Args:
        n: Number of distinct elements. Must be positive.
        s: Exponent. 0 is uniform; larger values are more skewed.
    """

    n: int
    s: float = 1.0
    _cumulative: tuple[float, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.n <= 0:
            raise InvalidArgumentError(f"n must be positive, got {self.n}")
        if self.s < 0:
            raise InvalidArgumentError(f"s must be non-negative, got {self.s}")

        weights = [1.0 / (k + 1) ** self.s for k in range(self.n)]
        total = sum(weights)
        object.__setattr__(
            self, "_cumulative", tuple(c / total for c in accumulate(weights))
        )
        logger.debug("ZipfDistribution created: n=%d s=%.3f", self.n, self.s)

    def probability_of_rank(self, k: int) -> float:
        """Probability of rank ``k``; 0 beyond the last element."""
        if k < 0:
            raise InvalidArgumentError(f"rank must be non-negative, got {k}")
        if k >= self.n:
            return 0.0
        lower = self._cumulative[k - 1] if k > 0 else 0.0
        return self._cumulative[k] - lower

    def sample(self, rng: random.Random | None = None) -> int:
        """Draw a rank in [0, n)."""
        rng = rng or random
        rank = bisect.bisect_left(self._cumulative, rng.random())
        return min(rank, self.n - 1)

    def __call__(self, k: int) -> float:
        return self.probability_of_rank(k)
