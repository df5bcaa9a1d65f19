"""Pareto rank/frequency model.

Power-law workloads (hot keys, popular URLs, noisy clients) put most of their
traffic on a handful of elements. A Pareto distribution with scale ``x_m``
and shape ``alpha`` has

    cdf(x) = 1 - (x_m / x) ** alpha        for x >= x_m

and the mass of rank k is taken as the probability of the unit interval
[x_m + k, x_m + k + 1).
"""

from __future__ import annotations

import math
import random
import sys
from dataclasses import dataclass

from spacesaver.errors import InvalidArgumentError


@dataclass(frozen=True)
class ParetoDistribution:
    """Pareto distribution over element ranks.

    Args:
        scale: Minimum value x_m. Must be positive.
        shape: Tail index alpha. Must be positive; smaller is heavier-tailed.

    Example:
        dist = ParetoDistribution(scale=50, shape=0.5)
        dist.probability_of_rank(0)     # mass on the hottest element
        dist.sample(random.Random(42))  # draw an element id
    """

    scale: float
    shape: float

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise InvalidArgumentError(f"scale must be positive, got {self.scale}")
        if not self.shape > 0:
            raise InvalidArgumentError(f"shape must be positive, got {self.shape}")

    def cdf(self, x: float) -> float:
        """Cumulative probability at ``x``; 0 below the scale."""
        if x <= self.scale:
            return 0.0
        return 1.0 - math.pow(self.scale / x, self.shape)

    def probability_of_rank(self, k: int) -> float:
        """Probability that one observation lands on the element of rank ``k``."""
        if k < 0:
            raise InvalidArgumentError(f"rank must be non-negative, got {k}")
        return self.cdf(self.scale + k + 1) - self.cdf(self.scale + k)

    def sample(self, rng: random.Random | None = None) -> int:
        """Draw an integer element id by inverse-CDF sampling.

        Ids start at ``int(scale)``; smaller ids are more frequent. Draws from
        the far tail are capped at ``sys.maxsize``, which heavy tails (small
        shapes) reach routinely.
        """
        rng = rng or random
        u = 1.0 - rng.random()  # (0, 1]
        # scale * u ** (-1/shape), computed in log space.
        limit = max(math.log(sys.maxsize / self.scale), 0.0)
        exponent = min(-math.log(u) / self.shape, limit)
        value = int(self.scale * math.exp(exponent))
        return max(int(self.scale), min(value, sys.maxsize))

    def __call__(self, k: int) -> float:
        return self.probability_of_rank(k)
