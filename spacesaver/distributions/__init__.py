"""Rank/probability distributions used to plan table capacity."""

from spacesaver.distributions.distribution import Distribution, RankProbability, as_rank_probability
from spacesaver.distributions.pareto import ParetoDistribution
from spacesaver.distributions.zipf import ZipfDistribution

__all__ = [
    "Distribution",
    "ParetoDistribution",
    "RankProbability",
    "ZipfDistribution",
    "as_rank_probability",
]
