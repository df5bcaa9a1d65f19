"""Base protocols for frequency sketches.

A sketch summarizes a stream in bounded memory and answers approximate
queries about it. This module defines:
- Sketch: operations every sketch supports (add, merge, clear, sizing)
- FrequencySketch: frequency estimation and top-k ranking
- FrequencyEstimate: one ranked answer, with its error bound
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class Sketch(ABC):
    """Base protocol for streaming sketches.

    Sketches process a stream of items and provide approximate answers to
    queries about it. They support:
    - Adding items (with optional counts)
    - Merging another sketch into this one
    - Estimating memory usage
    - Clearing state for reuse
    """

    @abstractmethod
    def add(self, item: T, count: int = 1) -> None:
        """Add ``count`` occurrences of an item to the sketch."""

    @abstractmethod
    def merge(self, other: "Sketch") -> None:
        """Fold another sketch of the same type into this one.

        Raises:
            TypeError: If other is not a compatible sketch.
        """

    @property
    @abstractmethod
    def memory_bytes(self) -> int:
        """Approximate memory footprint of the sketch data structures."""

    @property
    @abstractmethod
    def item_count(self) -> int:
        """Sum of all counts added to the sketch."""

    @abstractmethod
    def clear(self) -> None:
        """Reset the sketch to its initial empty state."""


@dataclass(frozen=True, slots=True)
class FrequencyEstimate(Generic[T]):
    """A frequency estimate for an item.

    The true frequency lies in ``[count - error, count]``.

    Attributes:
        item: The item being estimated.
        count: Estimated frequency (never an underestimate).
        error: Upper bound on the overestimation.
    """

    item: T
    count: int
    error: int

    @property
    def lower_bound(self) -> int:
        """Guaranteed minimum true frequency."""
        return self.count - self.error


class FrequencySketch(Sketch, Generic[T]):
    """Protocol for sketches that estimate item frequencies.

    Implementations: CounterTable (Space-Saving)
    """

    @abstractmethod
    def estimate(self, item: T) -> int:
        """Estimated frequency of an item, 0 if it is not tracked."""

    @abstractmethod
    def top(self, k: int):
        """The k most frequent items, sorted by count descending.

        May return fewer than k items if fewer distinct items were seen.
        """
