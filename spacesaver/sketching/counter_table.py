"""Top-k heavy hitters using the Space-Saving algorithm.

The Space-Saving algorithm finds the most frequent items of a stream using a
fixed number of counters. With ``capacity`` counters over a stream of total
weight N it guarantees that:
- Any item with true frequency > N/capacity is tracked
- A tracked item's true frequency lies in [count - error, count]

Counters live in an arena of slots addressed by integer index. Slots are
linked in rank order (highest count first) through ``prev``/``next`` indices,
with ``_NONE`` as the sentinel. A slot is allocated once, when the table is
still filling, and is reused in place whenever the minimum counter is
evicted. Because a single ``record()`` changes exactly one count, restoring
the order is one insertion-sort step: walk towards the head past every
counter the updated one now outranks, then splice it back in.

This is ideal for:
- Finding hot keys in caches
- Detecting abusive clients by request volume
- Ranking popular endpoints under a strict memory budget

Reference:
    Metwally, Agrawal, El Abbadi. "Efficient Computation of Frequent and Top-k
    Elements in Data Streams" (2005)

The table is not thread-safe. Share it behind a lock, or keep one table per
shard and combine them with merge().
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Hashable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar, overload

from spacesaver.errors import InvalidArgumentError, UnsupportedOperationError
from spacesaver.sketching.base import FrequencyEstimate, FrequencySketch

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)

_NONE = -1


@dataclass(slots=True)
class _Counter(Generic[T]):
    """One arena slot.

    ``error`` is the count inherited from the item that previously owned the
    slot. ``prev``/``next`` are slot indices of the neighbours in rank order.
    """

    item: T
    count: int
    error: int
    prev: int = _NONE
    next: int = _NONE


class RankedView(Sequence[FrequencyEstimate[T]]):
    """Read-only snapshot of a table's ranking.

    The view is detached from the table: later records do not change it,
    and it cannot be modified.
    """

    __slots__ = ("_estimates",)

    def __init__(self, estimates: Iterable[FrequencyEstimate[T]] = ()):
        self._estimates: tuple[FrequencyEstimate[T], ...] = tuple(estimates)

    @overload
    def __getitem__(self, index: int) -> FrequencyEstimate[T]: ...

    @overload
    def __getitem__(self, index: slice) -> RankedView[T]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return RankedView(self._estimates[index])
        return self._estimates[index]

    def __len__(self) -> int:
        return len(self._estimates)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RankedView):
            return self._estimates == other._estimates
        if isinstance(other, (list, tuple)):
            return list(self._estimates) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def _read_only(self, *args, **kwargs):
        raise UnsupportedOperationError("RankedView is a read-only snapshot")

    __setitem__ = _read_only
    __delitem__ = _read_only
    append = _read_only
    extend = _read_only
    insert = _read_only
    pop = _read_only
    remove = _read_only
    clear = _read_only

    def __repr__(self) -> str:
        return f"RankedView({list(self._estimates)!r})"


class CounterTable(FrequencySketch[T]):
    """Fixed-capacity Space-Saving counter table.

    Args:
        capacity: Maximum number of counters. Larger capacity means tighter
            error bounds and more memory.

    Raises:
        InvalidArgumentError: If capacity is not a positive integer.

    Example:
        table = CounterTable[str](capacity=1000)
        for client_ip in request_log:
            table.record(client_ip)

        for estimate in table.top(10):
            print(f"{estimate.item}: ~{estimate.count} (error <= {estimate.error})")
    """

    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidArgumentError(f"capacity must be a positive integer, got {capacity!r}")

        self._capacity = capacity
        self._slots: list[_Counter[T]] = []
        self._index: dict[T, int] = {}
        self._head = _NONE
        self._tail = _NONE
        self._total_count = 0

    @property
    def capacity(self) -> int:
        """Maximum number of tracked items, fixed at construction."""
        return self._capacity

    @property
    def size(self) -> int:
        """Number of items currently tracked."""
        return len(self._slots)

    @property
    def total_count(self) -> int:
        """Sum of every weight ever recorded, including evicted items' weight."""
        return self._total_count

    @property
    def item_count(self) -> int:
        return self._total_count

    def __len__(self) -> int:
        return len(self._slots)

    # -- mutation ---------------------------------------------------------

    def record(self, item: T, weight: int = 1) -> int:
        """Record ``weight`` observations of an item.

        Args:
            item: The observed item. Must be hashable and not None.
            weight: Number of observations, at least 1.

        Returns:
            The item's count after recording.

        Raises:
            InvalidArgumentError: If item is None or weight < 1. The table
                is left untouched.
        """
        if item is None:
            raise InvalidArgumentError("item must not be None")
        if isinstance(weight, bool) or not isinstance(weight, int) or weight < 1:
            raise InvalidArgumentError(f"weight must be a positive integer, got {weight!r}")
        return self._record(item, weight, 0)

    def add(self, item: T, count: int = 1) -> None:
        """Sketch-protocol spelling of record()."""
        self.record(item, count)

    def update(self, items: Iterable[T]) -> None:
        """Record one observation of each item in ``items``, in order."""
        for item in items:
            self.record(item)

    def _record(self, item: T, count: int, error: int) -> int:
        slot = self._index.get(item)

        if slot is not None:
            counter = self._slots[slot]
            counter.count += count
            counter.error += error
        elif len(self._slots) < self._capacity:
            slot = len(self._slots)
            self._slots.append(_Counter(item=item, count=count, error=error, prev=self._tail))
            if self._tail == _NONE:
                self._head = slot
            else:
                self._slots[self._tail].next = slot
            self._tail = slot
            self._index[item] = slot
            self._total_count += count
            # A weighted append can outrank the old tail.
            self._promote(slot)
            return count
        else:
            # Evict the minimum counter and take over its slot.
            slot = self._tail
            counter = self._slots[slot]
            del self._index[counter.item]
            self._index[item] = slot
            counter.item = item
            counter.error = counter.count + error
            counter.count += count

        self._total_count += count
        self._promote(slot)
        return counter.count

    def _promote(self, slot: int) -> None:
        """Move a counter towards the head until its predecessor's count >= its own."""
        counter = self._slots[slot]
        prev = counter.prev
        if prev == _NONE or self._slots[prev].count >= counter.count:
            return

        self._unlink(slot)
        # Every counter passed here is demoted by one rank.
        while prev != _NONE and self._slots[prev].count < counter.count:
            prev = self._slots[prev].prev
        self._link_after(slot, prev)

    def _unlink(self, slot: int) -> None:
        counter = self._slots[slot]
        if counter.prev == _NONE:
            self._head = counter.next
        else:
            self._slots[counter.prev].next = counter.next
        if counter.next == _NONE:
            self._tail = counter.prev
        else:
            self._slots[counter.next].prev = counter.prev

    def _link_after(self, slot: int, prev: int) -> None:
        counter = self._slots[slot]
        counter.prev = prev
        if prev == _NONE:
            counter.next = self._head
            self._head = slot
        else:
            counter.next = self._slots[prev].next
            self._slots[prev].next = slot
        if counter.next == _NONE:
            self._tail = slot
        else:
            self._slots[counter.next].prev = slot

    def merge(self, other: CounterTable[T]) -> None:
        """Fold another table's current ranking into this one.

        Each of other's items is recorded with its count, and other's error
        for that item is added to the resulting error. Summing errors is a
        conservative bound; the result approximates the combined stream but
        is not an exact union. Capacities need not match.

        Raises:
            TypeError: If other is not a CounterTable.
        """
        if not isinstance(other, CounterTable):
            raise TypeError(f"Can only merge with CounterTable, got {type(other).__name__}")

        # Materialize first so merging a table into itself is well defined.
        estimates = other.elements()
        for estimate in estimates:
            self._record(estimate.item, estimate.count, estimate.error)

        logger.debug(
            "Merged %d counters (capacity=%d) into table capacity=%d; total=%d",
            len(estimates),
            other.capacity,
            self._capacity,
            self._total_count,
        )

    def clear(self) -> None:
        """Drop every counter and reset the total count."""
        self._slots.clear()
        self._index.clear()
        self._head = _NONE
        self._tail = _NONE
        self._total_count = 0
        logger.debug("Cleared table capacity=%d", self._capacity)

    # -- queries ----------------------------------------------------------

    def top(self, k: int | None = None) -> RankedView[T]:
        """The k highest-ranked items, in descending count order.

        Args:
            k: Number of items wanted, at most capacity. None means all
                tracked items.

        Returns:
            A RankedView of min(k, size) estimates.

        Raises:
            InvalidArgumentError: If k is negative or greater than capacity.
        """
        if k is None:
            k = len(self._slots)
        if k < 0 or k > self._capacity:
            raise InvalidArgumentError(f"k must be in [0, {self._capacity}], got {k}")
        return RankedView(self._walk(min(k, len(self._slots))))

    def elements(self) -> RankedView[T]:
        """Every tracked item, in descending count order."""
        return self.top(len(self._slots))

    def _walk(self, n: int) -> Iterator[FrequencyEstimate[T]]:
        slot = self._head
        for _ in range(n):
            counter = self._slots[slot]
            yield FrequencyEstimate(item=counter.item, count=counter.count, error=counter.error)
            slot = counter.next

    def __iter__(self) -> Iterator[FrequencyEstimate[T]]:
        return iter(self.elements())

    def __contains__(self, item: object) -> bool:
        return item in self._index

    def estimate(self, item: T) -> int:
        """Estimated count of an item, or 0 if it is not tracked."""
        slot = self._index.get(item)
        if slot is None:
            return 0
        return self._slots[slot].count

    def estimate_with_error(self, item: T) -> FrequencyEstimate[T]:
        """Estimate with error bound.

        For an untracked item the true frequency is somewhere in
        [0, max_error()], which is reported as count=error=max_error().
        """
        slot = self._index.get(item)
        if slot is None:
            bound = self.max_error()
            return FrequencyEstimate(item=item, count=bound, error=bound)
        counter = self._slots[slot]
        return FrequencyEstimate(item=item, count=counter.count, error=counter.error)

    def max_error(self) -> int:
        """Upper bound on the true frequency of any untracked item.

        0 while the table has free slots; once full, the tail (minimum)
        tracked count.
        """
        if len(self._slots) < self._capacity:
            return 0
        return self._slots[self._tail].count

    def guaranteed_threshold(self) -> int:
        """Frequency above which an item is guaranteed to be tracked (N // capacity)."""
        return self._total_count // self._capacity

    @property
    def memory_bytes(self) -> int:
        # Slot object (5 fields) plus dict entry per tracked item.
        per_item = 5 * 8 + 50
        return sys.getsizeof(self._index) + sys.getsizeof(self._slots) + len(self._slots) * per_item

    # -- snapshot support -------------------------------------------------

    @classmethod
    def _restore(
        cls,
        capacity: int,
        total_count: int,
        counters: Iterable[tuple[T, int, int]],
    ) -> CounterTable[T]:
        """Rebuild a table from counters already in rank order.

        Callers are responsible for validating order and uniqueness.
        """
        table = cls(capacity)
        for item, count, error in counters:
            slot = len(table._slots)
            table._slots.append(_Counter(item=item, count=count, error=error, prev=slot - 1))
            table._index[item] = slot
        if table._slots:
            for slot in range(len(table._slots) - 1):
                table._slots[slot].next = slot + 1
            table._head = 0
            table._tail = len(table._slots) - 1
        table._total_count = total_count
        return table

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CounterTable):
            return NotImplemented
        return (
            self._capacity == other._capacity
            and self._total_count == other._total_count
            and self.elements() == other.elements()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"CounterTable(capacity={self._capacity}, size={len(self._slots)}, "
            f"total={self._total_count})"
        )
