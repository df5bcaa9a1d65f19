"""Integration tests comparing CounterTable against exact counting.

Each test feeds a seeded power-law stream to both a planned CounterTable and a
collections.Counter, then checks the Space-Saving guarantees end to end.
"""

import random
from collections import Counter
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from spacesaver import (
    CounterTable,
    CounterTableBuilder,
    ParetoDistribution,
    ZipfDistribution,
    decode,
    encode,
)
from spacesaver.data import to_dataframe


def pareto_stream(n: int, scale: float, shape: float, seed: int) -> list[int]:
    dist = ParetoDistribution(scale, shape)
    rng = random.Random(seed)
    return [dist.sample(rng) for _ in range(n)]


def zipf_stream(n: int, size: int, s: float, seed: int) -> list[int]:
    dist = ZipfDistribution(size, s=s)
    rng = random.Random(seed)
    return [dist.sample(rng) for _ in range(n)]


class TestPlannedTableAccuracy:
    """A planner-sized table over a Pareto workload."""

    N = 100_000

    def _run(self):
        table = (
            CounterTableBuilder[int]()
            .pareto_distribution(50, 0.5)
            .observations(self.N)
            .top(10)
            .build()
        )
        stream = pareto_stream(self.N, 50, 0.5, seed=42)
        table.update(stream)
        return table, Counter(stream)

    def test_frequent_items_are_tracked(self):
        """Every item with frequency above N / capacity is tracked."""
        table, exact = self._run()

        threshold = table.guaranteed_threshold()
        for item, true_count in exact.items():
            if true_count > threshold:
                assert item in table, f"{item} seen {true_count} times but not tracked"

    def test_true_top_ten_is_found(self):
        """The true ten heaviest items are all tracked."""
        table, exact = self._run()

        for item, _ in exact.most_common(10):
            assert item in table

    def test_error_bounds_hold(self):
        """count - error <= true frequency <= count for every tracked item."""
        table, exact = self._run()

        assert table.total_count == self.N
        for estimate in table.elements():
            assert estimate.lower_bound <= exact[estimate.item] <= estimate.count

    def test_snapshot_of_full_table(self):
        """A full, churned table survives a snapshot round trip."""
        table, _ = self._run()

        restored = decode(encode(table))

        assert restored.size == table.capacity
        assert restored == table


class TestShardedMerge:
    """Per-shard tables combined with merge()."""

    def test_merged_shards_find_heavy_hitters(self):
        """Merging shard tables recovers the global heavy hitters."""
        stream = zipf_stream(40_000, size=1000, s=1.2, seed=7)
        shards = [CounterTable[int](capacity=64) for _ in range(4)]
        for i, item in enumerate(stream):
            shards[i % 4].record(item)

        combined = CounterTable[int](capacity=64)
        for shard in shards:
            combined.merge(shard)

        exact = Counter(stream)
        top_10 = {e.item for e in combined.top(10)}
        for item, _ in exact.most_common(3):
            assert item in top_10
        assert combined.total_count == len(stream)

        counts = [e.count for e in combined.elements()]
        assert counts == sorted(counts, reverse=True)


class TestVisualization:
    """Rank/frequency plots for manual inspection."""

    def test_plot_rank_frequency(self, test_output_dir: Path):
        """Plot estimated vs true counts of the tracked ranking."""
        stream = zipf_stream(50_000, size=500, s=1.0, seed=42)
        table = CounterTable[int](capacity=50)
        table.update(stream)
        exact = Counter(stream)

        df = to_dataframe(table)
        df["true"] = [exact[item] for item in df["item"]]
        assert (df["lower_bound"] <= df["true"]).all()
        assert (df["true"] <= df["count"]).all()

        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(df["rank"], df["count"], label="Estimated count")
        ax.fill_between(df["rank"], df["lower_bound"], df["count"], alpha=0.3, label="Error bound")
        ax.plot(df["rank"], df["true"], "k.", label="True count")
        ax.set_xlabel("Rank")
        ax.set_ylabel("Count")
        ax.set_yscale("log")
        ax.set_title(f"CounterTable (capacity={table.capacity}) vs exact")
        ax.legend()
        fig.tight_layout()

        path = test_output_dir / "rank_frequency.png"
        fig.savefig(path, dpi=100)
        plt.close(fig)

        assert path.exists()
