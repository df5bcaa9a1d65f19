"""Hot-key detection on a Pareto-distributed request stream.

A planner-sized CounterTable watches a stream of request keys and reports the
heaviest keys with their error bounds, next to the exact counts. The table is
then snapshotted to disk and restored, as a periodic checkpoint would be.

## Expected Results (default config)

The true ten heaviest keys are all tracked, every reported count is within
its error bound, and the table uses a few hundred counters regardless of how
many distinct keys the stream contains.
"""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from pathlib import Path

import spacesaver
from spacesaver import CounterTableBuilder, ParetoDistribution, decode, encode
from spacesaver.data import to_dataframe


@dataclass(frozen=True)
class HotKeyConfig:
    """Parameters for the hot-key run."""

    observations: int = 200_000
    scale: float = 50.0
    shape: float = 0.5
    target_rank: int = 10
    seed: int = 42


def run(cfg: HotKeyConfig, output_dir: Path) -> None:
    table = (
        CounterTableBuilder[int]()
        .pareto_distribution(cfg.scale, cfg.shape)
        .observations(cfg.observations)
        .top(cfg.target_rank)
        .build()
    )

    dist = ParetoDistribution(cfg.scale, cfg.shape)
    rng = random.Random(cfg.seed)
    exact: Counter[int] = Counter()
    for _ in range(cfg.observations):
        key = dist.sample(rng)
        table.record(key)
        exact[key] += 1

    print("\n" + "=" * 60)
    print("HOT KEY REPORT")
    print("=" * 60)
    print(f"  Observations:    {table.total_count}")
    print(f"  Distinct keys:   {len(exact)}")
    print(f"  Capacity:        {table.capacity}")
    print(f"  Max error:       {table.max_error()}")

    df = to_dataframe(table.top(cfg.target_rank))
    df["true"] = [exact[item] for item in df["item"]]
    print()
    print(df.to_string(index=False))

    output_dir.mkdir(parents=True, exist_ok=True)
    snapshot = output_dir / "hot_keys.snapshot"
    snapshot.write_bytes(encode(table))
    restored = decode(snapshot.read_bytes())
    print(f"\nSnapshot: {snapshot} ({snapshot.stat().st_size} bytes), restored equal: {restored == table}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Hot-key detection with a Space-Saving counter table")
    parser.add_argument("--observations", type=int, default=200_000, help="Stream length (default: 200000)")
    parser.add_argument("--scale", type=float, default=50.0, help="Pareto scale (default: 50)")
    parser.add_argument("--shape", type=float, default=0.5, help="Pareto shape (default: 0.5)")
    parser.add_argument("--rank", type=int, default=10, help="Target rank to plan for (default: 10)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--output", type=str, default="output/hot_keys", help="Output directory")
    args = parser.parse_args()

    spacesaver.configure_from_env()

    config = HotKeyConfig(
        observations=args.observations,
        scale=args.scale,
        shape=args.shape,
        target_rank=args.rank,
        seed=args.seed,
    )
    run(config, Path(args.output))
