"""Space-Saving frequency sketching.

Quick Reference:
    CounterTable: fixed-capacity top-k counter with per-item error bounds
    CounterTableBuilder: sizes a CounterTable from a workload model
    encode / decode: binary snapshots of a CounterTable

Example:
    from spacesaver.sketching import CounterTable

    table = CounterTable[str](capacity=100)
    for customer_id in requests:
        table.record(customer_id)
    print(table.top(10))
"""

from spacesaver.sketching.base import FrequencyEstimate, FrequencySketch, Sketch
from spacesaver.sketching.counter_table import CounterTable, RankedView
from spacesaver.sketching.planner import SAFETY_FACTOR, CounterTableBuilder, required_capacity
from spacesaver.sketching.snapshot import (
    DEFAULT_CODEC,
    SNAPSHOT_MAGIC,
    ElementCodec,
    JsonCodec,
    StringCodec,
    decode,
    encode,
)

__all__ = [
    "DEFAULT_CODEC",
    "SAFETY_FACTOR",
    "SNAPSHOT_MAGIC",
    "CounterTable",
    "CounterTableBuilder",
    "ElementCodec",
    "FrequencyEstimate",
    "FrequencySketch",
    "JsonCodec",
    "RankedView",
    "Sketch",
    "StringCodec",
    "decode",
    "encode",
    "required_capacity",
]
