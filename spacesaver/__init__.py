"""spacesaver: approximate top-k frequency counting with bounded memory.

Implements the Space-Saving algorithm: a fixed number of counters tracks the
heaviest elements of an unbounded stream, and every reported count carries
an upper bound on its overestimation.

Example:
    import spacesaver

    table = spacesaver.CounterTable[str](capacity=1000)
    for key in stream:
        table.record(key)
    for estimate in table.top(10):
        print(estimate.item, estimate.count, estimate.error)

Logging is silent by default; see spacesaver.logging_config.
"""

import logging

from spacesaver.distributions import Distribution, ParetoDistribution, ZipfDistribution
from spacesaver.errors import (
    CorruptStateError,
    InvalidArgumentError,
    SpaceSaverError,
    UnsupportedOperationError,
)
from spacesaver.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
)
from spacesaver.sketching import (
    CounterTable,
    CounterTableBuilder,
    FrequencyEstimate,
    JsonCodec,
    RankedView,
    StringCodec,
    decode,
    encode,
    required_capacity,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Core
    "CounterTable",
    "FrequencyEstimate",
    "RankedView",
    # Planning
    "CounterTableBuilder",
    "Distribution",
    "ParetoDistribution",
    "ZipfDistribution",
    "required_capacity",
    # Snapshots
    "JsonCodec",
    "StringCodec",
    "decode",
    "encode",
    # Errors
    "CorruptStateError",
    "InvalidArgumentError",
    "SpaceSaverError",
    "UnsupportedOperationError",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
]
