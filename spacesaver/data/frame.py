from collections.abc import Iterable

import pandas as pd

from spacesaver.sketching.base import FrequencyEstimate
from spacesaver.sketching.counter_table import CounterTable


class RankFrame:
    RANK = 'rank'
    ITEM = 'item'
    COUNT = 'count'
    ERROR = 'error'
    LOWER_BOUND = 'lower_bound'

    COLUMNS = [RANK, ITEM, COUNT, ERROR, LOWER_BOUND]


def to_dataframe(source: CounterTable | Iterable[FrequencyEstimate]) -> pd.DataFrame:
    """One row per estimate, in rank order (rank 0 = most frequent)."""
    estimates = source.elements() if isinstance(source, CounterTable) else source
    rows = [
        (rank, e.item, e.count, e.error, e.lower_bound)
        for rank, e in enumerate(estimates)
    ]
    return pd.DataFrame(rows, columns=RankFrame.COLUMNS)
