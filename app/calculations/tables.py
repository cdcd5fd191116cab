"""
Sparse Reference Tables

Lookup over integer-keyed tables (age -> distribution period, year -> CPI)
where missing keys are linearly interpolated at lookup time.
"""

from typing import Dict

import numpy as np


def interpolate_table(table: Dict[int, float], key: float) -> float:
    """
    Look up ``key`` in a sparse table.

    Exact keys return the stored value unchanged. Keys outside the table
    clamp to the nearest endpoint; keys between two known entries are
    linearly interpolated.

    Args:
        table: Mapping of integer key to value
        key: Key to look up

    Returns:
        Table value for ``key``
    """
    if not table:
        raise ValueError("Cannot look up a value in an empty table")

    if key in table:
        return table[key]

    keys = sorted(table)
    values = [table[k] for k in keys]
    # np.interp clamps to the endpoint values outside [keys[0], keys[-1]]
    return float(np.interp(key, keys, values))
