"""Wide-to-long reshaping for per-date vote columns."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from ausvotes.common.errors import SchemaError


def pivot_long(
    df: pd.DataFrame,
    id_cols: Iterable[str],
    long_cols: Iterable[str] = (),
    names_to: str = "Issue Date",
    values_to: str = "Total Votes",
) -> pd.DataFrame:
    """Turn every column outside ``id_cols`` and ``long_cols`` into rows.

    Each output row holds the id values, the source column label under
    ``names_to`` and the cell under ``values_to``. Missing cells produce no
    row. Rows follow input row order, then source column order.
    """
    id_cols = list(id_cols)
    missing = [name for name in id_cols if name not in df.columns]
    if missing:
        raise SchemaError(f"The following id columns were not found in the data: {', '.join(missing)}")

    excluded = set(id_cols) | set(long_cols)
    value_cols = [name for name in df.columns if name not in excluded]
    out_cols = [*id_cols, names_to, values_to]
    if not value_cols or df.empty:
        return pd.DataFrame(columns=out_cols)

    n_rows, n_cols = len(df), len(value_cols)
    values = df[value_cols].to_numpy(dtype=object).reshape(-1)
    keep = ~pd.isna(values)

    long = df[id_cols].iloc[np.repeat(np.arange(n_rows), n_cols)].reset_index(drop=True)
    long[names_to] = np.tile(np.asarray(value_cols, dtype=object), n_rows)
    long[values_to] = values
    long = long.loc[keep].reset_index(drop=True)
    long[values_to] = long[values_to].infer_objects()
    return long
