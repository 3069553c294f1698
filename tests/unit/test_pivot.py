import numpy as np
import pandas as pd
import pytest

from ausvotes.common.errors import SchemaError
from ausvotes.transform.pivot import pivot_long


def test_pivot_long_orders_by_row_then_column_and_drops_missing_cells():
    df = pd.DataFrame(
        {
            "DivisionNm": ["Adelaide", "Barker"],
            "d1": [1, np.nan],
            "d2": [2, 3],
        }
    )

    out = pivot_long(df, ["DivisionNm"], names_to="Day", values_to="Votes")

    assert list(out.columns) == ["DivisionNm", "Day", "Votes"]
    assert out["DivisionNm"].tolist() == ["Adelaide", "Adelaide", "Barker"]
    assert out["Day"].tolist() == ["d1", "d2", "d2"]
    assert out["Votes"].tolist() == [1, 2, 3]


def test_pivot_long_row_count_is_bounded_by_cells():
    df = pd.DataFrame(
        {
            "id": ["a", "b", "c"],
            "x": [1, None, 3],
            "y": [None, None, 6],
            "z": [7, 8, 9],
        }
    )
    value_cols = ["x", "y", "z"]

    out = pivot_long(df, ["id"])

    assert len(out) <= len(df) * len(value_cols)
    assert len(out) == int(df[value_cols].notna().sum().sum())


def test_pivot_long_keeps_long_cols_out_of_the_pivot():
    df = pd.DataFrame({"id": ["a"], "Issue Date": ["x"], "d1": [5]})

    out = pivot_long(df, ["id"], long_cols=("Issue Date",))

    assert out["Issue Date"].tolist() == ["d1"]
    assert out["Total Votes"].tolist() == [5]


def test_pivot_long_with_nothing_to_pivot_returns_empty_frame():
    out = pivot_long(pd.DataFrame({"id": ["a"]}), ["id"])

    assert out.empty
    assert list(out.columns) == ["id", "Issue Date", "Total Votes"]


def test_pivot_long_requires_id_columns():
    with pytest.raises(SchemaError):
        pivot_long(pd.DataFrame({"a": [1]}), ["id"])
