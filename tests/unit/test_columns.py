import pandas as pd
import pytest

from ausvotes.common.errors import SchemaError
from ausvotes.transform.columns import (
    amend_colnames,
    drop_columns,
    drop_prefixed_columns,
    keep_columns,
    rename_columns,
    require_columns,
)


def test_rename_columns_uses_new_to_old_pairs_without_mutating_input():
    df = pd.DataFrame({"Enrolment": ["Sydney"], "State_Cd": ["NSW"]})

    out = rename_columns(df, {"DivisionNm": "Enrolment", "StateAb": "State_Cd"})

    assert list(out.columns) == ["DivisionNm", "StateAb"]
    assert list(df.columns) == ["Enrolment", "State_Cd"]


def test_rename_columns_reports_every_missing_old_name():
    df = pd.DataFrame({"a": [1]})

    with pytest.raises(SchemaError) as exc:
        rename_columns(df, {"x": "missing_one", "y": "a", "z": "missing_two"})

    message = str(exc.value)
    assert "The following old names were not found in the data" in message
    assert "missing_one" in message
    assert "missing_two" in message


def test_drop_and_keep_columns_ignore_absent_names():
    df = pd.DataFrame({"a": [1], "b": [2], "c": [3]})

    assert list(drop_columns(df, ("b", "nope")).columns) == ["a", "c"]
    assert list(keep_columns(df, ("c", "nope", "a")).columns) == ["c", "a"]


def test_drop_prefixed_columns_removes_spill_columns():
    df = pd.DataFrame({"StateAb": ["NSW"], "...5": [None], "...6": [None]})

    assert list(drop_prefixed_columns(df, "...").columns) == ["StateAb"]


def test_amend_colnames_only_renames_when_canonical_name_is_absent():
    df = pd.DataFrame({"State": ["NSW"], "PPId": [1], "PollingPlaceNm": ["Hall"], "PPNm": ["Other"]})

    out = amend_colnames(df)

    assert "StateAb" in out.columns
    assert "PollingPlaceID" in out.columns
    assert out["PollingPlaceNm"].tolist() == ["Hall"]
    assert "PPNm" in out.columns


def test_amend_colnames_can_be_limited_to_selected_names():
    df = pd.DataFrame({"State": ["NSW"], "Division": ["Sydney"], "PPId": [1]})

    out = amend_colnames(df, only=("StateAb", "DivisionNm"))

    assert list(out.columns) == ["StateAb", "DivisionNm", "PPId"]


def test_require_columns_lists_missing_names():
    with pytest.raises(SchemaError, match="StateAb, DivisionNm"):
        require_columns(pd.DataFrame({"a": [1]}), ("StateAb", "DivisionNm"))


def test_amend_colnames_leaves_kept_columns_alone():
    df = pd.DataFrame({"PrePollVotes": [4], "PPId": [1]})

    out = amend_colnames(df, keep=("PrePollVotes",))

    assert list(out.columns) == ["PrePollVotes", "PollingPlaceID"]
