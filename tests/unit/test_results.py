import pandas as pd
import pytest

from ausvotes.common.errors import SchemaError
from ausvotes.pipeline.results import attach_statistical_areas


def test_attach_statistical_areas_joins_on_polling_place():
    sa1_votes = pd.DataFrame(
        {
            "date": ["2019-05-18", "2019-05-18"],
            "event": ["2019 Federal Election"] * 2,
            "StateAb": ["NSW", "NSW"],
            "DivisionNm": ["Sydney", "Sydney"],
            "PollingPlaceID": [11, 11],
            "PollingPlaceNm": ["Town Hall", "Town Hall"],
            "StatisticalAreaID": ["1100101", "1100102"],
            "Count": [30, 12],
        }
    )
    dataset = pd.DataFrame(
        {
            "date": ["2019-05-18"],
            "event": ["2019 Federal Election"],
            "StateAb": ["NSW"],
            "DivisionNm": ["Sydney"],
            "PollingPlaceID": [11],
            "PollingPlaceNm": ["TOWN HALL"],
            "OrdinaryVotes": [42],
        }
    )

    out = attach_statistical_areas(sa1_votes, dataset, "2019 Federal Election")

    assert "SA1_7DIGITCODE_2016" in out.columns
    assert "StatisticalAreaID" not in out.columns
    assert out["PollingPlaceNm"].tolist() == ["Town Hall", "Town Hall"]
    assert out["OrdinaryVotes"].tolist() == [42, 42]


def test_attach_statistical_areas_keeps_name_for_unknown_event():
    sa1_votes = pd.DataFrame(
        {"date": ["d"], "event": ["e"], "PollingPlaceID": [1], "StatisticalAreaID": ["x"]}
    )
    dataset = pd.DataFrame({"date": ["d"], "event": ["e"], "PollingPlaceID": [1], "Votes": [2]})

    out = attach_statistical_areas(sa1_votes, dataset, "2025 Federal Election")

    assert list(out.columns) == ["date", "event", "PollingPlaceID", "StatisticalAreaID", "Votes"]


def test_attach_statistical_areas_requires_join_columns():
    with pytest.raises(SchemaError):
        attach_statistical_areas(pd.DataFrame({"date": []}), pd.DataFrame({"date": []}), "2019 Federal Election")
