from datetime import date

import numpy as np
import pandas as pd
import pytest

from ausvotes.common.errors import SchemaError
from ausvotes.harmonise.pva import (
    PVA_DATE_COLUMNS,
    harmonise_pva_date,
    harmonise_pva_party,
    preprocess_pva,
)


def test_pva_date_unrecognised_event_is_returned_unchanged(caplog):
    data = pd.DataFrame({"date": ["2022-05-21"], "event": ["2022 Federal Election"], "Votes": [90]})

    out = harmonise_pva_date(data, "2022 Federal Election")

    assert out is data
    assert "No processing required for `2022 Federal Election`. Data returned unprocessed." in caplog.text


def test_pva_date_2010():
    data = pd.DataFrame(
        {
            "date": ["2010-08-21"],
            "event": ["2010 Federal Election"],
            "StateAb": ["Vic"],
            "Enrolment": ["Melbourne"],
            "02 Aug 10": [50],
            "03 Aug 10": [60],
        }
    )

    out = harmonise_pva_date(data, "2010 Federal Election")

    assert list(out.columns) == list(PVA_DATE_COLUMNS)
    assert out["StateAb"].tolist() == ["VIC", "VIC"]
    assert out["DivisionNm"].tolist() == ["Melbourne", "Melbourne"]
    assert out["DateReceived"].tolist() == [date(2010, 8, 2), date(2010, 8, 3)]
    assert out["TotalPVAs"].tolist() == [50, 60]


def test_pva_date_2010_drops_footnote_rows_and_running_total():
    data = pd.DataFrame(
        {
            "date": ["2010-08-21", "2010-08-21"],
            "event": ["2010 Federal Election", "2010 Federal Election"],
            "StateAb": ["NSW", "Notes"],
            "Enrolment": ["Sydney", np.nan],
            "02 Aug 10": [5, np.nan],
            "TOTAL to date (Inc GPV)": [5, np.nan],
        }
    )

    out = harmonise_pva_date(data, "2010 Federal Election")

    assert len(out) == 1
    assert out["DateReceived"].tolist() == [date(2010, 8, 2)]


def test_pva_date_2013_fills_missing_state(caplog):
    data = pd.DataFrame(
        {
            "date": ["2013-09-07"],
            "event": ["2013 Federal Election"],
            "StateAb": [np.nan],
            "Enrolment Division": ["Sydney"],
            "20-Aug-13": [100],
            "21-Aug-13": [150],
        }
    )

    out = harmonise_pva_date(data, "2013 Federal Election")

    assert "Processing `2013 Federal Election` data to ensure all columns align across all elections." in caplog.text
    assert out["StateAb"].tolist() == ["ZZZ", "ZZZ"]
    assert out["DateReceived"].tolist() == [date(2013, 8, 20), date(2013, 8, 21)]
    assert out["TotalPVAs"].tolist() == [100, 150]


@pytest.mark.parametrize(
    ("event", "division_column", "labels", "expected"),
    [
        ("2016 Federal Election", "PVA_Web_2_Date_Div", ("20160614", "20160615"), (date(2016, 6, 14), date(2016, 6, 15))),
        ("2019 Federal Election", "PVA_Web_2_Date_V2_Div", ("20190411", "20190412"), (date(2019, 4, 11), date(2019, 4, 12))),
    ],
)
def test_pva_date_state_code_layouts(event, division_column, labels, expected):
    data = pd.DataFrame(
        {
            "date": ["x"],
            "event": [event],
            "State_Cd": ["nsw"],
            division_column: ["Sydney"],
            labels[0]: [200],
            labels[1]: [250],
        }
    )

    out = harmonise_pva_date(data, event)

    assert list(out.columns) == list(PVA_DATE_COLUMNS)
    assert out["StateAb"].tolist() == ["NSW", "NSW"]
    assert out["DateReceived"].tolist() == list(expected)
    assert out["TotalPVAs"].tolist() == [200, 250]


def test_pva_date_recognised_event_with_wrong_layout_raises():
    data = pd.DataFrame({"date": ["x"], "event": ["2016 Federal Election"], "StateAb": ["NSW"]})

    with pytest.raises(SchemaError):
        harmonise_pva_date(data, "2016 Federal Election")


def test_pva_party_2010_reuses_published_totals():
    data = pd.DataFrame(
        {
            "date": ["2010-08-21"],
            "event": ["2010 Federal Election"],
            "StateAb": ["Victoria"],
            "Enrolment": ["Melbourne"],
            "Country Liberal": [0],
            "Greens": [2],
            "Labor": [120],
            "Liberal": [180],
            "National": [1],
            "Other Party": [2],
            "AEC": [60],
            "Sum of AEC and Parties": [360],
        }
    )

    out = harmonise_pva_party(data, "2010 Federal Election")

    assert list(out.columns) == [
        "date", "event", "StateAb", "DivisionNm", "AEC (Total)", "Total (AEC + Parties)",
        "ALP", "CLP", "GRN", "LIB", "NAT", "OTH",
    ]
    assert out["StateAb"].tolist() == ["VICTORIA"]
    assert out["AEC (Total)"].tolist() == [60]
    assert out["Total (AEC + Parties)"].tolist() == [360]


def test_pva_party_2013_sums_online_and_paper():
    data = pd.DataFrame(
        {
            "date": ["2013-09-07"],
            "event": ["2013 Federal Election"],
            "StateAb": [np.nan],
            "Enrolment Division": ["Sydney"],
            "Country Liberal": [0],
            "Greens": [2],
            "National": [1],
            "Other Party": [2],
            "Liberal-National": [150],
            "AEC (Online)": [25],
            "AEC (Paper)": [15],
            "Labor": [100],
            "Liberal": [120],
        }
    )

    out = harmonise_pva_party(data, "2013 Federal Election")

    assert list(out.columns) == [
        "date", "event", "StateAb", "DivisionNm", "AEC (Online)", "AEC (Paper)", "AEC (Total)",
        "Total (AEC + Parties)", "ALP", "CLP", "GRN", "LIB", "LNP", "NAT", "OTH",
    ]
    assert out["StateAb"].tolist() == ["ZZZ"]
    assert out["AEC (Total)"].tolist() == [40]
    assert out["Total (AEC + Parties)"].tolist() == [415]
    assert out["LNP"].tolist() == [150]


def test_pva_party_2016_includes_gpv_in_total():
    data = pd.DataFrame(
        {
            "date": ["2016-07-02"],
            "event": ["2016 Federal Election"],
            "State_Cd": ["NSW"],
            "PVA_Web_1_Party_Div": ["Sydney"],
            "AEC - OPVA": [30],
            "AEC - Paper": [20],
            "ALP": [110],
            "CLP": [12],
            "LIB": [130],
            "GRN": [40],
            "GPV": [12],
            "LNP": [6],
            "NAT": [12],
            "OTH": [9],
        }
    )

    out = harmonise_pva_party(data, "2016 Federal Election")

    assert list(out.columns) == [
        "date", "event", "StateAb", "DivisionNm", "GPV", "AEC (Online)", "AEC (Paper)", "AEC (Total)",
        "Total (AEC + Parties)", "ALP", "CLP", "GRN", "LIB", "LNP", "NAT", "OTH",
    ]
    assert out["AEC (Total)"].tolist() == [50]
    assert out["Total (AEC + Parties)"].tolist() == [381]


def test_preprocess_pva_trims_columns_per_family():
    raw = pd.DataFrame(columns=["date", "event", "State_Cd", "PVA_Web_1_Party_Div", "ALP", "Notes", "...7"])

    assert list(preprocess_pva(raw, "pva_party").columns) == ["date", "event", "State_Cd", "PVA_Web_1_Party_Div", "ALP"]
    assert list(preprocess_pva(raw, "pva_date").columns) == ["date", "event", "State_Cd", "Notes"]
