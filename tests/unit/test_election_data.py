from datetime import date

import pandas as pd
import pytest

from ausvotes.common.cache import TableCache
from ausvotes.common.errors import ConfigError, StageError
from ausvotes.harmonise.overseas import OVERSEAS_COLUMNS
from ausvotes.harmonise.ppv import PPV_COLUMNS
from ausvotes.pipeline.election_data import get_election_data, prepare_event_table

EVENTS = [
    {"event": "2022 Federal Election", "date": "2022-05-21", "type": "Federal Election"},
    {"event": "2016 Federal Election", "date": "2016-07-02", "type": "Federal Election"},
    {"event": "2019 Federal Election", "date": "2019-05-18", "type": "Federal Election"},
]

RAW_PPV = {
    "2019 Federal Election": pd.DataFrame(
        {
            "m_state_ab": ["QLD"],
            "m_div_nm": ["Brisbane"],
            "m_pp_nm": ["Brisbane PPVC"],
            "29/04/2019": [300],
            "30/04/2019": [350],
        }
    ),
    "2022 Federal Election": pd.DataFrame(
        {
            "State": ["SA"],
            "Division": ["Adelaide"],
            "PPVC": ["Adelaide PPVC"],
            "Issue Date": ["09/05/22"],
            "Total Votes": [200],
        }
    ),
}


class FakeFetch:
    def __init__(self, tables):
        self.tables = tables
        self.calls = []

    def __call__(self, event):
        self.calls.append(event["event"])
        table = self.tables.get(event["event"])
        return None if table is None else table.copy()


def test_get_election_data_stacks_events_oldest_first(caplog):
    fetch = FakeFetch(RAW_PPV)

    out = get_election_data("ppv", EVENTS, fetch)

    assert fetch.calls == ["2016 Federal Election", "2019 Federal Election", "2022 Federal Election"]
    assert list(out.columns) == list(PPV_COLUMNS)
    assert out["event"].tolist() == ["2019 Federal Election"] * 2 + ["2022 Federal Election"]
    assert out["date"].tolist() == [date(2019, 5, 18)] * 2 + [date(2022, 5, 21)]
    assert out["IssueDate"].tolist() == [date(2019, 4, 29), date(2019, 4, 30), date(2022, 5, 9)]
    assert out["TotalPPVs"].tolist() == [300, 350, 200]
    assert "Skipping `ppv` for `2016 Federal Election` as it is not available." in caplog.text


def test_get_election_data_without_processing_keeps_source_layout():
    out = get_election_data("ppv", EVENTS[:1], FakeFetch(RAW_PPV), process=False)

    assert list(out.columns) == ["date", "event", "State", "Division", "PPVC", "Issue Date", "Total Votes"]


def test_get_election_data_uses_cache():
    cache = TableCache("ppv")
    get_election_data("ppv", EVENTS, FakeFetch(RAW_PPV), cache=cache)
    fetch = FakeFetch(RAW_PPV)

    out = get_election_data("ppv", EVENTS, fetch, cache=cache)

    assert fetch.calls == []
    assert len(out) == 3


def test_get_election_data_with_nothing_available_raises():
    with pytest.raises(StageError, match="No data was available for `ppv`"):
        get_election_data("ppv", EVENTS, FakeFetch({}))


def test_get_election_data_rejects_unknown_family():
    with pytest.raises(ConfigError):
        get_election_data("turnout", EVENTS, FakeFetch(RAW_PPV))


def test_prepare_event_table_trims_pva_downloads_before_harmonising():
    raw = pd.DataFrame(
        {
            "State_Cd": ["nsw"],
            "PVA_Web_2_Date_Div": ["Sydney"],
            "20160614": [200],
            "ALP": [1],
            "...5": [None],
        }
    )

    out = prepare_event_table("pva_date", raw, EVENTS[1])

    assert out["DateReceived"].tolist() == [date(2016, 6, 14)]
    assert out["TotalPVAs"].tolist() == [200]


def test_prepare_event_table_passes_harmoniser_options():
    raw = pd.DataFrame({"CandidateID": [1, 2], "SittingMemberFl": ["#", None]})
    event = {"event": "2004 Federal Election", "date": "2004-10-09", "type": "Federal Election"}

    out = prepare_event_table(
        "candidates", raw, event, harmoniser_options={"elected": pd.DataFrame({"CandidateID": [1]})}
    )

    assert out["Elected"].tolist() == ["Y", "N"]
    assert out["HistoricElected"].tolist() == ["Y", "N"]


def test_get_election_data_keeps_overseas_canonical_columns():
    raw = pd.DataFrame(
        {
            "State": ["NSW"],
            "Division": ["Sydney"],
            "Overseas Post": ["London"],
            "Postal Vote Envelopes Received at Post": [10],
            "Pre-Poll (in-person) Votes": [5],
        }
    )
    event = {"event": "2022 Federal Election", "date": "2022-05-21", "type": "Federal Election"}

    out = get_election_data("overseas", [event], FakeFetch({"2022 Federal Election": raw}))

    assert list(out.columns) == list(OVERSEAS_COLUMNS)
    assert out["PrePollVotes"].tolist() == [5]
    assert out["TotalVotes"].tolist() == [15]


def test_get_election_data_cache_key_includes_options():
    cache = TableCache("candidates")
    raw = {"2004 Federal Election": pd.DataFrame({"CandidateID": [1, 2], "SittingMemberFl": [None, None]})}
    event = {"event": "2004 Federal Election", "date": "2004-10-09", "type": "Federal Election"}

    def run(elected_ids):
        options = {"elected": pd.DataFrame({"CandidateID": elected_ids})}
        return get_election_data("candidates", [event], FakeFetch(raw), cache=cache, harmoniser_options=options)

    first = run([1])
    second = run([2])

    assert first["Elected"].tolist() == ["Y", "N"]
    assert second["Elected"].tolist() == ["N", "Y"]
