"""Postal vote application (PVA) tables, by date received and by party."""

from __future__ import annotations

import pandas as pd

from ausvotes.harmonise.registry import Family, Variant, harmonise
from ausvotes.transform.columns import drop_columns, drop_prefixed_columns, keep_columns

PVA_DATE_COLUMNS = ("date", "event", "StateAb", "DivisionNm", "DateReceived", "TotalPVAs")
PVA_PARTY_COLUMNS = (
    "date",
    "event",
    "StateAb",
    "DivisionNm",
    "GPV",
    "AEC (Online)",
    "AEC (Paper)",
    "AEC (Total)",
    "Total (AEC + Parties)",
    "ALP",
    "CLP",
    "DEM",
    "GRN",
    "LIB",
    "LNP",
    "NAT",
    "OTH",
)
PARTY_TOTAL_SOURCES = ("AEC (Total)", "GPV", "ALP", "CLP", "DEM", "GRN", "LIB", "LNP", "NAT", "OTH")

PVA_DATE = Family(
    name="pva_date",
    columns=PVA_DATE_COLUMNS,
    names_to="DateReceived",
    values_to="TotalPVAs",
    variants={
        "2010 Federal Election": Variant(
            renames={"DivisionNm": "Enrolment"},
            drop=("TOTAL to date (Inc GPV)",),
            drop_missing="DivisionNm",
            upper_state=True,
            pivot=True,
            date_format="%d %b %y",
        ),
        "2013 Federal Election": Variant(
            renames={"DivisionNm": "Enrolment Division"},
            drop=("TOTAL to date",),
            drop_missing="DivisionNm",
            fill_state=True,
            upper_state=True,
            pivot=True,
            date_format="%d-%b-%y",
        ),
        "2016 Federal Election": Variant(
            renames={"StateAb": "State_Cd", "DivisionNm": "PVA_Web_2_Date_Div"},
            upper_state=True,
            pivot=True,
            date_format="%Y%m%d",
        ),
        "2019 Federal Election": Variant(
            renames={"StateAb": "State_Cd", "DivisionNm": "PVA_Web_2_Date_V2_Div"},
            drop=("<>", "Date out of range"),
            upper_state=True,
            pivot=True,
            date_format="%Y%m%d",
        ),
    },
)

_OLD_PARTY_NAMES = {
    "ALP": "Labor",
    "CLP": "Country Liberal",
    "GRN": "Greens",
    "LIB": "Liberal",
    "NAT": "National",
    "OTH": "Other Party",
}
_ONLINE_PAPER_NAMES = {
    "StateAb": "State_Cd",
    "DivisionNm": "PVA_Web_1_Party_Div",
    "AEC (Online)": "AEC - OPVA",
    "AEC (Paper)": "AEC - Paper",
}


def _reconcile_party_totals(data: pd.DataFrame, event: str, variant: Variant) -> pd.DataFrame:
    # 2010 publishes combined AEC and overall totals directly.
    if "AEC (Online)" not in data.columns and "AEC (Paper)" not in data.columns:
        return data
    out = data.copy()
    parts = keep_columns(out, ("AEC (Online)", "AEC (Paper)")).apply(pd.to_numeric, errors="coerce")
    out["AEC (Total)"] = parts.sum(axis=1, min_count=0)
    totals = keep_columns(out, PARTY_TOTAL_SOURCES).apply(pd.to_numeric, errors="coerce")
    out["Total (AEC + Parties)"] = totals.sum(axis=1, min_count=0)
    return out


PVA_PARTY = Family(
    name="pva_party",
    columns=PVA_PARTY_COLUMNS,
    finalise=_reconcile_party_totals,
    variants={
        "2010 Federal Election": Variant(
            renames={
                **_OLD_PARTY_NAMES,
                "DivisionNm": "Enrolment",
                "AEC (Total)": "AEC",
                "Total (AEC + Parties)": "Sum of AEC and Parties",
            },
            drop_missing="DivisionNm",
            upper_state=True,
        ),
        "2013 Federal Election": Variant(
            renames={**_OLD_PARTY_NAMES, "DivisionNm": "Enrolment Division", "LNP": "Liberal-National"},
            drop_missing="DivisionNm",
            fill_state=True,
            upper_state=True,
        ),
        "2016 Federal Election": Variant(renames=_ONLINE_PAPER_NAMES, upper_state=True),
        "2019 Federal Election": Variant(renames=_ONLINE_PAPER_NAMES, upper_state=True),
    },
)

# Columns a by-party download may carry; anything else is a layout artefact.
PARTY_SOURCE_COLUMNS = (
    "date", "event", "State_Cd", "State", "StateAb", "PVA_Web_1_Party_Div", "Enrolment Division",
    "Division", "DivisionNm", "Enrolment", "AEC - OPVA", "AEC - Paper", "AEC (Online)", "AEC (Paper)",
    "AEC", "ALP", "CLP", "DEM", "GPV", "GRN", "LIB", "LNP", "NAT", "OTH", "Country Liberal", "Greens",
    "Labor", "Liberal", "Liberal-National", "National", "Other Party", "Sum of AEC and Parties",
)
# Party columns that occasionally leak into the by-date download.
DATE_EXCLUDED_COLUMNS = (
    "PVA_Web_1_Party_Div", "AEC - OPVA", "AEC - Paper", "AEC (Online)", "AEC (Paper)", "AEC", "ALP",
    "CLP", "DEM", "GPV", "GRN", "LIB", "LNP", "NAT", "OTH", "Sum of AEC and Parties", "Country Liberal",
    "Greens", "Labor", "Liberal", "Liberal-National", "National", "Other Party",
)


def preprocess_pva(data: pd.DataFrame, family: str) -> pd.DataFrame:
    """Trim a raw PVA download to the columns its family understands."""
    if family == "pva_party":
        return keep_columns(data, [name for name in data.columns if name in PARTY_SOURCE_COLUMNS])
    if family == "pva_date":
        return drop_prefixed_columns(drop_columns(data, DATE_EXCLUDED_COLUMNS), "...")
    return data


def harmonise_pva_date(data: pd.DataFrame, event: str) -> pd.DataFrame:
    return harmonise(PVA_DATE, data, event)


def harmonise_pva_party(data: pd.DataFrame, event: str) -> pd.DataFrame:
    return harmonise(PVA_PARTY, data, event)
