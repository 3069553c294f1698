"""Pre-poll voting centre (PPVC) issue counts."""

from __future__ import annotations

import pandas as pd

from ausvotes.harmonise.registry import Family, Variant, harmonise, with_variants

PPV_COLUMNS = ("date", "event", "StateAb", "DivisionNm", "PollingPlaceNm", "IssueDate", "TotalPPVs")

_PREFIXED_NAMES = {"StateAb": "m_state_ab", "DivisionNm": "m_div_nm", "PollingPlaceNm": "m_pp_nm"}
_LONG_NAMES = {"PollingPlaceNm": "PPVC", "IssueDate": "Issue Date", "TotalPPVs": "Total Votes"}

_BY_ELECTIONS_DMY = (
    "2014 Griffith By-Election",
    "2015 Canning By-Election",
    "2015 North Sydney By-Election",
    "2017 New England By-Election",
    "2017 Bennelong By-Election",
    "2018 Batman By-Election",
    "2018 Braddon By-Election",
    "2018 Wentworth By-Election",
)
_BY_ELECTIONS_ISO = ("2020 Eden-Monaro By-Election", "2020 Groom By-Election")
_LONG_EVENTS_DMY = (
    "2023 Referendum",
    "2023 Aston By-Election",
    "2023 Fadden By-Election",
    "2024 Dunkley By-Election",
    "2024 Cook By-Election",
)

PPV = Family(
    name="ppv",
    columns=PPV_COLUMNS,
    names_to="IssueDate",
    values_to="TotalPPVs",
    variants={
        "2010 Federal Election": Variant(
            drop_missing="DivisionNm",
            pivot=True,
            id_cols=("date", "event", "StateAb", "DivisionNm"),
            date_format="%d %b %y",
        ),
        "2013 Federal Election": Variant(
            renames={"PollingPlaceNm": "m_pp_nm"},
            pivot=True,
            date_format="%d/%m/%Y",
        ),
        "2016 Federal Election": Variant(
            renames=_PREFIXED_NAMES, drop=("by_elec_nm",), pivot=True, date_format="%Y-%m-%d"
        ),
        "2019 Federal Election": Variant(
            renames=_PREFIXED_NAMES, drop=("by_elec_nm",), pivot=True, date_format="%d/%m/%Y"
        ),
        **with_variants(
            _BY_ELECTIONS_DMY,
            Variant(renames=_PREFIXED_NAMES, drop=("by_elec_nm",), pivot=True, date_format="%d/%m/%Y"),
        ),
        **with_variants(
            _BY_ELECTIONS_ISO,
            Variant(renames=_PREFIXED_NAMES, drop=("by_elec_nm",), pivot=True, date_format="%Y-%m-%d"),
        ),
        "2022 Federal Election": Variant(renames=_LONG_NAMES, date_format="%d/%m/%y"),
        **with_variants(_LONG_EVENTS_DMY, Variant(renames=_LONG_NAMES, date_format="%d/%m/%Y")),
    },
)


def harmonise_ppv(data: pd.DataFrame, event: str) -> pd.DataFrame:
    return harmonise(PPV, data, event)
