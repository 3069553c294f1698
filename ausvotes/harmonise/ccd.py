"""Votes by polling place and statistical area (collection district or SA1)."""

from __future__ import annotations

import pandas as pd

from ausvotes.harmonise.registry import Family, Variant, harmonise

CCD_COLUMNS = (
    "date",
    "event",
    "StateAb",
    "DivisionNm",
    "PollingPlaceID",
    "PollingPlaceNm",
    "StatisticalAreaID",
    "Count",
)

_BASE_NAMES = {
    "StateAb": "state_ab",
    "DivisionNm": "div_nm",
    "PollingPlaceID": "pp_id",
    "PollingPlaceNm": "pp_nm",
}


def _variant(area_column: str, count_column: str) -> Variant:
    return Variant(
        renames={**_BASE_NAMES, "StatisticalAreaID": area_column, "Count": count_column},
        drop=("year",),
    )


CCD = Family(
    name="ccd",
    columns=CCD_COLUMNS,
    variants={
        "2013 Federal Election": _variant("ccd_id", "count"),
        "2016 Federal Election": _variant("SA1_id", "votes"),
        "2019 Federal Election": _variant("SA1_id", "votes"),
        "2022 Federal Election": _variant("ccd_id", "votes"),
        "2023 Referendum": _variant("ccd_id", "votes"),
    },
)


def harmonise_ccd(data: pd.DataFrame, event: str) -> pd.DataFrame:
    return harmonise(CCD, data, event)
