"""Votes issued at overseas posts."""

from __future__ import annotations

import pandas as pd

from ausvotes.harmonise.registry import Family, Variant, harmonise
from ausvotes.transform.columns import keep_columns

OVERSEAS_COLUMNS = (
    "date",
    "event",
    "StateAb",
    "DivisionNm",
    "OverseasPost",
    "PrePollVotes",
    "PostalVotes",
    "TotalVotes",
)


def _total_votes(data: pd.DataFrame, event: str, variant: Variant) -> pd.DataFrame:
    if "TotalVotes" in variant.renames:
        return data
    out = data.copy()
    parts = keep_columns(out, ("PostalVotes", "PrePollVotes")).apply(pd.to_numeric, errors="coerce")
    out["TotalVotes"] = parts.sum(axis=1, min_count=0)
    return out


OVERSEAS = Family(
    name="overseas",
    columns=OVERSEAS_COLUMNS,
    finalise=_total_votes,
    variants={
        "2013 Federal Election": Variant(
            renames={"OverseasPost": "pp_nm", "PostalVotes": "Postal Votes", "PrePollVotes": "Pre-poll Votes"},
            drop=("pp_sort_nm", "Total"),
            drop_missing="StateAb",
            state_names=True,
        ),
        "2019 Federal Election": Variant(
            renames={
                "OverseasPost": "Diplomatic Post\r\n(Nb. Colombo did not operate due to security issues)",
                "PostalVotes": "Postal Votes Received",
                "PrePollVotes": "Pre-Poll Votes Issued",
            },
            state_names=True,
        ),
        "2022 Federal Election": Variant(
            renames={
                "OverseasPost": "Overseas Post",
                "PostalVotes": "Postal Vote Envelopes Received at Post",
                "PrePollVotes": "Pre-Poll (in-person) Votes",
            },
        ),
        "2023 Referendum": Variant(
            renames={
                "OverseasPost": "Overseas Post",
                "PostalVotes": "Postal Vote Envelopes Received at Post",
                "PrePollVotes": "Pre-Poll (in-person) Votes Issued at Post",
            },
        ),
        "2025 Federal Election": Variant(
            renames={
                "OverseasPost": "Overseas Voting Centre",
                "PostalVotes": "Postal Vote Envelopes Received at Post",
                "PrePollVotes": "Pre-Poll (in-person) Votes Issued at Post",
                "TotalVotes": "Grand Total",
            },
        ),
    },
)


def harmonise_overseas(data: pd.DataFrame, event: str) -> pd.DataFrame:
    return harmonise(OVERSEAS, data, event)
