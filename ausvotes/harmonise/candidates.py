"""Candidate, group and elected-member flags."""

from __future__ import annotations

import numpy as np
import pandas as pd

from ausvotes.common.errors import ConfigError
from ausvotes.harmonise.registry import Family, Variant, harmonise, log_passthrough, log_processing, with_variants
from ausvotes.transform.columns import rename_columns, require_columns

FLAG_EVENT = "2004 Federal Election"
SENATE_KEY_COLUMNS = ("PartyAb", "StateAb", "GivenNm", "Surname")
CHAMBERS = ("House", "Senate")


def _flag_elected(data: pd.DataFrame, event: str, variant: Variant) -> pd.DataFrame:
    require_columns(data, ("Elected",))
    out = data.copy()
    out["Elected"] = np.where(out["Elected"].notna(), "Y", "N")
    return out


# 2004 marks elected candidates with any non-missing value.
ELECTED = Family(
    name="elected",
    finalise=_flag_elected,
    variants={FLAG_EVENT: Variant()},
)

GROUP = Family(
    name="group",
    variants=with_variants(
        (
            "2004 Federal Election",
            "2007 Federal Election",
            "2010 Federal Election",
            "2013 Federal Election",
            "2016 Federal Election",
            "2019 Federal Election",
        ),
        Variant(renames={"Group": "Ticket"}),
    ),
)


def harmonise_elected(data: pd.DataFrame, event: str) -> pd.DataFrame:
    return harmonise(ELECTED, data, event)


def harmonise_group(data: pd.DataFrame, event: str) -> pd.DataFrame:
    out = harmonise(GROUP, data, event)
    if "SittingMemberFl" in out.columns and "Elected" not in out.columns:
        out = harmonise_elected(rename_columns(out, {"Elected": "SittingMemberFl"}), event)
    return out


def _senate_keys(table: pd.DataFrame) -> pd.Series:
    return table.loc[:, list(SENATE_KEY_COLUMNS)].astype(str).agg("_".join, axis=1)


def harmonise_candidates(
    data: pd.DataFrame,
    event: str,
    *,
    elected: pd.DataFrame | None = None,
    chamber: str = "House",
) -> pd.DataFrame:
    """Align 2004 candidate lists with later years.

    The 2004 sitting-member flag becomes ``HistoricElected`` and ``Elected`` is
    set from ``elected``, the list of members (House, matched on
    ``CandidateID``) or senators (Senate, matched on party, state and name)
    elected at that election.
    """
    if event != FLAG_EVENT:
        log_passthrough("candidates", event)
        return data
    if chamber not in CHAMBERS:
        raise ConfigError(f"`chamber` must be one of: {', '.join(CHAMBERS)}")
    if elected is None:
        raise ConfigError(f"A table of elected candidates is required to process `{event}` candidates.")

    log_processing("candidates", event, len(data))
    out = data.copy()
    if "SittingMemberFl" in out.columns:
        out["HistoricElected"] = np.where(out["SittingMemberFl"].notna(), "Y", "N")
        out = out.drop(columns=["SittingMemberFl"])

    if chamber == "Senate":
        require_columns(out, SENATE_KEY_COLUMNS)
        require_columns(elected, SENATE_KEY_COLUMNS)
        matched = _senate_keys(out).isin(set(_senate_keys(elected)))
    else:
        require_columns(out, ("CandidateID",))
        require_columns(elected, ("CandidateID",))
        matched = out["CandidateID"].isin(set(elected["CandidateID"]))
    out["Elected"] = np.where(matched, "Y", "N")
    return out
