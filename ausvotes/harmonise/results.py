"""House results tables whose early years used different column names."""

from __future__ import annotations

import pandas as pd

from ausvotes.harmonise.registry import Family, Variant, harmonise, with_variants

_EARLY_ELECTIONS = ("2004 Federal Election", "2007 Federal Election", "2010 Federal Election")

# Declaration pre-poll votes by division.
PREPOLL = Family(
    name="prepoll",
    variants=with_variants(
        (*_EARLY_ELECTIONS, "2013 Federal Election"),
        Variant(
            renames={
                "DeclarationPrePollVotes": "PrePollVotes",
                "DeclarationPrePollPercentage": "PrePollPercentage",
            }
        ),
    ),
)

# Party representation in the House.
REPS = Family(
    name="reps",
    variants=with_variants(
        _EARLY_ELECTIONS,
        Variant(renames={"National": "Total", "LastElection": "LastElectionTotal"}, drop=("PartyAb",)),
    ),
)


def harmonise_prepoll(data: pd.DataFrame, event: str) -> pd.DataFrame:
    return harmonise(PREPOLL, data, event)


def harmonise_reps(data: pd.DataFrame, event: str) -> pd.DataFrame:
    return harmonise(REPS, data, event)
