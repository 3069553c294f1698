"""Column renaming and dropping."""

from __future__ import annotations

from typing import Iterable, Mapping

import pandas as pd

from ausvotes.common.errors import SchemaError

# Source spellings that vary between AEC downloads, keyed by canonical name.
CANONICAL_COLUMN_NAMES = {
    "StateAb": ("State",),
    "DivisionNm": ("Division",),
    "DivisionID": ("DivisionId",),
    "TransactionID": ("TransactionId",),
    "PollingPlaceID": ("PPId",),
    "PollingPlaceNm": ("PPNm", "PollingPlace"),
    "PartyNm": ("Party", "PartyName"),
    "CandidateID": ("CandidateId",),
    "CandidateID1": ("CandidateId1",),
    "CandidateID2": ("CandidateId2",),
    "ToCandidateID": ("ToCandidateId",),
    "FromCandidateID": ("FromCandidateId",),
    "Group": ("Ticket",),
    "PartyGroupAb": ("GroupAb",),
    "PartyGroupNm": ("GroupNm",),
    "Elected": ("SittingMemberFl",),
    "CountNumber": ("CountNum",),
    "DeclarationPrePollVotes": ("PrePollVotes",),
    "DeclarationPrePollPercentage": ("PrePollPercentage",),
    "TransferPercentage": ("TransferPercent",),
}


def rename_columns(df: pd.DataFrame, mapping: Mapping[str, str]) -> pd.DataFrame:
    """Rename columns using ``{new_name: old_name}`` pairs.

    Every old name must be present; all missing names are reported together.
    """
    missing = [old for old in mapping.values() if old not in df.columns]
    if missing:
        raise SchemaError(f"The following old names were not found in the data: {', '.join(missing)}")
    return df.rename(columns={old: new for new, old in mapping.items()})


def drop_columns(df: pd.DataFrame, names: Iterable[str]) -> pd.DataFrame:
    present = [name for name in names if name in df.columns]
    if not present:
        return df.copy()
    return df.drop(columns=present)


def drop_prefixed_columns(df: pd.DataFrame, prefix: str) -> pd.DataFrame:
    return df.loc[:, [not str(name).startswith(prefix) for name in df.columns]].copy()


def keep_columns(df: pd.DataFrame, names: Iterable[str]) -> pd.DataFrame:
    """Columns of ``df`` found in ``names``, in ``names`` order."""
    return df.loc[:, [name for name in names if name in df.columns]].copy()


def amend_colnames(
    df: pd.DataFrame,
    only: Iterable[str] | None = None,
    keep: Iterable[str] = (),
) -> pd.DataFrame:
    """Apply canonical names for any known source spellings present in ``df``.

    Columns named in ``keep`` are never renamed.
    """
    allowed = set(only) if only is not None else None
    kept = set(keep)
    out = df
    for new, candidates in CANONICAL_COLUMN_NAMES.items():
        if allowed is not None and new not in allowed:
            continue
        for old in candidates:
            if old in out.columns and old not in kept and new not in out.columns:
                out = rename_columns(out, {new: old})
    return out if out is not df else df.copy()


def require_columns(df: pd.DataFrame, names: Iterable[str]) -> None:
    missing = [name for name in names if name not in df.columns]
    if missing:
        raise SchemaError(f"The following columns were not found in the data: {', '.join(missing)}")
