"""State and territory name normalisation."""

from __future__ import annotations

import pandas as pd

from ausvotes.common.constants import MISSING_STATE, STATE_ABBREVIATIONS
from ausvotes.common.errors import ConfigError
from ausvotes.transform.columns import require_columns

CONVERSIONS = ("state_to_abbr", "abbr_to_state")


def _lookup(conversion: str) -> dict[str, str]:
    if conversion == "state_to_abbr":
        return {name.upper(): abbr for name, abbr in STATE_ABBREVIATIONS.items()}
    if conversion == "abbr_to_state":
        return {abbr.upper(): name for name, abbr in STATE_ABBREVIATIONS.items()}
    raise ConfigError(f"Invalid conversion type: {conversion}. Expected one of: {', '.join(CONVERSIONS)}")


def amend_names(df: pd.DataFrame, column: str, conversion: str = "state_to_abbr") -> pd.DataFrame:
    """Convert state names to abbreviations or back; unknown values are kept as-is."""
    lookup = _lookup(conversion)
    require_columns(df, (column,))
    out = df.copy()
    out[column] = out[column].map(
        lambda value: lookup.get(value.strip().upper(), value) if isinstance(value, str) else value
    )
    return out


def fill_missing_state(df: pd.DataFrame, column: str = "StateAb", sentinel: str = MISSING_STATE) -> pd.DataFrame:
    require_columns(df, (column,))
    out = df.copy()
    out[column] = out[column].astype(object).where(out[column].notna(), sentinel)
    return out


def upper_state(df: pd.DataFrame, column: str = "StateAb") -> pd.DataFrame:
    require_columns(df, (column,))
    out = df.copy()
    out[column] = out[column].map(lambda value: value.upper() if isinstance(value, str) else value)
    return out
