"""ABS statistical area code helpers."""

from __future__ import annotations

import re
from typing import Iterable

import pandas as pd

from ausvotes.common.errors import SchemaError

_YEAR_SUFFIX = re.compile(r"(\d{4})$")
_CODE_COLUMN = re.compile(r"_(CODE|MAINCODE|7DIGITCODE)_\d{4}$")


def _code_text(value: object) -> object:
    if pd.isna(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def as_code_strings(df: pd.DataFrame, columns: Iterable[str] | None = None) -> pd.DataFrame:
    """Store area codes as text so codes read as numbers join with AEC identifiers."""
    if columns is None:
        columns = [name for name in df.columns if _CODE_COLUMN.search(str(name))]
    out = df.copy()
    for name in columns:
        out[name] = out[name].map(_code_text).astype(object)
    return out


def amend_maincode(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Add ``SA1_7DIGITCODE_<year>`` derived from an 11-digit SA1 maincode column.

    The 7-digit code is the state digit followed by the last six digits.
    """
    if column not in df.columns:
        raise SchemaError(f"Column `{column}` does not exist in the data.")
    match = _YEAR_SUFFIX.search(column)
    if match is None:
        raise SchemaError(f"Column `{column}` does not end with a four-digit year.")

    def seven_digit(value: object) -> object:
        text = _code_text(value)
        if text is None:
            return None
        return f"{text[:1]}{text[-6:]}"

    out = df.copy()
    out[f"SA1_7DIGITCODE_{match.group(1)}"] = out[column].map(seven_digit).astype(object)
    return out
