"""Filesystem helpers."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pandas as pd

from ausvotes.common.errors import ConfigError

EXCEL_SUFFIXES = (".xlsx", ".xlsm", ".xls")


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True, default=str)
        f.write("\n")


def _table_suffix(name: str) -> str:
    suffixes = Path(name.split("?", 1)[0]).suffixes
    return suffixes[-1].lower() if suffixes else ""


def read_table(path: Path, *, skiprows: int = 0) -> pd.DataFrame:
    suffix = _table_suffix(path.name)
    if suffix in EXCEL_SUFFIXES:
        return pd.read_excel(path, skiprows=skiprows, engine="openpyxl")
    if suffix in (".csv", ".zip", ".gz"):
        return pd.read_csv(path, skiprows=skiprows, low_memory=False)
    raise ConfigError(f"Unsupported table format: {path}")


def read_table_bytes(payload: bytes, name: str, *, skiprows: int = 0) -> pd.DataFrame:
    suffix = _table_suffix(name)
    buffer = io.BytesIO(payload)
    if suffix in EXCEL_SUFFIXES:
        return pd.read_excel(buffer, skiprows=skiprows, engine="openpyxl")
    if suffix == ".zip":
        return pd.read_csv(buffer, skiprows=skiprows, compression="zip", low_memory=False)
    if suffix == ".csv":
        return pd.read_csv(buffer, skiprows=skiprows, low_memory=False)
    raise ConfigError(f"Unsupported table format: {name}")


def write_table(path: Path, table: pd.DataFrame) -> None:
    ensure_dir(path.parent)
    suffix = _table_suffix(path.name)
    if suffix in EXCEL_SUFFIXES:
        table.to_excel(path, index=False, engine="openpyxl")
    else:
        table.to_csv(path, index=False, encoding="utf-8")
