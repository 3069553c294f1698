"""Locating and reading raw election and boundary tables."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from ausvotes.common.cache import TableCache, cache_key
from ausvotes.common.constants import (
    BOUNDARY_KINDS,
    BOUNDARY_LEVELS,
    BOUNDARY_REF_DATE_MAX,
    BOUNDARY_REF_DATE_MIN,
)
from ausvotes.common.errors import ConfigError, SchemaError, StageError
from ausvotes.common.fs import read_table
from ausvotes.common.http import HttpClient
from ausvotes.common.logging import get_logger
from ausvotes.transform.codes import as_code_strings
from ausvotes.transform.columns import rename_columns
from ausvotes.transform.combine import combine_tables

logger = get_logger(__name__)


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def read_location(
    location: str,
    *,
    base_dir: Path,
    client: HttpClient | None = None,
    skiprows: int = 0,
) -> pd.DataFrame:
    if is_url(location):
        if client is None:
            raise StageError(f"No HTTP client available to download {location}")
        return client.get_table(location, skiprows=skiprows)
    path = Path(location)
    if not path.is_absolute():
        path = base_dir / path
    if not path.exists():
        raise StageError(f"File not found: {path}")
    return read_table(path, skiprows=skiprows)


class TableFetcher:
    """Fetch layer for per-event election tables.

    ``locations`` maps an event name to a file path or URL. Events without a
    location are reported as unavailable by returning ``None``.
    """

    def __init__(
        self,
        locations: dict[str, str],
        *,
        base_dir: Path = Path("."),
        client: HttpClient | None = None,
        skiprows: int = 0,
    ) -> None:
        self.locations = dict(locations)
        self.base_dir = base_dir
        self.client = client
        self.skiprows = skiprows

    def __call__(self, event: dict) -> pd.DataFrame | None:
        location = self.locations.get(event["event"])
        if location is None:
            return None
        logger.info(f"Reading `{event['event']}` data from {location}", extra={"election": event["event"]})
        return read_location(location, base_dir=self.base_dir, client=self.client, skiprows=self.skiprows)

    def cache_token(self, event: dict) -> str:
        """Where ``event`` is read from, for cache keys."""
        location = self.locations.get(event["event"])
        if location is None:
            return "unavailable"
        if not is_url(location) and not Path(location).is_absolute():
            location = str((self.base_dir / location).resolve())
        return f"{location}@skiprows={self.skiprows}"


class BoundarySource:
    """ABS boundary allocation and correspondence files listed in ``boundaries.yml``."""

    def __init__(
        self,
        config: dict,
        *,
        base_dir: Path = Path("."),
        client: HttpClient | None = None,
        cache: TableCache | None = None,
    ) -> None:
        self.config = config
        self.base_dir = base_dir
        self.client = client
        self.cache = cache

    def _read(self, location: str) -> pd.DataFrame:
        logger.info(f"Downloading boundary file from: {location}")
        return read_location(location, base_dir=self.base_dir, client=self.client)

    def load(self, ref_date: int, level: str, kind: str = "allocation") -> pd.DataFrame:
        if not isinstance(ref_date, int) or not BOUNDARY_REF_DATE_MIN <= ref_date <= BOUNDARY_REF_DATE_MAX:
            raise ConfigError(
                f"ref_date must be a number between {BOUNDARY_REF_DATE_MIN} and {BOUNDARY_REF_DATE_MAX}"
            )
        if level not in BOUNDARY_LEVELS:
            raise ConfigError(f"level must be one of: {', '.join(BOUNDARY_LEVELS)}")
        if kind not in BOUNDARY_KINDS:
            raise ConfigError(f"type must be one of: {', '.join(BOUNDARY_KINDS)}")

        key = cache_key("boundary", ref_date, level, kind)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        entries = [
            item
            for item in self.config["sources"]
            if int(item["ref_date"]) == ref_date and item["level"] == level and item["type"] == kind
        ]
        if not entries:
            raise ConfigError(
                f"No boundary data found for {ref_date} {level} {kind}. "
                f"Check that `ref_date` is between {BOUNDARY_REF_DATE_MIN} and {BOUNDARY_REF_DATE_MAX}, inclusively."
            )

        frames = [self._read(item["source"]) for item in entries]
        first_cols = list(frames[0].columns)
        if any(list(frame.columns) != first_cols for frame in frames[1:]):
            raise SchemaError("Boundary files have different columns and cannot be combined.")
        if len(frames) > 1:
            logger.info("Combining files into one single file.")
        table = as_code_strings(combine_tables(frames))
        logger.info(f"Successfully downloaded {ref_date} {level} boundary file(s).")

        if self.cache is not None:
            self.cache.set(key, table)
        return table

    def load_redistribution(self, name: str) -> pd.DataFrame:
        """AEC redistribution table ``name`` as ``[key, ced_column]`` rows."""
        redist = self.config["redistributions"].get(name)
        if redist is None:
            raise ConfigError(f"Unknown redistribution: {name}")
        frames = []
        for item in redist["files"]:
            renamed = rename_columns(
                self._read(item["source"]),
                {redist["key"]: item["sa1_column"], redist["ced_column"]: item["ced_column"]},
            )
            frames.append(renamed.loc[:, [redist["key"], redist["ced_column"]]])
        return as_code_strings(combine_tables(frames), [redist["key"]])
