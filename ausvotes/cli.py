"""CLI entrypoint for the Australian election data pipeline."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ausvotes.common.cache import CacheRegistry
from ausvotes.common.config_loader import ConfigBundle, load_all_configs, select_events
from ausvotes.common.constants import (
    EVENT_TYPES,
    EXIT_HARD_FAIL,
    EXIT_PARTIAL,
    EXIT_SUCCESS,
    FAMILIES,
    FATAL_ERROR_CODES,
)
from ausvotes.common.errors import ConfigError, PipelineError
from ausvotes.common.fs import write_table
from ausvotes.common.http import HttpClient
from ausvotes.common.logging import build_logger, log_event
from ausvotes.common.time_utils import generate_run_id
from ausvotes.pipeline.boundaries import prepare_boundaries
from ausvotes.pipeline.election_data import get_election_data
from ausvotes.pipeline.reports import table_report, write_run_summary
from ausvotes.pipeline.sources import BoundarySource, TableFetcher, read_location

BOUNDARY_CACHE = "boundary"
CACHE_KINDS = ("election", BOUNDARY_CACHE)


def _event_location(value: str) -> tuple[str, str]:
    event, sep, location = value.partition("=")
    if not sep or not event.strip() or not location.strip():
        raise argparse.ArgumentTypeError(f"expected EVENT=PATH, got {value!r}")
    return event.strip(), location.strip()


def parse_args(argv: list[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--run-id", default=None)
    common.add_argument("--config-dir", default="./config")
    common.add_argument("--overlay-config-dir", default=None)
    common.add_argument("--data-dir", default="./data")
    common.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    common.add_argument("--strict", action="store_true")
    common.add_argument("--no-cache", action="store_true")

    parser = argparse.ArgumentParser(description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    harmonise = commands.add_parser("harmonise", parents=[common], help="harmonise one dataset family")
    harmonise.add_argument("family", choices=FAMILIES)
    harmonise.add_argument("--input", dest="inputs", action="append", type=_event_location, required=True)
    harmonise.add_argument("--out", required=True)
    harmonise.add_argument("--no-process", dest="process", action="store_false")
    harmonise.add_argument("--skiprows", type=int, default=0)
    harmonise.add_argument("--elected", default=None)
    harmonise.add_argument("--chamber", default="House", choices=["House", "Senate"])
    harmonise.add_argument("--reference", default=None)
    harmonise.add_argument("--from", dest="date_from", default=None)
    harmonise.add_argument("--to", dest="date_to", default=None)
    harmonise.add_argument("--event-type", default=None, choices=EVENT_TYPES)

    correspond = commands.add_parser("correspond", parents=[common], help="build a boundary correspondence")
    correspond.add_argument("--event", required=True)
    correspond.add_argument("--compare-to", required=True)
    correspond.add_argument("--out", required=True)
    correspond.add_argument("--no-process", dest="process", action="store_false")

    clear = commands.add_parser("clear-cache", parents=[common], help="remove cached tables")
    clear.add_argument("--kind", default=None, choices=CACHE_KINDS)

    return parser.parse_args(argv)


def _cache_registry(args: argparse.Namespace, data_dir: Path) -> CacheRegistry | None:
    if args.no_cache:
        return None
    return CacheRegistry(data_dir / "cache")


def run_harmonise(
    args: argparse.Namespace, bundle: ConfigBundle, data_dir: Path, client: HttpClient
) -> list[dict]:
    date_range = {key: value for key, value in (("from", args.date_from), ("to", args.date_to)) if value is not None}
    events = select_events(
        [bundle.event(name) for name, _location in args.inputs],
        date_range or None,
        args.event_type,
    )
    fetch = TableFetcher(dict(args.inputs), base_dir=Path.cwd(), client=client, skiprows=args.skiprows)

    options = None
    if args.family == "candidates":
        if args.elected is None:
            raise ConfigError("`--elected` is required when harmonising candidates.")
        options = {
            "elected": read_location(args.elected, base_dir=Path.cwd(), client=client),
            "chamber": args.chamber,
        }
    elif args.family == "coords" and args.reference is not None:
        options = {"reference": read_location(args.reference, base_dir=Path.cwd(), client=client)}

    registry = _cache_registry(args, data_dir)
    table = get_election_data(
        args.family,
        events,
        fetch,
        process=args.process,
        cache=registry.for_family(args.family) if registry is not None else None,
        harmoniser_options=options,
    )
    out_path = Path(args.out)
    write_table(out_path, table)
    return [table_report(args.family, table, out_path)]


def run_correspond(
    args: argparse.Namespace, bundle: ConfigBundle, data_dir: Path, client: HttpClient
) -> list[dict]:
    registry = _cache_registry(args, data_dir)
    source = BoundarySource(
        bundle.boundaries,
        base_dir=data_dir,
        client=client,
        cache=registry.for_family(BOUNDARY_CACHE) if registry is not None else None,
    )
    table = prepare_boundaries(args.event, args.compare_to, source, process=args.process)
    out_path = Path(args.out)
    write_table(out_path, table)
    return [table_report(f"{args.event} to {args.compare_to}", table, out_path)]


def run_clear_cache(args: argparse.Namespace, data_dir: Path) -> list[dict]:
    registry = CacheRegistry(data_dir / "cache")
    if args.kind == BOUNDARY_CACHE:
        cleared = registry.clear(BOUNDARY_CACHE)
    elif args.kind == "election":
        cleared = sum(registry.clear(name) for name in registry.families() if name != BOUNDARY_CACHE)
    else:
        cleared = registry.clear()
    return [{"name": "cache", "kind": args.kind or "all", "cleared": cleared}]


def execute_command(args: argparse.Namespace, config_dir: Path, data_dir: Path) -> list[dict]:
    if args.command == "clear-cache":
        return run_clear_cache(args, data_dir)

    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    bundle = load_all_configs(config_dir, overlay_config_dir=overlay_config_dir)
    with HttpClient() as client:
        if args.command == "harmonise":
            return run_harmonise(args, bundle, data_dir, client)
        if args.command == "correspond":
            return run_correspond(args, bundle, data_dir, client)
    raise ValueError(f"Unknown command: {args.command}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    data_dir = Path(args.data_dir)
    stage = args.command

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    log_event(logger, "stage start", run_id=run_id, stage=stage, action="STAGE_START", status="ok")

    outputs: list[dict] = []
    errors: list[dict] = []
    exit_code = EXIT_SUCCESS
    try:
        outputs = execute_command(args, config_dir, data_dir)
    except PipelineError as exc:
        errors.append({"error_code": exc.error_code, "message": str(exc)})
        log_event(
            logger,
            f"stage failed: {exc}",
            run_id=run_id,
            stage=stage,
            action="STAGE_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        if exc.error_code in FATAL_ERROR_CODES or args.strict:
            exit_code = EXIT_HARD_FAIL
        else:
            exit_code = EXIT_PARTIAL
    except Exception as exc:
        errors.append({"error_code": "UNEXPECTED_ERROR", "message": str(exc)})
        logger.exception(
            "unexpected failure",
            extra={
                "run_id": run_id,
                "stage": stage,
                "action": "STAGE_FAIL",
                "status": "error",
                "error_code": "UNEXPECTED_ERROR",
            },
        )
        exit_code = EXIT_HARD_FAIL if args.strict else EXIT_PARTIAL
    else:
        rows = sum(item.get("rows", 0) for item in outputs)
        log_event(logger, "stage end", run_id=run_id, stage=stage, action="STAGE_END", status="ok", rows_out=rows)

    status = {EXIT_SUCCESS: "success", EXIT_PARTIAL: "partial"}.get(exit_code, "error")
    write_run_summary(data_dir, run_id=run_id, command=stage, status=status, outputs=outputs, errors=errors)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
