"""
Command line front end.

    flight-logbook import data/LH400.csv data/LH400.kml FRA JFK
    flight-logbook list
    flight-logbook delete 3
    flight-logbook paths --out outputs/paths.png
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import asdict
from pathlib import Path

import pandas as pd

from .config import load_config
from .globe import load_globe_paths
from .importer import import_flight
from .render import make_paths_figure
from .storage import FlightStore


LIST_COLUMNS = [
    "chronological_id", "id", "date", "departed_code", "arrived_code", "airline",
    "flight_number", "aircraft_model", "registration",
    "distance_direct_m", "distance_flown_m", "duration_minutes",
]


def flights_frame(store: FlightStore) -> pd.DataFrame:
    """Stored flights as a table, newest first."""
    records = store.list_flights()
    return pd.DataFrame([asdict(r) for r in records], columns=LIST_COLUMNS)


def _cmd_import(args, store: FlightStore, data_dir: Path) -> int:
    record = import_flight(args.csv, args.kml, args.departed, args.arrived, store=store, data_dir=data_dir)
    print(f"Saved flight {record.flight_number} (id {record.id})")
    print(f"  {record.departed_code} -> {record.arrived_code}, {record.date}")
    print(f"  direct {record.distance_direct_m / 1000:.1f} km, flown {record.distance_flown_m / 1000:.1f} km, "
          f"{record.duration_minutes} min")
    return 0


def _cmd_list(args, store: FlightStore, data_dir: Path) -> int:
    df = flights_frame(store)
    if len(df) == 0:
        print("No flights stored.")
    else:
        print(df.to_string(index=False))
    return 0


def _cmd_delete(args, store: FlightStore, data_dir: Path) -> int:
    if not store.delete_flight(args.id):
        print(f"No flight with id {args.id}")
        return 1
    print(f"Deleted flight {args.id}")
    return 0


def _cmd_paths(args, store: FlightStore, data_dir: Path) -> int:
    paths = load_globe_paths(store.list_flights())
    print(f"{len(paths)} paths, {sum(len(p.coords) for p in paths)} points")
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        fig = make_paths_figure(paths)
        fig.savefig(out, dpi=150)
        print(f"Plot: {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flight-logbook", description="Personal flight log from tracker exports")
    parser.add_argument("--db", type=str, default=None, help="Database URL (overrides FLIGHT_LOGBOOK_DB_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Import a flight from a CSV track and its KML")
    p_import.add_argument("csv", type=str, help="Path to telemetry CSV")
    p_import.add_argument("kml", type=str, help="Path to KML annotation file")
    p_import.add_argument("departed", type=str, help="Departure airport code")
    p_import.add_argument("arrived", type=str, help="Arrival airport code")
    p_import.set_defaults(func=_cmd_import)

    p_list = sub.add_parser("list", help="List stored flights")
    p_list.set_defaults(func=_cmd_list)

    p_delete = sub.add_parser("delete", help="Delete a stored flight")
    p_delete.add_argument("id", type=int)
    p_delete.set_defaults(func=_cmd_delete)

    p_paths = sub.add_parser("paths", help="Build reduced paths for all stored flights")
    p_paths.add_argument("--out", type=str, default=None, help="Save a plot of the paths to this file")
    p_paths.set_defaults(func=_cmd_paths)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = FlightStore(args.db or config.db_url)
    store.init_schema()
    return args.func(args, store, config.data_dir)


if __name__ == "__main__":
    raise SystemExit(main())
