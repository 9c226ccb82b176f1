"""CLI entrypoint."""
from __future__ import annotations

import argparse
import json
import logging
import os
import random
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv as _load_dotenv

from tourgen import config
from tourgen.budget import parse_tour_length, validate_tour_length
from tourgen.directions import SerializationError
from tourgen.directions_client import DirectionsClient, resolve_variations
from tourgen.http import HttpClient
from tourgen.models import Catalog, Stop, load_catalog
from tourgen.planner import error_panel, plan_tour, select_variation
from tourgen.reconcile import reconcile_steps
from tourgen.reporting import ensure_dir, render_arrivals, render_variations, write_variations_json
from tourgen.selection import WILDCARD, TourSelection
from tourgen.storage import TourStore


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    _load_dotenv(dotenv_path=env_path, override=False)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build street art walking tours")
    parser.add_argument("--catalog", type=str, help="Catalog JSON with artists, neighborhoods and street_art")
    parser.add_argument("--neighborhood", type=str, help="Neighborhood id")
    parser.add_argument(
        "--artist",
        action="append",
        default=[],
        help="Artist id (repeatable; omit to let the tour pick)",
    )
    parser.add_argument(
        "--artwork",
        action="append",
        default=[],
        help="Artwork id (repeatable; omit to let the tour pick)",
    )
    parser.add_argument("--duration", type=str, default="60", help="Tour length, e.g. 60 or '1.5 hours'")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible shuffles")
    parser.add_argument("--directions", action="store_true", help="Fetch walking directions per variation")
    parser.add_argument("--select", type=int, default=None, help="Variation index to save as the current tour")
    parser.add_argument("--store", type=str, default=config.STORE_DB_PATH)
    parser.add_argument(
        "--out",
        type=str,
        nargs="?",
        const=config.OUTPUT_DIR,
        default=None,
        help="Write variations.json to this directory (bare flag uses OUTPUT_DIR)",
    )
    parser.add_argument("--history", action="store_true", help="Print saved tours and exit")
    return parser.parse_args(argv)


def build_selection(args: argparse.Namespace, catalog: Catalog, duration: int) -> TourSelection:
    selection = TourSelection(duration_min=duration)
    selection.set_neighborhood(args.neighborhood)

    for artist_id in args.artist or [WILDCARD]:
        selection.toggle_artist(artist_id)
    for artwork_id in args.artwork or [WILDCARD]:
        selection.toggle_artwork(artwork_id)

    if args.artist and args.artwork:
        artists_by_id = catalog.artists_by_id()
        by_id = {art.id: art for art in catalog.artworks}
        selection.confirm_stops(
            Stop.from_artwork(by_id[art_id], artists_by_id) for art_id in args.artwork if art_id in by_id
        )
    return selection


def print_history(store: TourStore) -> int:
    history = store.get_tour_history()
    if not history:
        print("No saved tours.")
        return 0
    for entry in history:
        route = entry.get("selectedRoute") or {}
        print(
            f"- {route.get('name')} ({entry.get('duration')} min, "
            f"{len(route.get('locations') or [])} stops, {route.get('distance') or 'n/a'})"
        )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    config.load_tour_config()
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.history:
        store = TourStore(args.store)
        try:
            return print_history(store)
        finally:
            store.close()

    if not args.catalog or not args.neighborhood:
        print("--catalog and --neighborhood are required", file=sys.stderr)
        return 2

    try:
        duration = validate_tour_length(parse_tour_length(args.duration))
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        catalog = load_catalog(args.catalog)
    except (OSError, ValueError, KeyError) as exc:
        print(f"Could not read catalog: {exc}", file=sys.stderr)
        return 1

    selection = build_selection(args, catalog, duration)
    plan = plan_tour(selection, catalog, rng=random.Random(args.seed))

    if args.directions:
        api_key = os.environ.get("GOOGLE_MAPS_API_KEY")
        if not api_key:
            print("GOOGLE_MAPS_API_KEY is not set", file=sys.stderr)
            return 1
        client = DirectionsClient(HttpClient(), api_key)
        resolve_variations(plan.variations, client)

    print(render_variations(plan.variations, plan.duration))

    if args.out:
        ensure_dir(args.out)
        write_variations_json(os.path.join(args.out, "variations.json"), plan.variations, plan.duration)

    if args.select is None:
        return 0

    try:
        handoff = select_variation(plan, args.select)
    except (SerializationError, ValueError) as exc:
        panel = error_panel(exc)
        print(json.dumps(panel, indent=2), file=sys.stderr)
        return 1

    store = TourStore(args.store)
    try:
        handoff.persist(store)
    finally:
        store.close()

    route = handoff.selected_route
    print(f"\nSaved {route.name} as the current tour.")
    for line in render_arrivals(reconcile_steps(route.response, route.stops), route.stops):
        print(f"  {line}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
