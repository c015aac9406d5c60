import argparse
import json
import sys
from typing import Callable, List, Optional

from ..config.settings import STORE_FILE
from ..ingestion.orchestrator import Catalog, build_catalog
from ..recommend.engine import ScoredVenue, get_recommendations
from ..storage.repository import KeyValueStore, open_store, save_venue
from ..utils.logging import get_logger
from .display import (
    available_types,
    available_vibes,
    format_result,
    result_count_label,
    result_to_dict,
)
from .preferences import FilterState
from .query_state import DebouncedQueryWriter, Location, encode_query, hydrate

logger = get_logger(__name__)

BROWSE_HELP = """Commands:
  +tag / -tag      toggle a vibe (e.g. +cozy)
  type NAME        toggle a type (e.g. type Cafe)
  budget N         max per person
  go               show results
  save N           save result number N
  share            print the link for the current filters
  help, quit"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mysterymap",
        description="Find hidden-gem venues that match your vibe.",
    )
    parser.add_argument("command", nargs="?", choices=["recommend", "browse"], default="recommend")
    parser.add_argument("--source", help="CSV/JSON feed URL or local file (default: env or data/venues.json)")
    parser.add_argument("--query", default="", help="Shared link or query string, e.g. 'v=cozy,quiet&b=30&go=1'")
    parser.add_argument("--vibes", help="Comma-separated vibes")
    parser.add_argument("--types", help="Pipe-separated types, e.g. 'Cafe|Bar'")
    parser.add_argument("--budget", type=int, help="Max price per person")
    parser.add_argument("--cap", type=int, help="Max number of results")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--store", default=str(STORE_FILE), help="File for saved venues")
    return parser


def state_from_args(args: argparse.Namespace) -> FilterState:
    state = hydrate(args.query)
    if args.vibes:
        state.set_vibes(args.vibes.split(","))
    if args.types:
        state.set_types(args.types.split("|"))
    if args.budget is not None:
        state.set_budget(args.budget)
    return state


def _print_results(results: List[ScoredVenue], output: Callable[[str], None]) -> None:
    if not results:
        output("No matches. Try fewer types or a higher budget.")
        return
    for i, item in enumerate(results, 1):
        output(format_result(i, item))


def run_recommend(args: argparse.Namespace, catalog: Catalog, store: KeyValueStore) -> int:
    state = state_from_args(args)
    state.submit()
    results = get_recommendations(catalog.venues, state, top_n=args.cap)

    if args.json:
        print(json.dumps([result_to_dict(r, store) for r in results], indent=2, ensure_ascii=False))
        return 0

    print(f"\nHidden gems ({result_count_label(results, state.submitted)})")
    print("-" * 40)
    _print_results(results, print)
    print(f"\nShare: ?{encode_query(state)}")
    return 0


def run_browse(
    catalog: Catalog,
    state: FilterState,
    store: KeyValueStore,
    location: Location,
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
    cap: Optional[int] = None,
) -> FilterState:
    """Interactive session. Every filter edit schedules a debounced URL write."""
    writer = DebouncedQueryWriter(location.replace)
    results: List[ScoredVenue] = []

    output("Vibes: " + ", ".join(available_vibes(catalog.venues)))
    output("Types: " + ", ".join(available_types(catalog.venues)))
    output(BROWSE_HELP)

    while True:
        try:
            line = input_fn("> ").strip()
        except EOFError:
            break
        if not line:
            continue
        cmd, _, arg = line.partition(" ")
        arg = arg.strip()

        if line in ("quit", "exit", "q"):
            break
        if line == "help":
            output(BROWSE_HELP)
            continue

        changed = True
        if line[0] in "+-" and len(line) > 1:
            tag = line[1:].strip().lower()
            if (tag in state.selected_vibes) != (line[0] == "+"):
                state.toggle_vibe(tag)
            else:
                changed = False
        elif cmd == "type" and arg:
            state.toggle_type(arg)
        elif cmd == "budget" and arg:
            try:
                state.set_budget(float(arg))
            except ValueError:
                output("Budget must be a number.")
                changed = False
        elif cmd == "go":
            state.submit()
        elif cmd == "save" and arg.isdigit():
            changed = False
            idx = int(arg) - 1
            if 0 <= idx < len(results):
                key = results[idx].venue.key
                output("Saved." if save_venue(store, key) else "Already saved.")
            else:
                output("No such result.")
            continue
        elif cmd == "share":
            writer.flush()
            output(location.url)
            continue
        else:
            output("Unknown command. Type 'help'.")
            continue

        if changed:
            writer.schedule(state)
        results = get_recommendations(catalog.venues, state, top_n=cap)
        if state.submitted:
            output(f"{result_count_label(results, True)}:")
            _print_results(results, output)

    writer.flush()
    return state


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    catalog = build_catalog(args.source)
    if not catalog.available:
        print(catalog.error, file=sys.stderr)
        return 1

    store = open_store(args.store)
    if args.command == "browse":
        location = Location(query=args.query.split("?", 1)[-1])
        state = run_browse(catalog, state_from_args(args), store, location, cap=args.cap)
        print(f"\nShare: {location.url}")
        logger.debug("Final filters: %s", state)
        return 0
    return run_recommend(args, catalog, store)
