"""CLI entrypoint for gpsearch."""

import argparse
import sys
from typing import Dict, List, Optional

from gpsearch import __version__
from gpsearch.api.search_api import SearchOrchestrator
from gpsearch.cache.store import FingerprintCache
from gpsearch.config.loader import load_optional_config, resolve_log_level, resolve_settings
from gpsearch.errors import GpsearchError
from gpsearch.output.formatter import render_text
from gpsearch.retrieval.fetcher import PackageSearchClient
from gpsearch.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
QUERY_SEPARATOR = " "

KNOWN_FIELDS: Dict[str, str] = {
    "name": "The name",
    "path": "The import path",
    "synopsis": "The description",
    "import_count": "Num. of projects using/importing this",
    "stars": "Num. of github stars",
    "score": "How well is the document",
    "fork": "If this is a forked repository",
}


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"count must not be negative: {value}")
    return number


def build_query(terms: List[str]) -> str:
    """Join search terms into the query string sent upstream and used as cache key."""
    return QUERY_SEPARATOR.join(term.strip() for term in terms if term.strip())


def cmd_search(args: argparse.Namespace) -> int:
    """Search, then print the sorted, projected results."""
    settings = resolve_settings(
        cache_dir=args.cache_dir,
        cache_timeout=args.cache_timeout,
        endpoint=args.endpoint,
        config=args.config,
    )

    sort_field = args.sort or settings.defaults.sort
    fields = args.fields or settings.defaults.fields
    num = args.num if args.num is not None else settings.defaults.num

    orchestrator = SearchOrchestrator(
        FingerprintCache(settings.cache),
        PackageSearchClient(settings.api),
    )
    outcome = orchestrator.execute(
        args.query,
        sort_field=sort_field,
        reverse=args.reverse,
        fields=fields,
        limit=num,
    )
    logger.info(
        f"{outcome.view.shown} of {outcome.view.available} results for {outcome.query!r} "
        f"({'cache' if outcome.from_cache else 'network'})"
    )

    output = render_text(outcome.view)
    if output:
        print(output)
    return EXIT_OK


def describe_fields() -> str:
    """Help text listing the fields the search API is known to return."""
    width = max(len(name) for name in KNOWN_FIELDS)
    rows = [f"  {name:<{width}} : {desc}" for name, desc in KNOWN_FIELDS.items()]
    return "Fields supported:\n" + "\n".join(rows) + "\n\nNote: some packages only have few fields with data"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpsearch",
        description="Search golang packages from the CLI",
        epilog=describe_fields(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "terms",
        nargs="*",
        metavar="PATTERN",
        help="Search terms",
    )
    parser.add_argument(
        "-s",
        "--sort",
        type=str,
        help="Sort packages based on this field (default: import_count)",
    )
    parser.add_argument(
        "-r",
        "--reverse",
        action="store_true",
        help="Reverse the sort result",
    )
    parser.add_argument(
        "-n",
        "--num",
        type=_non_negative_int,
        help="Num. of packages to list (default: 10)",
    )
    parser.add_argument(
        "-f",
        "--fields",
        action="append",
        metavar="FIELD",
        help="Package fields to show, specify multiple values with -f <field1> -f <field2> "
        "(default: path, import_count, synopsis)",
    )
    parser.add_argument(
        "--cache-dir",
        type=str,
        help="Cache directory, must exist (default: $GPSEARCH_CACHEDIR or <tmp>/gpsearch)",
    )
    parser.add_argument(
        "--cache-timeout",
        type=str,
        help="Hours before cached results expire (default: $GPSEARCH_CACHETIMEOUT or 2)",
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        help="Search API endpoint (default: $GPSEARCH_ENDPOINT or https://api.godoc.org/search)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(func=cmd_search, config=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    args.query = build_query(args.terms)
    if not args.query:
        print("\nNo query string is provided\n")
        parser.print_help()
        return EXIT_ERROR

    try:
        args.config = load_optional_config()
        configure_logging("DEBUG" if args.verbose else resolve_log_level(args.config))
        return args.func(args)
    except GpsearchError as e:
        logger.debug(f"Search for {args.query!r} failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
