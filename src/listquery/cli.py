"""CLI entrypoint for listquery."""

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

from listquery.config.loader import get_view_config, list_view_names, load_views_config
from listquery.config.models import FilterDefinition, FilterKind, ViewConfig
from listquery.engine.query_engine import ListQueryEngine
from listquery.output.export import SUPPORTED_FORMATS, export_view
from listquery.search.debounce import ManualScheduler
from listquery.sources.file_source import FileRecordSource
from listquery.sources.http_source import ApiRecordSource
from listquery.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

DATE_RANGE_SEPARATOR = ".."


def _coerce_filter_value(definition: Optional[FilterDefinition], raw: str) -> Any:
    """
    Turn a command-line filter value into the runtime shape its kind expects.

    Values for unconfigured keys, text and select filters stay strings.
    """
    if definition is None:
        return raw
    if definition.kind == FilterKind.NUMBER.value:
        try:
            return float(raw)
        except ValueError:
            logger.warning(f"Filter '{definition.key}' expects a number, got {raw!r}")
            return raw
    if definition.kind == FilterKind.DATE_RANGE.value:
        if DATE_RANGE_SEPARATOR not in raw:
            logger.warning(f"Filter '{definition.key}' expects START{DATE_RANGE_SEPARATOR}END, got {raw!r}")
            return None
        start, end = raw.split(DATE_RANGE_SEPARATOR, 1)
        return (start.strip(), end.strip())
    if definition.kind == FilterKind.SELECT.value and definition.options:
        # Match the option's typed value when the string form lines up
        for option in definition.options:
            if str(option.value) == raw:
                return option.value
    return raw


def _parse_filter_args(filter_args: List[str], config: ViewConfig) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for entry in filter_args:
        if "=" not in entry:
            raise ValueError(f"Invalid --filter value (expected KEY=VALUE): {entry}")
        key, raw = entry.split("=", 1)
        key = key.strip()
        values[key] = _coerce_filter_value(config.get_filter(key), raw)
    return values


def _resolve_view_config(args: argparse.Namespace) -> ViewConfig:
    if args.config is None:
        return ViewConfig(name=args.view or "default")
    config = load_views_config(args.config)
    name = args.view
    if name is None:
        names = list_view_names(config)
        if len(names) != 1:
            raise ValueError(f"--view is required when the config defines {len(names)} views")
        name = names[0]
    return get_view_config(name, config)


def _load_records(args: argparse.Namespace) -> List[Dict[str, Any]]:
    if args.records is not None:
        return FileRecordSource(args.records).fetch_records()
    if args.url is not None:
        parts = urlsplit(args.url)
        source = ApiRecordSource(f"{parts.scheme}://{parts.netloc}", parts.path or "/", token=args.token)
        return source.fetch_records()
    raise ValueError("One of --records or --url is required")


def cmd_query(args: argparse.Namespace) -> None:
    """Run one search/filter/sort/paginate query and print the page."""
    view_config = _resolve_view_config(args)
    records = _load_records(args)

    engine: ListQueryEngine = ListQueryEngine.from_config(view_config, records, scheduler=ManualScheduler())
    for key, value in _parse_filter_args(args.filter or [], view_config).items():
        engine.update_filter(key, value)
    if args.search:
        engine.set_search_term(args.search)
        engine.flush_search()
    if args.sort:
        engine.clear_sort()
        engine.update_sort(args.sort)
        if args.desc:
            engine.update_sort(args.sort)
    if args.page_size is not None:
        engine.set_page_size(args.page_size)
    if args.page is not None:
        engine.go_to_page(args.page)

    columns = [c.strip() for c in args.columns.split(",")] if args.columns else None
    output = export_view(engine.snapshot(), format=args.format, out=args.out, columns=columns)
    print(output)


def cmd_views(args: argparse.Namespace) -> None:
    """List configured views with their searchable fields and filters."""
    config = load_views_config(args.config)
    for name in list_view_names(config):
        view = get_view_config(name, config)
        filters = ", ".join(f"{f.key}:{f.kind}" for f in view.filters) or "-"
        searchable = ", ".join(view.searchable_fields) or "(all scalar fields)"
        print(f"{name}\n  search: {searchable}\n  filters: {filters}\n  page_size: {view.page_size}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search, filter, sort and paginate record collections")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: $LISTQUERY_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    query_parser = subparsers.add_parser("query", help="Query a record collection")
    source_group = query_parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("--records", type=Path, help="Record file (.json, .yaml or .csv)")
    source_group.add_argument("--url", type=str, help="List endpoint URL returning JSON records")
    query_parser.add_argument("--token", type=str, help="Bearer token for --url")
    query_parser.add_argument("--config", type=Path, help="Views config YAML")
    query_parser.add_argument("--view", type=str, help="View name within --config")
    query_parser.add_argument("--search", type=str, help="Free-text search term")
    query_parser.add_argument(
        "--filter",
        action="append",
        metavar="KEY=VALUE",
        help=f"Filter value (repeatable); date ranges as START{DATE_RANGE_SEPARATOR}END",
    )
    query_parser.add_argument("--sort", type=str, help="Sort key")
    query_parser.add_argument("--desc", action="store_true", help="Sort descending")
    query_parser.add_argument("--page", type=int, help="Page number (clamped to the valid range)")
    query_parser.add_argument("--page-size", type=int, help="Rows per page")
    query_parser.add_argument("--columns", type=str, help="Comma-separated column order")
    query_parser.add_argument(
        "--format",
        type=str,
        choices=list(SUPPORTED_FORMATS),
        default="table",
        help="Output format (default: table)",
    )
    query_parser.add_argument("--out", type=Path, help="Output file path (if not provided, prints to stdout)")
    query_parser.set_defaults(func=cmd_query)

    views_parser = subparsers.add_parser("views", help="List configured views")
    views_parser.add_argument("--config", type=Path, required=True, help="Views config YAML")
    views_parser.set_defaults(func=cmd_views)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
