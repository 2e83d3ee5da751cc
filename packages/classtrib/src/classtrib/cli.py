"""CLI for looking up tax classifications of NCM/NBS codes."""

import argparse
import json
import sys

import pandas as pd
import structlog

from classtrib.config import SearchConfig
from classtrib.io import (
    DEFAULT_CLASSIFICATIONS_FILE,
    DEFAULT_GOODS_FILE,
    DEFAULT_SERVICES_FILE,
    default_path,
)
from classtrib.logging import configure_logging
from classtrib.search import ClassificationSearch
from classtrib.types import SearchResult


def _build_search(args: argparse.Namespace) -> ClassificationSearch:
    """Load the reference tables named on the command line."""
    log = structlog.get_logger()
    config = SearchConfig()
    if args.limit is not None:
        config.limits.max_results = args.limit

    log.info(
        "load_tables_start",
        goods=args.goods,
        services=args.services,
        classifications=args.classifications,
    )
    try:
        return ClassificationSearch.from_files(
            args.goods, args.services, args.classifications, config
        )
    except (OSError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        log.error("load_table_error", error=str(e))
        raise SystemExit(1) from e


def results_frame(result: SearchResult) -> pd.DataFrame:
    """Tabulate result rows the way the lookup table shows them."""
    rows = []
    for r in result.rows:
        c = r.classification
        rows.append({
            "item": f"{r.item.original_code} {r.item.description}".strip(),
            "tipo": "NCM" if r.item.kind == "GOODS" else "NBS",
            "cClassTrib": f"{c.code} {c.description}".strip() if c else "",
            "CST-IBS/CBS": f"{c.situation_code} {c.situation_description}".strip() if c else "",
            "LC 214/25": c.legal_reference if c else "",
            "tipo de alíquota": c.rate_type if c else "",
            "redução": c.rate_reduction_summary if c else "",
            "atualização": c.last_updated if c else "",
            "score": r.match_score,
        })
    return pd.DataFrame(rows)


def _print_result(result: SearchResult, max_results: int) -> None:
    if result.state == "EMPTY":
        return
    if result.state == "NO_MATCH":
        print("Nenhum resultado encontrado.")
        return

    if result.truncated:
        print(
            f"Atenção: a busca retornou {result.total_count} resultados. "
            f"Apenas os primeiros {max_results} estão sendo exibidos."
        )
    with pd.option_context("display.max_colwidth", 60, "display.width", 200):
        print(results_frame(result).to_string(index=False))


def cmd_search(args: argparse.Namespace) -> None:
    search = _build_search(args)
    result = search.search(args.query)
    if args.json:
        print(json.dumps(_result_json(result), ensure_ascii=False, indent=2))
        return
    _print_result(result, search.config.limits.max_results)


def cmd_interactive(args: argparse.Namespace) -> None:
    """Re-run the search for every line read from stdin."""
    search = _build_search(args)
    print("Digite um código NCM/NBS ou descrição (Ctrl-D para sair).")
    for line in sys.stdin:
        result = search.search(line)
        _print_result(result, search.config.limits.max_results)
    _print_stats(search)


def cmd_stats(args: argparse.Namespace) -> None:
    search = _build_search(args)
    _print_stats(search)


def _print_stats(search: ClassificationSearch) -> None:
    s = search.stats
    goods = sum(1 for item in search.items if item.kind == "GOODS")
    print("\n--- Statistics ---")
    print(f"Goods (NCM): {goods}")
    print(f"Services (NBS): {s.items - goods}")
    print(f"Classifications: {s.classifications}")
    if s.queries:
        print(f"Queries: {s.queries}")
        print(", ".join(f"{state}={count}" for state, count in s.states.items()))
        print(f"Truncated: {s.truncated}")


def _result_json(result: SearchResult) -> dict:
    rows = []
    for r in result.rows:
        c = r.classification
        rows.append({
            "kind": r.item.kind,
            "code": r.item.original_code,
            "description": r.item.description,
            "classification": None if c is None else {
                "code": c.code,
                "name": c.name,
                "description": c.description,
                "situation_code": c.situation_code,
                "situation_description": c.situation_description,
                "legal_reference": c.legal_reference,
                "rate_type": c.rate_type,
                "rate_reduction_summary": c.rate_reduction_summary,
                "last_updated": c.last_updated,
                "url": c.url,
            },
            "match_score": r.match_score,
        })
    return {
        "query": result.query,
        "state": result.state,
        "total_count": result.total_count,
        "truncated": result.truncated,
        "rows": rows,
    }


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def _add_global_options(parser: argparse.ArgumentParser, suppress_defaults: bool = False) -> None:
    """Add the options shared by every command.

    Subcommand copies use SUPPRESS so they never overwrite a value given
    before the subcommand name.
    """

    def default(value):
        return argparse.SUPPRESS if suppress_defaults else value

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=default("WARNING"),
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=default(False),
        help="Render log events as JSON lines",
    )
    parser.add_argument(
        "--goods",
        default=default(str(default_path(DEFAULT_GOODS_FILE))),
        help="Path to the NCM goods table",
    )
    parser.add_argument(
        "--services",
        default=default(str(default_path(DEFAULT_SERVICES_FILE))),
        help="Path to the NBS services table",
    )
    parser.add_argument(
        "--classifications",
        default=default(str(default_path(DEFAULT_CLASSIFICATIONS_FILE))),
        help="Path to the cClassTrib classification table",
    )
    parser.add_argument(
        "--limit",
        type=_positive_int,
        default=default(None),
        help="Maximum number of rows shown (default: 200)",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Tax classification lookup CLI")
    _add_global_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Run one query")
    _add_global_options(search_parser, suppress_defaults=True)
    search_parser.add_argument("query", help="NCM/NBS code or free text")
    search_parser.add_argument("--json", action="store_true", help="Print results as JSON")
    search_parser.set_defaults(func=cmd_search)

    interactive_parser = subparsers.add_parser("interactive", help="Query repeatedly from stdin")
    _add_global_options(interactive_parser, suppress_defaults=True)
    interactive_parser.set_defaults(func=cmd_interactive)

    stats_parser = subparsers.add_parser("stats", help="Show index sizes")
    _add_global_options(stats_parser, suppress_defaults=True)
    stats_parser.set_defaults(func=cmd_stats)

    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_output=args.log_json or None)
    args.func(args)


if __name__ == "__main__":
    main()
