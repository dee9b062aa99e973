"""CLI entry point for nestegg."""

from __future__ import annotations

import argparse
import sys

from loguru import logger

from .calculation import Calculations
from .log import setup_logging
from .schema import SchemaError, load_assumptions
from .simulation import ProjectionResult, run_projection
from .validate import validate_assumptions

_COLUMNS = (
    ("Year", "year", 6),
    ("Age", "age", 5),
    ("Phase", "phase", 9),
    ("Gross", "gross_income", 14),
    ("Net", "net_income", 14),
    ("Spend", "spend", 14),
    ("Taxes", "taxes", 12),
    ("Savings", "savings", 14),
    ("401k", "trad_401k", 14),
    ("Roth", "roth_ira", 14),
    ("Total", "total", 15),
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nestegg", description="Year-by-year retirement projection")
    parser.add_argument("assumptions", help="Path to assumptions JSON file")
    parser.add_argument("--validate", action="store_true", help="Validate JSON only")
    parser.add_argument("--years", type=int, help="Project only the first N years")
    parser.add_argument("--summary", action="store_true", help="Print only the closing summary, not the yearly table")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        help="Minimum log level on stderr (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def _print_validation(errors: list[str], warnings: list[str]) -> None:
    for warning in warnings:
        print(f"WARNING: {warning}")
    for error in errors:
        print(f"ERROR: {error}", file=sys.stderr)


def _format_cell(value: float | int | str, width: int) -> str:
    if isinstance(value, float):
        return f"{value:>{width},.0f}"
    return f"{value:>{width}}"


def _print_table(calculations: Calculations) -> None:
    print("".join(f"{title:>{width}}" for title, _, width in _COLUMNS))
    for calculation in calculations:
        row = calculation.as_row()
        print("".join(_format_cell(row[key], width) for _, key, width in _COLUMNS))


def _print_summary(result: ProjectionResult) -> None:
    calculations = result.calculations.get_all_calculations()
    if not calculations:
        print("No years projected.")
        return
    first = calculations[0]
    last = calculations[-1]
    print(f"Years: {first.year}-{last.year}")
    print(f"Ending balance: ${last.bal_total:,.0f}")
    if result.money_lasts:
        print("Money lasts: yes")
    else:
        print(f"Money lasts: no (first shortfall in {result.depletion_year})")
    if result.failed_years:
        print(f"Failed years: {', '.join(str(year) for year in result.failed_years)}")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        assumptions = load_assumptions(args.assumptions)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load assumptions: {exc}", file=sys.stderr)
        return 2

    validation = validate_assumptions(assumptions)
    _print_validation(validation.errors, validation.warnings)
    if not validation.is_valid:
        return 1

    if args.validate:
        print("Assumptions are valid.")
        return 0

    if args.years is not None and args.years <= 0:
        print("--years must be > 0", file=sys.stderr)
        return 2

    logger.debug("Loaded assumptions from {}", args.assumptions)
    result = run_projection(assumptions, years=args.years)
    if not args.summary:
        _print_table(result.calculations)
        print()
    _print_summary(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
