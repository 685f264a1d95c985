# Purpose: Command-line runner for the bond comparison engine.
# Loads a scenario YAML file, compares the two assets on a common horizon, prints a
# summary and optionally writes an Excel workbook and/or the flat JSON record.

import argparse
import json
import logging
import os
import sys

# Add project root to path for imports when running as standalone script
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)  # Go up from tools/ to project root
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from core.config import configure_logging
from bond_comparison.comparison import compare
from bond_comparison.data_loader import load_scenario, parse_date
from bond_comparison.excel.workbook import save_workbook
from bond_comparison.macro import curves_for_run, default_projection
from bond_comparison.models import ComparisonMode
from bond_comparison.reporting import summary_lines
from bond_comparison.validation import ConfigurationError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare two fixed-income assets on a common horizon")
    parser.add_argument("scenario", help="Scenario YAML file (asset_a, asset_b, optional macro block)")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ComparisonMode],
        help="Horizon policy; overrides the scenario file and settings.yaml",
    )
    parser.add_argument("--valuation-date", help="Valuation date (YYYY-MM-DD or DD/MM/YYYY)")
    parser.add_argument("--excel", metavar="PATH", help="Write the comparison workbook to PATH")
    parser.add_argument("--json", action="store_true", help="Print the flat result record as JSON")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--log-file", help="Also write a DEBUG log (per-coupon detail) to this file")
    return parser


def main(argv=None) -> int:
    """Run one comparison from the command line and return the process exit code.

    Exit codes: 0 on success, 2 when the inputs fail validation, 1 for any
    other error (missing file, malformed scenario).
    """
    args = build_parser().parse_args(argv)
    configure_logging("WARNING" if args.quiet else None, args.log_file)

    try:
        scenario = load_scenario(args.scenario)
        valuation_date = parse_date(args.valuation_date) if args.valuation_date else scenario["valuation_date"]
        mode = args.mode or scenario["mode"]
        projection = scenario["projection"] or default_projection()
        result = compare(scenario["asset_a"], scenario["asset_b"], projection, mode, valuation_date)
    except ConfigurationError as e:
        for message in e.messages:
            print(f"Invalid input: {message}", file=sys.stderr)
        return EXIT_INVALID
    except (OSError, ValueError) as e:
        logger.error(f"Error in run_comparison: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        print(json.dumps(result.to_record(), indent=2, default=str))
    else:
        for line in summary_lines(result):
            print(line)

    if args.excel:
        curves = curves_for_run(projection, result.valuation_date, result.horizon)
        path = save_workbook(result, curves, args.excel)
        if not args.json:
            print(f"Workbook: {path}")
    return EXIT_OK


# -----------------------------------------------------------------------------
# CLI entry-point
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
