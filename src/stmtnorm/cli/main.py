#!/usr/bin/env python3
"""
stmtnorm CLI - normalize bank statements from the command line.

Usage:
    stmtnorm parse statement.csv
    stmtnorm parse statement.pdf -o normalized.xlsx
    stmtnorm parse statement.txt --json
    stmtnorm analyze statement.csv
    stmtnorm validate statement.csv
    stmtnorm config > stmtnorm.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from stmtnorm.core.config import CONFIG_ENV_VAR, create_default_config, load_config
from stmtnorm.core.exceptions import ConfigurationError, EmptyInputError, StatementReadError
from stmtnorm.exporters.csv_writer import serialize, write_csv
from stmtnorm.exporters.excel import write_excel
from stmtnorm.parsers.dispatcher import StatementNormalizer
from stmtnorm.readers import read_statement_text

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNRECOGNIZED = 2


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _load_text(args) -> Optional[str]:
    try:
        return read_statement_text(args.file, password=getattr(args, "password", None))
    except StatementReadError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return None


# ============================================================================
# Command Handlers
# ============================================================================

def cmd_parse(args, normalizer: StatementNormalizer) -> int:
    """Handle parse command - normalize a statement file."""
    text = _load_text(args)
    if text is None:
        return EXIT_ERROR

    try:
        result = normalizer.parse(text)
    except EmptyInputError as e:
        print(f"Error: {e.message} ({args.file})", file=sys.stderr)
        return EXIT_UNRECOGNIZED

    if not result.success:
        print(f"Error: {result.error.message}", file=sys.stderr)
        if result.error.headers:
            print(f"Headers found: {', '.join(result.error.headers)}", file=sys.stderr)
        return EXIT_UNRECOGNIZED

    if args.output:
        output = Path(args.output)
        if output.suffix.lower() == ".xls":
            # openpyxl only writes the xlsx container
            output = output.with_suffix(".xlsx")
            logger.warning(f"Legacy .xls output not supported, writing {output}")
        if output.suffix.lower() == ".xlsx":
            write_excel(result.transactions, output)
        else:
            write_csv(result.transactions, output)
        print(f"Wrote {result.transaction_count} transactions to {output}")
    elif args.json:
        payload = {
            "transactions": [t.to_dict() for t in result.transactions],
            "warnings": result.warnings,
            "strategies": result.strategies,
        }
        print(json.dumps(payload, indent=2))
    else:
        print(serialize(result.transactions))

    if result.warnings and not args.json:
        print(f"\n{len(result.warnings)} rows skipped:", file=sys.stderr)
        for w in result.warnings[:5]:
            print(f"  - {w}", file=sys.stderr)

    return EXIT_OK


def cmd_analyze(args, normalizer: StatementNormalizer) -> int:
    """Handle analyze command - show detected structure."""
    text = _load_text(args)
    if text is None:
        return EXIT_ERROR

    analysis = normalizer.analyze(text)
    if analysis is None:
        print(f"Error: {args.file} is empty", file=sys.stderr)
        return EXIT_UNRECOGNIZED

    print(json.dumps(analysis, indent=2, default=str))
    return EXIT_OK if analysis["transaction_count"] else EXIT_UNRECOGNIZED


def cmd_validate(args, normalizer: StatementNormalizer) -> int:
    """Handle validate command - check whether the format is acceptable."""
    text = _load_text(args)
    if text is None:
        return EXIT_ERROR

    if normalizer.validate(text):
        print(f"{args.file}: OK")
        return EXIT_OK

    print(f"{args.file}: format not recognized")
    return EXIT_UNRECOGNIZED


def cmd_config(args) -> int:
    """Handle config command - print the default config as JSON."""
    print(json.dumps(create_default_config(), indent=2, ensure_ascii=False))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stmtnorm",
        description="Normalize bank statements into canonical transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  stmtnorm parse statement.csv
  stmtnorm parse statement.pdf -o normalized.xlsx
  stmtnorm analyze statement.csv
  stmtnorm validate statement.txt

The config file may also be given via ${CONFIG_ENV_VAR}.
        """
    )

    # Global arguments
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument("--config", "-c", help="Normalizer config file (JSON)")

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Command")

    parse_parser = subparsers.add_parser("parse", help="Parse a statement file")
    parse_parser.add_argument("file", help="Statement file (.csv, .txt, .tsv, .pdf, .xlsx)")
    parse_parser.add_argument("--output", "-o", help="Write to .csv or .xlsx instead of stdout")
    parse_parser.add_argument("--json", action="store_true", help="Print transactions as JSON")
    parse_parser.add_argument("--password", help="Password for encrypted PDFs")

    analyze_parser = subparsers.add_parser("analyze", help="Show detected statement structure")
    analyze_parser.add_argument("file", help="Statement file")

    validate_parser = subparsers.add_parser("validate", help="Check statement format")
    validate_parser.add_argument("file", help="Statement file")

    subparsers.add_parser("config", help="Print the default config")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    setup_logging(args.verbose, args.debug)

    if args.command == "config":
        return cmd_config(args)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Config error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    normalizer = StatementNormalizer(config)

    if args.command == "parse":
        return cmd_parse(args, normalizer)
    elif args.command == "analyze":
        return cmd_analyze(args, normalizer)
    elif args.command == "validate":
        return cmd_validate(args, normalizer)

    parser.print_help()
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
