"""
Command-line entry point for the extraction engine.

    python -m packages.extraction_engine.cli message.txt --mode one
    cat statement.txt | python -m packages.extraction_engine.cli --format json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from .extractor import TransactionExtractor
from .models import TransactionCandidate

TABLE_HEADERS = ["Date", "Description", "Amount", "Type", "Category", "Balance", "Conf", "Pattern"]


def _read_inputs(paths: List[str]) -> List[str]:
    if not paths:
        return [sys.stdin.read()]
    return [Path(path).read_text(encoding="utf-8") for path in paths]


def _row(candidate: TransactionCandidate) -> list:
    return [
        candidate.date.date().isoformat(),
        candidate.description[:40],
        f"{candidate.amount:,.2f}",
        candidate.transaction_type.value,
        candidate.category.value if candidate.category else "",
        "" if candidate.balance is None else f"{candidate.balance:,.2f}",
        f"{candidate.confidence:.2f}",
        candidate.pattern,
    ]


def run(args: argparse.Namespace) -> int:
    extractor = TransactionExtractor(strict_dates=args.strict_dates)

    candidates: List[TransactionCandidate] = []
    for text in _read_inputs(args.files):
        if args.mode == "one":
            candidate = extractor.extract_one(text)
            if candidate is not None:
                candidates.append(candidate)
        else:
            candidates.extend(extractor.extract_all(text))

    if args.format == "json":
        print(json.dumps([c.to_dict() for c in candidates], indent=2))
    elif candidates:
        print(tabulate([_row(c) for c in candidates], headers=TABLE_HEADERS, tablefmt="simple"))
    else:
        print("No transactions found.")

    return 0 if candidates else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Extract transactions from bank SMS and statements")
    parser.add_argument("files", nargs="*", help="Text files to read (stdin when omitted)")
    parser.add_argument(
        "--mode", choices=["one", "all"], default="all", help="Single best match or every match"
    )
    parser.add_argument("--format", choices=["table", "json"], default="table")
    parser.add_argument(
        "--strict-dates",
        action="store_true",
        help="Drop records whose date cannot be parsed",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
