#!/usr/bin/env python3
"""
Rewrite an inventory export with canonical headers and clean cells

Usage:
    normalize_inventory_csv.py 2000.csv -o 2000_normalized.csv
"""
import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from materials_exchange.core.exceptions import ParseError
from materials_exchange.core.logging import get_logger, setup_logging
from materials_exchange.services.ingestion import normalize_document

logger = get_logger("scripts.normalize")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("input", type=Path, help="Export to normalize (UTF-8 CSV)")
    parser.add_argument("-o", "--output", type=Path, help="Defaults to <input>_normalized.csv")
    args = parser.parse_args(argv)

    setup_logging(log_to_file=False)
    output = args.output or args.input.with_name(f"{args.input.stem}_normalized.csv")
    try:
        document = normalize_document(args.input.read_text(encoding="utf-8-sig"))
    except ParseError as e:
        logger.error(f"{args.input}: {e}")
        return 1

    output.write_text(document, encoding="utf-8")
    logger.info(f"Normalized {args.input} -> {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
