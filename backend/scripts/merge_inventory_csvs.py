#!/usr/bin/env python3
"""
Merge per balance unit CSVs back into one export

Usage:
    merge_inventory_csvs.py split/ -o merged.csv
    merge_inventory_csvs.py 2000.csv 3000.csv -o merged.csv
"""
import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from materials_exchange.core.exceptions import ParseError
from materials_exchange.core.logging import get_logger, setup_logging
from materials_exchange.services.ingestion import merge_documents

logger = get_logger("scripts.merge")


def collect_inputs(paths):
    """CSV files in the given order; directories contribute their *.csv sorted by name"""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(path.glob("*.csv")))
        else:
            files.append(path)
    return files


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("inputs", type=Path, nargs="+", help="CSV files or directories of them")
    parser.add_argument("-o", "--output", type=Path, default=Path("merged.csv"), help="Merged CSV")
    args = parser.parse_args(argv)

    setup_logging(log_to_file=False)
    files = [f for f in collect_inputs(args.inputs) if f.resolve() != args.output.resolve()]
    if not files:
        logger.error("No CSV files to merge")
        return 1

    try:
        merged = merge_documents(f.read_text(encoding="utf-8-sig") for f in files)
    except ParseError as e:
        logger.error(f"Merge failed: {e}")
        return 1

    args.output.write_text(merged, encoding="utf-8")
    logger.info(f"Merged {len(files)} files into {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
