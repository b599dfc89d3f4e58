#!/usr/bin/env python3
"""
Split a combined inventory export into one CSV per balance unit

Usage:
    split_inventory_by_tenant.py export.csv --out-dir split/
"""
import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from materials_exchange.core.exceptions import ParseError
from materials_exchange.core.logging import get_logger, setup_logging
from materials_exchange.services.ingestion import split_by_tenant, tenant_file_name

logger = get_logger("scripts.split")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("input", type=Path, help="Combined export (UTF-8 CSV)")
    parser.add_argument("--out-dir", type=Path, default=Path("split"), help="Output directory")
    args = parser.parse_args(argv)

    setup_logging(log_to_file=False)
    try:
        documents = split_by_tenant(args.input.read_text(encoding="utf-8-sig"))
    except ParseError as e:
        logger.error(f"{args.input}: {e}")
        return 1

    args.out_dir.mkdir(parents=True, exist_ok=True)
    for tenant_key, document in sorted(documents.items()):
        name = tenant_file_name(tenant_key)
        if name is None:
            logger.warning(f"Skipped balance unit {tenant_key!r}: not usable as a file name")
            continue
        target = args.out_dir / name
        target.write_text(document, encoding="utf-8")
        logger.info(f"Wrote {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
