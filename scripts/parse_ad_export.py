"""
Parse a Google Ads export from CLI and print the result as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from app.parsing.errors import AdExportError
from app.services.ad_export_service import parse_google_ads_file
from app.services.ad_import_store import get_ad_import_store
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Parse a Google Ads CSV/TSV/XLSX/XLS export.")
    parser.add_argument("path", type=Path, help="Export file to parse.")
    parser.add_argument(
        "--store",
        action="store_true",
        help="Also persist the result as the latest import.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        help="Logging level (default: WARNING).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.strip().upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        result = asyncio.run(parse_google_ads_file(args.path))
    except AdExportError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.store:
        with SessionLocal() as db:
            get_ad_import_store().save(db, result, source_filename=args.path.name)

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
