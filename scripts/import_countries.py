#!/usr/bin/env python3
"""Import countries from a spreadsheet into the ``countries`` collection.

Rows that fail validation are reported and skipped; codes that already
exist are left untouched.

    python -m scripts.import_countries data/countries.xlsx
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from config import settings
from config.logging_config import setup_logging
from utils.initial_data import import_countries, read_country_rows


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", help="Path to a .xlsx or .csv file")
    args = parser.parse_args(argv)

    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    summary = import_countries(read_country_rows(args.path))
    for error in summary.errors:
        print(f"Skipping {error}")
    print(f"Imported {summary.imported} countries, skipped {summary.skipped}.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
