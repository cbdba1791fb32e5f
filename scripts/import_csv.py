"""Import a historic cull-sheet CSV into the records database.

Usage:
    python scripts/import_csv.py culls.csv
    python scripts/import_csv.py culls.csv --square SO      # square for bare '600 393' refs
    python scripts/import_csv.py culls.csv --year 2022      # year for '16-Oct' style dates
    python scripts/import_csv.py culls.csv --dry-run        # report counts, write nothing
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from stalklog.database import Base, SessionLocal, engine
from stalklog.importer import import_csv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("import_csv")


def main():
    parser = argparse.ArgumentParser(description="Import a cull-sheet CSV")
    parser.add_argument("path", type=Path, help="CSV file to import")
    parser.add_argument("--square", default=None, help="Grid square for bare 'NNN NNN' references")
    parser.add_argument("--year", type=int, default=None, help="Year for dates without one")
    parser.add_argument("--dry-run", action="store_true", help="Roll back instead of committing")
    args = parser.parse_args()

    if not args.path.is_file():
        log.error("File not found: %s", args.path)
        sys.exit(2)

    raw = args.path.read_bytes()
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        content = raw.decode("latin-1")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        result = import_csv(
            db,
            content,
            default_square=args.square.upper() if args.square else None,
            default_year=args.year,
            commit=not args.dry_run,
        )
    finally:
        db.close()

    log.info(
        "%s%d imported, %d skipped, %d errors, %d invalid grid refs",
        "[dry run] " if args.dry_run else "",
        result["imported"], result["skipped"], result["errors"], result["invalid_grid_refs"],
    )


if __name__ == "__main__":
    main()
