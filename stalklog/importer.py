"""Import historic cull-sheet CSV exports into the records table.

Expected columns (positional, first row is a header):
  serial, date, species, sex, maturity, weight, grid ref, location, time of day
"""

import logging
from io import StringIO
from typing import Optional

import pandas as pd
from sqlalchemy.orm import Session

from .gridref.errors import GridReferenceError
from .models import StalkingRecord
from .parsing import (
    normalise_grid_ref,
    normalise_location,
    normalise_maturity,
    normalise_sex,
    normalise_species,
    normalise_time_of_day,
    parse_csv_date,
    parse_weight,
)

logger = logging.getLogger(__name__)

_COLUMNS = [
    "serial", "date", "species", "sex", "maturity",
    "weight", "grid_ref", "location", "time_of_day",
]
_MIN_FIELDS = 8
_SHOOTER = "CSV Import"


def _duplicate_key(record: StalkingRecord) -> tuple:
    return (
        record.date, record.species, record.sex, record.maturity,
        record.weight, record.grid_ref, record.location, record.time_of_day,
    )


def _read_rows(content: str) -> pd.DataFrame:
    """Read CSV text into a string DataFrame with exactly the expected columns.

    Short rows are padded with NaN, long rows truncated. The first column is
    never taken as the index, so trailing commas do not shift the fields.
    """
    return pd.read_csv(
        StringIO(content),
        header=None,
        skiprows=1,
        names=_COLUMNS,
        index_col=False,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        engine="python",
        on_bad_lines=lambda line: line[:len(_COLUMNS)],
    )


def import_csv(
    db: Session,
    content: str,
    default_square: Optional[str] = None,
    default_year: Optional[int] = None,
    commit: bool = True,
) -> dict:
    """Import cull-sheet CSV *content*, skipping rows already in the database.

    Returns counts: imported, skipped, errors and invalid_grid_refs (rows
    imported without a location because the reference was unusable).
    With commit=False the rows are only flushed and the caller decides.
    """
    imported = skipped = errors = invalid_grid_refs = 0

    try:
        df = _read_rows(content)
    except pd.errors.EmptyDataError:
        return {"imported": 0, "skipped": 0, "errors": 0, "invalid_grid_refs": 0}

    existing = {_duplicate_key(r) for r in db.query(StalkingRecord).all()}

    for row_no, row in enumerate(df.itertuples(index=False), start=1):
        try:
            present = sum(1 for value in row if isinstance(value, str))
            if present < _MIN_FIELDS:
                skipped += 1
                continue
            raw = {col: (value if isinstance(value, str) else "") for col, value in zip(_COLUMNS, row)}

            if not raw["species"].strip() or not raw["date"].strip():
                skipped += 1
                continue

            date_iso = parse_csv_date(raw["date"], default_year)
            if date_iso is None:
                logger.warning("Row %d: could not parse date %r", row_no, raw["date"])
                skipped += 1
                continue

            serial = raw["serial"].strip()
            record = StalkingRecord(
                date=date_iso,
                species=normalise_species(raw["species"]),
                sex=normalise_sex(raw["sex"]),
                maturity=normalise_maturity(raw["maturity"]),
                weight=parse_weight(raw["weight"]),
                location=normalise_location(raw["location"]),
                shooter=_SHOOTER,
                remarks=f"Serial: {serial}" if serial else "",
                time_of_day=normalise_time_of_day(raw["time_of_day"]),
            )

            grid_ref = normalise_grid_ref(raw["grid_ref"], default_square)
            try:
                record.set_grid_ref(grid_ref)
            except GridReferenceError as e:
                logger.warning("Row %d: %s (%s)", row_no, e, e.kind)
                invalid_grid_refs += 1
                record.set_grid_ref("")

            key = _duplicate_key(record)
            if key in existing:
                skipped += 1
                continue

            db.add(record)
            existing.add(key)
            imported += 1
        except Exception:
            logger.exception("Row %d: failed to import row", row_no)
            errors += 1

    if commit:
        db.commit()
    else:
        db.flush()
    logger.info(
        "CSV import: %d imported, %d skipped, %d errors, %d invalid grid refs",
        imported, skipped, errors, invalid_grid_refs,
    )
    return {
        "imported": imported,
        "skipped": skipped,
        "errors": errors,
        "invalid_grid_refs": invalid_grid_refs,
    }
