import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import DATABASE_URL

logger = logging.getLogger(__name__)

engine = create_engine(
    DATABASE_URL, connect_args={"check_same_thread": False}
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def _migrate_db():
    """Add columns that may be missing from existing databases."""
    import sqlalchemy
    with engine.connect() as conn:
        migrations = [
            "ALTER TABLE stalking_records ADD COLUMN latitude FLOAT",
            "ALTER TABLE stalking_records ADD COLUMN longitude FLOAT",
        ]
        for sql in migrations:
            try:
                conn.execute(sqlalchemy.text(sql))
                conn.commit()
            except Exception:
                conn.rollback()

    _backfill_coordinates()


def _backfill_coordinates():
    """Convert stored grid references into the cached latitude/longitude columns."""
    from .gridref.convert import to_lat_lng
    import sqlalchemy

    with engine.connect() as conn:
        try:
            rows = conn.execute(sqlalchemy.text(
                "SELECT id, grid_ref FROM stalking_records "
                "WHERE latitude IS NULL AND grid_ref IS NOT NULL AND grid_ref != ''"
            )).fetchall()
        except OperationalError:
            # Table not created yet
            return

        filled = 0
        for row in rows:
            point = to_lat_lng(row[1])
            if point is None:
                continue
            conn.execute(
                sqlalchemy.text(
                    "UPDATE stalking_records SET latitude = :lat, longitude = :lng "
                    "WHERE id = :id"
                ),
                {"lat": point.lat, "lng": point.lng, "id": row[0]},
            )
            filled += 1
        conn.commit()

    if filled:
        logger.info("Backfilled coordinates for %d records", filled)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
