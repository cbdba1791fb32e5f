from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
)

from .database import Base
from .gridref.convert import to_lat_lng
from .gridref.encoder import format_reference, parse


class StalkingRecord(Base):
    __tablename__ = "stalking_records"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String, nullable=False, index=True)  # ISO YYYY-MM-DD
    species = Column(String, nullable=False, index=True)
    sex = Column(String, default="Unknown")
    maturity = Column(String, default="Unknown")
    weight = Column(Float, default=0.0)  # kg
    grid_ref = Column(String, default="")  # canonical "SO 514 398" or empty
    # WGS84 coordinates derived from grid_ref (null when it cannot be located)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    location = Column(String, default="")
    shooter = Column(String, default="")
    remarks = Column(Text, nullable=True)
    time_of_day = Column(String, default="Morning")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("ix_record_date_created", "date", "created_at"),
    )

    def set_grid_ref(self, text: str) -> None:
        """Store *text* as a canonical grid reference and cache its WGS84 position.

        Blank text clears the location. Raises GridReferenceError if *text*
        is not a valid grid reference.
        """
        if not text or not text.strip():
            self.grid_ref = ""
            self.latitude = None
            self.longitude = None
            return

        ref = parse(text)
        self.grid_ref = format_reference(ref.easting, ref.northing, ref.precision)
        point = to_lat_lng(self.grid_ref)
        self.latitude = point.lat if point else None
        self.longitude = point.lng if point else None
