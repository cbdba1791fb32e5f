from datetime import date as date_type, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Sex = Literal["Male", "Female", "Unknown"]
Maturity = Literal["Adult", "Juvenile", "Unknown"]
TimeOfDay = Literal["Dawn", "Morning", "Afternoon", "Dusk", "Night"]

# --- Record schemas ---

class RecordCreate(BaseModel):
    date: date_type
    species: str = Field(min_length=1)
    sex: Sex = "Unknown"
    maturity: Maturity = "Unknown"
    weight: float = Field(default=0.0, ge=0)
    grid_ref: str = ""
    location: str = ""
    shooter: str = ""
    remarks: Optional[str] = None
    time_of_day: TimeOfDay = "Morning"


class RecordUpdate(BaseModel):
    date: Optional[date_type] = None
    species: Optional[str] = Field(default=None, min_length=1)
    sex: Optional[Sex] = None
    maturity: Optional[Maturity] = None
    weight: Optional[float] = Field(default=None, ge=0)
    grid_ref: Optional[str] = None
    location: Optional[str] = None
    shooter: Optional[str] = None
    remarks: Optional[str] = None
    time_of_day: Optional[TimeOfDay] = None


class RecordOut(BaseModel):
    id: int
    date: str
    species: str
    sex: Optional[str] = None
    maturity: Optional[str] = None
    weight: Optional[float] = None
    grid_ref: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[str] = None
    shooter: Optional[str] = None
    remarks: Optional[str] = None
    time_of_day: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RecordGeoPoint(BaseModel):
    id: int
    latitude: float
    longitude: float
    date: str
    species: str
    sex: Optional[str] = None
    maturity: Optional[str] = None
    weight: Optional[float] = None
    grid_ref: str
    location: Optional[str] = None
    time_of_day: Optional[str] = None


class ClearResponse(BaseModel):
    message: str
    deleted: int


# --- Grid reference ---

class GridRefInfo(BaseModel):
    input: str
    valid: bool
    canonical: Optional[str] = None
    easting: Optional[int] = None
    northing: Optional[int] = None
    precision: Optional[int] = None
    precision_metres: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    in_herefordshire: bool = False
    error: Optional[str] = None
    kind: Optional[str] = None


# --- CSV import ---

class ImportResponse(BaseModel):
    message: str
    imported: int
    skipped: int
    errors: int
    invalid_grid_refs: int = 0


# --- Predictions ---

class Prediction(BaseModel):
    type: Literal["location", "time", "species"]
    title: str
    description: str
    confidence: float


class PredictionsResponse(BaseModel):
    total_records: int
    species_stats: dict[str, int] = {}
    location_stats: dict[str, int] = {}
    time_stats: dict[str, int] = {}
    monthly_stats: dict[str, int] = {}
    predictions: list[Prediction] = []
