import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..database import get_db
from ..gridref.convert import to_lat_lng
from ..gridref.errors import GridReferenceError
from ..models import StalkingRecord
from ..schemas import ClearResponse, RecordCreate, RecordGeoPoint, RecordOut, RecordUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["records"])


def _invalid_grid_ref(e: GridReferenceError) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": str(e), "kind": e.kind})


def _get_or_404(db: Session, record_id: int) -> StalkingRecord:
    record = db.query(StalkingRecord).filter(StalkingRecord.id == record_id).first()
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    return record


@router.get("/records", response_model=list[RecordOut])
def list_records(
    q: Optional[str] = Query(default=None, description="Search species, location, shooter and remarks"),
    species: Optional[str] = Query(default=None, description="Filter by species"),
    start_date: Optional[date] = Query(default=None, description="Earliest date (inclusive)"),
    end_date: Optional[date] = Query(default=None, description="Latest date (inclusive)"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=0, ge=0, description="Max records to return (0 = all)"),
    db: Session = Depends(get_db),
):
    """List records newest first, with optional search, filters and pagination."""
    query = db.query(StalkingRecord)

    if q:
        term = f"%{q.lower()}%"
        query = query.filter(or_(
            func.lower(StalkingRecord.species).like(term),
            func.lower(StalkingRecord.location).like(term),
            func.lower(StalkingRecord.shooter).like(term),
            func.lower(StalkingRecord.remarks).like(term),
        ))
    if species:
        query = query.filter(func.lower(StalkingRecord.species) == species.lower())
    if start_date:
        query = query.filter(StalkingRecord.date >= start_date.isoformat())
    if end_date:
        query = query.filter(StalkingRecord.date <= end_date.isoformat())

    query = query.order_by(
        StalkingRecord.date.desc(), StalkingRecord.created_at.desc(), StalkingRecord.id.desc()
    ).offset(skip)
    if limit > 0:
        query = query.limit(limit)
    return query.all()


@router.post("/records", response_model=RecordOut, status_code=201)
def create_record(payload: RecordCreate, db: Session = Depends(get_db)):
    """Create a record. The grid reference is validated and stored in canonical form."""
    data = payload.model_dump(exclude={"grid_ref"})
    data["date"] = payload.date.isoformat()
    record = StalkingRecord(**data)
    try:
        record.set_grid_ref(payload.grid_ref)
    except GridReferenceError as e:
        raise _invalid_grid_ref(e)

    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@router.delete("/records", response_model=ClearResponse)
def clear_records(db: Session = Depends(get_db)):
    """Delete every record."""
    deleted = db.query(StalkingRecord).delete()
    db.commit()
    logger.info("Cleared %d records", deleted)
    return ClearResponse(message=f"Deleted {deleted} records", deleted=deleted)


@router.get("/records/geo", response_model=list[RecordGeoPoint])
def get_records_geo(
    species: Optional[str] = Query(default=None, description="Filter by species"),
    limit: int = Query(default=1000, ge=1, le=5000),
    db: Session = Depends(get_db),
):
    """Return records with lat/lng coordinates for map markers.

    Records whose grid reference cannot be located are left off the map.
    """
    query = db.query(StalkingRecord).filter(
        StalkingRecord.grid_ref.isnot(None), StalkingRecord.grid_ref != ""
    )
    if species:
        query = query.filter(func.lower(StalkingRecord.species) == species.lower())
    records = query.order_by(StalkingRecord.date.desc()).limit(limit).all()

    # Fill in coordinates for records saved before they were cached
    updated = False
    for r in records:
        if r.latitude is None:
            point = to_lat_lng(r.grid_ref)
            if point is not None:
                r.latitude = point.lat
                r.longitude = point.lng
                updated = True
    if updated:
        try:
            db.commit()
        except Exception:
            db.rollback()
            logger.warning("Failed to save cached coordinates")

    return [
        RecordGeoPoint(
            id=r.id,
            latitude=r.latitude,
            longitude=r.longitude,
            date=r.date,
            species=r.species,
            sex=r.sex,
            maturity=r.maturity,
            weight=r.weight,
            grid_ref=r.grid_ref,
            location=r.location,
            time_of_day=r.time_of_day,
        )
        for r in records
        if r.latitude is not None and r.longitude is not None
    ]


@router.get("/records/{record_id}", response_model=RecordOut)
def get_record(record_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, record_id)


@router.patch("/records/{record_id}", response_model=RecordOut)
def update_record(record_id: int, payload: RecordUpdate, db: Session = Depends(get_db)):
    """Partially update a record. A new grid reference is re-validated."""
    record = _get_or_404(db, record_id)
    updates = payload.model_dump(exclude_unset=True)

    if "grid_ref" in updates:
        try:
            record.set_grid_ref(updates.pop("grid_ref") or "")
        except GridReferenceError as e:
            db.rollback()
            raise _invalid_grid_ref(e)
    if updates.get("date") is not None:
        updates["date"] = updates["date"].isoformat()

    for field, value in updates.items():
        if value is None and field not in ("remarks",):
            continue
        setattr(record, field, value)

    db.commit()
    db.refresh(record)
    return record


@router.delete("/records/{record_id}", status_code=204)
def delete_record(record_id: int, db: Session = Depends(get_db)):
    record = _get_or_404(db, record_id)
    db.delete(record)
    db.commit()
