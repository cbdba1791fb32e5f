import calendar
from collections import Counter, defaultdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..models import StalkingRecord
from ..schemas import Prediction, PredictionsResponse

router = APIRouter(tags=["predictions"])

_MONTH_NAMES = [m for m in calendar.month_name if m]


def _month_name(iso_date: str) -> Optional[str]:
    try:
        return calendar.month_name[int(iso_date[5:7])]
    except (ValueError, IndexError):
        return None


def _top(counter: Counter) -> Optional[tuple[str, int]]:
    """Most common entry; ties go to the first seen."""
    common = counter.most_common(1)
    return common[0] if common else None


def _confidence(value: float, cap: float) -> float:
    return round(min(cap, value), 1)


def _analyse(
    records: list[StalkingRecord],
    selected_species: Optional[str],
    today: date,
    recent_days: int,
) -> PredictionsResponse:
    """Frequency counts and the headline "predictions" drawn from them."""
    total = len(records)
    species_stats = Counter(r.species for r in records)
    location_stats = Counter(r.location for r in records)
    time_stats = Counter(r.time_of_day for r in records)
    monthly_stats = Counter(m for m in (_month_name(r.date) for r in records) if m)

    predictions: list[Prediction] = []

    top_location = _top(location_stats)
    if top_location:
        name, count = top_location
        pct = count / total * 100
        predictions.append(Prediction(
            type="location",
            title=f"High Activity Zone: {name}",
            description=f"{count} sightings recorded. {round(pct)}% of all activity.",
            confidence=_confidence(pct + 20, 95),
        ))

    top_time = _top(time_stats)
    if top_time:
        name, count = top_time
        predictions.append(Prediction(
            type="time",
            title=f"Optimal Time: {name}",
            description=f"{count} sightings during {name.lower()}. Best success rate.",
            confidence=_confidence(count / total * 100 + 15, 90),
        ))

    top_species = _top(species_stats)
    if top_species:
        name, count = top_species
        predictions.append(Prediction(
            type="species",
            title=f"Most Common: {name}",
            description=f"{count} sightings. Highest probability species in this area.",
            confidence=_confidence(count / total * 100 + 10, 85),
        ))

    # Best location for the selected species
    if selected_species:
        matching = [r for r in records if r.species.lower() == selected_species.lower()]
        by_location: dict[str, int] = defaultdict(int)
        for r in matching:
            by_location[r.location] += 1
        if by_location:
            location, count = max(by_location.items(), key=lambda item: item[1])
            species_name = matching[0].species
            predictions.append(Prediction(
                type="location",
                title=f"Best {species_name} Location: {location}",
                description=(
                    f"{count} {species_name} sightings here. "
                    "Highest success rate for this species."
                ),
                confidence=_confidence(count / len(matching) * 100, 90),
            ))

    # Recent hotspot
    recent = []
    for r in records:
        try:
            days = abs((today - date.fromisoformat(r.date)).days)
        except ValueError:
            continue
        if days <= recent_days:
            recent.append(r)
    top_recent = _top(Counter(r.location for r in recent))
    if top_recent:
        name, count = top_recent
        predictions.append(Prediction(
            type="location",
            title=f"Recent Hotspot: {name}",
            description=(
                f"{count} sightings in the last {recent_days} days. "
                "Current high activity area."
            ),
            confidence=_confidence(count / len(recent) * 100 + 25, 80),
        ))

    return PredictionsResponse(
        total_records=total,
        species_stats=dict(species_stats),
        location_stats=dict(location_stats),
        time_stats=dict(time_stats),
        monthly_stats=dict(monthly_stats),
        predictions=predictions,
    )


@router.get("/predictions", response_model=PredictionsResponse)
def get_predictions(
    species: Optional[str] = Query(default=None, description="Only records of this species"),
    month: Optional[str] = Query(default=None, description="Only records from this month, e.g. 'October'"),
    db: Session = Depends(get_db),
):
    """Descriptive statistics over the records: where, when and what is most often culled."""
    if month is not None:
        month = month.strip().capitalize()
        if month not in _MONTH_NAMES:
            raise HTTPException(status_code=422, detail=f"Unknown month '{month}'")

    query = db.query(StalkingRecord)
    if species:
        query = query.filter(func.lower(StalkingRecord.species) == species.lower())
    records = query.all()
    if month:
        records = [r for r in records if _month_name(r.date) == month]

    return _analyse(records, species, date.today(), config.PREDICTIONS_RECENT_DAYS)
