import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from ..config import RATE_LIMIT_ENABLED, RATE_LIMIT_IMPORT
from ..database import get_db
from ..importer import import_csv
from ..schemas import ImportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["import"])

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


def _decode(body: bytes) -> str:
    try:
        return body.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Spreadsheet exports are often cp1252/latin-1
        return body.decode("latin-1")


@router.post("/csv", response_model=ImportResponse)
@limiter.limit(RATE_LIMIT_IMPORT)
async def import_csv_body(
    request: Request,
    default_square: Optional[str] = Query(
        default=None, min_length=2, max_length=2,
        description="Grid square for bare '600 393' references (defaults to IMPORT_DEFAULT_GRID_SQUARE)",
    ),
    default_year: Optional[int] = Query(
        default=None, ge=1900, le=2100,
        description="Year for dates without one (defaults to IMPORT_DEFAULT_YEAR)",
    ),
    db: Session = Depends(get_db),
):
    """Import a cull-sheet CSV sent as the raw request body."""
    body = await request.body()
    if not body.strip():
        raise HTTPException(status_code=400, detail="Request body is empty")

    content = _decode(body)
    result = import_csv(
        db,
        content,
        default_square=default_square.upper() if default_square else None,
        default_year=default_year,
    )
    return ImportResponse(
        message=f"Imported {result['imported']} records",
        **result,
    )
