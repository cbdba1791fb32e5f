import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy import text

from .config import CORS_ORIGINS, LOG_LEVEL, RATE_LIMIT_DEFAULT, RATE_LIMIT_ENABLED
from .database import Base, SessionLocal, _migrate_db, engine
from .routers import gridref, imports, predictions, records

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Migrate existing databases, then create any new tables
_migrate_db()
Base.metadata.create_all(bind=engine)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=RATE_LIMIT_ENABLED,
)

app = FastAPI(
    title="Stalk to Fork API",
    description="Deer stalking cull records with National Grid reference mapping.",
    version="1.0.0",
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(records.router, prefix="/api/v1")
app.include_router(gridref.router, prefix="/api/v1")
app.include_router(predictions.router, prefix="/api/v1")
app.include_router(imports.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    """Health check endpoint; verifies DB connectivity."""
    try:
        db = SessionLocal()
        db.execute(text("SELECT 1"))
        db.close()
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {e}"

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "version": app.version,
        "database": db_status,
    }


@app.get("/")
def root():
    return {
        "message": "Stalk to Fork API",
        "docs": "/docs",
    }
