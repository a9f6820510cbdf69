from fastapi import FastAPI

from spamshield.api.v1.router import router as v1_router
from spamshield.routers import health
from spamshield.core.logging_config import configure_logging

# DB (Base / engine)
from spamshield.db.base import Base
from spamshield.db.session import engine

# register models on Base.metadata
import spamshield.db.models  # noqa: F401

configure_logging()

app = FastAPI(title="SpamShield")

app.include_router(v1_router, prefix="/api/v1")
app.include_router(health.router)


@app.on_event("startup")
def on_startup():
    # no migrations yet: create missing tables
    Base.metadata.create_all(bind=engine)
