import io

import numpy as np
import pytest
import soundfile as sf
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import spamshield.db.models  # noqa: F401
from spamshield.db.base import Base
from spamshield.db.models.profile import Profile
from spamshield.db.session import get_db
from spamshield.main import app


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def admin(db):
    profile = Profile(id="admin-1", email="admin@spamshield.test", first_name="Ada", last_name="Admin", role="admin")
    db.add(profile)
    db.commit()
    return profile


def as_user(user_id: str) -> dict:
    return {"X-User-Id": user_id}


def wav_bytes(samples: np.ndarray, sr: int = 16000) -> bytes:
    buf = io.BytesIO()
    sf.write(buf, samples, sr, format="WAV", subtype="PCM_16")
    return buf.getvalue()


def steady_tone(seconds: float = 2.0, sr: int = 16000, freq: float = 200.0) -> np.ndarray:
    t = np.arange(int(seconds * sr)) / sr
    return (0.5 * np.sin(2 * np.pi * freq * t)).astype(np.float32)


def speech_like(sr: int = 16000, seed: int = 0) -> np.ndarray:
    # tone bursts of uneven length with a moving envelope, room noise in between
    rng = np.random.default_rng(seed)
    bursts = [0.3, 0.7, 0.45, 1.0, 0.2]
    gaps = [0.2, 0.15, 0.3, 0.1, 0.2, 0.2]

    parts = []
    for i, gap in enumerate(gaps):
        parts.append(rng.normal(0.0, 0.003, int(gap * sr)))
        if i < len(bursts):
            n = int(bursts[i] * sr)
            t = np.arange(n) / sr
            envelope = 0.6 + 0.3 * np.sin(2 * np.pi * 3.0 * t)
            parts.append(0.5 * envelope * np.sin(2 * np.pi * 220.0 * t) + rng.normal(0.0, 0.003, n))
    return np.concatenate(parts).astype(np.float32)
