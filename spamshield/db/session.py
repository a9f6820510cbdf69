# db connection
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv
from sqlalchemy.orm import Session

from spamshield.core.config import settings

load_dotenv()

DATABASE_URL = settings.DATABASE_URL

# sqlite connections are shared across the threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# DB session dependency
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
