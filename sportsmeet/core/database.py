from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from sportsmeet.core.config import settings

IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}

def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    options = {"connect_args": {"check_same_thread": False}}
    if url in IN_MEMORY_URLS:
        # Every session has to see the same in-memory database
        options["poolclass"] = StaticPool
    return options

engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
