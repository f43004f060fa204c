from typing import Generator
from sqlmodel import SQLModel, Session, create_engine

from .config import settings
from .models import StoredRecord, User

# SQLite connections are shared across FastAPI's worker threads
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    connect_args=connect_args
)


def init_db(bind=None):
    SQLModel.metadata.create_all(bind or engine, tables=[User.__table__, StoredRecord.__table__])  # type: ignore[attr-defined]


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
