from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings

settings = get_settings()


def _engine_kwargs(database_url: str) -> dict:
    if not database_url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in database_url or database_url.endswith("sqlite://"):
        # A single shared connection, otherwise every checkout sees an empty database
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(
    settings.database_url,
    echo=settings.database_echo,
    **_engine_kwargs(settings.database_url),
)

SessionLocal = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)
