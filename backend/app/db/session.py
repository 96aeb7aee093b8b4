from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def build_engine(database_url: str):
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are used from the threadpool
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def build_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


engine = build_engine(settings.DATABASE_URL)
