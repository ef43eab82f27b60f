import logging

import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker, declarative_base

from files_manager.config import DATABASE_URL

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

db = sa.create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=db, autocommit=False, autoflush=False, expire_on_commit=False)

Base = declarative_base()

def get_db():
    database = SessionLocal()
    try:
        yield database
    finally:
        database.close()


def init_db(engine=db):
    import files_manager.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def is_alive(database) -> bool:
    try:
        database.execute(sa.text("SELECT 1"))
    except sa.exc.SQLAlchemyError:
        logger.exception("Database ping failed")
        return False
    return True
