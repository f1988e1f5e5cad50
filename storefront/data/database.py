# storefront/data/database.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.domain.errors import StorageError
from storefront.utils.settings import DATABASE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)

if engine.dialect.name == "sqlite":
    # pysqlite sam zarzadza BEGIN i psuje SAVEPOINT - BEGIN emitujemy recznie.
    # IMMEDIATE: zapisujaca transakcja bierze blokade od razu, druga czeka zamiast
    # konczyc sie "database is locked" przy pierwszym zapisie
    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

SessionLocal = sessionmaker(bind=engine, autoflush=False)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Jedna transakcja: commit przy sukcesie, rollback przy kazdym bledzie.
    Po rollbacku sesja jest czyszczona, obiekty z wycofanej transakcji nie zostaja w identity map.
    Bledy SQLAlchemy wychodza jako StorageError.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        db.expunge_all()
        logger.exception(f"Storage error, transaction rolled back: {e}")
        raise StorageError("Storage failure") from e
    except Exception:
        db.rollback()
        db.expunge_all()
        raise


def init_db():
    # rejestracja wszystkich modeli w Base.metadata przed create_all
    import storefront.data.models  # noqa: F401

    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)
