from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from os import getenv

DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://wiki:wiki@db:5432/wiki")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite n'applique les ON DELETE qu'avec ce pragma, par connexion
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str):
    # SQLite (dev local, tests) : session partagée entre threads du serveur
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, echo=False, pool_pre_ping=True)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """Session DB par requête, fermée après la réponse"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
