import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from .config import DATABASE_URL
from .errors import StorageError

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Crear el engine sin probar conexión en el import.
# pool_pre_ping ayuda a reconectar conexiones muertas.
engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def storage_errors(db: Session, message: str):
    """Convierte cualquier fallo de SQLAlchemy en un StorageError con el mensaje de la ruta.

    La sesión se revierte antes de propagar, así la conexión vuelve limpia al pool.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s: %s", message, e)
        raise StorageError(message) from e

def reset_tables(db: Session, *tables: str) -> None:
    """Vacía las tablas y reinicia sus contadores de id a 1."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        db.execute(text(f"TRUNCATE TABLE {', '.join(tables)} RESTART IDENTITY"))
    elif dialect == "mysql":
        for table in tables:
            db.execute(text(f"TRUNCATE TABLE {table}"))
    else:
        # SQLite: sin AUTOINCREMENT una tabla vacía vuelve a empezar en 1
        for table in tables:
            db.execute(text(f"DELETE FROM {table}"))
    db.commit()

# Función opcional para probar la conexión manualmente (usar desde CLI o en un healthcheck)
def check_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
        return True
    except SQLAlchemyError as e:
        logger.error("Database connection failed: %s", e)
        return False
