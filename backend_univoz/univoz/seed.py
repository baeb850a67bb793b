import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .auth import hash_password
from .config import SEED_PASSWORD, SEED_ADMIN_PASSWORD
from .database import Base, engine
from .models import User

logger = logging.getLogger(__name__)


def seed_accounts() -> list[tuple[str, str, str]]:
    """(email, password, rol) de las cuentas que siempre deben existir."""
    return [
        ("admin@live.uleam.edu.ec", SEED_PASSWORD, "admin"),
        ("juan@live.uleam.edu.ec", SEED_PASSWORD, "estudiante"),
        ("admin@uleam.edu.ec", SEED_ADMIN_PASSWORD, "admin"),
    ]


def create_tables() -> None:
    # Solo crea las tablas que faltan, nunca altera las existentes
    Base.metadata.create_all(bind=engine)


def seed_users(db: Session) -> list[str]:
    """Inserta las cuentas semilla que no existan; devuelve los correos creados.

    Una cuenta existente no se toca (ni su rol ni su contraseña), así que se
    puede llamar cuantas veces se quiera.
    """
    created = []
    for email, password, rol in seed_accounts():
        if db.query(User.id).filter(User.email == email).first():
            continue
        db.add(User(email=email, password=hash_password(password), rol=rol))
        try:
            db.commit()
        except IntegrityError:
            # otra instancia la insertó entre el SELECT y el INSERT
            db.rollback()
            continue
        created.append(email)

    if created:
        logger.info("Usuarios semilla creados: %s", ", ".join(created))
    else:
        logger.info("Usuarios semilla ya existen")
    return created


def bootstrap(db: Session) -> list[str]:
    create_tables()
    return seed_users(db)
