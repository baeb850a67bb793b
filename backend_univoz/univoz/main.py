import html
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .config import CORS_ORIGINS, LOG_LEVEL, SEED_ON_STARTUP, FRONTEND_URL
from .database import engine, get_db, SessionLocal, storage_errors, reset_tables
from .errors import (
    register_error_handlers, ApiError, NotFoundError, UnauthorizedError, InvalidInputError
)
from .models import User, Vote, Opinion
from .schemas import (
    LoginIn, LoginOut, VoteIn, OpinionIn, PendingOut, TallyRow, OpinionOut,
    UserCreate, UserOut, RoleChange, StatusOut
)
from .auth import hash_password, verify_password
from .seed import bootstrap, seed_accounts

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Lifespan: migración idempotente al arrancar, cierre del pool al apagar
@asynccontextmanager
async def lifespan(app: FastAPI):
    if SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            bootstrap(db)
        except SQLAlchemyError:
            # Sin base al arrancar: la API sigue arriba y cada ruta responde 500 hasta que vuelva
            db.rollback()
            logger.exception("No se pudo preparar la base de datos al arrancar")
        finally:
            db.close()
    logger.info("API UniVoz lista")
    yield
    engine.dispose()
    logger.info("API UniVoz detenida")

app = FastAPI(title="Backend UniVoz", version="1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

api = APIRouter(prefix="/api")

# ========= SETUP =========

@api.get("/crear-usuarios", response_class=HTMLResponse)
def create_seed_users(db: Session = Depends(get_db)):
    try:
        bootstrap(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error creando usuarios: %s", e)
        return HTMLResponse(f"Error creando usuarios: {html.escape(str(e))}", status_code=500)

    cuentas = "".join(
        f"<p>{'Admin' if rol == 'admin' else 'Estudiante'}: {email}</p>"
        for email, _, rol in seed_accounts()
    )
    return f"""
        <div style="font-family: sans-serif; text-align: center; padding: 40px;">
            <h1 style="color: #27ae60;">¡Usuarios creados!</h1>
            <p>Las tablas <b>votos, opiniones y usuarios</b> están listas.</p>
            {cuentas}
            <a href="{FRONTEND_URL}" style="color: blue;">Volver al sitio</a>
        </div>
    """

# ========= AUTH =========

@api.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    with storage_errors(db, "Error en el servidor"):
        user = db.query(User).filter(User.email == payload.email).first()
    if not user:
        raise NotFoundError("Usuario no encontrado")
    if payload.password is None:
        # sin contraseña no hay hash que comparar
        raise ApiError("Error en el servidor")
    if not verify_password(payload.password, user.password):
        raise UnauthorizedError("Contraseña incorrecta")
    return {"status": "success", "email": user.email, "rol": user.rol}

# ========= DASHBOARD =========

@api.get("/pendientes", response_model=PendingOut)
def pending_status(email: Optional[str] = None, db: Session = Depends(get_db)):
    with storage_errors(db, "Error en el servidor"):
        voted = db.query(Vote.id).filter(Vote.email == email).first() is not None
        cafeteria = db.query(Opinion.id).filter(
            Opinion.email == email, Opinion.categoria == "cafeteria"
        ).first() is not None
        labs = db.query(Opinion.id).filter(
            Opinion.email == email, Opinion.categoria == "laboratorios"
        ).first() is not None

    # Solo la votación cuenta como pendiente; las opiniones se informan pero no suman
    pendientes = 0 if voted else 1
    return {
        "pendientes": pendientes,
        "estado": {"elecciones": voted, "cafeteria": cafeteria, "laboratorios": labs},
    }

# ========= VOTOS =========

@api.post("/votar", response_model=StatusOut)
def cast_vote(payload: VoteIn, db: Session = Depends(get_db)):
    with storage_errors(db, "Error al votar"):
        # Tablas antiguas pueden no tener el UNIQUE de votos.email; el SELECT cubre ese caso
        if db.query(Vote.id).filter(Vote.email == payload.email).first():
            return {"status": "error", "message": "Usuario ya votó"}
        db.add(Vote(
            email=payload.email,
            candidato=payload.candidato,
            propuestas=payload.propuestas,
            comentarios=payload.comentarios,
        ))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            # Voto concurrente rechazado por el UNIQUE; cualquier otra violación sigue como error
            if db.query(Vote.id).filter(Vote.email == payload.email).first():
                return {"status": "error", "message": "Usuario ya votó"}
            raise
    return {"status": "success", "message": "Voto guardado"}

@api.get("/resultados", response_model=list[TallyRow])
def tally(db: Session = Depends(get_db)):
    with storage_errors(db, "Error obteniendo resultados"):
        rows = db.query(Vote.candidato, func.count(Vote.id)).group_by(Vote.candidato).all()
    return [{"candidato": candidato, "total": total} for candidato, total in rows]

@api.delete("/votos", response_model=StatusOut)
def reset_votes(db: Session = Depends(get_db)):
    with storage_errors(db, "Error al eliminar votos"):
        reset_tables(db, "votos")
    logger.info("Votos reiniciados")
    return {"status": "success", "message": "Votos eliminados correctamente"}

@api.delete("/reset", response_model=StatusOut)
def reset_all(db: Session = Depends(get_db)):
    with storage_errors(db, "Error crítico al reiniciar"):
        reset_tables(db, "votos", "opiniones")
    logger.info("Sistema reiniciado (votos y opiniones)")
    return {"status": "success", "message": "Sistema reiniciado"}

# ========= OPINIONES =========

@api.post("/opinion", response_model=StatusOut, response_model_exclude_none=True)
def submit_opinion(payload: OpinionIn, db: Session = Depends(get_db)):
    # Sin control de duplicados: cada envío es una fila nueva
    with storage_errors(db, "Error al guardar opinion"):
        db.add(Opinion(
            email=payload.email,
            categoria=payload.categoria,
            calificacion=payload.calificacion,
            comentario=payload.comentario,
        ))
        db.commit()
    return {"status": "success"}

@api.get("/opiniones", response_model=list[OpinionOut])
def list_opinions(db: Session = Depends(get_db)):
    with storage_errors(db, "Error al leer opiniones"):
        return db.query(Opinion).order_by(Opinion.fecha.desc(), Opinion.id.desc()).all()

@api.delete("/opiniones/{opinion_id}", response_model=StatusOut)
def delete_opinion(opinion_id: int, db: Session = Depends(get_db)):
    with storage_errors(db, "Error al eliminar opinión"):
        db.query(Opinion).filter(Opinion.id == opinion_id).delete()
        db.commit()
    return {"status": "success", "message": "Opinión eliminada"}

@api.delete("/opiniones-reset", response_model=StatusOut)
def reset_category(categoria: Optional[str] = None, db: Session = Depends(get_db)):
    if not categoria:
        raise InvalidInputError("Falta la categoría")
    with storage_errors(db, "Error al reiniciar categoría"):
        deleted = db.query(Opinion).filter(Opinion.categoria == categoria).delete()
        db.commit()
    logger.info("Categoría %s reiniciada (%d opiniones)", categoria, deleted)
    return {"status": "success", "message": f"Se reinició la categoría {categoria}"}

# ========= USUARIOS (ADMIN) =========

@api.get("/usuarios", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    with storage_errors(db, "Error al listar usuarios"):
        return db.query(User).order_by(User.id.asc()).all()

@api.post("/usuarios", response_model=StatusOut)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    if payload.password is None:
        raise ApiError("Error al crear usuario (quizás el correo ya existe)")
    with storage_errors(db, "Error al crear usuario (quizás el correo ya existe)"):
        db.add(User(
            email=payload.email,
            password=hash_password(payload.password),
            rol=payload.rol or "estudiante",
        ))
        db.commit()
    return {"status": "success", "message": "Usuario creado"}

# Sin comprobar existencia: un id inexistente responde success sin borrar nada
@api.delete("/usuarios/{user_id}", response_model=StatusOut)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    with storage_errors(db, "Error al eliminar"):
        db.query(User).filter(User.id == user_id).delete()
        db.commit()
    return {"status": "success", "message": "Usuario eliminado"}

@api.put("/usuarios/{user_id}/rol", response_model=StatusOut, response_model_exclude_none=True)
def change_role(user_id: int, payload: RoleChange, db: Session = Depends(get_db)):
    with storage_errors(db, "Error al actualizar rol"):
        db.query(User).filter(User.id == user_id).update({User.rol: payload.nuevoRol})
        db.commit()
    return {"status": "success"}

app.include_router(api)
