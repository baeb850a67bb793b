from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.config import ConfigDict

# Los campos opcionales no se validan aquí: lo que la base rechace (NOT NULL, UNIQUE)
# termina como error 500 de almacenamiento.

# ===== AUTH =====
class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class LoginOut(BaseModel):
    status: str = "success"
    email: str
    rol: Optional[str] = None

# ===== VOTOS Y OPINIONES =====
class VoteIn(BaseModel):
    email: Optional[str] = None
    candidato: Optional[str] = None
    propuestas: Optional[str] = None
    comentarios: Optional[str] = None

class OpinionIn(BaseModel):
    email: Optional[str] = None
    categoria: Optional[str] = None
    calificacion: Optional[int] = None
    comentario: Optional[str] = None

class PendingState(BaseModel):
    elecciones: bool
    cafeteria: bool
    laboratorios: bool

class PendingOut(BaseModel):
    pendientes: int
    estado: PendingState

class TallyRow(BaseModel):
    candidato: Optional[str] = None
    total: int

class OpinionOut(BaseModel):
    id: int
    email: str
    categoria: Optional[str] = None
    calificacion: Optional[int] = None
    comentario: Optional[str] = None
    fecha: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# ===== USUARIOS (ADMIN) =====
class UserCreate(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    rol: Optional[str] = None

class UserOut(BaseModel):
    id: int
    email: str
    rol: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class RoleChange(BaseModel):
    nuevoRol: Optional[str] = None  # 'admin' o 'estudiante'

# ===== RESPUESTAS =====
class StatusOut(BaseModel):
    status: str = "success"
    message: Optional[str] = None
