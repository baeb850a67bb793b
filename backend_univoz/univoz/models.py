from sqlalchemy import Column, Integer, String, Text, DateTime, func
from .database import Base

class User(Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # hash bcrypt
    rol = Column(String(20), default="estudiante", server_default="estudiante")

class Vote(Base):
    __tablename__ = "votos"

    id = Column(Integer, primary_key=True, index=True)
    # unique: un voto por correo, lo garantiza la base y no un SELECT previo
    email = Column(String(100), unique=True, index=True, nullable=False)
    candidato = Column(String(50))
    propuestas = Column(Text)
    comentarios = Column(Text)
    fecha = Column(DateTime, server_default=func.now())

class Opinion(Base):
    __tablename__ = "opiniones"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), index=True, nullable=False)
    categoria = Column(String(50), index=True)
    calificacion = Column(Integer)
    comentario = Column(Text)
    fecha = Column(DateTime, server_default=func.now())
