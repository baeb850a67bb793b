"""Configuración común de pruebas: SQLite local y cliente con la app real."""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test_univoz.db"
os.environ["SEED_ON_STARTUP"] = "true"
os.environ["SEED_PASSWORD"] = "123456"
os.environ["SEED_ADMIN_PASSWORD"] = "admin123"

import pytest
from fastapi.testclient import TestClient

from univoz.database import Base, engine, SessionLocal
from univoz.main import app


@pytest.fixture
def client():
    """Cliente con esquema recién creado; el lifespan siembra las cuentas."""
    Base.metadata.drop_all(bind=engine)
    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(client):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def vote(client):
    """Emite un voto: vote(email, candidato)."""
    def _vote(email, candidato="Lista A"):
        return client.post("/api/votar", json={
            "email": email,
            "candidato": candidato,
            "propuestas": "Más becas",
            "comentarios": "",
        })
    return _vote


@pytest.fixture
def opinion(client):
    """Envía una opinión: opinion(email, categoria, calificacion)."""
    def _opinion(email, categoria="cafeteria", calificacion=4):
        return client.post("/api/opinion", json={
            "email": email,
            "categoria": categoria,
            "calificacion": calificacion,
            "comentario": "Bien",
        })
    return _opinion
