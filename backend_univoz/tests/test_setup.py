from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from univoz import main
from univoz.database import Base, engine
from univoz.models import User
from univoz.seed import seed_users


def _db_down(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))


def test_bootstrap_endpoint_is_idempotent(client, db_session):
    before = db_session.query(User).count()
    assert before == 3

    for _ in range(2):
        res = client.get("/api/crear-usuarios")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/html")
        assert "admin@live.uleam.edu.ec" in res.text

    assert db_session.query(User).count() == before


def test_seed_keeps_existing_role(client, db_session):
    users = client.get("/api/usuarios").json()
    juan = next(u for u in users if u["email"] == "juan@live.uleam.edu.ec")
    client.put(f"/api/usuarios/{juan['id']}/rol", json={"nuevoRol": "admin"})

    assert seed_users(db_session) == []

    res = client.post("/api/login", json={"email": "juan@live.uleam.edu.ec", "password": "123456"})
    assert res.json()["rol"] == "admin"


def test_seed_recreates_deleted_account(client, db_session):
    users = client.get("/api/usuarios").json()
    admin = next(u for u in users if u["email"] == "admin@uleam.edu.ec")
    client.delete(f"/api/usuarios/{admin['id']}")

    assert seed_users(db_session) == ["admin@uleam.edu.ec"]


def test_bootstrap_endpoint_reports_storage_error_as_html(client, monkeypatch):
    monkeypatch.setattr(main, "bootstrap", _db_down)

    res = client.get("/api/crear-usuarios")
    assert res.status_code == 500
    assert res.headers["content-type"].startswith("text/html")
    assert res.text.startswith("Error creando usuarios:")
    assert "unable to open database file" in res.text


def test_app_starts_when_bootstrap_fails(monkeypatch):
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(main, "bootstrap", _db_down)
    try:
        with TestClient(main.app) as c:
            assert c.get("/api/resultados").json() == []
            # sin semilla: la cuenta admin no existe todavía
            res = c.post("/api/login", json={"email": "admin@live.uleam.edu.ec", "password": "123456"})
            assert res.status_code == 401
    finally:
        Base.metadata.drop_all(bind=engine)
