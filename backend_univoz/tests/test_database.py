import pytest
from sqlalchemy import text

from univoz.database import storage_errors, check_connection
from univoz.errors import StorageError


def test_storage_errors_wraps_and_rolls_back(db_session):
    with pytest.raises(StorageError) as info:
        with storage_errors(db_session, "Error de prueba"):
            db_session.execute(text("SELECT * FROM tabla_que_no_existe"))
    assert info.value.message == "Error de prueba"
    assert info.value.status_code == 500

    # la sesión sigue usable tras el rollback
    assert db_session.execute(text("SELECT 1")).scalar() == 1


def test_check_connection():
    assert check_connection() is True
