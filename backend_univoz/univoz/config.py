import os
from dotenv import load_dotenv

load_dotenv()

# ===== CONFIG =====
# URL de conexión (MySQL por defecto, cualquier URL de SQLAlchemy sirve)
DATABASE_URL = os.getenv("DATABASE_URL", "mysql+pymysql://root:@localhost:3306/univoz_db")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP", "true").lower() in ("1", "true", "yes")
SEED_PASSWORD = os.getenv("SEED_PASSWORD", "123456")
SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

FRONTEND_URL = os.getenv("FRONTEND_URL", "https://uleam-encuestas.onrender.com")
