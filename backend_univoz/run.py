#!/usr/bin/env python
import sys
import os
import logging

# Agregar el directorio actual al path
sys.path.insert(0, os.path.dirname(__file__))

from univoz.config import HOST, PORT, LOG_LEVEL
from univoz.database import check_connection
from univoz.main import app
import uvicorn

logger = logging.getLogger("univoz.run")

if __name__ == "__main__":
    if not check_connection():
        logger.warning("La base de datos no responde; la API arrancará igual")
    logger.info("Servidor corriendo en http://%s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
