import logging
import os

DATABASE_URL = os.getenv("DASHBOARD_DATABASE_URL", "sqlite:///./dashboard.db")
LOG_LEVEL = os.getenv("DASHBOARD_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("DASHBOARD_CORS_ORIGINS", "*").split(",") if o.strip()]

HOST = os.getenv("DASHBOARD_HOST", "127.0.0.1")
PORT = int(os.getenv("DASHBOARD_PORT", "8000"))

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
