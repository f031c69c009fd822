"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    DATABASE_URL         — SQLAlchemy URL of the record store (default: sqlite:///./bugtracker.db)
    API_PREFIX           — Prefix for the REST surface (default: /api/v1)
    CORS_ORIGINS         — Comma-separated origins allowed to call the API
    LOG_LEVEL            — Root log level name (default: INFO)
    LOG_DIR              — Directory for the daily log file; empty disables it (default: logs)
    HOST / PORT          — uvicorn bind address (default: 127.0.0.1:8000)
    BUGTRACKER_API_URL   — Base URL the Python client talks to
"""
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bugtracker.db")
API_PREFIX = os.getenv("API_PREFIX", "/api/v1").rstrip("/")

CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", 8000))

API_BASE_URL = os.getenv("BUGTRACKER_API_URL", f"http://localhost:{PORT}{API_PREFIX}")
