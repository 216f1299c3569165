import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root (one level above backend/)
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

CALCULATOR_API_BASE = os.getenv("CALCULATOR_API_BASE", "http://localhost:8080").rstrip("/")
CALCULATOR_TIMEOUT_SECONDS = float(os.getenv("CALCULATOR_TIMEOUT_SECONDS", "10.0"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
