"""Service configuration from environment variables."""

import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SERVICE_NAME = os.getenv("SERVICE_NAME", "Hospital Recovery Engine")
SERVICE_VERSION = os.getenv("SERVICE_VERSION", "1.0.0")

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]
