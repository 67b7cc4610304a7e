import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

BACKEND_CONFIG = {
    "base_url": os.getenv("BACKEND_BASE_URL", "http://localhost:5000"),
    "api_prefix": os.getenv("API_PREFIX", "api"),
    "token": os.getenv("API_TOKEN"),
    "timeout": float(os.getenv("REQUEST_TIMEOUT", "10")),
}

# Reverse geocoding is optional; without a key addresses fall back to coordinates.
MAP_API_KEY = os.getenv("MAP_API_KEY")
GEOLOCATION_TIMEOUT = float(os.getenv("GEOLOCATION_TIMEOUT", "15"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
