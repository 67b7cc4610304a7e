import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

BACKEND_CONFIG = {
    "base_url": os.getenv("BACKEND_BASE_URL", "http://localhost:5000"),
    "api_prefix": os.getenv("API_PREFIX", "api"),
    "token": os.getenv("API_TOKEN"),
    "timeout": float(os.getenv("REQUEST_TIMEOUT", "10")),
}

MAP_API_KEY = os.getenv("MAP_API_KEY")
GEOLOCATION_TIMEOUT = float(os.getenv("GEOLOCATION_TIMEOUT", "15"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
