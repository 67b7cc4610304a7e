import os

SECRET_KEY = "test-secret"

BACKEND_CONFIG = {
    "base_url": os.getenv("BACKEND_BASE_URL", "http://backend.test"),
    "api_prefix": "api",
    "token": "test-token",
    "timeout": 5.0,
}

MAP_API_KEY = None
GEOLOCATION_TIMEOUT = 15.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
