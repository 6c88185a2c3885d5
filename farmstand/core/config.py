# file: farmstand/core/config.py
import os

# ==============================
# Firebase / Firestore
# ==============================
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "farm-stand-locator")
CREDENTIAL_SOURCE = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

# One document per vendor, keyed by the auth uid
VENDORS_COLLECTION = os.getenv("VENDORS_COLLECTION", "vendors")

# ==============================
# Auth Settings
# ==============================
# "firebase" verifies Firebase ID tokens, "jwt" verifies locally issued HS256 tokens
AUTH_PROVIDER = os.getenv("AUTH_PROVIDER", "firebase").lower()
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ==============================
# Google Maps
# ==============================
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
GOOGLE_MAPS_BASE_URL = os.getenv("GOOGLE_MAPS_BASE_URL", "https://maps.googleapis.com/maps/api")
MAPS_TIMEOUT = float(os.getenv("MAPS_TIMEOUT", "10"))

# Map center used when the viewer's position is unknown
DEFAULT_CENTER = (
    float(os.getenv("DEFAULT_CENTER_LAT", "41.9")),
    float(os.getenv("DEFAULT_CENTER_LNG", "-72.0")),
)

# ==============================
# Public pages / QR codes
# ==============================
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/")
QR_CODE_WIDTH = int(os.getenv("QR_CODE_WIDTH", "500"))

# ==============================
# Rate limits (slowapi syntax)
# ==============================
RATE_LIMIT_GEOCODE = os.getenv("RATE_LIMIT_GEOCODE", "30/minute")
RATE_LIMIT_SUGGEST = os.getenv("RATE_LIMIT_SUGGEST", "120/minute")
RATE_LIMIT_DIRECTIONS = os.getenv("RATE_LIMIT_DIRECTIONS", "30/minute")

# ==============================
# Logging
# ==============================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
USE_CLOUD_LOGGING = os.getenv("USE_CLOUD_LOGGING", "false").lower() in ("1", "true", "yes")


def get_secret_key() -> str:
    """
    Return the signing key for locally issued tokens.
    Only needed when AUTH_PROVIDER is "jwt".
    """
    if not SECRET_KEY or len(SECRET_KEY) < 32:
        raise RuntimeError("SECRET_KEY must be set (32+ chars) when AUTH_PROVIDER=jwt")
    return SECRET_KEY
