# skillsync/core/config.py

import os

# =========================
# DATABASE
# =========================

DB_USER = os.getenv("DB_USER", "skillsync")
DB_PASS = os.getenv("DB_PASS", "skillsync")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "skillsync")

# A full URL wins over the individual parts
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# =========================
# AUTH
# =========================

JWT_SECRET = os.getenv("JWT_SECRET", "")
SERVICE_ROLE_KEY = os.getenv("SERVICE_ROLE_KEY", "")

# =========================
# INTEGRATIONS
# =========================

WHEREBY_API_KEY = os.getenv("WHEREBY_API_KEY", "")
RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
EMAIL_FROM = os.getenv("EMAIL_FROM", "SkillSync <onboarding@resend.dev>")

# Raw JSON of the Google service account used for FCM
FIREBASE_SERVICE_ACCOUNT = os.getenv("FIREBASE_SERVICE_ACCOUNT", "")

APP_URL = os.getenv("APP_URL", "http://localhost:5173")

HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
