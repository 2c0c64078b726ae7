import os

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
JWT_EXPIRES_HOURS = 24
RESET_TOKEN_MINUTES = 60

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hris_test"),
}

FRONTEND_URL = "http://localhost:3000"

SMTP_HOST = None
SMTP_PORT = 587
SMTP_USER = None
SMTP_PASS = None
FROM_EMAIL = None
FROM_NAME = "HRIS Management"

MIDTRANS_SERVER_KEY = "SB-Mid-server-test"
MIDTRANS_CLIENT_KEY = "SB-Mid-client-test"
MIDTRANS_IS_PRODUCTION = False

REQUIRE_SUBSCRIPTION = False

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
