# config.py
"""
Application settings loaded from the environment (.env supported).

Every setting has a default so the app can boot locally; production
deployments are expected to provide the DB_* and JWT_SECRET variables.
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Database
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")

# DATABASE_URL wins when set (sqlite for local dev and tests)
DATABASE_URL = os.getenv("DATABASE_URL") or (
     f"mssql+pymssql://{quote_plus(DB_USER or '')}:{quote_plus(DB_PASS or '')}"
     f"@{DB_SERVER}:{DB_PORT}/{DB_NAME}"
)
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Auth
JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Email (Brevo)
BREVO_API_KEY = os.getenv("BREVO_API_KEY")
BREVO_API_URL = os.getenv("BREVO_API_URL", "https://api.brevo.com/v3/smtp/email")
EMAIL_SENDER_NAME = os.getenv("EMAIL_SENDER_NAME", "RentLedger")
EMAIL_SENDER_ADDRESS = os.getenv("EMAIL_SENDER_ADDRESS", "noreply@rentledger.app")
EMAIL_TIMEOUT = int(os.getenv("EMAIL_TIMEOUT", "10"))
APP_URL = os.getenv("APP_URL", "http://localhost:3000")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "standard")

# Ops
CRON_SECRET = os.getenv("CRON_SECRET")
CORS_ORIGINS = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]
PORT = int(os.getenv("PORT", "10000"))

# Business rules
APPLICATION_COOLDOWN_DAYS = 7
MAX_OCCUPANTS_PER_LEASE = 5
DEFAULT_COTENANT_SHARE = 50
BACKFILL_PAYMENT_DAY = 5
REMINDER_DAY_OF_MONTH = 5
