import os

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./workhub.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# Security
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Admin login stub
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

# Email (disabled when SMTP_HOST is unset)
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
MAIL_FROM = os.getenv("MAIL_FROM", "StudentWorkHub <no-reply@studentworkhub.local>")

# File storage
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Subscription / posting policy
SUBSCRIPTION_PERIOD_DAYS = 30
MAX_JOB_DURATION_DAYS = 30
BOOST_DURATION_DAYS = 10
LOW_QUOTA_WARNING_THRESHOLD = 1
OTP_RESEND_COOLDOWN_SECONDS = 180

# Background reconciler
ENABLE_RECONCILER = os.getenv("ENABLE_RECONCILER", "1") == "1"
RECONCILE_INTERVAL_HOURS = int(os.getenv("RECONCILE_INTERVAL_HOURS", "24"))
RECONCILE_STARTUP_DELAY_SECONDS = int(os.getenv("RECONCILE_STARTUP_DELAY_SECONDS", "5"))
