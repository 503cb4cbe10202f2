import hashlib
import os
from datetime import timedelta

from dotenv import load_dotenv

from stepauth.core.durations import ConfigError, parse_lifetime, parse_session_interval

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./stepauth.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o for o in os.getenv("CORS_ORIGINS", "http://localhost:8000,http://localhost").split(",") if o]

# Bearer tokens, one secret/issuer/lifetime per kind
JWT_ALG = "HS256"

ACCESS_SECRET = os.getenv("ACCESS_SECRET", "dev-access-change-me")
ACCESS_ISSUER = os.getenv("ACCESS_ISSUER", "stepauth-access")
ACCESS_EXPIRATION = parse_lifetime(os.getenv("ACCESS_EXPIRATION", "15m"))

REFRESH_SECRET = os.getenv("REFRESH_SECRET", "dev-refresh-change-me")
REFRESH_ISSUER = os.getenv("REFRESH_ISSUER", "stepauth-refresh")
REFRESH_EXPIRATION = parse_lifetime(os.getenv("REFRESH_EXPIRATION", "30d"))

LOGIN_SECRET = os.getenv("LOGIN_SECRET", "dev-login-change-me")
LOGIN_ISSUER = os.getenv("LOGIN_ISSUER", "stepauth-login")
LOGIN_EXPIRATION = parse_lifetime(os.getenv("LOGIN_EXPIRATION", "5m"))

# Sessions
SESSION_EXPIRATION = parse_session_interval(os.getenv("SESSION_EXPIRATION_TIME", "1d"))
SESSION_TOKEN_LENGTH = int(os.getenv("SESSION_TOKEN_LENGTH", "64"))

# Passwords and recovery codes
HASH_ALGORITHM = os.getenv("HASH_ALGORITHM", "sha512")
if HASH_ALGORITHM not in hashlib.algorithms_available:
    raise ConfigError(f"Unsupported password hash algorithm: {HASH_ALGORITHM!r}")
RECOVERY_CODE_COUNT = 50
RECOVERY_CODE_LENGTH = 16

# Shown in authenticator app
TOTP_ISSUER = os.getenv("TOTP_ISSUER", "StepAuth")
TOTP_LABEL = os.getenv("TOTP_LABEL", "StepAuth account")
TOTP_ALGORITHM = os.getenv("TOTP_ALGORITHM", "SHA1")
TOTP_DIGITS = int(os.getenv("TOTP_DIGITS", "6"))
TOTP_PERIOD = int(os.getenv("TOTP_PERIOD", "30"))
TOTP_SECRET_LENGTH = int(os.getenv("TOTP_SECRET_LENGTH", "32"))
TOTP_VALIDATION_WINDOW = int(os.getenv("TOTP_VALIDATION_WINDOW", "1"))
PENDING_TOTP_EXPIRY = timedelta(seconds=int(os.getenv("PENDING_TOTP_EXPIRY_SECONDS", "300")))

# Proof of work, used for estimates only
HASHING_SPEED = int(os.getenv("HASHING_SPEED", "1000"))
