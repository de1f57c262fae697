import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./blog.db")
DATABASE_ECHO = _get_bool(os.getenv("DATABASE_ECHO"), default=False)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
# 0 keeps tokens without an exp claim; the cookie max-age is the only lifetime.
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "0"))

ACCESS_TOKEN_COOKIE_NAME = "access_token"
SESSION_COOKIE_MAX_AGE_SECONDS = 7 * 24 * 60 * 60

PASSWORD_HASH_ROUNDS = int(os.getenv("PASSWORD_HASH_ROUNDS", "10"))

LOCAL_PROVIDER = "local"
THIRD_PARTY_PROVIDER = "google"
PROFILE_STORAGE_URL_MARKER = os.getenv("PROFILE_STORAGE_URL_MARKER", "supabase.co/storage")

CORS_ORIGINS = _get_list(
    os.getenv("CORS_ORIGINS"),
    default=["http://localhost:5173", "http://localhost:3000"],
)
CORS_ORIGIN_REGEX = os.getenv("CORS_ORIGIN_REGEX", r"https://.*\.vercel\.app")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def is_production(environment: str | None = None) -> bool:
    return (environment or APP_ENV).strip().lower() == "production"


def validate_runtime_config() -> None:
    if is_production() and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
