"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Bookshelf API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./bookshelf.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    jwt_issuer: str = getenv("JWT_ISSUER", "bookshelf")
    jwt_audience: str = getenv("JWT_AUDIENCE", "bookshelf-clients")
    admin_email: str = getenv("ADMIN_EMAIL", "admin@bookshelf.local")
    admin_password: str = getenv("ADMIN_PASSWORD", "Admin123!")
    audit_system_actor: str = getenv("AUDIT_SYSTEM_ACTOR", "system")
    audit_value_max_length: int = int(getenv("AUDIT_VALUE_MAX_LENGTH", "4000"))


settings: Settings = Settings()
