from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "marketplace-jwt-secret"
ALLOWED_APP_MODES = {"demo", "pilot", "production"}
ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    app_name: str = "Marketplace Fulfillment API"
    api_version: str = "v1"

    database_url: str = Field(
        default="sqlite+pysqlite:///./marketplace.db",
        validation_alias=AliasChoices("MARKETPLACE_DATABASE_URL", "database_url"),
    )
    cors_allowed_origins: str = "http://localhost:3000"

    jwt_secret: str = DEFAULT_JWT_SECRET
    allowed_roles: str = "BUYER,SELLER,ADMIN"
    enable_test_auth_bypass: bool = False
    testing: bool = Field(
        default=False,
        validation_alias=AliasChoices("MARKETPLACE_TESTING", "testing"),
    )
    app_mode: str = Field(
        default="demo",
        validation_alias=AliasChoices("APP_MODE", "app_mode"),
    )
    auto_create_schema: bool = True
    require_migrations: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("app_mode")
    @classmethod
    def validate_app_mode(cls, value: str) -> str:
        mode = value.lower().strip()
        if mode not in ALLOWED_APP_MODES:
            allowed = ", ".join(sorted(ALLOWED_APP_MODES))
            raise ValueError(f"APP_MODE must be one of: {allowed}")
        return mode

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper().strip()
        if level not in ALLOWED_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(ALLOWED_LOG_LEVELS))}")
        return level


settings = Settings()


def api_prefix() -> str:
    return f"/api/{settings.api_version}"


def allowed_origins() -> list[str]:
    return [origin.strip() for origin in settings.cors_allowed_origins.split(",") if origin.strip()]


def allowed_roles_list() -> list[str]:
    return [value.strip() for value in settings.allowed_roles.split(",") if value.strip()]


def is_production_mode() -> bool:
    return settings.app_mode == "production"


def ensure_secure_runtime_settings() -> None:
    """Fail fast when production-like runtime uses insecure defaults."""
    if is_production_mode() and settings.auto_create_schema:
        raise RuntimeError("AUTO_CREATE_SCHEMA must be disabled in APP_MODE=production")
    if settings.testing:
        return
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError(
            "JWT_SECRET must be set to a non-default value when MARKETPLACE_TESTING is false"
        )
    if len(settings.jwt_secret) < MIN_SECRET_LENGTH:
        raise RuntimeError(
            "JWT_SECRET must be at least "
            f"{MIN_SECRET_LENGTH} characters when MARKETPLACE_TESTING is false"
        )
    if _is_sqlite_url(settings.database_url):
        raise RuntimeError(
            "MARKETPLACE_DATABASE_URL must use postgres when MARKETPLACE_TESTING is false"
        )


def _is_sqlite_url(database_url: str) -> bool:
    value = database_url.strip().lower()
    return value.startswith("sqlite")
