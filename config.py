"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

Services keep a reference to the AppSettings instance and read the values
they need at call time, so tests (and operators) can swap a sub-config
without rebuilding the services.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str
    db_name: str = "url-shortener"


class JWTSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    jwt_secret_access_token: str = ""
    jwt_secret_refresh_token: str = ""
    # Lifetimes in seconds: access 1h, refresh 7d
    jwt_expiration_access_token: int = 3600
    jwt_expiration_refresh_token: int = 604800
    jwt_algorithm: str = "HS256"

    @model_validator(mode="after")
    def _secrets_must_differ(self) -> "JWTSettings":
        if (
            self.jwt_secret_access_token
            and self.jwt_secret_access_token == self.jwt_secret_refresh_token
        ):
            raise ValueError(
                "JWT_SECRET_ACCESS_TOKEN and JWT_SECRET_REFRESH_TOKEN must differ"
            )
        return self


class PasswordSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # argon2 time cost (number of iterations)
    password_hash_time_cost: int = 3


class VerificationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    verification_code_ttl_seconds: int = 300
    # The user id is appended directly, e.g. https://app.example.com/verify/<id>
    client_verification_url: str = "http://localhost:5173/verify/"
    # Query string (?userId=...&verificationCode=...) is appended
    direct_verification_url: str = "http://localhost:8000/mail/verify"


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    zepto_api_token: str = ""
    zepto_from_email: str = "noreply@localhost"
    zepto_from_name: str = "URL Shortener"
    email_http_timeout_seconds: float = 5.0


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_name: str = "URL Shortener"

    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # OpenAPI docs URL (None disables the docs UI)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    jwt: Optional[JWTSettings] = None
    password: Optional[PasswordSettings] = None
    verification: Optional[VerificationSettings] = None
    email: Optional[EmailSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.db is None:
            self.db = DatabaseSettings()
        if self.jwt is None:
            self.jwt = JWTSettings()
        if self.password is None:
            self.password = PasswordSettings()
        if self.verification is None:
            self.verification = VerificationSettings()
        if self.email is None:
            self.email = EmailSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
