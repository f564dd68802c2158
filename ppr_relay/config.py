"""
Configuration Management

Centralized configuration using Pydantic Settings with environment variables.
Credentials are optional at load time: a process with missing credentials
still starts so it can be health-checked, but refuses to relay submissions.
"""

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# Environment variables that must be set before submissions are accepted
REQUIRED_FIELDS = ("EMAIL_USER", "EMAIL_PASS", "DESTINATION_EMAIL", "RESEND_API_KEY")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Sensitive values should NEVER have defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # ===================================
    # Application Settings
    # ===================================
    APP_ENV: str = Field(default="production", description="Environment: development, staging, production")
    APP_NAME: str = Field(default="PPR Form Relay", description="Application name")
    HOST: str = Field(default="0.0.0.0", description="Host to bind to")
    PORT: int = Field(default=10000, ge=1, le=65535, description="Port to bind to")

    # ===================================
    # Credentials (REQUIRED for delivery)
    # ===================================
    EMAIL_USER: Optional[str] = Field(default=None, description="Sender account address")
    EMAIL_PASS: Optional[str] = Field(default=None, description="Sender credential / app password")
    DESTINATION_EMAIL: Optional[str] = Field(default=None, description="Address submissions are relayed to")
    RESEND_API_KEY: Optional[str] = Field(default=None, description="Resend API key")

    # ===================================
    # Mail Settings
    # ===================================
    MAIL_TRANSPORT: str = Field(default="resend", description="Mail transport: resend or smtp")
    SENDER_NAME: str = Field(default="DPA Website Form", description="Display name of the sender")
    MAIL_TIMEOUT_SECONDS: float = Field(default=15.0, ge=1, le=60, description="Upper bound on one mail-send call")
    RESEND_API_URL: str = Field(default="https://api.resend.com/emails", description="Resend emails endpoint")

    # ===================================
    # SMTP Settings
    # ===================================
    SMTP_HOST: str = Field(default="smtp.gmail.com", description="SMTP relay host")
    SMTP_PORT: int = Field(default=465, description="SMTP relay port")
    SMTP_USE_TLS: bool = Field(default=True, description="Use implicit TLS for SMTP")

    # ===================================
    # Request Limits
    # ===================================
    MAX_BODY_SIZE_MB: int = Field(default=10, ge=1, le=50, description="Maximum request body size in MB")

    # ===================================
    # Logging Configuration
    # ===================================
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    LOG_FILE: Optional[str] = Field(default=None, description="Log file path")

    # ===================================
    # CORS
    # ===================================
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(default=["*"], description="Allowed CORS origins")

    # ===================================
    # Monitoring
    # ===================================
    ENABLE_METRICS: bool = Field(default=True, description="Expose Prometheus metrics at /metrics")
    ENABLE_REQUEST_LOGGING: bool = Field(default=True, description="Log every request")

    # ===================================
    # Validators
    # ===================================

    @field_validator("EMAIL_USER", "EMAIL_PASS", "DESTINATION_EMAIL", "RESEND_API_KEY", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        """Treat empty strings the same as unset variables."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("MAIL_TRANSPORT")
    @classmethod
    def validate_transport(cls, v):
        """Validate mail transport."""
        valid_transports = ["resend", "smtp"]
        v = v.lower()
        if v not in valid_transports:
            raise ValueError(f"Mail transport must be one of: {valid_transports}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v

    @field_validator("APP_ENV")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment."""
        valid_envs = ["development", "staging", "production"]
        v = v.lower()
        if v not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v

    # ===================================
    # Computed Properties
    # ===================================

    @property
    def missing_required(self) -> List[str]:
        """Names of required variables that are not set."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    @property
    def is_complete(self) -> bool:
        """Check if every credential needed for delivery is present."""
        return not self.missing_required

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.APP_ENV == "development"

    @property
    def max_body_size_bytes(self) -> int:
        """Get maximum request body size in bytes."""
        return self.MAX_BODY_SIZE_MB * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Only the process entry point should call this; the application
    receives its settings explicitly through ``create_app``.

    Returns:
        Settings: Application settings
    """
    return Settings()
