"""
# Configuration Management Module

This module provides the configuration system for the campushub API, built on **Pydantic Settings**.
Values are loaded once at import time into the module-level `settings` object and shared by every
service, route and middleware in the application.

## Configuration Loading Hierarchy

```
┌─────────────────────────────────────────────────────────────┐
│  1. Environment Variables (HIGHEST PRIORITY)                │
├─────────────────────────────────────────────────────────────┤
│  2. CAMPUSHUB_CONFIG_PATH                                   │
│     - Custom config file path from env var                  │
├─────────────────────────────────────────────────────────────┤
│  3. .campushub File (Project Root)                          │
├─────────────────────────────────────────────────────────────┤
│  4. .env File (Project Root)                                │
├─────────────────────────────────────────────────────────────┤
│  5. Default Values (LOWEST PRIORITY)                        │
└─────────────────────────────────────────────────────────────┘
```

If no configuration file is found the application runs in **environment-only mode**.

## Secret Management

`SECRET_KEY`, `SMTP_PASSWORD` and `SEMAPHORE_API_KEY` are `SecretStr` values so they are never
printed by accident. `SECRET_KEY` is validated at startup and rejects empty or placeholder values.

## Configuration Groups

- **Server**: `HOST`, `PORT`, `DEBUG`, `API_PREFIX`, `CORS_ORIGINS`
- **Database**: `MONGODB_URL`, `MONGODB_DATABASE`, connection timeouts
- **JWT**: `SECRET_KEY`, `ALGORITHM`, `JWT_ISSUER`, `JWT_EXPIRES_MINUTES`, `AUTH_COOKIE_NAME`
- **Passwords**: `BCRYPT_ROUNDS`
- **SMS (Semaphore)**: `SEMAPHORE_API_KEY`, `SEMAPHORE_SENDER_NAME`, `SEMAPHORE_BASE_URL`
- **Email (SMTP)**: `SMTP_HOST`, `SMTP_PORT`, `SMTP_USER`, `SMTP_PASSWORD`, `EMAIL_FROM`
- **OTP**: `OTP_EXPIRY_MINUTES`, `OTP_MAX_ATTEMPTS`
- **Reports**: `UPLOAD_DIR`

## Usage Example

```python
from campushub.config import settings

if settings.is_production:
    response.set_cookie(settings.AUTH_COOKIE_NAME, token, httponly=True)
```

Attributes:
    CONFIG_PATH (Optional[str]): Resolved path to the active configuration file, or `None`.
    settings (Settings): The global settings instance.
"""

import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
CAMPUSHUB_FILENAME: str = ".campushub"
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "CAMPUSHUB_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the configuration file path based on a predefined precedence order.

    1.  **Environment Variable**: `CAMPUSHUB_CONFIG_PATH` (if set and file exists).
    2.  **campushub Config**: `.campushub` file in the project root directory.
    3.  **Dotenv Config**: `.env` file in the project root directory.
    4.  **Fallback**: Returns `None`, triggering environment-variable-only mode.

    Returns:
        Optional[str]: The absolute path to the configuration file, or `None` if not found.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    campushub_path: Path = PROJECT_ROOT / CAMPUSHUB_FILENAME
    if campushub_path.exists():
        return str(campushub_path)
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    load_dotenv(dotenv_path=CONFIG_PATH, override=True)


class Settings(BaseSettings):
    """
    Application configuration settings model.

    **Configuration Groups:**
    *   **Server**: Host, port, debug mode, API prefix, CORS origins.
    *   **Database**: MongoDB connection details.
    *   **Security**: JWT signing key, issuer, expiry, bcrypt cost.
    *   **Integrations**: Semaphore SMS gateway and SMTP email delivery.
    *   **OTP**: Code lifetime and verification attempt cap.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Server configuration
    APP_NAME: str = "campushub"
    HOST: str = "127.0.0.1"
    PORT: int = 5000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: str = "http://localhost:5173"

    # MongoDB configuration
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = ""
    MONGODB_CONNECTION_TIMEOUT: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT: int = 5000

    # JWT configuration
    SECRET_KEY: SecretStr = SecretStr("")  # Must be set in .campushub or environment
    ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "campushub"
    JWT_EXPIRES_MINUTES: int = 1440
    AUTH_COOKIE_NAME: str = "token"

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # Semaphore SMS gateway
    SEMAPHORE_API_KEY: SecretStr = SecretStr("")
    SEMAPHORE_SENDER_NAME: str = "CampusHub"
    SEMAPHORE_BASE_URL: str = "https://semaphore.co/api/v4"
    SMS_TIMEOUT: int = 15

    # SMTP email
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: SecretStr = SecretStr("")
    SMTP_USE_TLS: bool = True
    EMAIL_FROM: str = ""

    # OTP
    OTP_EXPIRY_MINUTES: int = 5
    OTP_MAX_ATTEMPTS: int = 5

    # Report files
    UPLOAD_DIR: str = "uploads/reports"

    @field_validator("SECRET_KEY", mode="before")
    @classmethod
    def no_hardcoded_secrets(cls, v: Any, info: Any) -> Any:
        """
        Validates that the JWT signing key is not hardcoded or empty.

        Rejects placeholder text like "change" or "0000" as well as blank values.

        Raises:
            ValueError: If the value is empty, hardcoded, or insecure.
        """
        if not v or "change" in str(v).lower() or "0000" in str(v) or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .campushub and not hardcoded!")
        return v

    @field_validator("MONGODB_URL", mode="before")
    @classmethod
    def no_empty_urls(cls, v: Any, info: Any) -> Any:
        """Validates that the MongoDB URL is not empty."""
        if not v or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .campushub and not empty!")
        return v

    @field_validator(
        "JWT_EXPIRES_MINUTES",
        "BCRYPT_ROUNDS",
        "OTP_EXPIRY_MINUTES",
        "OTP_MAX_ATTEMPTS",
        "SMS_TIMEOUT",
        mode="before",
    )
    @classmethod
    def validate_positive_integers(cls, v: Any, info: Any) -> int:
        """
        Validates that numeric settings are positive integers.

        Raises:
            ValueError: If the value is not a positive integer.
        """
        value = int(v)
        if value <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return value

    @property
    def is_production(self) -> bool:
        """
        Determine if the application is running in production mode.

        **Production mode** is defined as `DEBUG=False`. In production the auth token travels
        in an httpOnly cookie and error responses never include tracebacks.

        Returns:
            `bool`: `True` if running in production (`DEBUG=False`), `False` otherwise.
        """
        return not self.DEBUG

    @property
    def database_name(self) -> str:
        """The MongoDB database name, derived from the environment when not set explicitly."""
        if self.MONGODB_DATABASE:
            return self.MONGODB_DATABASE
        return "campushub_prod" if self.is_production else "campushub_dev"

    @property
    def cors_origins_list(self) -> List[str]:
        """Comma-separated `CORS_ORIGINS` as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings: Settings = Settings()
