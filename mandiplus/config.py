"""
Client configuration.

Loads MandiPlus client environment variables only.
Safely ignores unrelated environment variables.
"""

from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field


class Settings(BaseSettings):
    """
    Client application settings.

    Environment variables must be prefixed with:
        MANDIPLUS_

    Example:
        MANDIPLUS_API_BASE_URL=https://api.mandiplus.in
    """

    # --------------------
    # Backend
    # --------------------
    API_BASE_URL: str = Field(
        default="http://localhost:3000",
        description="Base URL for backend API",
        min_length=1,
    )
    REQUEST_TIMEOUT: float = Field(default=10, gt=0)
    UPLOAD_TIMEOUT: float = Field(default=60, gt=0)

    # Empty string disables the server-side logout call
    LOGOUT_ENDPOINT: str = "/auth/logout"

    # --------------------
    # Session
    # --------------------
    SESSION_STORAGE_KEY: str = Field(
        default="mandiplus.session",
        description="Entry in NiceGUI general storage holding token and profile",
    )
    CHECK_TOKEN_EXPIRY: bool = False

    # --------------------
    # UI
    # --------------------
    UI_TITLE: str = "Mandi Plus"
    UI_PORT: int = 8080
    STORAGE_SECRET: str = "dev-secret"

    model_config = ConfigDict(
        env_file=".env",
        env_prefix="MANDIPLUS_",
        extra="ignore",
    )


settings = Settings()
