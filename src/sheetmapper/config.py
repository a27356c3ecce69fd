"""Configuration management for SheetMapper."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _optional_path(env_name: str) -> Optional[Path]:
    """Read an optional path from the environment."""
    value = os.getenv(env_name)
    if value:
        return Path(value)
    return None


class Settings(BaseModel):
    """Application settings."""

    # Google Sheets API credentials (OAuth installed-app flow)
    google_credentials_path: Path = Path(os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"))
    google_token_path: Path = Path(os.getenv("GOOGLE_TOKEN_PATH", "token.json"))

    # Service account key; takes precedence over the OAuth flow when set
    google_service_account_path: Optional[Path] = _optional_path("GOOGLE_SERVICE_ACCOUNT_PATH")

    # How written values are interpreted and how read values are rendered.
    # RAW stores strings verbatim: "007" stays text and "=..." is never a formula.
    value_input_option: str = os.getenv("VALUE_INPUT_OPTION", "RAW")
    value_render_option: str = os.getenv("VALUE_RENDER_OPTION", "UNFORMATTED_VALUE")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
