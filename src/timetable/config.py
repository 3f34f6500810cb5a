"""Converter configuration loaded from environment variables.

Only the ambient settings live here (credentials, API location, logging).
Per-run options such as the number of weeks are passed to the converter
directly as TimetableOptions.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ConverterConfig(BaseSettings):
    """Converter configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # ClassCharts student login
    classcharts_code: str = Field(
        default="",
        description="ClassCharts student code, usually given by the school",
    )
    classcharts_dob: str | None = Field(
        default=None,
        description="Student date of birth in DD/MM/YYYY format",
    )
    classcharts_url: str = Field(
        default="https://www.classcharts.com",
        description="ClassCharts base URL",
    )

    # HTTP settings
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for each ClassCharts request",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: ConverterConfig | None = None


def get_config() -> ConverterConfig:
    """Get the converter configuration singleton.

    Returns:
        ConverterConfig: Converter configuration instance
    """
    global _config
    if _config is None:
        _config = ConverterConfig()
    return _config
