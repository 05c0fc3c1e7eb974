"""Configuration management for GroupSplit."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GROUPSPLIT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Database path
    database_path: Path = Path.home() / ".groupsplit" / "groupsplit.db"

    # Reject payers/participants that aren't group members
    strict_members: bool = False

    # Analytics settings
    recent_expenses_limit: int = 5
    overall_recent_expenses_limit: int = 10

    # Display settings
    currency_symbol: str = "$"

    def __init__(self, **kwargs):
        """Initialize settings and create database directory if needed."""
        super().__init__(**kwargs)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the GROUPSPLIT_* variables in "
            f"your environment or .env file.\n"
            f"Error: {e}"
        ) from e
