"""Library settings using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix ``SYMBOLWALK_``)."""

    model_config = SettingsConfigDict(
        env_prefix="SYMBOLWALK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Node printer
    render_indentation: str = Field(
        default="    ",
        description="Indentation emitted per nesting level by the node printer",
    )
    render_end_of_line: str = Field(
        default="\n",
        description="Line terminator emitted by the node printer",
    )

    # Qualified names
    strict_qualified_names: bool = Field(
        default=False,
        description=(
            "Raise QualifiedNameError instead of returning a truncated name "
            "when an enclosing symbol cannot be displayed"
        ),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings. For testing only."""
    global _settings
    _settings = None
