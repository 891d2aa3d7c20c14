from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """SSCMFI calculation engine connection."""

    api_url: str = Field(
        default="https://api.sscmfi.com/api/sscmfiMCPAPI",
        description="Engine endpoint that receives calculation payloads"
    )
    payload_shape: Literal["flat", "nested"] = Field(
        default="flat",
        description="Wire contract of the engine: 'flat' fields or nested securityDefinition/tradeDefinition"
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        description="Request timeout in seconds (unset keeps the HTTP client default)"
    )

    model_config = SettingsConfigDict(
        env_prefix="SSCMFI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


class McpSettings(BaseSettings):
    """Stdio server behaviour."""

    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(
        default="INFO",
        description="Log level for stderr logging"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    model_config = SettingsConfigDict(
        env_prefix="MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


class Settings(BaseSettings):
    """Combined application settings."""

    engine: EngineSettings = Field(default_factory=EngineSettings)
    mcp: McpSettings = Field(default_factory=McpSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        extra="ignore"
    )
