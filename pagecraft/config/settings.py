"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
import re
from pathlib import Path

_CONTAINER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="pagecraft", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=True, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # Page Configuration
    page_title: str = Field(default="pagecraft", description="Title of the full page shell")
    page_container_id: str = Field(
        default="page-content", description="DOM id of the page content container"
    )
    modal_container_id: str = Field(
        default="edit-modal-container", description="DOM id of the edit modal container"
    )
    htmx_script_url: str = Field(
        default="https://unpkg.com/htmx.org@1.9.12", description="htmx script source"
    )

    # Rendering Configuration
    max_render_depth: int = Field(
        default=256, ge=1, description="Maximum element nesting depth during render"
    )

    # Editing Configuration
    admin_users: List[str] = Field(
        default=["admin"], description="Users that edit every module in owner mode"
    )
    max_modules_per_row: int = Field(
        default=3, ge=1, le=12, description="Modules a page row holds before its Add Module control is hidden"
    )

    # API Documentation Configuration
    enable_docs: bool = Field(default=True, description="Enable FastAPI docs endpoint")

    # Security Configuration
    allowed_hosts: List[str] = Field(default=["*"], description="Allowed hosts for CORS")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Path = Field(default=Path("./logs"), description="Log file directory")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("page_container_id", "modal_container_id")
    @classmethod
    def validate_container_id(cls, v: str) -> str:
        """Container ids end up in client-side selectors."""
        if not _CONTAINER_ID_PATTERN.fullmatch(v):
            raise ValueError(f"Container id must match [A-Za-z0-9_-]+, got {v!r}")
        return v

    @field_validator("allowed_hosts", "admin_users", mode="before")
    @classmethod
    def parse_string_list(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse a list from a JSON array or a comma-separated string."""
        if isinstance(v, str):
            # Handle JSON-like string: ["*"] or ["host1", "host2"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "*" or "host1,host2"
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="PAGECRAFT_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
