"""Service settings, read from `CRP_*` environment variables or a `.env` file."""

from pathlib import Path
from typing import Annotated, Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_TEMPLATE_URL = "https://pub-d3c1780dc09a40659cc37fe6ae6e2937.r2.dev/template.docx"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="CRP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Strong Street Recyclers Tools API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Level applied to the crp_tools logger tree.")
    manifest_template_url: str = Field(
        default=DEFAULT_TEMPLATE_URL,
        description="Remote location of the delivery manifest .docx template.",
    )
    manifest_template_file: Optional[Path] = Field(
        default=None,
        description="Local .docx template; takes precedence over the URL when set.",
    )
    manifest_template_timeout_seconds: float = Field(default=10.0, ge=0.0)
    manifest_template_cache_seconds: float = Field(
        default=300.0,
        ge=0.0,
        description="How long a fetched template is reused. 0 disables the cache.",
    )
    manifest_filename: str = Field(default="manifest.docx", description="Download name of generated manifests.")
    manifest_timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone used for run titles (e.g. Australia/Brisbane). Server local time when unset.",
    )
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("manifest_template_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("manifest_timezone", mode="before")
    @classmethod
    def _check_timezone(cls, value: Any) -> Optional[str]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        name = str(value).strip()
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {name}") from exc
        return name

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> tuple[str, ...]:
        """Accept a JSON array or a comma-separated list of origins."""
        if isinstance(value, str):
            text = value.strip()
            if text.startswith("["):
                value = json.loads(text)
            else:
                value = text.split(",")
        return tuple(str(origin).strip() for origin in value or () if str(origin).strip())


settings = Settings()
