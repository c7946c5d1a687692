"""
Client-facing models for the subsetcss language server.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.defaults import DEFAULT_CONFIG_FILENAME


class DocumentSettings(BaseModel):
    """Per-document client settings from the `subsetcss` section"""
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore'
    )

    config_path: str = Field(default=DEFAULT_CONFIG_FILENAME, alias="configPath")

    @field_validator('config_path', mode='before')
    @classmethod
    def default_blank_path(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CONFIG_FILENAME
        return v

    @classmethod
    def from_client(cls, raw: Optional[Any], fallback: Optional["DocumentSettings"] = None) -> "DocumentSettings":
        """Build settings from whatever the client sent; unusable payloads use the fallback"""
        if isinstance(raw, dict):
            return cls.model_validate(raw)
        return fallback or cls()
