"""
Configuration models for subsetcss.

Holds the subset configuration (allowed values per property, with optional
at-rule override scopes) and the server-wide settings.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ValueList = Tuple[str, ...]
Subsets = Dict[str, ValueList]


def _validate_subsets(subsets: Subsets) -> Subsets:
    """Reject property entries whose allowed values repeat"""
    for prop, values in subsets.items():
        if not prop:
            raise ValueError('Subset property names cannot be empty')
        seen = set()
        for value in values:
            if value in seen:
                raise ValueError(f"Duplicate value '{value}' in subset for '{prop}'")
            seen.add(value)
    return subsets


class OverrideScope(BaseModel):
    """One entry of an at-rule override list, e.g. under ``@media``"""
    model_config = ConfigDict(frozen=True, extra='ignore')

    # feature name -> accepted values; a bare string is matched by substring
    params: Dict[str, Union[ValueList, str]] = Field(default_factory=dict)
    subsets: Subsets = Field(default_factory=dict)

    @field_validator('subsets')
    @classmethod
    def validate_subsets(cls, v: Subsets) -> Subsets:
        return _validate_subsets(v)

    def matches(self, param_name: str, param_value: str) -> bool:
        """Check whether an at-rule's (name, value) pair selects this scope"""
        accepted = self.params.get(param_name)
        return bool(accepted) and param_value in accepted


class SubsetConfig(BaseModel):
    """
    Root subset configuration.

    The external JSON shape is ``{"subsets": {...}, "@media": [...], ...}``;
    every ``@``-prefixed key is gathered into ``overrides`` at validation
    time. Instances are frozen and replaced wholesale on reload.
    """
    model_config = ConfigDict(frozen=True, extra='ignore')

    subsets: Subsets = Field(default_factory=dict)
    overrides: Dict[str, Tuple[OverrideScope, ...]] = Field(default_factory=dict)

    @model_validator(mode='before')
    @classmethod
    def collect_override_scopes(cls, data: Any) -> Any:
        """Move ``@<atRuleName>`` keys into the ``overrides`` mapping"""
        if not isinstance(data, dict):
            return data

        collected = dict(data.get('overrides') or {})
        cleaned = {}
        for key, value in data.items():
            if isinstance(key, str) and key.startswith('@'):
                if not isinstance(value, (list, tuple)):
                    raise ValueError(f"'{key}' must be a list of override scopes")
                collected[key] = value
            elif key != 'overrides':
                cleaned[key] = value

        cleaned['overrides'] = collected
        return cleaned

    @field_validator('subsets')
    @classmethod
    def validate_subsets(cls, v: Subsets) -> Subsets:
        return _validate_subsets(v)

    @field_validator('overrides')
    @classmethod
    def validate_override_keys(cls, v: Dict[str, Tuple[OverrideScope, ...]]) -> Dict[str, Tuple[OverrideScope, ...]]:
        for key in v:
            if not key.startswith('@') or len(key) < 2:
                raise ValueError(f"Override key '{key}' must be an at-rule name such as '@media'")
        return v

    @classmethod
    def empty(cls) -> 'SubsetConfig':
        """Configuration with no subsets; every lookup comes back empty"""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SubsetConfig':
        return cls.model_validate(data)

    def override_scopes(self, at_rule_name: str) -> Optional[Tuple[OverrideScope, ...]]:
        """Get the override list for an at-rule name, with or without ``@``"""
        key = at_rule_name if at_rule_name.startswith('@') else f"@{at_rule_name}"
        return self.overrides.get(key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the external JSON shape"""
        data: Dict[str, Any] = {
            'subsets': {prop: list(values) for prop, values in self.subsets.items()}
        }
        for key, scopes in self.overrides.items():
            data[key] = [
                {
                    'params': {
                        name: accepted if isinstance(accepted, str) else list(accepted)
                        for name, accepted in scope.params.items()
                    },
                    'subsets': {prop: list(values) for prop, values in scope.subsets.items()},
                }
                for scope in scopes
            ]
        return data


Scope = Union[SubsetConfig, OverrideScope]


class ServerSettings(BaseSettings):
    """Server-wide settings with environment variable support"""
    model_config = SettingsConfigDict(
        env_prefix="SUBSETCSS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra='ignore'
    )

    # Subset configuration file, relative to the workspace root
    config_path: str = ".subsetcss.json"

    # Reload the configuration from disk when the client does not watch files
    watch_config: bool = False

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_file: Optional[Path] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator('config_path')
    @classmethod
    def validate_config_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Config path cannot be empty')
        return v.strip()
