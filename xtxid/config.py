"""
Settings for the optional fetch layer and the command line.
"""

import os
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .extractor import ONDEMAND_BASE_URL

DEFAULT_HOME_URL = "https://x.com"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
)

# settings field -> environment variable
ENV_VARS = {
    "home_url": "XTXID_HOME_URL",
    "ondemand_base_url": "XTXID_ONDEMAND_BASE_URL",
    "user_agent": "XTXID_USER_AGENT",
    "impersonate": "XTXID_IMPERSONATE",
    "timeout": "XTXID_TIMEOUT",
    "proxy": "XTXID_PROXY",
    "log_level": "LOG_LEVEL",
    "json_logs": "XTXID_JSON_LOGS",
}


class Settings(BaseModel):
    """Fetch and logging configuration."""

    home_url: str = Field(default=DEFAULT_HOME_URL, description="Page carrying the verification key")
    ondemand_base_url: str = Field(default=ONDEMAND_BASE_URL, description="Where ondemand scripts live")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    impersonate: str = Field(default="chrome124", description="curl_cffi browser fingerprint")
    timeout: float = Field(default=30.0, gt=0)
    proxy: Optional[str] = Field(default=None, description="Proxy URL for all requests")
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)

    @field_validator("home_url", "ondemand_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        if not v or not v.strip():
            raise ValueError("URL cannot be empty")
        return v.strip().rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v):
        return v.upper()

    @classmethod
    def _env_values(cls) -> Dict[str, Any]:
        values = {}
        for field, env_var in ENV_VARS.items():
            value = os.getenv(env_var)
            if value is not None and value != "":
                values[field] = value
        return values

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build settings from ``XTXID_*`` environment variables.

        Keyword arguments that are not ``None`` win over the environment.
        """
        values = cls._env_values()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: str, **overrides: Any) -> "Settings":
        """Load settings from a YAML mapping, falling back to the environment."""
        with open(path, "r", encoding="utf-8") as file:
            try:
                loaded = yaml.safe_load(file) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"{path} is not valid YAML: {e}") from e
        if not isinstance(loaded, dict):
            raise ValueError(f"{path} must contain a mapping, got {type(loaded).__name__}")

        values = cls._env_values()
        values.update(loaded)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def headers(self) -> Dict[str, str]:
        return {
            "user-agent": self.user_agent,
            "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "accept-language": "en-US,en;q=0.9",
            "cache-control": "no-cache",
        }
