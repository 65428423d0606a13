"""Configuration management for the openFDA MCP server."""

import os
import json
from pathlib import Path
from typing import Optional, Dict, Any, Union
from urllib.parse import urlparse
import logging

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "https://api.fda.gov/drug/label.json"


class OpenFDAConfig(BaseModel):
    """Configuration for the openFDA drug label API."""

    base_url: str = Field(default=DEFAULT_BASE_URL, description="openFDA drug label endpoint")
    api_key: Optional[str] = Field(None, description="Optional openFDA API key")
    request_timeout: int = Field(default=30, description="Request timeout in seconds")

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that base_url is a properly formatted URL."""
        if not v:
            raise ValueError("base_url cannot be empty")

        if not v.startswith(('http://', 'https://')):
            v = f'https://{v}'

        parsed = urlparse(v)
        if not parsed.netloc:
            raise ValueError(f"Invalid base URL format: {v}")

        return v.rstrip('?')

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank key as no key at all."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator('request_timeout')
    @classmethod
    def validate_request_timeout(cls, v: int) -> int:
        """Validate request_timeout is reasonable."""
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        if v > 300:
            raise ValueError("request_timeout should not exceed 300 seconds")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    openfda: OpenFDAConfig = Field(default_factory=OpenFDAConfig)
    log_level: str = Field(default="INFO", description="Logging level")


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger = logging.getLogger(__name__)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if config_path.suffix.lower() in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}

            elif config_path.suffix.lower() == '.json':
                return json.load(f) or {}

            else:
                raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    except Exception as e:
        logger.error(f"Failed to load config file {config_path}: {e}")
        raise


def find_config_file() -> Optional[Path]:
    """Find configuration file in standard locations."""
    search_paths = [
        Path.cwd() / "config.yaml",
        Path.cwd() / "config.yml",
        Path.cwd() / "config.json",
        Path.cwd() / ".openfda-mcp.yaml",
        Path.cwd() / ".openfda-mcp.yml",
        Path.cwd() / ".openfda-mcp.json",
        Path.home() / ".config" / "openfda-mcp" / "config.yaml",
        Path.home() / ".config" / "openfda-mcp" / "config.yml",
        Path.home() / ".config" / "openfda-mcp" / "config.json",
    ]

    for config_path in search_paths:
        if config_path.exists():
            return config_path

    return None


def merge_config(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Merge configuration dictionaries with override taking precedence."""
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value

    return merged


def load_config(config_file: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load configuration from multiple sources with priority order.

    Priority (highest to lowest):
    1. Environment variables (including those from a .env file)
    2. Specified config file (if provided)
    3. Auto-discovered config file
    4. Default values
    """
    logger = logging.getLogger(__name__)

    config_data: Dict[str, Any] = {}

    if config_file:
        config_path = Path(config_file)
        if config_path.exists():
            config_data = load_config_file(config_path)
            logger.info(f"Loaded configuration from: {config_path}")
        else:
            raise FileNotFoundError(f"Specified config file not found: {config_path}")
    else:
        config_path = find_config_file()
        if config_path:
            config_data = load_config_file(config_path)
            logger.info(f"Auto-discovered configuration file: {config_path}")

    load_dotenv()

    env_config = {
        "openfda": {
            "base_url": os.getenv("OPENFDA_BASE_URL"),
            "api_key": os.getenv("OPENFDA_API_KEY"),
            "request_timeout": os.getenv("OPENFDA_REQUEST_TIMEOUT"),
        },
        "log_level": os.getenv("LOG_LEVEL"),
    }

    def remove_none_values(d):
        if isinstance(d, dict):
            return {k: remove_none_values(v) for k, v in d.items() if v is not None}
        return d

    env_config = remove_none_values(env_config)

    final_config = merge_config(config_data, env_config)

    openfda_data = final_config.get("openfda", {}) or {}
    openfda_config = OpenFDAConfig(
        base_url=openfda_data.get("base_url", DEFAULT_BASE_URL),
        api_key=openfda_data.get("api_key"),
        request_timeout=int(openfda_data.get("request_timeout", 30)),
    )

    return AppConfig(
        openfda=openfda_config,
        log_level=final_config.get("log_level", "INFO"),
    )
