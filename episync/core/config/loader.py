"""
Configuration loader — resolves connection and output settings.

Settings come from, lowest precedence first:

    1. episync.yml (searched upward from the project root, optional)
    2. .env, .env.local, .env.<environment>, .env.<environment>.local
    3. the process environment
    4. explicit overrides (CLI flags)

and are validated into a ``SyncConfig``.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Literal
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILE = "episync.yml"
DEFAULT_MODEL_DIR = "src/Models/Episerver"
DEFAULT_ENVIRONMENT = "development"

Environment = Literal["development", "integration", "preproduction", "production"]
ENVIRONMENTS: tuple[str, ...] = ("development", "integration", "preproduction", "production")

# Environment variable → SyncConfig field
_ENV_KEYS = {
    "EPI_URL": "episerver_url",
    "EPI_MODEL_PATH": "model_dir",
    "EPI_INSECURE": "insecure",
}
# episync.yml key → SyncConfig field
_YAML_KEYS = {
    "url": "episerver_url",
    "episerver_url": "episerver_url",
    "model_dir": "model_dir",
    "insecure": "insecure",
}


class ConfigError(Exception):
    """Raised when the sync configuration is invalid or missing."""


class SyncConfig(BaseModel):
    """Resolved settings for a sync run."""

    root_dir: Path
    environment: Environment = DEFAULT_ENVIRONMENT
    episerver_url: str
    model_dir: str = DEFAULT_MODEL_DIR
    insecure: bool = False
    sources: list[str] = Field(default_factory=list)

    @field_validator("episerver_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"not an http(s) URL: {value!r}")
        return value if value.endswith("/") else value + "/"

    @field_validator("model_dir")
    @classmethod
    def _check_model_dir(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Episerver models directory not set")
        return value

    @property
    def model_path(self) -> Path:
        return self.root_dir / self.model_dir


_ENV_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_.]*)\s*=\s*(.*)$")


def _env_value(raw: str) -> str:
    if raw[:1] in ('"', "'"):
        quote = raw[0]
        end = raw.find(quote, 1)
        if end > 0:
            return raw[1:end]
    # Unquoted values end at an inline " #" comment
    value, _, _ = raw.partition(" #")
    return value.strip()


def parse_env_file(path: Path) -> dict[str, str]:
    """Read the ``KEY=value`` pairs of a dotenv file.

    ``export`` prefixes, quoted values and ``#`` comments (whole line
    or after an unquoted value) are understood.  Lines that are not an
    assignment are ignored.  A missing file yields an empty dict.
    """
    if not path.is_file():
        return {}
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return {}

    pairs: dict[str, str] = {}
    for line in lines:
        match = _ENV_LINE.match(line.strip())
        if match:
            pairs[match.group(1)] = _env_value(match.group(2).strip())
    return pairs


def env_file_names(environment: str) -> list[str]:
    """Env file variants for an environment, lowest precedence first."""
    return [".env", ".env.local", f".env.{environment}", f".env.{environment}.local"]


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest episync.yml at or above ``start_dir``."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def _load_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def _parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_config(
    root_dir: Path | None = None,
    environment: str = DEFAULT_ENVIRONMENT,
    overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> SyncConfig:
    """Resolve and validate the sync configuration.

    Args:
        root_dir: Project (SPA) root; defaults to the directory holding
            episync.yml, or the current directory.
        environment: Which ``.env.<environment>`` files to read.
        overrides: SyncConfig field values that win over everything.
        environ: Process environment (default: ``os.environ``).

    Raises:
        ConfigError: If the environment is unknown or a value is invalid.
    """
    if environment not in ENVIRONMENTS:
        raise ConfigError(
            f"Unknown environment '{environment}', expected one of: {', '.join(ENVIRONMENTS)}"
        )

    config_file = find_config_file(root_dir)
    if root_dir is None:
        root_dir = config_file.parent if config_file else Path.cwd()
    root_dir = Path(root_dir).resolve()

    values: dict[str, object] = {}
    sources: list[str] = []

    if config_file is not None:
        logger.debug("Loading sync config from %s", config_file)
        for key, value in _load_yaml(config_file).items():
            if key in _YAML_KEYS:
                values[_YAML_KEYS[key]] = value
        sources.append(str(config_file))

    for name in env_file_names(environment):
        path = root_dir / name
        parsed = parse_env_file(path)
        if not parsed:
            continue
        sources.append(str(path))
        for key, field in _ENV_KEYS.items():
            if key in parsed:
                values[field] = parsed[key]

    env = os.environ if environ is None else environ
    for key, field in _ENV_KEYS.items():
        if env.get(key):
            values[field] = env[key]

    for field, value in (overrides or {}).items():
        if value is not None:
            values[field] = value

    if "insecure" in values:
        values["insecure"] = _parse_bool(values["insecure"])
    if not values.get("episerver_url"):
        raise ConfigError(
            "No Episerver URL configured. Set EPI_URL in .env or pass --domain."
        )

    try:
        config = SyncConfig(
            root_dir=root_dir,
            environment=environment,
            sources=sources,
            **values,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid sync configuration: {e}") from e

    logger.info("Using Episerver at %s (%s)", config.episerver_url, config.environment)
    return config
