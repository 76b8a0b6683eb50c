"""
Configuration Management for the Nest exporter

Settings are read from a TOML file (default ~/.nest_exporter.toml) and may
be overridden by environment variables (required for Docker). A .env file
in the working directory is loaded by the CLI before the configuration.

Configuration File:

    token = "c.abc123..."       # Nest access token (python -m nest_exporter token)
    refresh_interval = 120      # Polling frequency in seconds (0/unset: 120)

    # Legacy variant - OAuth client used to create the token
    client_id = "..."
    client_secret = "..."

    # Optional
    timeout = 10                # Nest API timeout in seconds
    auth_mode = "query"         # "query" (?auth=token) or "bearer" (Authorization header)
    temperature_scale = "F"     # "F" or "C"

    Keys are case-insensitive (Token and token are the same setting).

Environment Variables:

    NEST_TOKEN              - Access token
    NEST_REFRESH_INTERVAL   - Polling frequency in seconds
    NEST_TIMEOUT            - Nest API timeout in seconds
    NEST_AUTH_MODE          - query/bearer
    NEST_TEMPERATURE_SCALE  - F/C
    NEST_CLIENT_ID          - OAuth client id (token command)
    NEST_CLIENT_SECRET      - OAuth client secret (token command)
"""
import logging
import os
import tomllib
from dataclasses import dataclass
from typing import Optional

from nest_exporter.client import API_TIMEOUT, AUTH_MODES
from nest_exporter.exceptions import NestExporterConfigError
from nest_exporter.models import SCALES
from nest_exporter.poller import DEFAULT_REFRESH_INTERVAL

log = logging.getLogger(__name__)

CONFIGFILE = "~/.nest_exporter.toml"

# setting -> environment variable
ENV_OVERRIDES = {
    'token': 'NEST_TOKEN',
    'refresh_interval': 'NEST_REFRESH_INTERVAL',
    'timeout': 'NEST_TIMEOUT',
    'auth_mode': 'NEST_AUTH_MODE',
    'temperature_scale': 'NEST_TEMPERATURE_SCALE',
    'client_id': 'NEST_CLIENT_ID',
    'client_secret': 'NEST_CLIENT_SECRET',
}


@dataclass
class Config:
    token: str = ""
    refresh_interval: int = DEFAULT_REFRESH_INTERVAL
    timeout: float = API_TIMEOUT
    auth_mode: str = "query"
    temperature_scale: str = "F"
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    path: Optional[str] = None

    def __post_init__(self):
        if not self.refresh_interval:
            # Default to 2 minute refreshes
            self.refresh_interval = DEFAULT_REFRESH_INTERVAL
        self.auth_mode = self.auth_mode.lower()
        self.temperature_scale = self.temperature_scale.upper()
        if self.refresh_interval < 0:
            raise NestExporterConfigError(f"refresh_interval must be positive: {self.refresh_interval}")
        if self.timeout <= 0:
            raise NestExporterConfigError(f"timeout must be positive: {self.timeout}")
        if self.auth_mode not in AUTH_MODES:
            raise NestExporterConfigError(f"Invalid auth_mode {self.auth_mode!r} - must be query or bearer")
        if self.temperature_scale not in SCALES:
            raise NestExporterConfigError(
                f"Invalid temperature_scale {self.temperature_scale!r} - must be F or C")

    def validate(self):
        """Check settings required to run the exporter"""
        if not self.token:
            raise NestExporterConfigError(
                f"No access token configured in {self.path or 'environment'} - "
                "run 'python -m nest_exporter token' to create one")


def _typed(key: str, value, kind):
    if kind is int:
        if isinstance(value, bool):
            raise NestExporterConfigError(f"{key} must be an integer: {value!r}")
        if isinstance(value, float) and not value.is_integer():
            raise NestExporterConfigError(f"{key} must be an integer: {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise NestExporterConfigError(f"{key} must be an integer: {value!r}") from None
    if kind is float:
        if isinstance(value, bool):
            raise NestExporterConfigError(f"{key} must be a number: {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise NestExporterConfigError(f"{key} must be a number: {value!r}") from None
    if not isinstance(value, str):
        raise NestExporterConfigError(f"{key} must be a string: {value!r}")
    return value


SETTING_TYPES = {
    'token': str,
    'refresh_interval': int,
    'timeout': float,
    'auth_mode': str,
    'temperature_scale': str,
    'client_id': str,
    'client_secret': str,
}


def load_config(path: str = CONFIGFILE, use_env: bool = True, required: bool = True) -> Config:
    """
    Load the TOML configuration file and apply environment overrides.

    Raises NestExporterConfigError if the file is missing (and required)
    or cannot be parsed.
    """
    path = os.path.expanduser(path)
    data = {}
    if os.path.isfile(path):
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (tomllib.TOMLDecodeError, OSError) as exc:
            raise NestExporterConfigError(f"Unable to parse configuration file {path}: {exc}") from exc
        log.debug(f"Configuration loaded: {path}")
    elif required:
        raise NestExporterConfigError(f"Configuration file not found: {path}")
    else:
        log.debug(f"Configuration file not found: {path}")

    settings = {}
    for key, value in data.items():
        key = key.lower()
        if key not in SETTING_TYPES:
            log.warning(f"Ignoring unknown setting '{key}' in {path}")
            continue
        settings[key] = _typed(key, value, SETTING_TYPES[key])

    if use_env:
        for key, env in ENV_OVERRIDES.items():
            value = os.getenv(env)
            if value:
                settings[key] = _typed(env, value, SETTING_TYPES[key])

    return Config(path=path, **settings)
