"""
Module: api.config

Purpose:
    Connection settings for the exam service. Immutable configuration with
    validation on construction, loaded from the environment or a JSON
    settings file.

Key Classes:
    - ClientConfig: Base URL, API prefix, bearer token, timeout

Key Functions:
    - load_client_config(): Settings file with environment fallback

Environment:
    - CBT_API_BASE_URL: Service root, e.g. "https://cbt.example.org"
    - CBT_API_TOKEN: Bearer token of the signed-in user
    - CBT_API_TIMEOUT: Request timeout in seconds

Used By:
    - api.client.ExamServiceClient
    - cli
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_API_PREFIX = "/api"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ClientConfig:
    """
    Exam service connection settings (immutable).

    Attributes:
        base_url: Scheme and host of the service
        api_prefix: Path prefix all endpoints live under
        token: Bearer token, or None for anonymous calls
        timeout: Request timeout in seconds

    Invariants:
        - base_url starts with http:// or https://
        - timeout > 0

    Example:
        >>> config = ClientConfig(base_url="https://cbt.example.org/")
        >>> config.api_root
        'https://cbt.example.org/api'
    """

    base_url: str = DEFAULT_BASE_URL
    api_prefix: str = DEFAULT_API_PREFIX
    token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL: {self.base_url!r}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive: {self.timeout}")

    @property
    def api_root(self) -> str:
        """Base URL joined with the API prefix, without a trailing slash."""
        prefix = "/" + self.api_prefix.strip("/") if self.api_prefix.strip("/") else ""
        return self.base_url.rstrip("/") + prefix

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ClientConfig with defaults for unset variables

        Raises:
            ValueError: If a set variable is invalid
        """
        env = os.environ if environ is None else environ
        timeout_raw = env.get("CBT_API_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ValueError(f"CBT_API_TIMEOUT must be a number: {timeout_raw!r}") from e
        return cls(
            base_url=env.get("CBT_API_BASE_URL") or DEFAULT_BASE_URL,
            token=env.get("CBT_API_TOKEN") or None,
            timeout=timeout,
        )

    def with_token(self, token: Optional[str]) -> ClientConfig:
        return replace(self, token=token)


def _apply_settings(config: ClientConfig, data: dict[str, Any]) -> ClientConfig:
    changes: dict[str, Any] = {}
    if "base_url" in data:
        changes["base_url"] = str(data["base_url"])
    if "api_prefix" in data:
        changes["api_prefix"] = str(data["api_prefix"])
    if "token" in data:
        changes["token"] = data["token"] or None
    if "timeout" in data:
        changes["timeout"] = float(data["timeout"])
    return replace(config, **changes)


def load_client_config(
    path: Optional[Path] = None, environ: Mapping[str, str] | None = None
) -> ClientConfig:
    """
    Load connection settings.

    The environment provides the base; a JSON settings file, when given and
    readable, overrides individual keys. Malformed files are logged and
    ignored so a bad settings file never stops the tool.

    Args:
        path: Optional JSON settings file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ClientConfig
    """
    config = ClientConfig.from_env(environ)
    if path is None:
        return config
    if not path.exists():
        logger.warning(f"Settings file not found: {path}; using environment defaults")
        return config

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning(f"Settings file is corrupted ({e}); using environment defaults")
        return config
    except OSError as e:
        logger.warning(f"Failed to read settings ({e}); using environment defaults")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Settings file {path.name} must contain an object; ignoring it")
        return config

    try:
        return _apply_settings(config, data)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid settings in {path.name} ({e}); using environment defaults")
        return config
