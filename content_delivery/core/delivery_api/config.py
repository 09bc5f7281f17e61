"""
Client configuration.

A ClientConfig is an immutable value: every request picks the base URL it
needs from it by scope, and per-call variations are made with
``with_overrides`` rather than by mutating shared state.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import load_dotenv

from content_delivery.core.delivery_api.errors import ConfigurationError
from content_delivery.core.delivery_api.models import ApiScope

logger = logging.getLogger(__name__)

DEFAULT_HOST = "cdn.contentful.com"
DEFAULT_ENVIRONMENT = "master"
DEFAULT_TIMEOUT_SECONDS = 30.0
CLIENT_NAME = "content-delivery-client"
CLIENT_VERSION = "0.1.0"

ENV_PREFIX = "CONTENT_DELIVERY_"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ClientConfig:
    """Connection and behaviour settings for a DeliveryClient."""
    space: Optional[str]
    access_token: Optional[str]
    environment: str = DEFAULT_ENVIRONMENT
    host: str = DEFAULT_HOST
    base_path: str = ""
    insecure: bool = False
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    resolve_links: bool = True
    remove_unresolved: bool = False
    headers: Dict[str, str] = field(default_factory=dict)
    proxies: Dict[str, str] = field(default_factory=dict)
    application: Optional[str] = None
    cache_dir: Optional[str] = None
    min_request_interval: float = 0.0

    @property
    def root_url(self) -> str:
        scheme = "http" if self.insecure else "https"
        base_path = self.base_path.strip("/")
        root = f"{scheme}://{self.host.rstrip('/')}"
        return f"{root}/{base_path}" if base_path else root

    @property
    def space_base_url(self) -> Optional[str]:
        if not self.space or not self.host:
            return None
        return f"{self.root_url}/spaces/{self.space}/"

    @property
    def environment_base_url(self) -> Optional[str]:
        space_url = self.space_base_url
        if not space_url or not self.environment:
            return None
        return f"{space_url}environments/{self.environment}/"

    def base_url_for(self, scope: ApiScope) -> str:
        """
        Base URL for requests in ``scope``, always ending in a slash.

        Raises:
            ConfigurationError: If the URL cannot be built from this config
        """
        base_url = self.space_base_url if scope is ApiScope.SPACE else self.environment_base_url
        if not base_url:
            raise ConfigurationError(f"Please define baseUrl for {scope.value}")
        if not base_url.endswith("/"):
            base_url += "/"
        return base_url

    @property
    def user_agent(self) -> str:
        agent = f"{CLIENT_NAME}/{CLIENT_VERSION}"
        if self.application:
            agent = f"{agent} app {self.application}"
        return agent

    def with_overrides(self, **changes) -> "ClientConfig":
        """Return a copy of this config with ``changes`` applied."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None, **overrides) -> "ClientConfig":
        """
        Build a config from ``CONTENT_DELIVERY_*`` environment variables.

        Args:
            env_file: Optional .env file loaded with python-dotenv first
                (existing environment variables are not overridden)
            **overrides: Explicit values that take precedence over the environment

        Returns:
            The resulting ClientConfig
        """
        if env_file is not None:
            if load_dotenv(env_file):
                logger.debug(f"Loaded environment from {env_file}")
            else:
                logger.debug(f"No variables loaded from {env_file}")

        interval = os.getenv(ENV_PREFIX + "MIN_REQUEST_INTERVAL")
        timeout = os.getenv(ENV_PREFIX + "TIMEOUT")
        values = {
            "space": os.getenv(ENV_PREFIX + "SPACE"),
            "access_token": os.getenv(ENV_PREFIX + "ACCESS_TOKEN"),
            "environment": os.getenv(ENV_PREFIX + "ENVIRONMENT") or DEFAULT_ENVIRONMENT,
            "host": os.getenv(ENV_PREFIX + "HOST") or DEFAULT_HOST,
            "base_path": os.getenv(ENV_PREFIX + "BASE_PATH") or "",
            "insecure": _env_flag("INSECURE", False),
            "timeout": float(timeout) if timeout else DEFAULT_TIMEOUT_SECONDS,
            "resolve_links": _env_flag("RESOLVE_LINKS", True),
            "remove_unresolved": _env_flag("REMOVE_UNRESOLVED", False),
            "application": os.getenv(ENV_PREFIX + "APPLICATION"),
            "cache_dir": os.getenv(ENV_PREFIX + "CACHE_DIR"),
            "min_request_interval": float(interval) if interval else 0.0,
        }
        values.update(overrides)
        return cls(**values)
