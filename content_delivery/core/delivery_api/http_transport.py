"""
HTTP transport for the delivery API.

Performs authenticated GET requests against the space- or environment-scoped
base URL of a ClientConfig and returns parsed JSON bodies. Non-2xx responses
and network failures surface as TransportError; nothing is retried.
"""

import logging
from typing import Any, Dict, Optional

import requests

from content_delivery.core.delivery_api.cache_manager import ResponseCache
from content_delivery.core.delivery_api.config import ClientConfig
from content_delivery.core.delivery_api.errors import TransportError
from content_delivery.core.delivery_api.models import ApiScope
from content_delivery.core.delivery_api.rate_limiter import SharedRateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Authenticated GET transport bound to one ClientConfig.

    The base URL is chosen per request from the config by scope, so the same
    transport serves space-level calls (``get_space``) and environment-level
    calls (entries, assets, sync) without switching any shared state.
    """

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
        rate_limiter: Optional[SharedRateLimiter] = None,
    ):
        """
        Initialize the transport.

        Args:
            config: Client configuration (credentials, host, timeouts...)
            session: requests session to use (a new one is created if None)
            cache: Response cache (built from config.cache_dir if None and configured)
            rate_limiter: Request throttle (uses the global one if None)
        """
        self.config = config
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.update(self._default_headers())
        if config.proxies:
            self.session.proxies.update(config.proxies)

        if cache is None and config.cache_dir:
            cache = ResponseCache(config.cache_dir)
        self.cache = cache

        self.rate_limiter = rate_limiter or get_rate_limiter()
        # Per-transport gap; the limiter itself is never reconfigured from here
        self.min_request_interval = config.min_request_interval or None

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        headers.update(self.config.headers)
        return headers

    def build_url(self, scope: ApiScope, path: str) -> str:
        """Join the scope's base URL and a relative path."""
        return self.config.base_url_for(scope) + path.lstrip("/")

    def get(self, scope: ApiScope, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET ``path`` under the base URL for ``scope``.

        Args:
            scope: Space or environment scope
            path: Path relative to the scope's base URL ("" for the scope root)
            params: Query parameters

        Returns:
            The parsed JSON body

        Raises:
            ConfigurationError: If the base URL for the scope cannot be built
            TransportError: On network failure, non-2xx status or a non-JSON body
        """
        # Raises before anything touches the network
        url = self.build_url(scope, path)
        namespace = path.split("/", 1)[0] or scope.value

        if self.cache is not None:
            cached = self.cache.get(namespace, url, params)
            if cached is not None:
                logger.debug(f"✓ Served {url} from cache")
                return cached

        self.rate_limiter.wait_if_needed(f"GET {namespace}", self.min_request_interval)
        logger.info(f"→ GET {url}")
        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

        if not response.ok:
            raise TransportError(
                self._error_message(response),
                status_code=response.status_code,
                body=self._error_body(response),
                url=url,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                f"Response from {url} is not valid JSON",
                status_code=response.status_code,
                body=response.text,
                url=url,
            ) from e

        if self.cache is not None:
            self.cache.set(namespace, url, params, body)
        return body

    @staticmethod
    def _error_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text or None

    def _error_message(self, response: requests.Response) -> str:
        body = self._error_body(response)
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"{response.status_code} {response.reason or 'Error'}"

    def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session:
            self.session.close()
