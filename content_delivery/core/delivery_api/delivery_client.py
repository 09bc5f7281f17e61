"""
Delivery API client.

Public surface for reading content: spaces, content types, entries, assets,
locales and the sync feed. Entry collections are passed through the link
resolver according to the client's ``resolve_links`` / ``remove_unresolved``
settings, which any call can override through its query.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from content_delivery.core.delivery_api.config import ClientConfig
from content_delivery.core.delivery_api.errors import ConfigurationError, NotFoundError
from content_delivery.core.delivery_api.http_transport import HttpTransport
from content_delivery.core.delivery_api.link_resolver import resolve_response
from content_delivery.core.delivery_api.models import ApiScope, ResolveOptions, ResolvedCollection, SyncCollection
from content_delivery.core.delivery_api.paged_sync import paged_sync
from content_delivery.core.delivery_api.query_builder import build_query_params, client_options, normalize_select

logger = logging.getLogger(__name__)


class DeliveryClient:
    """
    Read-only client for a delivery API space.

    Example:
        client = create_client(space="<space_id>", access_token="<token>")
        entries = client.get_entries({"content_type": "animal"})
        print(entries["items"][0]["fields"]["name"])
    """

    def __init__(self, config: ClientConfig, transport: Optional[HttpTransport] = None):
        """
        Initialize the client.

        Args:
            config: Client configuration
            transport: Transport to use (built from config if None)
        """
        self.config = config
        self.transport = transport or HttpTransport(config)

    def __enter__(self) -> "DeliveryClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    def _resolve_options(self, query: Optional[Mapping[str, Any]] = None) -> ResolveOptions:
        """Config defaults overridden by options carried in ``query``."""
        options = {
            "resolve_links": self.config.resolve_links,
            "remove_unresolved": self.config.remove_unresolved,
        }
        options.update(client_options(query))
        return ResolveOptions(**options)

    def _not_found(self, id: Optional[str]) -> NotFoundError:
        return NotFoundError(id or "unknown", self.config.environment, self.config.space)

    def get_space(self) -> Dict[str, Any]:
        """Get the space the client is configured for."""
        return self.transport.get(ApiScope.SPACE, "")

    def get_content_type(self, id: str) -> Dict[str, Any]:
        """Get a single content type by id."""
        return self.transport.get(ApiScope.ENVIRONMENT, f"content_types/{id}")

    def get_content_types(self, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Get a collection of content types."""
        return self.transport.get(ApiScope.ENVIRONMENT, "content_types", params=build_query_params(query))

    def get_entries(self, query: Optional[Mapping[str, Any]] = None) -> ResolvedCollection:
        """
        Get a collection of entries, with links resolved.

        Args:
            query: Search parameters; may also carry ``resolve_links`` and
                ``remove_unresolved`` to override the client defaults for this call

        Returns:
            ResolvedCollection with ``items``, ``includes`` and paging metadata
        """
        options = self._resolve_options(query)
        params = build_query_params(normalize_select(query))
        raw = self.transport.get(ApiScope.ENVIRONMENT, "entries", params=params)
        return resolve_response(raw, options)

    def get_entry(self, id: str, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Get a single entry by id, with links resolved.

        Raises:
            NotFoundError: If ``id`` is empty or no entry matches it
        """
        if not id:
            raise self._not_found(id)
        entries = self.get_entries({**(query or {}), "sys.id": id})
        items = entries.get("items") or []
        if not items:
            raise self._not_found(id)
        return items[0]

    def get_asset(self, id: str, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Get a single asset by id."""
        return self.transport.get(
            ApiScope.ENVIRONMENT, f"assets/{id}", params=build_query_params(normalize_select(query))
        )

    def get_assets(self, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Get a collection of assets."""
        return self.transport.get(
            ApiScope.ENVIRONMENT, "assets", params=build_query_params(normalize_select(query))
        )

    def get_locales(self, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Get the locales of the environment."""
        return self.transport.get(
            ApiScope.ENVIRONMENT, "locales", params=build_query_params(normalize_select(query))
        )

    def parse_entries(self, raw: Mapping[str, Any]) -> ResolvedCollection:
        """
        Resolve links in raw entry collection JSON obtained elsewhere.

        Useful for responses fetched by other means (webhooks, stored exports).
        """
        return resolve_response(raw, self._resolve_options())

    def sync(self, query: Optional[Mapping[str, Any]] = None, paginate: bool = True) -> SyncCollection:
        """
        Synchronize all content or the changes since a previous sync.

        Pass ``{"initial": True}`` for a full sync, or ``{"next_sync_token": token}``
        with the token from the previous run for a delta sync. Links are only
        resolved for initial syncs.
        """
        options = self._resolve_options(query)
        return paged_sync(
            self.transport,
            query,
            resolve_links=options.resolve_links,
            remove_unresolved=options.remove_unresolved,
            paginate=paginate,
        )


def create_client(
    space: Optional[str] = None,
    access_token: Optional[str] = None,
    session: Optional[requests.Session] = None,
    **options: Any,
) -> DeliveryClient:
    """
    Create a DeliveryClient.

    Args:
        space: Space id
        access_token: Delivery API access token
        session: Optional requests session to send requests through
        **options: Any other ClientConfig field (environment, host, insecure,
            resolve_links, remove_unresolved, timeout, headers...)

    Raises:
        ConfigurationError: If ``space`` or ``access_token`` is missing
    """
    if not access_token:
        raise ConfigurationError("Expected parameter access_token")
    if not space:
        raise ConfigurationError("Expected parameter space")

    config = ClientConfig(space=space, access_token=access_token, **options)
    logger.debug(f"Creating client for space {space} / environment {config.environment}")
    return DeliveryClient(config, HttpTransport(config, session=session))
