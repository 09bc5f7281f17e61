"""
Delivery API client module.

This module provides read-only access to a headless CMS delivery API and
resolves links between the entries and assets it returns.

The main entry point is create_client() in delivery_client.py; resolve_response()
in link_resolver.py can be used on its own for JSON obtained elsewhere.
"""

# Client
from content_delivery.core.delivery_api.delivery_client import DeliveryClient, create_client
from content_delivery.core.delivery_api.config import ClientConfig
from content_delivery.core.delivery_api.http_transport import HttpTransport

# Link resolution and sync
from content_delivery.core.delivery_api.link_resolver import LinkResolver, resolve_response
from content_delivery.core.delivery_api.paged_sync import paged_sync

# Errors
from content_delivery.core.delivery_api.errors import (
    ConfigurationError,
    DeliveryAPIError,
    NotFoundError,
    TransportError,
)

# Data models
from content_delivery.core.delivery_api.models import (
    ApiScope,
    FieldShape,
    ResolveOptions,
    ResolvedCollection,
    SyncCollection,
)

__all__ = [
    # Client
    'DeliveryClient',
    'create_client',
    'ClientConfig',
    'HttpTransport',

    # Link resolution and sync
    'LinkResolver',
    'resolve_response',
    'paged_sync',

    # Errors
    'DeliveryAPIError',
    'NotFoundError',
    'TransportError',
    'ConfigurationError',

    # Data models
    'ApiScope',
    'FieldShape',
    'ResolveOptions',
    'ResolvedCollection',
    'SyncCollection',
]
