"""
Smoke test against a real delivery API space.

Reads credentials from .env.local / .env at the project root and is skipped
when CONTENT_DELIVERY_SPACE or CONTENT_DELIVERY_ACCESS_TOKEN is not set.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from content_delivery.core.delivery_api import ClientConfig, DeliveryClient

project_root = Path(__file__).parent.parent.parent
load_dotenv(project_root / ".env.local")
load_dotenv(project_root / ".env")

pytestmark = pytest.mark.skipif(
    not (os.getenv("CONTENT_DELIVERY_SPACE") and os.getenv("CONTENT_DELIVERY_ACCESS_TOKEN")),
    reason="delivery API credentials not configured",
)


@pytest.fixture(scope="module")
def client():
    with DeliveryClient(ClientConfig.from_env()) as client:
        yield client


def test_space_and_locales(client):
    space = client.get_space()
    locales = client.get_locales()

    assert space["sys"]["type"] == "Space"
    assert locales["items"]


def test_entries_resolve_and_serialise(client):
    entries = client.get_entries({"limit": 5, "include": 2})

    assert "items" in entries
    assert isinstance(entries.stringify_safe(), str)


def test_initial_sync_first_page(client):
    result = client.sync({"initial": True, "type": "Asset"}, paginate=False)

    assert result.next_page_token or result.next_sync_token
