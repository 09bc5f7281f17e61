import pytest

from content_delivery.core.delivery_api.query_builder import (
    build_query_params,
    client_options,
    normalize_select,
    sync_request_params,
    validate_sync_query,
)
from content_delivery.core.delivery_api.utils import extract_sync_token


def test_normalize_select_adds_sys_fields():
    query = {"select": "fields.name,fields.age", "limit": 2}

    normalized = normalize_select(query)

    assert normalized["select"] == "fields.name,fields.age,sys.id,sys.type"
    assert normalized["limit"] == 2
    # input untouched
    assert query["select"] == "fields.name,fields.age"


def test_normalize_select_keeps_full_sys():
    assert normalize_select({"select": ["sys", "fields.name"]})["select"] == "sys,fields.name"


def test_normalize_select_without_select():
    assert normalize_select(None) == {}
    assert normalize_select({"limit": 1}) == {"limit": 1}


def test_normalize_select_does_not_duplicate():
    assert normalize_select({"select": "sys.id,fields.a"})["select"] == "sys.id,fields.a,sys.type"


def test_build_query_params():
    params = build_query_params({
        "content_type": "animal",
        "sys.id[in]": ["a", "b"],
        "fields.alive": True,
        "order": ("-sys.createdAt", "fields.name"),
        "skip": None,
        "resolve_links": False,
        "removeUnresolved": True,
    })

    assert params == {
        "content_type": "animal",
        "sys.id[in]": "a,b",
        "fields.alive": "true",
        "order": "-sys.createdAt,fields.name",
    }


def test_client_options():
    assert client_options(None) == {}
    assert client_options({"resolveLinks": 0, "remove_unresolved": 1}) == {
        "resolve_links": False,
        "remove_unresolved": True,
    }


class TestSyncQuery:

    @pytest.mark.parametrize("query", [None, {}, {"initial": False}, {"next_sync_token": ""}])
    def test_missing_starting_point(self, query):
        with pytest.raises(ValueError):
            validate_sync_query(query)

    def test_accepts_tokens_in_either_case(self):
        assert validate_sync_query({"nextSyncToken": "t"}) == {"nextSyncToken": "t"}
        assert validate_sync_query({"next_page_token": "p"}) == {"next_page_token": "p"}

    def test_token_replaces_query(self):
        assert sync_request_params({"next_page_token": "p", "type": "Entry"}) == {"sync_token": "p"}
        assert sync_request_params({"sync_token": "s"}) == {"sync_token": "s"}

    def test_initial_query_passed_through(self):
        assert sync_request_params({"initial": True, "type": "Asset"}) == {"initial": "true", "type": "Asset"}


@pytest.mark.parametrize("url, token", [
    ("https://cdn.example.com/spaces/s/environments/master/sync?sync_token=abc123", "abc123"),
    ("https://cdn.example.com/sync?foo=1&sync_token=x-y_z", "x-y_z"),
    ("https://cdn.example.com/sync", ""),
    ("", ""),
])
def test_extract_sync_token(url, token):
    assert extract_sync_token(url) == token
