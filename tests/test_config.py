"""
Tests for ClientConfig.
"""

from unittest.mock import patch

import pytest

from content_delivery.core.delivery_api.config import ClientConfig
from content_delivery.core.delivery_api.errors import ConfigurationError
from content_delivery.core.delivery_api.models import ApiScope


class TestClientConfig:

    def test_base_urls(self):
        config = ClientConfig(space="sp", access_token="tok")

        assert config.space_base_url == "https://cdn.contentful.com/spaces/sp/"
        assert config.environment_base_url == "https://cdn.contentful.com/spaces/sp/environments/master/"
        assert config.base_url_for(ApiScope.SPACE) == config.space_base_url

    def test_insecure_host_and_base_path(self):
        config = ClientConfig(space="sp", access_token="tok", host="localhost:8080/", base_path="/api/",
                              insecure=True, environment="dev")

        assert config.environment_base_url == "http://localhost:8080/api/spaces/sp/environments/dev/"

    def test_missing_space_raises_configuration_error(self):
        config = ClientConfig(space=None, access_token="tok")

        with pytest.raises(ConfigurationError, match="space"):
            config.base_url_for(ApiScope.SPACE)

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)

    def test_config_is_immutable(self):
        config = ClientConfig(space="sp", access_token="tok")

        with pytest.raises(AttributeError):
            config.space = "other"

    def test_with_overrides_returns_new_config(self):
        config = ClientConfig(space="sp", access_token="tok")

        preview = config.with_overrides(host="preview.contentful.com")

        assert preview.host == "preview.contentful.com"
        assert config.host == "cdn.contentful.com"

    def test_user_agent_includes_application(self):
        config = ClientConfig(space="sp", access_token="tok", application="my-site/1.2")

        assert config.user_agent.endswith("app my-site/1.2")

    def test_from_env(self):
        env = {
            "CONTENT_DELIVERY_SPACE": "env-space",
            "CONTENT_DELIVERY_ACCESS_TOKEN": "env-token",
            "CONTENT_DELIVERY_ENVIRONMENT": "staging",
            "CONTENT_DELIVERY_REMOVE_UNRESOLVED": "true",
            "CONTENT_DELIVERY_RESOLVE_LINKS": "no",
            "CONTENT_DELIVERY_TIMEOUT": "5",
            "CONTENT_DELIVERY_MIN_REQUEST_INTERVAL": "0.25",
        }
        with patch.dict("os.environ", env, clear=True):
            config = ClientConfig.from_env(timeout=7.0)

        assert config.space == "env-space"
        assert config.access_token == "env-token"
        assert config.environment == "staging"
        assert config.remove_unresolved is True
        assert config.resolve_links is False
        assert config.timeout == 7.0
        assert config.min_request_interval == 0.25

    def test_from_env_loads_dotenv_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("CONTENT_DELIVERY_SPACE=file-space\nCONTENT_DELIVERY_ACCESS_TOKEN=file-token\n")

        with patch.dict("os.environ", {}, clear=True):
            config = ClientConfig.from_env(env_file)

        assert config.space == "file-space"
        assert config.access_token == "file-token"
        assert config.environment == "master"
