"""Tests for client configuration."""

import os
from unittest.mock import patch

from cronofy import config


class TestEndpoints:
    """Test endpoint resolution."""

    def test_defaults(self):
        """Should fall back to the public Cronofy hosts."""
        with patch.dict(os.environ, {}, clear=True):
            assert config.api_url() == "https://api.cronofy.com"
            assert config.app_url() == "https://app.cronofy.com"
            assert config.default_timeout() == 30.0

    def test_overrides(self):
        """Should read endpoints from the environment and strip trailing slashes."""
        env = {
            "CRONOFY_API_URL": "https://api-uk.cronofy.com/",
            "CRONOFY_APP_URL": "https://app-uk.cronofy.com",
            "CRONOFY_TIMEOUT": "5",
        }
        with patch.dict(os.environ, env, clear=True):
            assert config.api_url() == "https://api-uk.cronofy.com"
            assert config.app_url() == "https://app-uk.cronofy.com"
            assert config.default_timeout() == 5.0


class TestCredentials:
    """Test credential lookup."""

    def test_from_env(self):
        """Should map environment variables to client arguments."""
        env = {
            "CRONOFY_CLIENT_ID": "env-client-id",
            "CRONOFY_CLIENT_SECRET": "env-client-secret",
            "CRONOFY_ACCESS_TOKEN": "env-access-token",
        }
        with patch.dict(os.environ, env, clear=True):
            assert config.get_credentials_from_env() == {
                "client_id": "env-client-id",
                "client_secret": "env-client-secret",
                "access_token": "env-access-token",
                "refresh_token": None,
            }

    def test_status(self):
        """Should report which credentials are configured."""
        with patch.dict(os.environ, {"CRONOFY_CLIENT_ID": "id"}, clear=True):
            status = config.get_credential_status()

        assert status["credentials"]["client_id"] is True
        assert status["credentials"]["client_secret"] is False
        assert status["api_url"] == "https://api.cronofy.com"


class TestEnvFile:
    """Test .env loading."""

    def test_load_env_file(self, tmp_path):
        """Should load values, strip quotes and skip comments."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# Cronofy\n"
            "CRONOFY_CLIENT_ID=from-file\n"
            "CRONOFY_CLIENT_SECRET='quoted-secret'\n"
            "not a variable\n"
        )
        with patch.dict(os.environ, {}, clear=True):
            loaded = config._load_env_file(env_file)
            assert os.environ["CRONOFY_CLIENT_ID"] == "from-file"
            assert os.environ["CRONOFY_CLIENT_SECRET"] == "quoted-secret"

        assert loaded == {
            "CRONOFY_CLIENT_ID": "from-file",
            "CRONOFY_CLIENT_SECRET": "quoted-secret",
        }

    def test_environment_takes_precedence(self, tmp_path):
        """Should not override variables already set."""
        env_file = tmp_path / ".env"
        env_file.write_text("CRONOFY_CLIENT_ID=from-file\n")

        with patch.dict(os.environ, {"CRONOFY_CLIENT_ID": "from-env"}, clear=True):
            loaded = config._load_env_file(env_file)
            assert os.environ["CRONOFY_CLIENT_ID"] == "from-env"

        assert loaded == {}

    def test_missing_file(self, tmp_path):
        """Should load nothing when the file does not exist."""
        assert config._load_env_file(tmp_path / ".env") == {}
