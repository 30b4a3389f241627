"""
Unit Tests for Environment-Driven Configuration

Covers SpiceDBConfig and FilterConfig loading.
"""

import pytest
from unittest.mock import patch

from authz_rag_pipeline.authz.config import SpiceDBConfig, get_config, reset_config
from authz_rag_pipeline.filtering import FilterConfig, USER_SUBJECT_TYPE


class TestSpiceDBConfig:
    """Test SpiceDB connection settings."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = SpiceDBConfig.from_env()

            assert config.endpoint == "localhost:50051"
            assert config.preshared_key == "somepresharedkey"
            assert config.insecure is True
            assert config.timeout_seconds is None

    def test_from_env(self):
        env = {
            "SPICEDB_ENDPOINT": "spicedb.internal:443",
            "SPICEDB_PRESHARED_KEY": "s3cret",
            "SPICEDB_INSECURE": "false",
            "SPICEDB_TIMEOUT_SECONDS": "2.5",
        }
        with patch.dict("os.environ", env):
            config = SpiceDBConfig.from_env()

            assert config.endpoint == "spicedb.internal:443"
            assert config.preshared_key == "s3cret"
            assert config.insecure is False
            assert config.timeout_seconds == 2.5

    def test_bad_timeout_raises(self):
        with patch.dict("os.environ", {"SPICEDB_TIMEOUT_SECONDS": "soon"}):
            with pytest.raises(ValueError):
                SpiceDBConfig.from_env()

    def test_get_config_singleton(self):
        assert get_config() is get_config()


class TestFilterConfig:
    """Test filter settings."""

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = FilterConfig.from_env()

            assert config.permission == "read"
            assert config.resource_type == "document"
            assert config.metadata_key == "spicedb_object"
            assert config.subject_type == USER_SUBJECT_TYPE == "user"

    def test_from_env(self):
        env = {
            "AUTHZ_PERMISSION": "view",
            "AUTHZ_RESOURCE_TYPE": "article",
            "AUTHZ_METADATA_KEY": "authz_ref",
        }
        with patch.dict("os.environ", env):
            config = FilterConfig.from_env()

            assert (config.permission, config.resource_type, config.metadata_key) == (
                "view",
                "article",
                "authz_ref",
            )

    def test_frozen(self):
        with pytest.raises(AttributeError):
            FilterConfig().permission = "write"
