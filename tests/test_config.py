"""
Unit tests for client configuration.
"""

import pytest
from pydantic import ValidationError

from barkpush.config import BarkConfig


class TestBarkConfig:
    """Tests for BarkConfig."""

    def test_defaults(self, ec_private_pem):
        config = BarkConfig(team_id="T", auth_key_id="K", private_key=ec_private_pem)

        assert config.topic == "me.fin.bark"
        assert config.token_ttl == 2700
        assert config.timeout == 10.0
        assert config.max_concurrency == 1
        assert config.host == "api.push.apple.com"

    def test_sandbox_host(self, bark_config):
        config = BarkConfig(**{**bark_config.model_dump(), "sandbox": True})

        assert config.host == "api.sandbox.push.apple.com"

    def test_unknown_fields_rejected(self, bark_config):
        with pytest.raises(ValidationError):
            BarkConfig(**bark_config.model_dump(), apns_host="example.com")

    @pytest.mark.parametrize(
        "field,value",
        [("token_ttl", 0), ("max_concurrency", 0), ("timeout", -1), ("team_id", "")],
    )
    def test_invalid_values_rejected(self, bark_config, field, value):
        with pytest.raises(ValidationError):
            BarkConfig(**{**bark_config.model_dump(), field: value})
