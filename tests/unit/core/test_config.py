"""Unit tests for ClientConfig and RetryPolicy."""

from __future__ import annotations

import pytest

from digitalbits.frontier.core import ClientConfig, ConfigurationError, Network, RetryPolicy


class TestClientConfig:
    """Test client configuration validation."""

    def test_for_network(self):
        config = ClientConfig.for_network(Network.TESTNET)
        assert config.server_url == "https://frontier.testnet.digitalbits.io"
        assert config.timeout == 30.0

    def test_for_network_from_string(self):
        config = ClientConfig.for_network("livenet", timeout=5.0)
        assert config.server_url == Network.LIVENET.server_url
        assert config.timeout == 5.0

    def test_insecure_server_rejected(self):
        with pytest.raises(ConfigurationError, match="insecure"):
            ClientConfig(server_url="http://localhost:8000")

    def test_insecure_server_allowed_explicitly(self):
        config = ClientConfig(server_url="http://localhost:8000", allow_http=True)
        assert config.allow_http

    def test_invalid_url(self):
        with pytest.raises(ConfigurationError):
            ClientConfig(server_url="frontier")

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigurationError):
            ClientConfig(server_url="https://example.com", timeout=0)

    def test_request_headers_merge_credentials(self):
        config = ClientConfig(
            server_url="https://example.com",
            headers={"Authorization": "Bearer token"},
            client_name="my-app",
        )
        headers = config.request_headers()
        assert headers["X-Client-Name"] == "my-app"
        assert headers["X-Client-Version"] == config.client_version
        assert headers["Authorization"] == "Bearer token"


class TestRetryPolicy:
    """Test backoff computation."""

    def test_exponential_backoff_capped(self):
        policy = RetryPolicy(initial_delay=1.0, multiplier=2.0, max_delay=5.0, jitter=0.0)
        assert [policy.delay(n) for n in range(1, 6)] == [1.0, 2.0, 4.0, 5.0, 5.0]

    def test_floor_raises_delay(self):
        policy = RetryPolicy(initial_delay=0.5, jitter=0.0)
        assert policy.delay(1, floor=3.0) == 3.0
        assert policy.delay(1, floor=0.1) == 0.5

    def test_jitter_bounded(self):
        policy = RetryPolicy(initial_delay=1.0, jitter=0.2)
        for _ in range(20):
            assert 1.0 <= policy.delay(1) <= 1.2

    def test_jitter_never_exceeds_max_delay(self):
        policy = RetryPolicy(initial_delay=1.0, max_delay=30.0, jitter=0.5)
        for attempt in (6, 10, 20):
            assert policy.delay(attempt) <= 30.0

    def test_server_floor_above_max_delay_wins(self):
        policy = RetryPolicy(max_delay=5.0, jitter=0.5)
        assert policy.delay(1, floor=60.0) == 60.0

    def test_exhausted(self):
        policy = RetryPolicy(max_retries=2)
        assert not policy.exhausted(2)
        assert policy.exhausted(3)
        assert not RetryPolicy(max_retries=None).exhausted(10_000)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"initial_delay": -1},
            {"multiplier": 0.5},
            {"max_retries": -1},
            {"jitter": 2.0},
        ],
    )
    def test_invalid_policy(self, kwargs):
        with pytest.raises(ConfigurationError):
            RetryPolicy(**kwargs)
