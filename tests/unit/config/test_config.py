"""Unit tests for config.py — AppConfig and load_config()."""

import os
from unittest.mock import patch

import pytest

from frameio_sync.config import AppConfig, load_config

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Minimal set of required environment variables for load_config()
_REQUIRED_ENV = {
    "FIO_ACCESS_TOKEN": "fio-test-token",
    "AzureWebJobsStorage": "DefaultEndpointsProtocol=https;AccountName=test",
}


# ---------------------------------------------------------------------------
# AppConfig tests
# ---------------------------------------------------------------------------


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig(access_token="tok", storage_connection_string="conn")

        assert config.base_url == "https://api.frame.io/v2"
        assert config.page_size == 100
        assert config.max_concurrency == 8
        assert config.sweep_team_ids == ()
        assert config.comment_threading == "final_pass"

    def test_is_frozen(self) -> None:
        config = AppConfig(access_token="tok", storage_connection_string="conn")

        with pytest.raises(AttributeError):
            config.page_size = 10  # type: ignore[misc]


# ---------------------------------------------------------------------------
# load_config tests
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_loads_required_values(self) -> None:
        with patch.dict(os.environ, _REQUIRED_ENV, clear=True):
            config = load_config()

        assert config.access_token == "fio-test-token"
        assert config.storage_connection_string.startswith("DefaultEndpointsProtocol")

    def test_missing_access_token_raises_key_error(self) -> None:
        env = {k: v for k, v in _REQUIRED_ENV.items() if k != "FIO_ACCESS_TOKEN"}
        with patch.dict(os.environ, env, clear=True), pytest.raises(KeyError):
            load_config()

    def test_optional_overrides(self) -> None:
        env = {
            **_REQUIRED_ENV,
            "FIO_BASE_URL": "https://frameio.example/v2",
            "FIO_PAGE_SIZE": "25",
            "FIO_MAX_CONCURRENCY": "3",
            "FIO_REQUEST_TIMEOUT_SECONDS": "12.5",
            "FIO_CONTINUATION_CONTAINER": "state",
            "FIO_CONTINUATION_BLOB": "sweep.json",
            "FIO_COMMENT_THREADING": "per_batch",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        assert config.base_url == "https://frameio.example/v2"
        assert config.page_size == 25
        assert config.max_concurrency == 3
        assert config.request_timeout_seconds == 12.5
        assert config.continuation_container == "state"
        assert config.continuation_blob == "sweep.json"
        assert config.comment_threading == "per_batch"

    def test_sweep_team_ids_are_split_and_trimmed(self) -> None:
        env = {**_REQUIRED_ENV, "FIO_SWEEP_TEAM_IDS": " t1, t2 ,,t3 "}
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        assert config.sweep_team_ids == ("t1", "t2", "t3")

    def test_unknown_threading_mode_raises(self) -> None:
        env = {**_REQUIRED_ENV, "FIO_COMMENT_THREADING": "eventually"}
        with patch.dict(os.environ, env, clear=True), pytest.raises(ValueError):
            load_config()
