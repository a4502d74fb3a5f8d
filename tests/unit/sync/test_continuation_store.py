"""Unit tests for sync/continuation_store.py — blob-backed continuation."""

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError

from frameio_sync.config import AppConfig
from frameio_sync.frameio.models import Continuation
from frameio_sync.sync.continuation_store import (
    ContinuationStore,
    continuation_store_from_config,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_store() -> tuple[ContinuationStore, MagicMock, MagicMock, MagicMock]:
    """Return (store, mock_blob_service, mock_container, mock_blob).

    The async blob calls are AsyncMocks; client lookups stay synchronous as
    they are in ``azure.storage.blob.aio``.
    """
    mock_blob_service = MagicMock()
    mock_blob_service.__aenter__.return_value = mock_blob_service
    mock_blob_service.__aexit__.return_value = None
    mock_container = MagicMock()
    mock_container.create_container = AsyncMock()
    mock_blob = MagicMock()
    mock_blob.download_blob = AsyncMock()
    mock_blob.upload_blob = AsyncMock()
    mock_blob.delete_blob = AsyncMock()
    mock_blob_service.get_container_client.return_value = mock_container
    mock_container.get_blob_client.return_value = mock_blob

    store = ContinuationStore(
        storage_connection_string="DefaultEndpointsProtocol=https;...",
        container="frameio-sync-state",
        blob="project-sweep/continuation.json",
    )
    return store, mock_blob_service, mock_container, mock_blob


def _patched_service(mock_blob_service: MagicMock) -> Any:
    return patch(
        "frameio_sync.sync.continuation_store.BlobServiceClient.from_connection_string",
        return_value=mock_blob_service,
    )


def _stored_payload(mock_blob: MagicMock, payload: bytes) -> None:
    downloader = MagicMock()
    downloader.readall = AsyncMock(return_value=payload)
    mock_blob.download_blob.return_value = downloader


# ---------------------------------------------------------------------------
# load tests
# ---------------------------------------------------------------------------


class TestLoad:
    @pytest.mark.asyncio
    async def test_returns_none_when_blob_not_found(self) -> None:
        store, mock_blob_service, _, mock_blob = _make_store()
        mock_blob.download_blob.side_effect = ResourceNotFoundError("not found")

        with _patched_service(mock_blob_service):
            assert await store.load() is None

    @pytest.mark.asyncio
    async def test_returns_stored_continuation(self) -> None:
        store, mock_blob_service, mock_container, mock_blob = _make_store()
        _stored_payload(mock_blob, b'{"page": 4}')

        with _patched_service(mock_blob_service) as mock_from_conn:
            result = await store.load()

        assert result == Continuation(page=4)
        mock_from_conn.assert_called_once_with("DefaultEndpointsProtocol=https;...")
        mock_blob_service.get_container_client.assert_called_with("frameio-sync-state")
        mock_container.get_blob_client.assert_called_with("project-sweep/continuation.json")

    @pytest.mark.asyncio
    async def test_closes_service_client(self) -> None:
        store, mock_blob_service, _, mock_blob = _make_store()
        _stored_payload(mock_blob, b'{"page": 2}')

        with _patched_service(mock_blob_service):
            await store.load()

        mock_blob_service.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejects_invalid_page(self) -> None:
        store, mock_blob_service, _, mock_blob = _make_store()
        _stored_payload(mock_blob, b'{"page": 0}')

        with _patched_service(mock_blob_service), pytest.raises(ValueError):
            await store.load()


# ---------------------------------------------------------------------------
# save tests
# ---------------------------------------------------------------------------


class TestSave:
    @pytest.mark.asyncio
    async def test_uploads_json_document(self) -> None:
        store, mock_blob_service, _, mock_blob = _make_store()

        with _patched_service(mock_blob_service):
            await store.save(Continuation(page=3))

        payload = mock_blob.upload_blob.call_args[0][0]
        assert json.loads(payload.decode("utf-8")) == {"page": 3}
        assert mock_blob.upload_blob.call_args[1] == {"overwrite": True}

    @pytest.mark.asyncio
    async def test_creates_container_if_not_exists(self) -> None:
        store, mock_blob_service, mock_container, _ = _make_store()

        with _patched_service(mock_blob_service):
            await store.save(Continuation(page=2))

        mock_container.create_container.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_continues_if_container_already_exists(self) -> None:
        store, mock_blob_service, mock_container, mock_blob = _make_store()
        mock_container.create_container.side_effect = ResourceExistsError("exists")

        with _patched_service(mock_blob_service):
            await store.save(Continuation(page=2))

        mock_blob.upload_blob.assert_awaited_once()


# ---------------------------------------------------------------------------
# clear tests
# ---------------------------------------------------------------------------


class TestClear:
    @pytest.mark.asyncio
    async def test_deletes_blob(self) -> None:
        store, mock_blob_service, _, mock_blob = _make_store()

        with _patched_service(mock_blob_service):
            await store.clear()

        mock_blob.delete_blob.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_blob_is_not_an_error(self) -> None:
        store, mock_blob_service, _, mock_blob = _make_store()
        mock_blob.delete_blob.side_effect = ResourceNotFoundError("gone")

        with _patched_service(mock_blob_service):
            await store.clear()


class TestContinuationStoreFromConfig:
    def test_uses_configured_container_and_blob(self) -> None:
        config = AppConfig(
            access_token="tok",
            storage_connection_string="conn",
            continuation_container="custom-container",
            continuation_blob="custom/path.json",
        )

        store = continuation_store_from_config(config)

        assert store._connection_string == "conn"
        assert store._container == "custom-container"
        assert store._blob == "custom/path.json"
