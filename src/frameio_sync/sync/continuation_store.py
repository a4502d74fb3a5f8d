"""Project sweep continuation persisted in Azure Blob Storage."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob.aio import BlobServiceClient

from frameio_sync.frameio.models import Continuation

if TYPE_CHECKING:
    from frameio_sync.config import AppConfig

logger = logging.getLogger(__name__)


class ContinuationStore:
    """Keeps the scheduled project sweep's paging state between timer firings.

    Uses the async blob client so the sweep never blocks the worker's event
    loop; each operation opens and closes its own service client.
    """

    def __init__(self, storage_connection_string: str, container: str, blob: str) -> None:
        """Initialise the store.

        Args:
            storage_connection_string: Azure Storage connection string.
            container: Blob container name for the continuation.
            blob: Blob path for the continuation JSON document.
        """
        self._connection_string = storage_connection_string
        self._container = container
        self._blob = blob

    def _service(self) -> BlobServiceClient:
        return BlobServiceClient.from_connection_string(self._connection_string)

    async def load(self) -> Continuation | None:
        """Read the persisted continuation.

        Returns:
            The stored continuation, or None if paging has not started or the
            previous sweep completed.
        """
        async with self._service() as blob_service:
            container_client = blob_service.get_container_client(self._container)
            blob_client = container_client.get_blob_client(self._blob)
            try:
                downloader = await blob_client.download_blob()
                data = await downloader.readall()
            except ResourceNotFoundError:
                logger.info("[load] no continuation found in blob storage — starting at page 1")
                return None
        return Continuation.from_dict(json.loads(data.decode("utf-8")))

    async def save(self, continuation: Continuation) -> None:
        """Write the continuation, creating the container if needed."""
        async with self._service() as blob_service:
            container_client = blob_service.get_container_client(self._container)
            try:
                await container_client.create_container()
                logger.info("[save] created blob container; container:%s", self._container)
            except ResourceExistsError:
                pass

            blob_client = container_client.get_blob_client(self._blob)
            payload = json.dumps(continuation.to_dict()).encode("utf-8")
            await blob_client.upload_blob(payload, overwrite=True)
        logger.info("[save] saved continuation; page:%d", continuation.page)

    async def clear(self) -> None:
        """Delete the stored continuation once paging is complete."""
        async with self._service() as blob_service:
            container_client = blob_service.get_container_client(self._container)
            blob_client = container_client.get_blob_client(self._blob)
            try:
                await blob_client.delete_blob()
            except ResourceNotFoundError:
                return
        logger.info("[clear] cleared continuation")


def continuation_store_from_config(config: AppConfig) -> ContinuationStore:
    """Construct a ContinuationStore from application configuration."""
    return ContinuationStore(
        storage_connection_string=config.storage_connection_string,
        container=config.continuation_container,
        blob=config.continuation_blob,
    )
