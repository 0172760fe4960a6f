"""
Azure Blob Storage adapter for generated reports.
"""

import asyncio
import logging
from typing import Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

from ...application.ports.services.report_storage import ReportStorage
from ...core.config import AzureBlobSettings
from ...core.exceptions import ArtifactNotFoundError, StoreError

logger = logging.getLogger(__name__)


async def run_blocking(func, *args, **kwargs):
    """
    Run a blocking function in an executor to avoid blocking the event loop.

    Args:
        func: The blocking function to run
        *args: Positional arguments for the function
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the function call
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: func(*args, **kwargs))


class AzureBlobReportStorage(ReportStorage):
    """Write-once report blobs in a single container."""

    def __init__(self, settings: AzureBlobSettings, client: Optional[BlobServiceClient] = None):
        self.settings = settings
        self._client = client
        self._container_client = None

    @property
    def client(self) -> BlobServiceClient:
        """Get or create the BlobServiceClient."""
        if self._client is None:
            if not self.settings.connection_string:
                raise StoreError("Azure Blob Storage connection string is required")
            self._client = BlobServiceClient.from_connection_string(
                self.settings.connection_string
            )
        return self._client

    @property
    def container_client(self):
        if self._container_client is None:
            self._container_client = self.client.get_container_client(
                self.settings.container_name
            )
        return self._container_client

    async def ensure_container_exists(self) -> bool:
        """Create the container if needed. Returns True when it was created."""
        try:
            await run_blocking(self.container_client.create_container)
            logger.info(f"Created blob container: {self.settings.container_name}")
            return True
        except ResourceExistsError:
            return False
        except AzureError as e:
            raise StoreError(f"Failed to create blob container: {e}") from e

    async def upload_text(self, key: str, text: str) -> str:
        blob_client = self.container_client.get_blob_client(key)
        try:
            await run_blocking(
                blob_client.upload_blob,
                text.encode("utf-8"),
                overwrite=False,
                content_settings=ContentSettings(content_type="text/plain; charset=utf-8"),
            )
        except ResourceExistsError as e:
            raise StoreError(f"Report already exists: {key}", {"key": key}) from e
        except AzureError as e:
            raise StoreError(f"Failed to upload report: {e}", {"key": key}) from e

        logger.info(f"Uploaded report blob: {self.settings.container_name}/{key}")
        return key

    async def download_text(self, key: str) -> str:
        blob_client = self.container_client.get_blob_client(key)
        try:
            stream = await run_blocking(blob_client.download_blob)
            data = await run_blocking(stream.readall)
        except ResourceNotFoundError as e:
            raise ArtifactNotFoundError(key) from e
        except AzureError as e:
            raise StoreError(f"Failed to download report: {e}", {"key": key}) from e
        return data.decode("utf-8")
