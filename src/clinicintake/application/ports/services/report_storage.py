"""
Object storage interface for generated reports.
"""

from abc import ABC, abstractmethod


class ReportStorage(ABC):
    """Write-once text artifact storage."""

    @abstractmethod
    async def upload_text(self, key: str, text: str) -> str:
        """Store UTF-8 text under ``key`` without overwriting. Returns the key.

        Raises StoreError when the upload is rejected, including when the
        key already exists.
        """
        pass

    @abstractmethod
    async def download_text(self, key: str) -> str:
        """Read a stored artifact. Raises StoreError when missing."""
        pass
