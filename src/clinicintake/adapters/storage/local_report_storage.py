"""
Filesystem report storage for development and tests.
"""

import logging
from pathlib import Path

from ...application.ports.services.report_storage import ReportStorage
from ...core.exceptions import ArtifactNotFoundError, StoreError
from .azure_blob_service import run_blocking

logger = logging.getLogger(__name__)


class LocalReportStorage(ReportStorage):
    """Stores each report as a file under ``base_path``; existing files are never replaced."""

    def __init__(self, base_path: str):
        self.base_path = Path(base_path)

    def _path_for(self, key: str) -> Path:
        path = (self.base_path / key).resolve()
        if path.parent != self.base_path.resolve():
            raise StoreError(f"Invalid report key: {key}", {"key": key})
        return path

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "x", encoding="utf-8") as f:
            f.write(text)

    async def upload_text(self, key: str, text: str) -> str:
        path = self._path_for(key)
        try:
            await run_blocking(self._write, path, text)
        except FileExistsError as e:
            raise StoreError(f"Report already exists: {key}", {"key": key}) from e
        except OSError as e:
            raise StoreError(f"Failed to write report: {e}", {"key": key}) from e
        logger.info(f"Stored report file: {path}")
        return key

    async def download_text(self, key: str) -> str:
        path = self._path_for(key)
        try:
            return await run_blocking(path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(key) from e
        except OSError as e:
            raise StoreError(f"Failed to read report: {e}", {"key": key}) from e
