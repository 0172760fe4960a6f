"""
Report storage adapters for Clinic-Intake.

Reports are written once to Azure Blob Storage or to a local directory.
"""

from .azure_blob_service import AzureBlobReportStorage, run_blocking
from .local_report_storage import LocalReportStorage

__all__ = [
    "AzureBlobReportStorage",
    "LocalReportStorage",
    "run_blocking",
]
