"""Report download endpoint."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ...core.exceptions import ArtifactNotFoundError
from ..deps import ReportStorageDep
from ..errors import ReportNotFoundError
from ..schemas.common import ErrorResponse

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "/{key}",
    response_class=PlainTextResponse,
    summary="Download a generated check-in report",
    responses={404: {"model": ErrorResponse, "description": "Report not found"}},
)
async def download_report(key: str, storage: ReportStorageDep):
    try:
        text = await storage.download_text(key)
    except ArtifactNotFoundError as e:
        raise ReportNotFoundError(key) from e
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{key}"'},
    )
