"""
Per-user analysis history endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import Response
from loguru import logger

from ..clients import ClientBundle, get_clients
from ..exceptions import (
    ExportFailedError,
    HistoryClearError,
    HistoryFetchError,
    HistorySaveError,
    LexiError,
    RecordNotFoundError,
    UnauthorizedError,
)
from ..models.requests import MessageResponse, SaveAnalysisRequest
from ..models.schemas import AnalysisRecord, AnalysisResult
from ..services.export_service import render_analysis_pdf, report_filename
from ..utils.validators import parse_bearer_token

router = APIRouter(prefix="/history", tags=["history"])


def bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """Extract the bearer token, rejecting with 401 before any client is touched"""
    token = parse_bearer_token(authorization)
    if token is None:
        raise UnauthorizedError("missing bearer token")
    return token


async def get_current_user(
    token: str = Depends(bearer_token),
    clients: ClientBundle = Depends(get_clients)
) -> str:
    """Resolve the caller's uid from the bearer token, or reject with 401"""
    return await clients.identity.verify(token)


@router.get("", response_model=List[AnalysisRecord])
async def list_history(
    user_id: str = Depends(get_current_user),
    clients: ClientBundle = Depends(get_clients)
):
    """Saved analyses of the caller, newest first"""
    try:
        return await clients.history.list(user_id)
    except Exception as e:
        logger.exception(f"Failed to fetch history for {user_id}: {e}")
        raise HistoryFetchError(str(e)) from e


@router.post("", response_model=AnalysisRecord, status_code=201)
async def save_analysis(
    request: SaveAnalysisRequest,
    user_id: str = Depends(get_current_user),
    clients: ClientBundle = Depends(get_clients)
):
    """Append a finished analysis to the caller's history"""
    result = AnalysisResult.model_validate(request.model_dump(exclude={"file_name"}))
    try:
        return await clients.history.save(user_id, request.file_name, result)
    except Exception as e:
        logger.exception(f"Failed to save analysis for {user_id}: {e}")
        raise HistorySaveError(str(e)) from e


@router.delete("/clear", response_model=MessageResponse)
async def clear_history(
    user_id: str = Depends(get_current_user),
    clients: ClientBundle = Depends(get_clients)
):
    """Delete every saved analysis of the caller"""
    try:
        deleted = await clients.history.clear(user_id)
    except Exception as e:
        logger.exception(f"Failed to clear history for {user_id}: {e}")
        raise HistoryClearError(str(e)) from e

    if deleted == 0:
        return MessageResponse(message="No documents to delete.")
    return MessageResponse(message="History cleared successfully.")


@router.get("/{record_id}/export")
async def export_analysis(
    record_id: str,
    user_id: str = Depends(get_current_user),
    clients: ClientBundle = Depends(get_clients)
):
    """Download one saved analysis as a PDF report"""
    try:
        record = await clients.history.get(user_id, record_id)
    except Exception as e:
        logger.exception(f"Failed to load analysis {record_id}: {e}")
        raise HistoryFetchError(str(e)) from e

    if record is None:
        raise RecordNotFoundError(record_id)

    try:
        pdf_bytes = render_analysis_pdf(record)
    except LexiError:
        raise
    except Exception as e:
        logger.exception(f"Failed to render analysis {record_id}: {e}")
        raise ExportFailedError(str(e)) from e

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(record.file_name)}"'}
    )
