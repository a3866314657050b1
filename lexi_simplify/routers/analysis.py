"""
Document analysis and follow-up question endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from loguru import logger

from ..clients import ClientBundle, get_clients
from ..config import DEFAULT_TARGET_LANGUAGE, settings
from ..exceptions import (
    AnalysisFailedError,
    AnswerFailedError,
    FileTooLargeError,
    LexiError,
    MissingFileError,
    MissingQuestionError,
)
from ..models.requests import AskRequest, AskResponse
from ..models.schemas import AnalysisResult, UploadedDocument
from ..utils.validators import is_blank

router = APIRouter(tags=["analysis"])


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_document(
    file: Optional[UploadFile] = File(None),
    language: str = Form(DEFAULT_TARGET_LANGUAGE),
    clients: ClientBundle = Depends(get_clients)
):
    """
    Upload a legal document (PDF or image) and get back its category,
    summary, risks, jargon glossary and a translation into ``language``.

    Processing is synchronous: the request stays open until OCR and the
    language model have both finished.
    """
    if file is None:
        raise MissingFileError()

    content = await file.read()
    if not content:
        raise MissingFileError("uploaded file is empty")

    max_size_bytes = settings.max_file_size_mb * 1024 * 1024
    if len(content) > max_size_bytes:
        raise FileTooLargeError(f"{len(content)} bytes (max: {max_size_bytes})")

    document = UploadedDocument(
        filename=file.filename or "document",
        content_type=file.content_type or "application/octet-stream",
        content=content,
    )
    target_language = language.strip() or DEFAULT_TARGET_LANGUAGE

    logger.info(f"Starting analysis: {document.filename} ({len(content)} bytes, {document.content_type})")

    try:
        return await clients.analyzer.analyze(document, target_language)
    except LexiError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error analyzing {document.filename}: {e}")
        raise AnalysisFailedError(str(e)) from e


@router.post("/ask", response_model=AskResponse)
async def ask_question(
    request: AskRequest,
    clients: ClientBundle = Depends(get_clients)
):
    """Answer a question using only the summary of a previous analysis"""
    if is_blank(request.summary) or is_blank(request.question):
        raise MissingQuestionError()

    try:
        answer = await clients.llm.answer_question(request.summary, request.question)
    except LexiError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error answering question: {e}")
        raise AnswerFailedError(str(e)) from e

    return AskResponse(answer=answer)
