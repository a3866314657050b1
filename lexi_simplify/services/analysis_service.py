"""
Document analysis pipeline: upload, OCR, Gemini analysis and cleanup
"""

import time
import uuid
from typing import Optional

from loguru import logger

from ..config import Settings
from ..exceptions import (
    LexiError,
    NoReadableTextError,
    OcrFailedError,
    UploadFailedError,
)
from ..models.schemas import AnalysisResult, OcrJob, UploadedDocument
from ..utils.validators import sanitize_filename
from .gemini_service import GeminiService
from .ocr_service import OcrService
from .storage_service import StorageService


class TemporaryArtifacts:
    """
    Async context manager that owns the temporary objects of one request.

    The upload key and the OCR output prefix are registered as soon as they
    are generated; on exit both are removed from storage whatever happened
    inside the block. Cleanup errors are logged and never replace the
    block's own result or exception.
    """

    def __init__(self, storage: StorageService):
        self.storage = storage
        self.upload_key: Optional[str] = None
        self.output_prefix: Optional[str] = None

    def register_upload(self, key: str) -> str:
        self.upload_key = key
        return key

    def register_output_prefix(self, prefix: str) -> str:
        self.output_prefix = prefix
        return prefix

    async def __aenter__(self) -> "TemporaryArtifacts":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.cleanup()
        return False

    async def cleanup(self) -> None:
        logger.info("Cleaning up temporary files...")

        if self.upload_key:
            try:
                await self.storage.delete(self.upload_key)
            except Exception as e:
                logger.warning(f"Could not delete upload {self.upload_key}: {e}")

        if self.output_prefix:
            try:
                deleted = await self.storage.delete_prefix(self.output_prefix)
                logger.debug(f"Deleted {deleted} OCR output objects under {self.output_prefix}")
            except Exception as e:
                logger.warning(f"Could not clean OCR output under {self.output_prefix}: {e}")

        logger.info("Cleanup complete.")


class DocumentAnalyzer:
    """Coordinates one document through storage, OCR and Gemini"""

    def __init__(self, storage: StorageService, ocr: OcrService, llm: GeminiService, settings: Settings):
        self.storage = storage
        self.ocr = ocr
        self.llm = llm
        self.output_root = settings.ocr_output_root.strip("/")

    async def analyze(self, document: UploadedDocument, language: str) -> AnalysisResult:
        """
        Run the full analysis pipeline for one uploaded document.

        Raises a LexiError subclass for every failure; temporary storage
        objects are gone by the time this returns or raises.
        """
        start_time = time.time()

        async with TemporaryArtifacts(self.storage) as artifacts:
            # Step 1: upload the raw document
            key = artifacts.register_upload(f"{uuid.uuid4()}-{sanitize_filename(document.filename)}")
            try:
                await self.storage.upload(key, document.content, document.content_type)
            except Exception as e:
                logger.error(f"Upload of {document.filename} failed: {e}")
                raise UploadFailedError(str(e)) from e

            # Step 2: run OCR into a per-request output prefix
            prefix = artifacts.register_output_prefix(f"{self.output_root}/{uuid.uuid4()}/")
            job = OcrJob(
                source_uri=self.storage.uri(key),
                destination_prefix=prefix,
                destination_uri=self.storage.uri(prefix),
                mime_type=document.content_type,
            )

            try:
                await self.ocr.detect_text(job)
                # Step 3: read OCR results back
                full_text = await self.ocr.collect_text(self.storage, prefix)
            except LexiError:
                raise
            except Exception as e:
                logger.error(f"OCR failed for {document.filename}: {e}")
                raise OcrFailedError(str(e)) from e

            if not full_text.strip():
                raise NoReadableTextError(f"no text found in {document.filename}")

            # Step 4: analyze with Gemini
            result = await self.llm.analyze_document(full_text, language)

        logger.info(
            f"Analyzed {document.filename} as '{result.category}' "
            f"in {time.time() - start_time:.2f}s"
        )
        return result
