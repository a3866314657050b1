"""
Google Cloud Vision service for asynchronous document text detection
"""

import json
from typing import Any, Dict

from google.cloud import vision
from loguru import logger

from ..config import IMAGE_MIME_TYPES
from ..models.schemas import OcrJob


def extract_text_from_output(payload: Dict[str, Any]) -> str:
    """
    Pull the recognised text out of one Vision output JSON object.

    Each response contributes its full-document annotation when present,
    otherwise the first plain text annotation.
    """
    text = ""
    for response in payload.get("responses", []):
        full_text = (response.get("fullTextAnnotation") or {}).get("text")
        if full_text:
            text += full_text
            continue

        annotations = response.get("textAnnotations") or []
        if annotations:
            text += annotations[0].get("description", "")
    return text


class OcrService:
    """Service for submitting Vision batch jobs and reading their output"""

    def __init__(self, client: vision.ImageAnnotatorAsyncClient, batch_size: int = 20):
        self.client = client
        self.batch_size = batch_size

    async def detect_text(self, job: OcrJob) -> None:
        """
        Submit a text-detection job and wait for it to finish.

        The wait has no deadline of its own; it ends when the job resolves
        or the surrounding request is torn down.
        """
        features = [vision.Feature(type_=vision.Feature.Type[job.feature])]
        output_config = vision.OutputConfig(
            gcs_destination=vision.GcsDestination(uri=job.destination_uri),
            batch_size=self.batch_size,
        )

        if job.mime_type in IMAGE_MIME_TYPES:
            request = vision.AnnotateImageRequest(
                image=vision.Image(source=vision.ImageSource(image_uri=job.source_uri)),
                features=features,
            )
            operation = await self.client.async_batch_annotate_images(
                requests=[request],
                output_config=output_config,
            )
        else:
            request = vision.AsyncAnnotateFileRequest(
                input_config=vision.InputConfig(
                    gcs_source=vision.GcsSource(uri=job.source_uri),
                    mime_type=job.mime_type,
                ),
                features=features,
                output_config=output_config,
            )
            operation = await self.client.async_batch_annotate_files(requests=[request])

        logger.info(f"OCR job submitted for {job.source_uri} -> {job.destination_uri}")
        await operation.result()
        logger.info(f"OCR job finished for {job.source_uri}")

    async def collect_text(self, storage, prefix: str) -> str:
        """
        Concatenate the text of every JSON output object under a prefix.

        Objects are read in listing order. The service does not promise that
        this is page order, so multi-page documents may come back reordered.
        """
        text = ""
        names = await storage.list_names(prefix)
        for name in names:
            if not name.endswith(".json"):
                continue
            payload = json.loads((await storage.download(name)).decode("utf-8"))
            text += extract_text_from_output(payload)

        logger.info(f"Collected {len(text)} characters from {len(names)} OCR output objects")
        return text
