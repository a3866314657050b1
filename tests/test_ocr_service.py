"""
Test Vision request construction and OCR output parsing
"""

import json
from unittest.mock import AsyncMock, MagicMock

from google.cloud import vision

from lexi_simplify.models.schemas import OcrJob
from lexi_simplify.services.ocr_service import OcrService, extract_text_from_output

from tests.fakes import FakeStorage, vision_output


def make_client():
    operation = MagicMock()
    operation.result = AsyncMock(return_value=MagicMock())
    client = MagicMock()
    client.async_batch_annotate_files = AsyncMock(return_value=operation)
    client.async_batch_annotate_images = AsyncMock(return_value=operation)
    return client, operation


def make_job(mime_type: str) -> OcrJob:
    return OcrJob(
        source_uri="gs://bucket/abc-lease.pdf",
        destination_prefix="ocr-output/123/",
        destination_uri="gs://bucket/ocr-output/123/",
        mime_type=mime_type,
    )


class TestExtractTextFromOutput:
    """Test the per-object text extraction."""

    def test_prefers_full_text_annotation(self):
        payload = {"responses": [{
            "fullTextAnnotation": {"text": "Full text"},
            "textAnnotations": [{"description": "Plain text"}]
        }]}
        assert extract_text_from_output(payload) == "Full text"

    def test_falls_back_to_first_text_annotation(self):
        assert extract_text_from_output(vision_output("Plain text", plain=True)) == "Plain text"

    def test_concatenates_responses_in_order(self):
        assert extract_text_from_output(vision_output("A", "B", "C")) == "ABC"

    def test_empty_payloads(self):
        assert extract_text_from_output({}) == ""
        assert extract_text_from_output({"responses": [{}, {"textAnnotations": []}]}) == ""


class TestOcrService:
    """Test job submission and result collection."""

    async def test_pdf_uses_file_batch(self):
        client, operation = make_client()
        service = OcrService(client, batch_size=20)

        await service.detect_text(make_job("application/pdf"))

        client.async_batch_annotate_files.assert_awaited_once()
        client.async_batch_annotate_images.assert_not_called()
        operation.result.assert_awaited_once()

        request = client.async_batch_annotate_files.call_args.kwargs["requests"][0]
        assert request.input_config.gcs_source.uri == "gs://bucket/abc-lease.pdf"
        assert request.input_config.mime_type == "application/pdf"
        assert request.output_config.gcs_destination.uri == "gs://bucket/ocr-output/123/"
        assert request.output_config.batch_size == 20
        assert request.features[0].type_ == vision.Feature.Type.DOCUMENT_TEXT_DETECTION

    async def test_png_uses_image_batch(self):
        client, operation = make_client()
        service = OcrService(client, batch_size=5)

        await service.detect_text(make_job("image/png"))

        client.async_batch_annotate_images.assert_awaited_once()
        client.async_batch_annotate_files.assert_not_called()

        kwargs = client.async_batch_annotate_images.call_args.kwargs
        assert kwargs["requests"][0].image.source.image_uri == "gs://bucket/abc-lease.pdf"
        assert kwargs["output_config"].batch_size == 5

    async def test_collect_text_reads_only_json(self):
        storage = FakeStorage()
        storage.objects = {
            "ocr-output/123/output-1-to-2.json": json.dumps(vision_output("One ", "Two ")).encode(),
            "ocr-output/123/notes.txt": b"ignored",
            "ocr-output/123/output-3-to-3.json": json.dumps(vision_output("Three")).encode(),
            "ocr-output/999/output-1-to-1.json": json.dumps(vision_output("Other request")).encode(),
        }
        service = OcrService(MagicMock())

        text = await service.collect_text(storage, "ocr-output/123/")

        assert text == "One Two Three"
