"""
Test configuration and fixtures
"""

import pytest
from httpx import AsyncClient, ASGITransport

from lexi_simplify.clients import ClientBundle, get_clients
from lexi_simplify.config import Settings
from lexi_simplify.main import app
from lexi_simplify.services.analysis_service import DocumentAnalyzer
from lexi_simplify.services.gemini_service import GeminiService
from lexi_simplify.services.history_service import HistoryService

from tests.fakes import FakeCollection, FakeIdentity, FakeModel, FakeOcrService, FakeStorage


@pytest.fixture
def test_settings():
    return Settings(gcs_bucket_name="test-bucket", gemini_api_key="test-key")


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def ocr(storage):
    return FakeOcrService(storage)


@pytest.fixture
def model():
    return FakeModel()


@pytest.fixture
def llm(model):
    return GeminiService(model)


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def history(collection):
    return HistoryService(collection)


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def analyzer(storage, ocr, llm, test_settings):
    return DocumentAnalyzer(storage, ocr, llm, test_settings)


@pytest.fixture
def clients(storage, ocr, llm, identity, history, analyzer):
    return ClientBundle(
        storage=storage,
        ocr=ocr,
        llm=llm,
        identity=identity,
        history=history,
        analyzer=analyzer,
    )


@pytest.fixture
async def async_client(clients):
    """Create an async HTTP client wired to the fake clients."""
    app.dependency_overrides[get_clients] = lambda: clients
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def unwired_client(monkeypatch):
    """Client for an app whose service clients failed to build at startup."""
    monkeypatch.setattr(app.state, "clients", None)
    app.dependency_overrides.clear()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    import io
    from reportlab.pdfgen import canvas

    buffer = io.BytesIO()
    p = canvas.Canvas(buffer)
    p.drawString(100, 750, "RESIDENTIAL LEASE AGREEMENT")
    p.drawString(100, 730, "The Tenant shall pay a security deposit of $1,000.")
    p.showPage()
    p.save()

    buffer.seek(0)
    return buffer.getvalue()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer token-alice"}
