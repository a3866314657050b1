"""
Construction of the external service clients shared by all requests
"""

import json
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from fastapi import Request
from firebase_admin import credentials as firebase_credentials
from google.cloud import storage, vision
from google.oauth2 import service_account
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from .config import Settings
from .services.analysis_service import DocumentAnalyzer
from .services.gemini_service import GeminiService
from .services.history_service import HistoryService
from .services.identity_service import IdentityService
from .services.ocr_service import OcrService
from .services.storage_service import StorageService


@dataclass
class ClientBundle:
    """Every external collaborator a request handler may need"""
    storage: StorageService
    ocr: OcrService
    llm: GeminiService
    identity: IdentityService
    history: HistoryService
    analyzer: DocumentAnalyzer
    mongo_client: Optional[AsyncIOMotorClient] = None

    def close(self):
        if self.mongo_client:
            self.mongo_client.close()
            logger.info("Disconnected from MongoDB")


def _service_account_info(settings: Settings) -> dict:
    if not settings.gcp_service_account_key:
        raise RuntimeError("GCP_SERVICE_ACCOUNT_KEY is not set in environment variables.")
    return json.loads(settings.gcp_service_account_key)


def _firebase_app(info: dict) -> firebase_admin.App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        return firebase_admin.initialize_app(firebase_credentials.Certificate(info))


def build_client_bundle(settings: Settings) -> ClientBundle:
    """Create all clients once; called from the application lifespan"""
    if not settings.gcs_bucket_name:
        raise RuntimeError("GCS_BUCKET_NAME is not set in environment variables.")
    if not settings.gemini_api_key:
        raise RuntimeError("GEMINI_API_KEY is not set in environment variables.")

    info = _service_account_info(settings)
    gcp_credentials = service_account.Credentials.from_service_account_info(info)

    storage_service = StorageService(
        storage.Client(project=info.get("project_id"), credentials=gcp_credentials),
        settings.gcs_bucket_name,
    )
    ocr_service = OcrService(
        vision.ImageAnnotatorAsyncClient(credentials=gcp_credentials),
        batch_size=settings.ocr_batch_size,
    )
    llm_service = GeminiService.from_api_key(
        settings.gemini_api_key,
        settings.gemini_model_name,
        max_prompt_chars=settings.max_prompt_chars,
    )

    mongo_client = AsyncIOMotorClient(settings.mongodb_connection_string, tz_aware=True)
    history_service = HistoryService(mongo_client[settings.mongodb_database_name].analyses)

    logger.info(f"Clients ready (bucket: {settings.gcs_bucket_name}, model: {settings.gemini_model_name})")

    return ClientBundle(
        storage=storage_service,
        ocr=ocr_service,
        llm=llm_service,
        identity=IdentityService(_firebase_app(info)),
        history=history_service,
        analyzer=DocumentAnalyzer(storage_service, ocr_service, llm_service, settings),
        mongo_client=mongo_client,
    )


def get_clients(request: Request) -> ClientBundle:
    """FastAPI dependency returning the bundle built at startup"""
    clients = getattr(request.app.state, "clients", None)
    if clients is None:
        raise RuntimeError("Service clients are not initialized")
    return clients
