"""
Services package initialization
"""

from .storage_service import StorageService
from .ocr_service import OcrService
from .gemini_service import GeminiService
from .analysis_service import DocumentAnalyzer, TemporaryArtifacts
from .history_service import HistoryService
from .identity_service import IdentityService

__all__ = [
    "StorageService",
    "OcrService",
    "GeminiService",
    "DocumentAnalyzer",
    "TemporaryArtifacts",
    "HistoryService",
    "IdentityService",
]
