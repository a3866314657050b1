"""
Models package initialization
"""

from .schemas import *
from .requests import *

__all__ = [
    "JargonTerm",
    "Translations",
    "AnalysisResult",
    "AnalysisRecord",
    "UploadedDocument",
    "OcrJob",
    "AskRequest",
    "AskResponse",
    "SaveAnalysisRequest",
    "MessageResponse",
    "HealthResponse",
    "ErrorResponse",
]
