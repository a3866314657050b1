"""
Domain models for the Lexi Simplify application
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List

from pydantic import BaseModel


class JargonTerm(BaseModel):
    """A legal term and its plain-language explanation"""
    term: str
    explanation: str


class Translations(BaseModel):
    """Summary and risks rendered in the caller's target language"""
    summary: str
    risks: List[str]


class AnalysisResult(BaseModel):
    """Structured analysis returned by the language model"""
    category: str
    summary: str
    risks: List[str]
    jargon: List[JargonTerm]
    translations: Translations


class AnalysisRecord(AnalysisResult):
    """A saved analysis owned by one user"""
    id: str
    file_name: str
    created_at: datetime

    @classmethod
    def from_document(cls, doc: dict) -> "AnalysisRecord":
        """Build a record from a raw MongoDB document"""
        data = {k: v for k, v in doc.items() if k not in ("_id", "user_id")}
        return cls(id=str(doc["_id"]), **data)


@dataclass(frozen=True)
class UploadedDocument:
    """Raw upload held for the duration of one analysis request"""
    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class OcrJob:
    """One asynchronous text-detection job against object storage"""
    source_uri: str
    destination_prefix: str
    destination_uri: str
    mime_type: str
    feature: str = "DOCUMENT_TEXT_DETECTION"
