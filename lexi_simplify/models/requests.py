"""
Request and Response models for API endpoints
"""

from datetime import datetime
from typing import Optional, Dict

from pydantic import BaseModel

from .schemas import AnalysisResult


class AskRequest(BaseModel):
    """Request model for follow-up questions"""
    summary: Optional[str] = None
    question: Optional[str] = None


class AskResponse(BaseModel):
    """Response model for follow-up questions"""
    answer: str


class SaveAnalysisRequest(AnalysisResult):
    """Request model for appending an analysis to the caller's history"""
    file_name: str


class MessageResponse(BaseModel):
    """Response model for status messages"""
    message: str


class HealthResponse(BaseModel):
    """Response model for health check"""
    status: str
    timestamp: datetime
    version: str
    services: Dict[str, str]
    uptime_seconds: float


class ErrorResponse(BaseModel):
    """Response model for errors"""
    error: str
    timestamp: datetime
    request_id: Optional[str] = None
