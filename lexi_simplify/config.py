"""
Configuration settings for the Lexi Simplify API
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API Configuration
    api_version: str = "v1"
    debug_mode: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # Gemini Configuration
    gemini_api_key: Optional[str] = None
    gemini_model_name: str = "gemini-1.5-flash-latest"

    # Google Cloud Configuration
    gcs_bucket_name: Optional[str] = None
    gcp_service_account_key: Optional[str] = None

    # MongoDB Configuration
    mongodb_connection_string: str = "mongodb://localhost:27017"
    mongodb_database_name: str = "lexi_simplify"

    # Processing Configuration
    max_file_size_mb: int = 20
    max_prompt_chars: int = Field(default=25000, gt=0)
    ocr_batch_size: int = Field(default=20, gt=0)
    ocr_output_root: str = "ocr-output"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def __init__(self, **data):
        super().__init__(**data)

        # The LLM key has historically been published under two names
        if not self.gemini_api_key:
            self.gemini_api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")


# Global settings instance
settings = Settings()

DEFAULT_TARGET_LANGUAGE = "English"

REFUSAL_SENTENCE = (
    "I'm sorry, but the answer to that question cannot be found in the document's summary."
)

# Raster formats are annotated as images; everything else (PDF, TIFF, GIF) as files
IMAGE_MIME_TYPES = {
    'image/png',
    'image/jpeg',
    'image/jpg',
    'image/webp',
    'image/bmp',
}
