"""
Utilities package initialization
"""

from .jargon import split_by_jargon
from .validators import is_blank, parse_bearer_token, sanitize_filename

__all__ = [
    "split_by_jargon",
    "is_blank",
    "parse_bearer_token",
    "sanitize_filename"
]
