"""
Validation utilities for the Lexi Simplify application
"""

import re
import uuid
from typing import Optional

_UNSAFE_KEY_CHARS = re.compile(r'[^\w\s\-\.]')


def sanitize_filename(filename: Optional[str]) -> str:
    """Make a filename safe to embed in an object storage key"""
    if not filename:
        return f"unnamed_{uuid.uuid4().hex[:8]}"

    sanitized = _UNSAFE_KEY_CHARS.sub('_', filename).strip() or "document"

    # Limit length
    if len(sanitized) > 200:
        base, dot, ext = sanitized.rpartition('.')
        if dot and len(ext) <= 10:
            sanitized = f"{base[:199 - len(ext)]}.{ext}"
        else:
            sanitized = sanitized[:200]

    return sanitized


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header, or None"""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()
