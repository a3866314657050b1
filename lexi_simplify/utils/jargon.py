"""
Jargon term matching inside a summary
"""

import re
from typing import List, Optional, Sequence, Tuple

from ..models.schemas import JargonTerm


def split_by_jargon(summary: str, jargon: Sequence[JargonTerm]) -> List[Tuple[str, Optional[str]]]:
    """
    Split a summary into (text, explanation) segments.

    Jargon terms match as whole words, case-insensitively; matched segments
    carry the term's explanation, all other segments carry None. Empty
    segments are dropped.
    """
    terms = [j for j in jargon if j.term.strip()]
    if not terms:
        return [(summary, None)] if summary else []

    explanations = {}
    for j in terms:
        explanations.setdefault(j.term.lower(), j.explanation)

    # Longest first so "force majeure clause" wins over "force majeure"
    alternatives = sorted((re.escape(j.term) for j in terms), key=len, reverse=True)
    pattern = re.compile(r"\b(" + "|".join(alternatives) + r")\b", re.IGNORECASE)

    segments = []
    # With one capture group, odd indices of split() are the matches
    for index, part in enumerate(pattern.split(summary)):
        if not part:
            continue
        explanation = explanations.get(part.lower()) if index % 2 else None
        segments.append((part, explanation))
    return segments
