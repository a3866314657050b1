"""
PDF report rendering for saved analyses
"""

import io
import os
from typing import List, Tuple
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from ..models.schemas import AnalysisRecord
from ..utils.jargon import split_by_jargon
from ..utils.validators import sanitize_filename


def report_filename(file_name: str) -> str:
    """Download name for a report, e.g. ``LexiSimplify_Summary_lease.pdf``"""
    stem = os.path.splitext(sanitize_filename(file_name))[0]
    # Header values must stay ASCII
    stem = stem.encode("ascii", "ignore").decode("ascii").replace(" ", "_") or "document"
    return f"LexiSimplify_Summary_{stem}.pdf"


def _highlighted_summary(record: AnalysisRecord) -> str:
    parts = []
    for text, explanation in split_by_jargon(record.summary, record.jargon):
        parts.append(f"<b>{escape(text)}</b>" if explanation else escape(text))
    return "".join(parts)


def report_outline(record: AnalysisRecord) -> List[Tuple[str, str]]:
    """
    Report content as (style, markup) pairs, in reading order.

    Styles are ``title``, ``subtitle``, ``heading``, ``body`` and ``bullet``.
    Markup is reportlab paragraph markup with user text escaped. The
    translation is left out: the built-in PDF fonts only cover Latin
    scripts, and the target language may be Hindi, Tamil or Bengali.
    """
    outline = [
        ("title", escape(f"Analysis for: {record.file_name}")),
        ("subtitle", escape(f"Category: {record.category}")),
        ("heading", "Summary"),
        ("body", _highlighted_summary(record)),
        ("heading", "Risks &amp; Obligations"),
    ]
    if record.risks:
        outline.extend(("bullet", escape(risk)) for risk in record.risks)
    else:
        outline.append(("body", "No risks identified."))

    if record.jargon:
        outline.append(("heading", "Jargon Explained"))
        outline.extend(
            ("body", f"<b>{escape(item.term)}</b>: {escape(item.explanation)}")
            for item in record.jargon
        )
    return outline


def _flowables(outline: List[Tuple[str, str]]) -> list:
    styles = getSampleStyleSheet()
    paragraph_styles = {
        "title": styles["Title"],
        "subtitle": styles["Heading3"],
        "heading": styles["Heading2"],
        "body": styles["BodyText"],
    }

    story, bullets = [], []
    for style, markup in outline + [("end", "")]:
        if style == "bullet":
            bullets.append(ListItem(Paragraph(markup, styles["BodyText"]), leftIndent=12))
            continue
        if bullets:
            story.append(ListFlowable(bullets, bulletType="bullet", leftIndent=12))
            bullets = []
        if style == "heading":
            story.append(Spacer(1, 4 * mm))
        if style in paragraph_styles:
            story.append(Paragraph(markup, paragraph_styles[style]))
    return story


def render_analysis_pdf(record: AnalysisRecord) -> bytes:
    """Render one analysis as a PDF document and return its bytes"""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        title=f"Analysis for: {record.file_name}",
    )
    doc.build(_flowables(report_outline(record)))
    return buffer.getvalue()
