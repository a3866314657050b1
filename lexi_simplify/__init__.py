"""
Lexi Simplify FastAPI Backend

Turns an uploaded legal document into a plain-language summary, a list of
risks, a jargon glossary and a translation, using Google Cloud Vision for
OCR and Gemini for analysis, and keeps a per-user history of the results.
"""

__version__ = "1.0.0"
