"""
Main entry point for the Lexi Simplify API
This file allows running the application with 'uvicorn main:app'
"""

from lexi_simplify.main import app

# Re-export the FastAPI app instance for uvicorn
__all__ = ["app"]
