"""
PDF Conversion Service package.

This module provides a FastAPI application exposing REST endpoints that
render PDF pages to PNG images and extract text from PDFs. The same
endpoints are also available as individually invocable serverless handlers.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
