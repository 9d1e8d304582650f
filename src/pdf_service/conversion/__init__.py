"""
Domain layer for PDF conversion and text extraction.
Provides interfaces (gateways) and a service that decodes documents and
delegates to PDF libraries, so front-ends (HTTP server or serverless
functions) can use the same core logic.
"""

from .errors import PdfServiceError
from .interfaces import (
    ConversionRequest,
    ConversionResult,
    ExtractionRequest,
    ExtractionResult,
    ExtractorGateway,
    PageStreamGateway,
    RendererGateway,
)
from .service import PdfService, select_page
