"""Framework-agnostic endpoint functions.

Each function takes the HTTP method and raw request body and returns a
``FunctionResponse``. The FastAPI server and the serverless handlers both
delegate here, so the two deployment shapes answer identically.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from .config import Settings
from .conversion import PdfService, PdfServiceError
from .conversion.errors import (
    InternalError,
    MethodNotAllowedError,
    PayloadTooLargeError,
    RouteNotFoundError,
    WrongTypeError,
)
from .conversion.validation import validate_conversion_request, validate_extraction_request

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}

CONVERT_MESSAGE = "PDF convertido com sucesso"
EXTRACT_MESSAGE = "Texto extraído com sucesso"


@dataclass
class FunctionResponse:
    status_code: int
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)


def build_service(settings: Settings) -> PdfService:
    from .conversion.adapters import PyMuPDFExtractor, PyMuPDFRenderer

    return PdfService(
        renderer=PyMuPDFRenderer(),
        extractor=PyMuPDFExtractor(),
        timeout_sec=settings.request_timeout_sec,
    )


def success_envelope(message: str, **fields: Any) -> FunctionResponse:
    return FunctionResponse(200, {"success": True, **fields, "message": message})


def error_envelope(error: PdfServiceError) -> FunctionResponse:
    return FunctionResponse(error.status_code, {"success": False, "error": error.message})


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_json_body(raw: bytes, *, max_bytes: int, max_mb: int) -> Any:
    if len(raw) > max_bytes:
        raise PayloadTooLargeError(max_mb)
    # An empty body behaves like an empty object: the document field is missing
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise WrongTypeError("corpo da requisição", "um JSON válido")


def health(settings: Settings) -> FunctionResponse:
    return FunctionResponse(
        200,
        {
            "status": "ok",
            "message": "API está funcionando",
            "version": settings.version,
            "timestamp": _utcnow(),
        },
    )


def index() -> FunctionResponse:
    return FunctionResponse(
        200,
        {
            "message": "API de Conversão e Extração de PDF",
            "endpoints": {
                "health": "GET /health",
                "convert": "POST /api/pdf/convert",
                "extractText": "POST /api/pdf/extract-text",
            },
            "usage": [
                {
                    "name": "Converter PDF para Imagem",
                    "method": "POST",
                    "url": "/api/pdf/convert",
                    "body": {
                        "pdfBase64": "string (base64 do PDF)",
                        "pageNumber": "number (opcional, padrão: 1)",
                        "scale": "number (opcional, padrão: 2.0)",
                    },
                },
                {
                    "name": "Extrair Texto do PDF",
                    "method": "POST",
                    "url": "/api/pdf/extract-text",
                    "body": {"pdfBase64": "string (base64 do PDF)"},
                },
            ],
        },
    )


def not_found() -> FunctionResponse:
    return error_envelope(RouteNotFoundError())


async def _pdf_endpoint(
    method: str,
    operation: Callable[[], Awaitable[FunctionResponse]],
) -> FunctionResponse:
    method = method.upper()
    if method == "OPTIONS":
        return FunctionResponse(200, None, dict(CORS_HEADERS))
    try:
        if method != "POST":
            raise MethodNotAllowedError("POST")
        response = await operation()
    except PdfServiceError as e:
        response = error_envelope(e)
    except Exception:
        logger.exception("Unexpected error while handling PDF request")
        response = error_envelope(InternalError())
    response.headers = {**CORS_HEADERS, **response.headers}
    return response


async def convert(
    service: PdfService,
    method: str,
    raw_body: bytes,
    *,
    settings: Settings,
) -> FunctionResponse:
    """POST /api/pdf/convert: render one page of a base64 PDF to a PNG data URI."""

    async def operation() -> FunctionResponse:
        body = parse_json_body(raw_body, max_bytes=settings.max_body_bytes, max_mb=settings.max_body_mb)
        request = validate_conversion_request(body, max_scale=settings.max_scale)
        result = await service.convert(request)
        return success_envelope(CONVERT_MESSAGE, imageBase64=result.image_data_uri)

    return await _pdf_endpoint(method, operation)


async def extract_text(
    service: PdfService,
    method: str,
    raw_body: bytes,
    *,
    settings: Settings,
) -> FunctionResponse:
    """POST /api/pdf/extract-text: extract text, page count and metadata from a base64 PDF."""

    async def operation() -> FunctionResponse:
        body = parse_json_body(raw_body, max_bytes=settings.max_body_bytes, max_mb=settings.max_body_mb)
        request = validate_extraction_request(body)
        result = await service.extract_text(request)
        return success_envelope(
            EXTRACT_MESSAGE,
            text=result.text,
            numPages=result.num_pages,
            info=dict(result.info) if result.info is not None else None,
            metadata=dict(result.metadata) if result.metadata is not None else None,
        )

    return await _pdf_endpoint(method, operation)
