import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from pdf_service import functions
from pdf_service.config import Settings
from pdf_service.conversion import PdfService
from pdf_service.conversion.errors import InternalError, MethodNotAllowedError, PayloadTooLargeError
from pdf_service.logging_setup import configure_logging

SETTINGS = Settings.from_env()

app = FastAPI(
    title="PDF Conversion Service",
    version=SETTINGS.version,
    description=(
        "RESTful API that renders PDF pages to PNG images and extracts text "
        "and metadata from base64-encoded PDF documents."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=functions.CORS_HEADERS["Access-Control-Allow-Methods"].split(","),
    allow_headers=["*"],
)

logger = logging.getLogger(__name__)

# Every method is routed to the PDF endpoints so the endpoint functions
# answer OPTIONS and reject non-POST methods themselves.
PDF_ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

SERVICE: PdfService | None = None


def _to_response(result: functions.FunctionResponse) -> Response:
    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(status_code=result.status_code, content=result.body, headers=result.headers)


def _service() -> PdfService:
    global SERVICE
    if SERVICE is None:
        SERVICE = functions.build_service(SETTINGS)
    return SERVICE


async def _read_body(request: Request) -> bytes:
    """Read the body in chunks, stopping once it passes the size limit.

    Chunked uploads carry no Content-Length, so the middleware check alone
    does not bound them.
    """
    chunks: list[bytes] = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > SETTINGS.max_body_bytes:
            raise PayloadTooLargeError(SETTINGS.max_body_mb)
        chunks.append(chunk)
    return b"".join(chunks)


async def _pdf_route(request: Request, endpoint) -> Response:
    try:
        raw = await _read_body(request)
    except PayloadTooLargeError as e:
        result = functions.error_envelope(e)
        result.headers = dict(functions.CORS_HEADERS)
        return _to_response(result)
    return _to_response(await endpoint(_service(), request.method, raw, settings=SETTINGS))


@app.on_event("startup")
async def _startup() -> None:
    configure_logging(SETTINGS.log_level)
    _service()
    logger.info(
        "PDF service ready (max body %d MB, timeout %g s)",
        SETTINGS.max_body_mb,
        SETTINGS.request_timeout_sec,
    )


@app.middleware("http")
async def _limit_body_size(request: Request, call_next):
    # Reject oversize uploads before the body is read into memory
    length = request.headers.get("content-length", "")
    if length.isdigit() and int(length) > SETTINGS.max_body_bytes:
        return _to_response(functions.error_envelope(PayloadTooLargeError(SETTINGS.max_body_mb)))
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == 404:
        return _to_response(functions.not_found())
    if exc.status_code == 405:
        # PDF routes answer 405 themselves; the rest are GET-only
        return _to_response(functions.error_envelope(MethodNotAllowedError("GET")))
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc.detail)})


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _to_response(functions.error_envelope(InternalError()))


@app.get("/")
def index() -> Response:
    """List the available endpoints with usage examples."""
    return _to_response(functions.index())


@app.get("/health")
@app.get("/api/health")
def health() -> Response:
    """Basic health check endpoint."""
    return _to_response(functions.health(SETTINGS))


@app.api_route("/api/pdf/convert", methods=PDF_ROUTE_METHODS)
async def convert_pdf(request: Request) -> Response:
    """Render one page of a base64 PDF to a PNG data URI.

    Body: ``{"pdfBase64": str, "pageNumber"?: int, "scale"?: float}``.
    """
    return await _pdf_route(request, functions.convert)


@app.api_route("/api/pdf/extract-text", methods=PDF_ROUTE_METHODS)
async def extract_text(request: Request) -> Response:
    """Extract text, page count and metadata from a base64 PDF.

    Body: ``{"pdfBase64": str}``.
    """
    return await _pdf_route(request, functions.extract_text)


def run() -> None:
    """Run the ASGI server using uvicorn.

    Exposes the app at host:port (default 0.0.0.0:3000). Set HOST/PORT env vars to override.
    """
    import uvicorn

    configure_logging(SETTINGS.log_level)
    uvicorn.run(
        "pdf_service.webapi:app",
        host=SETTINGS.host,
        port=SETTINGS.port,
        reload=SETTINGS.reload,
        log_level=SETTINGS.log_level.lower(),
    )


if __name__ == "__main__":
    run()
