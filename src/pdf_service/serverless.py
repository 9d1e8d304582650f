"""Individually invocable HTTP functions.

Serverless platforms that expect a ``handler`` class derived from
``BaseHTTPRequestHandler`` load one of these per endpoint (see ``api/``).
They share ``pdf_service.functions`` with the FastAPI server.
"""

import asyncio
import json
import logging
from functools import lru_cache
from http.server import BaseHTTPRequestHandler

from pdf_service import functions
from pdf_service.config import Settings
from pdf_service.conversion import PdfService
from pdf_service.conversion.errors import InternalError, InvalidHeaderError, PayloadTooLargeError, PdfServiceError
from pdf_service.logging_setup import configure_logging

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings


@lru_cache(maxsize=1)
def get_service() -> PdfService:
    return functions.build_service(get_settings())


class _FunctionHandler(BaseHTTPRequestHandler):
    def respond(self) -> functions.FunctionResponse:
        raise NotImplementedError

    def _dispatch(self) -> None:
        try:
            result = self.respond()
        except Exception:
            logger.exception("Unhandled error on %s %s", self.command, self.path)
            result = functions.error_envelope(InternalError())
        self.send_function_response(result)

    def send_function_response(self, result: functions.FunctionResponse) -> None:
        payload = b"" if result.body is None else json.dumps(result.body, ensure_ascii=False).encode("utf-8")
        self.send_response(result.status_code)
        for name, value in result.headers.items():
            self.send_header(name, value)
        if result.body is not None:
            self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args) -> None:
        logger.info("%s - %s", self.address_string(), format % args)

    do_GET = do_POST = do_PUT = do_PATCH = do_DELETE = do_OPTIONS = _dispatch


class HealthHandler(_FunctionHandler):
    def respond(self) -> functions.FunctionResponse:
        return functions.health(get_settings())


class IndexHandler(_FunctionHandler):
    def respond(self) -> functions.FunctionResponse:
        return functions.index()


class _PdfFunctionHandler(_FunctionHandler):
    def read_body(self, settings: Settings) -> bytes:
        raw_length = (self.headers.get("Content-Length") or "0").strip()
        if not raw_length.isdigit():
            raise InvalidHeaderError("Content-Length")
        length = int(raw_length)
        if length > settings.max_body_bytes:
            raise PayloadTooLargeError(settings.max_body_mb)
        return self.rfile.read(length) if length > 0 else b""

    def respond(self) -> functions.FunctionResponse:
        settings = get_settings()
        raw = b""
        if self.command == "POST":
            try:
                raw = self.read_body(settings)
            except PdfServiceError as e:
                # the unread body is dropped with the connection
                self.close_connection = True
                result = functions.error_envelope(e)
                result.headers = dict(functions.CORS_HEADERS)
                return result
        return asyncio.run(self.endpoint(get_service(), self.command, raw, settings=settings))


class ConvertHandler(_PdfFunctionHandler):
    endpoint = staticmethod(functions.convert)


class ExtractTextHandler(_PdfFunctionHandler):
    endpoint = staticmethod(functions.extract_text)
