import http.client
import json
import threading
import time
from http.server import ThreadingHTTPServer

import pytest
import requests

from pdf_service import serverless
from pdf_service.conversion import PdfService
from pdf_service.conversion.adapters import PyMuPDFExtractor
from pdf_service.serverless import ConvertHandler, ExtractTextHandler, HealthHandler, IndexHandler


@pytest.fixture
def serve():
    """Start a throwaway HTTP server for one handler class and yield its base URL."""
    servers = []

    def _serve(handler_cls) -> str:
        server = ThreadingHTTPServer(("127.0.0.1", 0), handler_cls)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        host, port = server.server_address[:2]
        return f"http://{host}:{port}"

    yield _serve
    for server in servers:
        server.shutdown()
        server.server_close()


class TestServerlessFunctions:
    def test_health(self, serve):
        response = requests.get(serve(HealthHandler), timeout=10)
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_index(self, serve):
        response = requests.get(serve(IndexHandler), timeout=10)
        assert response.json()["message"] == "API de Conversão e Extração de PDF"

    def test_convert(self, serve, pdf_data_uri):
        response = requests.post(serve(ConvertHandler), json={"pdfBase64": pdf_data_uri, "pageNumber": 2}, timeout=30)
        assert response.status_code == 200
        assert response.json()["imageBase64"].startswith("data:image/png;base64,")
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_convert_page_out_of_range(self, serve, pdf_base64):
        response = requests.post(serve(ConvertHandler), json={"pdfBase64": pdf_base64, "pageNumber": 7}, timeout=30)
        assert response.status_code == 500
        assert "página 7" in response.json()["error"]

    def test_extract_text(self, serve, pdf_base64):
        response = requests.post(serve(ExtractTextHandler), json={"pdfBase64": pdf_base64}, timeout=30)
        assert response.status_code == 200
        assert response.json()["numPages"] == 2

    def test_missing_field(self, serve):
        response = requests.post(serve(ExtractTextHandler), json={}, timeout=10)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "O campo pdfBase64 é obrigatório"}

    def test_wrong_method(self, serve):
        response = requests.get(serve(ConvertHandler), timeout=10)
        assert response.status_code == 405

    def test_preflight(self, serve):
        response = requests.options(serve(ConvertHandler), timeout=10)
        assert response.status_code == 200
        assert response.content == b""
        assert "POST" in response.headers["Access-Control-Allow-Methods"]


class SleepingRenderer:
    def render_page(self, document: bytes, page_number: int, scale: float) -> bytes:
        time.sleep(3)
        return b"late"

    def iter_pages(self, document: bytes, scale: float):
        return iter(())


def test_timeout_answers_before_library_call_finishes(serve, monkeypatch, pdf_base64):
    service = PdfService(SleepingRenderer(), PyMuPDFExtractor(), timeout_sec=0.2)
    monkeypatch.setattr(serverless, "get_service", lambda: service)

    started = time.monotonic()
    response = requests.post(serve(ConvertHandler), json={"pdfBase64": pdf_base64}, timeout=30)
    elapsed = time.monotonic() - started

    assert response.status_code == 500
    assert "tempo limite" in response.json()["error"]
    assert elapsed < 2


@pytest.mark.parametrize("length", ["abc", "-5", "1.5"])
def test_malformed_content_length(serve, length):
    host, port = serve(ExtractTextHandler).removeprefix("http://").split(":")
    conn = http.client.HTTPConnection(host, int(port), timeout=10)
    try:
        conn.putrequest("POST", "/")
        conn.putheader("Content-Type", "application/json")
        conn.putheader("Content-Length", length)
        conn.endheaders()
        response = conn.getresponse()
        body = json.loads(response.read())
    finally:
        conn.close()
    assert response.status == 400
    assert body == {"success": False, "error": "Cabeçalho Content-Length inválido"}
