"""
Test Configuration and Fixtures
"""
import base64

import fitz  # PyMuPDF
import pytest
from fastapi.testclient import TestClient

PAGE_SIZE = 200


def make_pdf(pages: int = 2, **save_options) -> bytes:
    """Build a small PDF with one line of text per page."""
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=PAGE_SIZE, height=PAGE_SIZE)
        page.insert_text((20, 50), f"Hello page {i + 1}")
    doc.set_metadata({"title": "Test Document", "author": "Tester"})
    data = doc.tobytes(**save_options)
    doc.close()
    return data


def png_size(png: bytes) -> tuple[int, int]:
    """Width and height from the PNG IHDR chunk."""
    assert png.startswith(b"\x89PNG\r\n\x1a\n")
    return int.from_bytes(png[16:20], "big"), int.from_bytes(png[20:24], "big")


@pytest.fixture(scope="session")
def pdf_bytes():
    return make_pdf(pages=2)


@pytest.fixture(scope="session")
def pdf_base64(pdf_bytes):
    return base64.b64encode(pdf_bytes).decode("ascii")


@pytest.fixture(scope="session")
def pdf_data_uri(pdf_base64):
    return "data:application/pdf;base64," + pdf_base64


@pytest.fixture
def client():
    """Create test client with startup hooks run"""
    from pdf_service.webapi import app

    with TestClient(app) as c:
        yield c
