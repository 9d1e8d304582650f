import logging
from typing import Iterator

import fitz  # PyMuPDF

from .errors import ConversionError, ExtractionError, InvalidPageError, PdfServiceError
from .interfaces import ExtractionResult, ExtractorGateway, RendererGateway

logger = logging.getLogger(__name__)


def _open_pdf(document: bytes) -> fitz.Document:
    return fitz.open(stream=document, filetype="pdf")


class PyMuPDFRenderer(RendererGateway):
    def render_page(self, document: bytes, page_number: int, scale: float) -> bytes:
        try:
            with _open_pdf(document) as doc:
                # PyMuPDF gives random access, so no need to walk the page sequence
                if page_number < 1 or page_number > doc.page_count:
                    raise InvalidPageError(page_number)
                page = doc.load_page(page_number - 1)
                pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
                return pix.tobytes("png")
        except PdfServiceError:
            raise
        except Exception as e:
            raise ConversionError(str(e)) from e

    def iter_pages(self, document: bytes, scale: float) -> Iterator[bytes]:
        """Lazily render every page in order; the sequence is forward-only."""
        try:
            doc = _open_pdf(document)
        except Exception as e:
            raise ConversionError(str(e)) from e
        with doc:
            matrix = fitz.Matrix(scale, scale)
            for page in doc:
                yield page.get_pixmap(matrix=matrix, alpha=False).tobytes("png")


class PyMuPDFExtractor(ExtractorGateway):
    def extract(self, document: bytes) -> ExtractionResult:
        try:
            with _open_pdf(document) as doc:
                if doc.needs_pass:
                    raise ExtractionError("o documento está protegido por senha")
                text = "\n\n".join(page.get_text() for page in doc)
                info = {k: v for k, v in (doc.metadata or {}).items() if v}
                xmp = doc.get_xml_metadata()
                return ExtractionResult(
                    text=text,
                    num_pages=doc.page_count,
                    info=info,
                    metadata={"xmp": xmp} if xmp else None,
                )
        except PdfServiceError:
            raise
        except Exception as e:
            logger.debug("PyMuPDF failed to parse document", exc_info=True)
            raise ExtractionError(str(e)) from e
