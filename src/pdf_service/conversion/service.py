import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar

from .codec import decode_document
from .errors import ConversionError, ExtractionError, InvalidPageError, PdfServiceError
from .interfaces import (
    ConversionRequest,
    ConversionResult,
    ExtractionRequest,
    ExtractionResult,
    ExtractorGateway,
    PageStreamGateway,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Separate from the loop default executor, which asyncio.run joins on exit.
LIBRARY_EXECUTOR = ThreadPoolExecutor(thread_name_prefix="pdf-library")


def select_page(pages: Iterable[bytes], page_number: int) -> bytes:
    """Walk a forward-only page sequence up to the 1-indexed ``page_number``."""
    iterator = iter(pages)
    try:
        for current, image in enumerate(iterator, start=1):
            if current == page_number:
                return image
    finally:
        close = getattr(iterator, "close", None)
        if callable(close):
            close()
    raise InvalidPageError(page_number)


class PdfService:
    """Core domain service for PDF conversion and text extraction.

    This service is framework-agnostic. It decodes the base64 document and
    runs the blocking PDF library call in a worker thread, bounded by a
    timeout, so front-ends (HTTP server or serverless functions) share the
    same behaviour.
    """

    def __init__(
        self,
        renderer: PageStreamGateway,
        extractor: ExtractorGateway,
        *,
        timeout_sec: float | None = 60.0,
    ) -> None:
        self._renderer = renderer
        self._extractor = extractor
        self._timeout_sec = timeout_sec

    async def _run_blocking(
        self,
        fn: Callable[[], T],
        wrap: Callable[[str], PdfServiceError],
    ) -> T:
        try:
            loop = asyncio.get_running_loop()
            return await asyncio.wait_for(loop.run_in_executor(LIBRARY_EXECUTOR, fn), self._timeout_sec)
        except asyncio.TimeoutError:
            raise wrap(f"tempo limite de {self._timeout_sec:g} s excedido")
        except PdfServiceError:
            raise
        except Exception as e:
            raise wrap(str(e)) from e

    def _render(self, document: bytes, page_number: int, scale: float) -> bytes:
        # Prefer random access; fall back to walking the page sequence
        render_page = getattr(self._renderer, "render_page", None)
        if callable(render_page):
            return render_page(document, page_number, scale)
        return select_page(self._renderer.iter_pages(document, scale), page_number)

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        try:
            document = decode_document(request.document)
            image = await self._run_blocking(
                lambda: self._render(document, request.page_number, request.scale),
                ConversionError,
            )
        except PdfServiceError as e:
            logger.error("PDF conversion failed: %s", e.message)
            raise
        logger.info(
            "Rendered page %d at scale %g (%d bytes PNG)",
            request.page_number,
            request.scale,
            len(image),
        )
        return ConversionResult(image=image)

    async def extract_text(self, request: ExtractionRequest) -> ExtractionResult:
        try:
            document = decode_document(request.document)
            result = await self._run_blocking(
                lambda: self._extractor.extract(document),
                ExtractionError,
            )
        except PdfServiceError as e:
            logger.error("PDF text extraction failed: %s", e.message)
            raise
        logger.info("Extracted %d characters from %d pages", len(result.text), result.num_pages)
        return result
