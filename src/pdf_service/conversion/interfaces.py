from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Protocol

from .codec import encode_png_data_uri

DEFAULT_PAGE_NUMBER = 1
DEFAULT_SCALE = 2.0


class PageStreamGateway(Protocol):
    def iter_pages(self, document: bytes, scale: float) -> Iterator[bytes]:
        """Yield each page as PNG bytes, in order. Forward-only, single pass."""


class RendererGateway(PageStreamGateway, Protocol):
    def render_page(self, document: bytes, page_number: int, scale: float) -> bytes:
        """Render one 1-indexed page of the document to PNG bytes.
        This is a blocking call; callers should offload to threads if needed.
        """


class ExtractorGateway(Protocol):
    def extract(self, document: bytes) -> "ExtractionResult":
        """Extract text, page count and metadata. Blocking, like render_page."""


@dataclass(frozen=True)
class ConversionRequest:
    document: str
    page_number: int = DEFAULT_PAGE_NUMBER
    scale: float = DEFAULT_SCALE


@dataclass(frozen=True)
class ConversionResult:
    image: bytes

    @property
    def image_data_uri(self) -> str:
        return encode_png_data_uri(self.image)


@dataclass(frozen=True)
class ExtractionRequest:
    document: str


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    num_pages: int
    info: Mapping[str, Any] | None
    metadata: Mapping[str, Any] | None
