"""Request body validation.

Validation never touches the PDF libraries; it only checks field presence and
types and applies defaults for the optional numeric fields.
"""

import math
from typing import Any

from .errors import MissingFieldError, WrongTypeError
from .interfaces import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_SCALE,
    ConversionRequest,
    ExtractionRequest,
)

DOCUMENT_FIELD = "pdfBase64"
PAGE_NUMBER_FIELD = "pageNumber"
SCALE_FIELD = "scale"


def _require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise WrongTypeError("corpo da requisição", "um objeto JSON")
    return body


def _require_document(body: dict[str, Any]) -> str:
    value = body.get(DOCUMENT_FIELD)
    if value is None or value == "":
        raise MissingFieldError(DOCUMENT_FIELD)
    if not isinstance(value, str):
        raise WrongTypeError(DOCUMENT_FIELD, "uma string")
    return value


def _positive_number(
    body: dict[str, Any],
    field: str,
    default: float,
    *,
    integral: bool = False,
    maximum: float | None = None,
) -> float:
    expected = "um número inteiro positivo" if integral else "um número positivo"
    value = body.get(field)
    if value is None:
        return default
    # bool is an int subclass; true/false are not page numbers
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise WrongTypeError(field, expected)
    try:
        number = float(value)
    except (ValueError, OverflowError):
        raise WrongTypeError(field, expected)
    if not math.isfinite(number) or number <= 0:
        raise WrongTypeError(field, expected)
    if integral and not number.is_integer():
        raise WrongTypeError(field, expected)
    if maximum is not None and number > maximum:
        raise WrongTypeError(field, f"{expected} menor ou igual a {maximum:g}")
    return number


def validate_conversion_request(body: Any, *, max_scale: float | None = None) -> ConversionRequest:
    body = _require_object(body)
    document = _require_document(body)
    page_number = _positive_number(body, PAGE_NUMBER_FIELD, DEFAULT_PAGE_NUMBER, integral=True)
    scale = _positive_number(body, SCALE_FIELD, DEFAULT_SCALE, maximum=max_scale)
    return ConversionRequest(document=document, page_number=int(page_number), scale=scale)


def validate_extraction_request(body: Any) -> ExtractionRequest:
    body = _require_object(body)
    return ExtractionRequest(document=_require_document(body))
