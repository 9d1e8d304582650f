import pytest

from pdf_service.conversion.errors import MissingFieldError, WrongTypeError
from pdf_service.conversion.validation import validate_conversion_request, validate_extraction_request


class TestConversionRequest:
    def test_defaults(self):
        request = validate_conversion_request({"pdfBase64": "QUJD"})
        assert request.document == "QUJD"
        assert request.page_number == 1
        assert request.scale == 2.0

    def test_null_optionals_use_defaults(self):
        request = validate_conversion_request({"pdfBase64": "QUJD", "pageNumber": None, "scale": None})
        assert (request.page_number, request.scale) == (1, 2.0)

    def test_numeric_strings_are_coerced(self):
        request = validate_conversion_request({"pdfBase64": "QUJD", "pageNumber": "3", "scale": "1.5"})
        assert request.page_number == 3
        assert request.scale == 1.5

    def test_integral_float_page_number_is_accepted(self):
        assert validate_conversion_request({"pdfBase64": "QUJD", "pageNumber": 2.0}).page_number == 2

    @pytest.mark.parametrize("body", [{}, {"pdfBase64": None}, {"pdfBase64": ""}])
    def test_missing_document(self, body):
        with pytest.raises(MissingFieldError) as exc_info:
            validate_conversion_request(body)
        assert "pdfBase64" in exc_info.value.message
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("value", [123, ["QUJD"], {"a": 1}, True])
    def test_document_must_be_string(self, value):
        with pytest.raises(WrongTypeError) as exc_info:
            validate_conversion_request({"pdfBase64": value})
        assert exc_info.value.message == "O campo pdfBase64 deve ser uma string"

    @pytest.mark.parametrize("page", [0, -1, 1.5, "abc", True, [1], float("inf")])
    def test_invalid_page_number(self, page):
        with pytest.raises(WrongTypeError) as exc_info:
            validate_conversion_request({"pdfBase64": "QUJD", "pageNumber": page})
        assert exc_info.value.field == "pageNumber"

    @pytest.mark.parametrize("scale", [0, -2, "big", False, 10 ** 400])
    def test_invalid_scale(self, scale):
        with pytest.raises(WrongTypeError) as exc_info:
            validate_conversion_request({"pdfBase64": "QUJD", "scale": scale})
        assert exc_info.value.field == "scale"

    def test_scale_above_maximum(self):
        with pytest.raises(WrongTypeError) as exc_info:
            validate_conversion_request({"pdfBase64": "QUJD", "scale": 11}, max_scale=10)
        assert "10" in exc_info.value.message
        assert validate_conversion_request({"pdfBase64": "QUJD", "scale": 10}, max_scale=10).scale == 10

    @pytest.mark.parametrize("body", [[], "QUJD", None, 5])
    def test_body_must_be_object(self, body):
        with pytest.raises(WrongTypeError):
            validate_conversion_request(body)


class TestExtractionRequest:
    def test_valid(self):
        assert validate_extraction_request({"pdfBase64": "QUJD"}).document == "QUJD"

    def test_missing(self):
        with pytest.raises(MissingFieldError):
            validate_extraction_request({"other": "x"})

    def test_wrong_type(self):
        with pytest.raises(WrongTypeError):
            validate_extraction_request({"pdfBase64": 42})
