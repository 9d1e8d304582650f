class PdfServiceError(Exception):
    """Base error; each kind carries the HTTP status it maps to."""

    kind = "InternalError"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PdfServiceError):
    kind = "ValidationError"
    status_code = 400


class MissingFieldError(ValidationError):
    kind = "MissingField"

    def __init__(self, field: str) -> None:
        super().__init__(f"O campo {field} é obrigatório")
        self.field = field


class WrongTypeError(ValidationError):
    kind = "WrongType"

    def __init__(self, field: str, expected: str) -> None:
        super().__init__(f"O campo {field} deve ser {expected}")
        self.field = field


class InvalidHeaderError(ValidationError):
    kind = "InvalidHeader"

    def __init__(self, header: str) -> None:
        super().__init__(f"Cabeçalho {header} inválido")
        self.header = header


class MethodNotAllowedError(PdfServiceError):
    kind = "MethodNotAllowed"
    status_code = 405

    def __init__(self, allowed: str = "POST") -> None:
        super().__init__(f"Método não permitido. Use {allowed}")
        self.allowed = allowed


class RouteNotFoundError(PdfServiceError):
    kind = "RouteNotFound"
    status_code = 404

    def __init__(self) -> None:
        super().__init__("Rota não encontrada")


class PayloadTooLargeError(PdfServiceError):
    kind = "PayloadTooLarge"
    status_code = 413

    def __init__(self, max_mb: int) -> None:
        super().__init__(f"Corpo da requisição excede {max_mb} MB")


class ProcessingError(PdfServiceError):
    kind = "ProcessingError"


class DecodeError(ProcessingError):
    kind = "DecodeError"

    def __init__(self, cause: str) -> None:
        super().__init__(f"Falha ao decodificar PDF em base64: {cause}")


class ConversionError(ProcessingError):
    kind = "ConversionError"

    def __init__(self, cause: str) -> None:
        super().__init__(f"Falha ao converter PDF: {cause}")


class InvalidPageError(ConversionError):
    kind = "InvalidPageError"

    def __init__(self, page_number: int) -> None:
        super().__init__(
            f"Número de página inválido. Não foi possível acessar a página {page_number}."
        )
        self.page_number = page_number


class ExtractionError(ProcessingError):
    kind = "ExtractionError"

    def __init__(self, cause: str) -> None:
        super().__init__(f"Falha ao extrair texto do PDF: {cause}")


class InternalError(PdfServiceError):
    def __init__(self, message: str = "Erro interno do servidor") -> None:
        super().__init__(message)
