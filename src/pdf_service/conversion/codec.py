import base64
import binascii
import re

from .errors import DecodeError

PDF_DATA_URI_PREFIX = re.compile(r"^data:application/pdf;base64,")
PNG_DATA_URI_PREFIX = "data:image/png;base64,"


def strip_data_uri_prefix(value: str) -> str:
    return PDF_DATA_URI_PREFIX.sub("", value, count=1)


def decode_document(value: str) -> bytes:
    """Decode a base64 PDF, with or without the ``data:application/pdf;base64,`` prefix."""
    payload = "".join(strip_data_uri_prefix(value).split())
    # Accept unpadded input
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(str(e)) from e


def encode_png_data_uri(png: bytes) -> str:
    return PNG_DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")
