import base64
import binascii
from typing import Optional

from drone_hunter.exceptions import UnsupportedEncodingError
from drone_hunter.models import Blob

SUPPORTED_ENCODING = "base64"


def decode_blob(
    blob: Blob, repository: Optional[str] = None, path: Optional[str] = None
) -> bytes:
    """
    Decode blob content to raw bytes.

    GitHub wraps base64 payloads at 60 columns, so embedded newlines are ignored.

    Raises:
        UnsupportedEncodingError: For any encoding other than base64, or a
            payload that is not valid base64.
    """
    if blob.encoding != SUPPORTED_ENCODING:
        raise UnsupportedEncodingError(blob.encoding, repository=repository, path=path)

    payload = "".join(blob.content.split())
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise UnsupportedEncodingError(
            blob.encoding, repository=repository, path=path
        ) from exc
