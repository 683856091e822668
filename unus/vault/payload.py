"""
Secret Payload

JSON envelope encrypted into each cryptogram:
    {"ContentType": "<mime type>", "Secret": "<base64 bytes>"}
"""

import base64
import binascii
import json
from dataclasses import dataclass, field

from .. import config
from .errors import PayloadError


# Supported content types
MIME_JSON = "application/json"
MIME_STRING = "text/plain"
MIME_PNG = "image/png"
MIME_JPEG = "image/jpeg"

SUPPORTED_CONTENT_TYPES = frozenset({MIME_JSON, MIME_STRING, MIME_PNG, MIME_JPEG})


@dataclass(frozen=True)
class SecretPayload:
    """A secret and the content type it should be served back with."""
    content_type: str
    secret: bytes = field(repr=False)

    def validate(self, max_bytes: int = config.MAX_SECRET_BYTES) -> None:
        """
        Check content type and size.

        Raises:
            PayloadError: If the content type is unsupported or the secret
                exceeds max_bytes
        """
        if self.content_type not in SUPPORTED_CONTENT_TYPES:
            raise PayloadError(f"content-type {self.content_type!r} is not a supported type")
        if len(self.secret) > max_bytes:
            raise PayloadError(f"secret exceeds {max_bytes} bytes")

    def to_json(self) -> bytes:
        """Serialize to compact JSON bytes."""
        return json.dumps({
            'ContentType': self.content_type,
            'Secret': base64.b64encode(self.secret).decode('ascii'),
        }, separators=(',', ':')).encode('utf-8')

    @classmethod
    def from_json(cls, data: bytes) -> 'SecretPayload':
        """
        Parse JSON bytes produced by to_json().

        Raises:
            PayloadError: If the document is malformed
        """
        try:
            document = json.loads(data)
            content_type = document['ContentType']
            secret = base64.b64decode(document['Secret'], validate=True)
        except (ValueError, KeyError, TypeError, binascii.Error) as e:
            raise PayloadError("error decoding payload") from e

        if not isinstance(content_type, str):
            raise PayloadError("error decoding payload")
        return cls(content_type=content_type, secret=secret)
