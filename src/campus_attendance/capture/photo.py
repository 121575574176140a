from __future__ import annotations

import base64
import binascii
import io
import re
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from ..core.constants import MAX_PHOTO_BYTES
from ..core.exceptions import ValidationError

_DATA_URI_RE = re.compile(r"^data:(image/[A-Za-z0-9.+-]+);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class Photo:
    mime: str
    data: bytes
    width: int
    height: int

    def to_data_uri(self) -> str:
        return f"data:{self.mime};base64,{base64.b64encode(self.data).decode('ascii')}"


def decode_photo_data_uri(uri: str, *, max_bytes: int = MAX_PHOTO_BYTES) -> Photo:
    """Decode and verify a captured photo sent as ``data:image/...;base64,...``."""
    if not uri or not uri.strip():
        raise ValidationError("Please capture a photo")

    m = _DATA_URI_RE.match(uri.strip())
    if not m:
        raise ValidationError("Photo must be an image data URI")

    mime, payload = m.group(1).lower(), m.group(2)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Photo is not valid base64")

    if len(data) > max_bytes:
        raise ValidationError(f"Photo is larger than {max_bytes // (1024 * 1024)} MB")

    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("Photo could not be read as an image")

    return Photo(mime=mime, data=data, width=width, height=height)
