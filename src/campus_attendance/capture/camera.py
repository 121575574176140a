"""Camera handling.

``classify_camera_error`` maps the error names a browser reports for
``getUserMedia`` failures onto the portal's four categories.

``CameraSession`` is the kiosk-mode capture path: the portal host owns the
camera and takes the photo itself. The device handle is released on capture
(by default), on ``close()``, on context exit and on garbage collection, so the
capture light never stays on after the screen is left.
"""

from __future__ import annotations

import base64
import logging
from typing import Callable, Optional, Union

import cv2

from ..core.enums import CameraErrorKind
from ..core.exceptions import CameraError

logger = logging.getLogger(__name__)

_KIND_BY_NAME = {
    "NotAllowedError": CameraErrorKind.DENIED,
    "PermissionDeniedError": CameraErrorKind.DENIED,
    "NotFoundError": CameraErrorKind.NOT_FOUND,
    "DevicesNotFoundError": CameraErrorKind.NOT_FOUND,
    "NotReadableError": CameraErrorKind.IN_USE,
    "TrackStartError": CameraErrorKind.IN_USE,
}

_MESSAGES = {
    CameraErrorKind.DENIED: "Permission denied",
    CameraErrorKind.NOT_FOUND: "No camera found",
    CameraErrorKind.IN_USE: "Camera is already in use",
}


def classify_camera_error(name: Optional[str], message: Optional[str] = None) -> CameraError:
    kind = _KIND_BY_NAME.get((name or "").strip(), CameraErrorKind.OTHER)
    text = _MESSAGES.get(kind) or (message or "").strip() or "permission or device issue"
    return CameraError(kind, text)


class CameraSession:
    def __init__(
        self,
        source: Union[int, str] = 0,
        *,
        capture_factory: Optional[Callable[[Union[int, str]], object]] = None,
        jpeg_quality: int = 90,
        release_on_capture: bool = True,
    ):
        self._capture = None
        self._source = source
        self._factory = capture_factory or cv2.VideoCapture
        self._jpeg_quality = int(jpeg_quality)
        self._release_on_capture = release_on_capture

    @property
    def is_active(self) -> bool:
        return self._capture is not None

    def open(self) -> "CameraSession":
        if self._capture is not None:
            return self

        capture = self._factory(self._source)
        if not capture.isOpened():
            capture.release()
            raise CameraError(CameraErrorKind.NOT_FOUND, _MESSAGES[CameraErrorKind.NOT_FOUND])

        self._capture = capture
        logger.debug("Camera %r opened", self._source)
        return self

    def capture(self) -> str:
        """Grab one frame and return it as a JPEG data URI."""
        if self._capture is None:
            raise CameraError(CameraErrorKind.OTHER, "Camera is not active")

        try:
            ok, frame = self._capture.read()
            if not ok or frame is None:
                raise CameraError(CameraErrorKind.IN_USE, _MESSAGES[CameraErrorKind.IN_USE])

            ok, encoded = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self._jpeg_quality])
            if not ok:
                raise CameraError(CameraErrorKind.OTHER, "Could not encode captured frame")
        except CameraError:
            self.close()
            raise

        if self._release_on_capture:
            self.close()

        return "data:image/jpeg;base64," + base64.b64encode(encoded.tobytes()).decode("ascii")

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.debug("Camera %r released", self._source)

    def __enter__(self) -> "CameraSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        self.close()
