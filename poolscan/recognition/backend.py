"""
Remote Recognition Backends

HTTP clients for the two remote producer shapes: an OCR endpoint that
returns text blocks, and a structured-extraction endpoint that returns
the whole grid.
"""

import io
import json
import logging
from typing import Any, List, Optional

import requests
from PIL import Image

from ..layout import ReconstructedGrid, TextFragment
from .base import FragmentSource, GridReader
from .structured import grid_from_structured_response, unwrap_proxy_body

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0
JPEG_QUALITY = 85
PREVIEW_CHARS = 150


class BackendError(Exception):
    """Remote recognition call failed or returned an unusable payload."""


def encode_jpeg(image: Image.Image, quality: int = JPEG_QUALITY) -> bytes:
    """Encode a PIL image as JPEG bytes for upload."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, "JPEG", quality=quality)
    return buffer.getvalue()


def _post_image(
    session: requests.Session,
    url: str,
    image: Image.Image,
    timeout: float
) -> str:
    """POST the image and return the response body text."""
    try:
        response = session.post(
            url,
            data=encode_jpeg(image),
            headers={"Content-Type": "image/jpeg"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise BackendError(f"Request to {url} failed: {e}") from e

    if not 200 <= response.status_code < 300:
        raise BackendError(f"Recognition server error (HTTP {response.status_code})")
    return response.text


def _decode(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise BackendError(f"Invalid JSON: {e}. Response: {raw[:PREVIEW_CHARS]}") from e


class BackendFragmentSource(FragmentSource):
    """
    Fragment source backed by a remote OCR endpoint.

    Response shape:
        {"blocks": [{"text", "x", "y", "width", "height", "confidence"}, ...]}
    with normalized coordinates and a bottom-left origin.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        session: Optional[requests.Session] = None
    ):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def name(self) -> str:
        return "backend"

    def recognize(self, image: Image.Image) -> List[TextFragment]:
        payload = unwrap_proxy_body(_decode(_post_image(self._session, self.url, image, self.timeout)))
        if not isinstance(payload, dict) or not isinstance(payload.get("blocks"), list):
            raise BackendError("OCR response has no 'blocks' list")

        fragments = []
        for block in payload["blocks"]:
            try:
                fragments.append(TextFragment.from_dict(block))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed block: {e}")

        logger.info(f"Backend returned {len(fragments)} fragments")
        return fragments


class StructuredGridReader(GridReader):
    """
    Grid reader backed by a structured-extraction endpoint.

    The backend returns digit arrays and a name grid directly, so the
    layout engine is bypassed.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        session: Optional[requests.Session] = None
    ):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def name(self) -> str:
        return "structured"

    def read(self, image: Image.Image) -> ReconstructedGrid:
        raw = _post_image(self._session, self.url, image, self.timeout)
        payload = unwrap_proxy_body(_decode(raw))

        if isinstance(payload, dict) and "blocks" in payload:
            raise BackendError(
                "Wrong backend: got OCR blocks. Point the structured reader at the "
                f"grid extraction endpoint, not the OCR endpoint. Response: {raw[:PREVIEW_CHARS]}"
            )

        grid = grid_from_structured_response(payload)
        logger.info(f"Structured backend returned {grid.filled_count} filled cells")
        return grid
