import base64
import binascii
import io

import httpx
from PIL import Image, ImageOps, UnidentifiedImageError

from onboarding.logging.logger import Log
from onboarding.report.exceptions import DocumentRenderError


def decode_image(content: bytes) -> Image.Image:
    """Decode uploaded image bytes, honouring EXIF rotation from phone cameras.

    Raises:
        DocumentRenderError: if the bytes are not a readable image or exceed
            Pillow's pixel limit.
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.load()
            upright = ImageOps.exif_transpose(img)
            has_alpha = "A" in upright.getbands() or "transparency" in upright.info
            return upright.convert("RGBA" if has_alpha else "RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DocumentRenderError(f"Image decoding failed: {exc}") from exc


def decode_data_url(value: str | bytes) -> bytes:
    """Accept raw bytes or a ``data:<mime>;base64,<payload>`` string."""
    if isinstance(value, bytes):
        return value
    payload = value.split(",", 1)[1] if value.startswith("data:") else value
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DocumentRenderError(f"Invalid base64 image payload: {exc}") from exc


def to_black_ink(signature: Image.Image) -> Image.Image:
    """Recolour every visible pixel to black, keeping the stroke's alpha.

    The signature pad draws light strokes on a transparent canvas; on a white
    page they must read as ink. Opaque images (a scanned signature) have no
    alpha to keep, so their darkness becomes the alpha.
    """
    if "A" in signature.getbands():
        alpha = signature.getchannel("A")
    else:
        alpha = ImageOps.invert(signature.convert("L"))
    inked = Image.new("RGBA", signature.size, (0, 0, 0, 0))
    inked.putalpha(alpha)
    return inked


class LogoFetcher:
    """Downloads the header logo. Failures are soft: the header is drawn without it."""

    def __init__(self, timeout_seconds: int, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(timeout=timeout_seconds, follow_redirects=True)

    def fetch(self, url: str) -> Image.Image | None:
        if not url:
            return None
        try:
            response = self._client.get(url)
            response.raise_for_status()
            # GIF/palette logos are flattened to RGBA so transparency survives in the PDF.
            return decode_image(response.content).convert("RGBA")
        except (httpx.HTTPError, DocumentRenderError) as exc:
            Log.warning(f"Could not load logo, continuing without it: {exc}", url=url)
            return None

    def close(self) -> None:
        self._client.close()
