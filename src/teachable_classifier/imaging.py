"""Sample decoding and color statistics helpers.

Samples arrive either as raw encoded bytes (uploads, files on disk) or as
``data:image/<fmt>;base64,`` URLs (browser capture).  Both decode to an RGB
PIL image.
"""

from __future__ import annotations

import base64
import binascii
import io
import re

from PIL import Image, ImageStat, UnidentifiedImageError

from teachable_classifier.errors import SampleDecodeError
from teachable_classifier.schemas.classes import EncodedSample

_DATA_URL_RE = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)

ImageInput = EncodedSample | Image.Image


def split_data_url(sample: EncodedSample) -> tuple[str, bytes]:
    """Return ``(mime_type, raw_bytes)`` for an encoded sample.

    Raw bytes are reported as ``image/jpeg``; the actual format is sniffed
    by PIL at decode time.
    """
    if isinstance(sample, bytes):
        return "image/jpeg", sample

    match = _DATA_URL_RE.match(sample)
    mime_type = match.group(1).lower() if match else "image/jpeg"
    payload = sample[match.end() :] if match else sample
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SampleDecodeError(f"Sample is not valid base64: {exc}") from exc


def decode_image(sample: ImageInput) -> Image.Image:
    """Decode an encoded sample into an RGB image.

    Raises:
        SampleDecodeError: If the payload is not a readable image.
    """
    if isinstance(sample, Image.Image):
        return sample.convert("RGB")

    _, raw = split_data_url(sample)
    if not raw:
        raise SampleDecodeError("Sample is empty")
    try:
        with Image.open(io.BytesIO(raw)) as img:
            return img.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise SampleDecodeError(f"Sample could not be decoded: {exc}") from exc


def mean_color(image: Image.Image, size: int = 50) -> tuple[float, float, float]:
    """Average RGB color of ``image`` after resizing to ``size`` x ``size``."""
    thumb = image.convert("RGB").resize((size, size), Image.Resampling.BILINEAR)
    r, g, b = ImageStat.Stat(thumb).mean
    return float(r), float(g), float(b)


def encode_jpeg(image: Image.Image, quality: int = 95) -> bytes:
    """Serialize an image to JPEG bytes."""
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="JPEG", quality=quality)
    return buf.getvalue()
