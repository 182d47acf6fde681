"""
Image Helpers (Qt)
==================
Decoding, encoding and resizing of QImage objects.

Why is this file needed?
------------------------
The model treats images as opaque handles with a width and a height. Every
operation that touches actual pixels (file decoding, Base64 data URLs,
downscaling for export, cutting regions out of a spritesheet) lives here.

Note: QImage works without a QApplication for most operations, but a
QGuiApplication must exist before QPainter is used on text.
"""
import base64
import logging
import os
from typing import Mapping, Optional, Tuple

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, Qt
from PySide6.QtGui import QImage, QImageWriter, QPainter

logger = logging.getLogger(__name__)

WEBP_QUALITY = 90


class ImageLoadError(IOError):
    """Raised when image data cannot be decoded."""


def supports_webp() -> bool:
    return b"webp" in [bytes(f).lower() for f in QImageWriter.supportedImageFormats()]


def load_image(path: str) -> QImage:
    image = QImage(path)
    if image.isNull():
        raise ImageLoadError(f"Failed to load image: {path}")
    logger.debug(f"Loaded image '{path}' ({image.width()}x{image.height()}).")
    return image


def display_name(path: str) -> str:
    """File name without directory and extension."""
    return os.path.splitext(os.path.basename(path))[0]


def scale_to_max(image: QImage, max_dimension: int) -> Tuple[QImage, float]:
    """
    Downscales an image so neither side exceeds max_dimension.
    Smaller images are returned unchanged with scale 1.0.
    """
    w, h = image.width(), image.height()
    scale = 1.0
    if w > max_dimension or h > max_dimension:
        scale = min(max_dimension / w, max_dimension / h)
    if scale == 1.0:
        return image, scale

    new_w = max(1, round(w * scale))
    new_h = max(1, round(h * scale))
    scaled = image.scaled(new_w, new_h, Qt.IgnoreAspectRatio, Qt.SmoothTransformation)
    return scaled, scale


def encode_image(image: QImage, fmt: Optional[str] = None, quality: int = WEBP_QUALITY) -> Tuple[bytes, str]:
    """
    Encodes an image to bytes. WebP is preferred when the Qt image plugin is
    available, PNG otherwise.

    Returns:
        (data, mime_type)
    """
    if fmt is None:
        fmt = "WEBP" if supports_webp() else "PNG"

    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.WriteOnly)
    ok = image.save(buffer, fmt, quality if fmt.upper() == "WEBP" else -1)
    buffer.close()

    if not ok and fmt.upper() != "PNG":
        logger.warning(f"Encoding as {fmt} failed, falling back to PNG.")
        return encode_image(image, "PNG")
    if not ok:
        raise ImageLoadError("Failed to encode image.")
    return bytes(data), f"image/{fmt.lower()}"


def image_to_data_url(image: QImage, max_dimension: Optional[int] = None) -> str:
    if max_dimension:
        image, _ = scale_to_max(image, max_dimension)
    payload, mime = encode_image(image)
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


def image_from_bytes(payload: bytes) -> QImage:
    image = QImage.fromData(payload)
    if image.isNull():
        raise ImageLoadError("Image data could not be decoded.")
    return image


def image_from_data_url(data_url: str) -> QImage:
    try:
        _, encoded = data_url.split(",", 1)
        payload = base64.b64decode(encoded)
    except ValueError as e:
        raise ImageLoadError("Malformed image data URL.") from e
    return image_from_bytes(payload)


def extract_region(sheet: QImage, region: Mapping[str, int]) -> QImage:
    """Copies one rectangle (x, y, width, height) out of a spritesheet."""
    return sheet.copy(region["x"], region["y"], region["width"], region["height"])


def save_image(image: QImage, path: str, fmt: Optional[str] = None) -> None:
    payload, _ = encode_image(image, fmt)
    with open(path, "wb") as f:
        f.write(payload)
    logger.info(f"Image saved to: {path}")


def new_canvas(width: int, height: int) -> Tuple[QImage, QPainter]:
    """Transparent ARGB canvas with an active, antialiased painter."""
    image = QImage(max(1, width), max(1, height), QImage.Format_ARGB32_Premultiplied)
    image.fill(Qt.transparent)
    painter = QPainter(image)
    painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
    painter.setRenderHint(QPainter.Antialiasing, True)
    return image, painter
