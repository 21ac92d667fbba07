"""Decoding model textures into raw RGBA pixels."""

from __future__ import annotations

import io
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional

from PIL import Image

from .model import ImageFormat, ModelTexture

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShallowTexture:
    """Decoded texture: RGBA bytes, row by row, and its size."""

    pixels: bytes
    width: int
    height: int


class TextureDecodeError(ValueError):
    """Raised when a texture cannot be decoded."""


def decode_texture(texture: ModelTexture) -> ShallowTexture:
    """Decode one model texture into RGBA pixels."""
    message = (
        "Could not decode TGA texture"
        if texture.format is ImageFormat.TGA
        else "Could not decode texture"
    )
    try:
        with Image.open(io.BytesIO(texture.data), formats=[texture.format.value]) as img:
            rgba = img.convert("RGBA")
            return ShallowTexture(rgba.tobytes(), rgba.width, rgba.height)
    except (OSError, ValueError, SyntaxError, EOFError) as exc:
        raise TextureDecodeError(message) from exc


def _decode_or_none(texture: ModelTexture) -> Optional[ShallowTexture]:
    try:
        return decode_texture(texture)
    except TextureDecodeError as exc:
        _log.error("%s: %s", exc, exc.__cause__)
        return None


def decode_model_textures(textures: Iterable[ModelTexture]) -> list[ShallowTexture]:
    """Decode textures in parallel, keeping their order and skipping failures."""
    textures = list(textures)
    if not textures:
        return []
    workers = os.cpu_count() or 1
    if workers > 1:
        workers -= 1
    workers = min(workers, len(textures))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="Image Decoder Thread") as pool:
        decoded = list(pool.map(_decode_or_none, textures))
    return [tex for tex in decoded if tex is not None]