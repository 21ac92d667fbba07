"""The contents of a puppet file: puppet, textures and vendor data."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .puppet import Puppet

INOCHI2D_SPEC_VERSION = "1.0-alpha"


class ImageFormat(Enum):
    """Encodings a model texture may be stored in; values are image library format names."""

    PNG = "PNG"
    TGA = "TGA"


@dataclass(frozen=True)
class ModelTexture:
    """An encoded texture as stored in the model file."""

    format: ImageFormat
    data: bytes


@dataclass
class VendorData:
    """Application-specific data attached to a model, as a parsed JSON value."""

    name: str
    payload: Any

    def __str__(self) -> str:
        return f"{self.name} {json.dumps(self.payload, indent=2, ensure_ascii=False)}\n"


@dataclass(eq=False)
class Model:
    """A loaded model: its puppet, encoded textures and vendor data."""

    puppet: "Puppet"
    textures: list[ModelTexture] = field(default_factory=list)
    vendors: list[VendorData] = field(default_factory=list)