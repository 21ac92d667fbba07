"""Reading models from the binary puppet container format."""

from __future__ import annotations

import io
import json
import struct
from typing import Any, BinaryIO, Union

from .jsonobj import JsonError
from .model import ImageFormat, Model, ModelTexture, VendorData
from .payload import InoxParseError, puppet_from_json

MAGIC = b"TRNSRTS\0"
TEX_SECT = b"TEX_SECT"
EXT_SECT = b"EXT_SECT"

_FIXED_MESSAGES = {
    "IncorrectMagic": "magic bytes do not match, the file is not in the INP format",
    "NoTexSect": "there is no texture section",
    "Bc7NotSupported": "BC7 texture encoding is not supported yet",
}
_WRAPPING_KINDS = {"Io", "Utf8", "FromUtf8", "JsonParse", "InoxParse", "Json"}


class ParseInpError(ValueError):
    """A model file that could not be read; ``kind`` names the problem."""

    def __init__(self, kind: str, detail: Any = None) -> None:
        self.kind = kind
        self.detail = detail
        if kind in _FIXED_MESSAGES:
            message = _FIXED_MESSAGES[kind]
        elif kind == "InvalidTexEncoding":
            message = f"Invalid texture encoding: {detail}"
        elif kind in _WRAPPING_KINDS:
            message = f"Could not parse INP file\n  - {detail}"
        else:
            raise ValueError(f"unknown INP error kind {kind!r}")
        super().__init__(message)


class _Reader:
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def read_exact(self, n: int) -> bytes:
        chunks = []
        remaining = n
        while remaining > 0:
            try:
                chunk = self._stream.read(remaining)
            except OSError as err:
                raise ParseInpError("Io", err) from err
            if not chunk:
                raise ParseInpError("Io", "failed to fill whole buffer")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def u8(self) -> int:
        return self.read_exact(1)[0]

    def be_u32(self) -> int:
        return struct.unpack(">I", self.read_exact(4))[0]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _parse_json(raw: bytes) -> Any:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ParseInpError("Utf8", err) from err
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as err:
        raise ParseInpError("JsonParse", err) from err


def _read_textures(reader: _Reader) -> list[ModelTexture]:
    textures = []
    for _ in range(reader.be_u32()):
        length = reader.be_u32()
        encoding = reader.u8()
        if encoding == 0:
            fmt = ImageFormat.PNG
        elif encoding == 1:
            fmt = ImageFormat.TGA
        elif encoding == 2:
            raise ParseInpError("Bc7NotSupported")
        else:
            raise ParseInpError("InvalidTexEncoding", encoding)
        textures.append(ModelTexture(fmt, reader.read_exact(length)))
    return textures


def _read_vendors(reader: _Reader) -> list[VendorData]:
    vendors = []
    for _ in range(reader.be_u32()):
        raw_name = reader.read_exact(reader.be_u32())
        try:
            name = raw_name.decode("utf-8")
        except UnicodeDecodeError as err:
            raise ParseInpError("FromUtf8", err) from err
        payload = _parse_json(reader.read_exact(reader.be_u32()))
        vendors.append(VendorData(name, payload))
    return vendors


def parse_inp(data: Union[bytes, bytearray, memoryview, BinaryIO]) -> Model:
    """Parse a model from bytes or a binary stream."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        data = io.BytesIO(bytes(data))
    reader = _Reader(data)

    if reader.read_exact(8) != MAGIC:
        raise ParseInpError("IncorrectMagic")

    payload = _parse_json(reader.read_exact(reader.be_u32()))
    try:
        puppet = puppet_from_json(payload)
    except InoxParseError as err:
        raise ParseInpError("InoxParse", err) from err
    except JsonError as err:
        raise ParseInpError("Json", err) from err

    try:
        tex_sect = reader.read_exact(8)
    except ParseInpError:
        raise ParseInpError("NoTexSect") from None
    if tex_sect != TEX_SECT:
        raise ParseInpError("NoTexSect")

    textures = _read_textures(reader)

    try:
        ext_sect = reader.read_exact(8)
    except ParseInpError:
        ext_sect = b""
    vendors = _read_vendors(reader) if ext_sect == EXT_SECT else []

    return Model(puppet=puppet, textures=textures, vendors=vendors)