import io
import json
import struct

import pytest

from inox2d.inp import EXT_SECT, MAGIC, TEX_SECT, ParseInpError, parse_inp
from inox2d.model import ImageFormat


def _payload():
    return {
        "meta": {
            "name": "Test",
            "version": "1.0-alpha",
            "rigger": None,
            "artist": None,
            "copyright": None,
            "licenseURL": None,
            "contact": None,
            "reference": None,
            "preservePixels": False,
        },
        "physics": {"pixelsPerMeter": 1000, "gravity": 9.8},
        "nodes": {
            "uuid": 1,
            "name": "Root",
            "type": "Node",
            "enabled": True,
            "zsort": 0.0,
            "transform": {"trans": [0, 0, 0], "rot": [0, 0, 0], "scale": [1, 1]},
            "lockToRoot": False,
        },
        "param": [],
    }


def _u32(n):
    return struct.pack(">I", n)


def _block(raw):
    return _u32(len(raw)) + raw


def _file(payload_bytes=None, textures=(), vendors=None, tex_sect=TEX_SECT):
    if payload_bytes is None:
        payload_bytes = json.dumps(_payload()).encode()
    out = MAGIC + _block(payload_bytes)
    if tex_sect is None:
        return out
    out += tex_sect + _u32(len(textures))
    for encoding, data in textures:
        out += _u32(len(data)) + bytes([encoding]) + data
    if vendors is not None:
        out += EXT_SECT + _u32(len(vendors))
        for name, value in vendors:
            out += _block(name.encode()) + _block(json.dumps(value).encode())
    return out


def test_parse_full_file():
    model = parse_inp(_file(textures=[(0, b"png-bytes"), (1, b"tga")], vendors=[("app", {"k": [1, 2]})]))
    assert model.puppet.meta.name == "Test"
    assert [t.format for t in model.textures] == [ImageFormat.PNG, ImageFormat.TGA]
    assert model.textures[0].data == b"png-bytes"
    assert len(model.vendors) == 1
    assert model.vendors[0].name == "app"
    assert model.vendors[0].payload == {"k": [1, 2]}


def test_stream_input_and_no_vendors():
    model = parse_inp(io.BytesIO(_file()))
    assert model.textures == []
    assert model.vendors == []


def test_trailing_garbage_is_not_vendor_data():
    model = parse_inp(_file() + b"GARBAGE!")
    assert model.vendors == []


def test_incorrect_magic():
    with pytest.raises(ParseInpError) as info:
        parse_inp(b"NOTMAGIC" + _file()[8:])
    assert info.value.kind == "IncorrectMagic"
    assert str(info.value) == "magic bytes do not match, the file is not in the INP format"


def test_missing_texture_section():
    with pytest.raises(ParseInpError) as info:
        parse_inp(_file(tex_sect=None))
    assert info.value.kind == "NoTexSect"
    with pytest.raises(ParseInpError) as info:
        parse_inp(_file(tex_sect=b"TEX_XXXX"))
    assert str(info.value) == "there is no texture section"


def test_bc7_not_supported():
    with pytest.raises(ParseInpError) as info:
        parse_inp(_file(textures=[(2, b"")]))
    assert str(info.value) == "BC7 texture encoding is not supported yet"


def test_invalid_texture_encoding():
    with pytest.raises(ParseInpError) as info:
        parse_inp(_file(textures=[(7, b"")]))
    assert info.value.kind == "InvalidTexEncoding"
    assert info.value.detail == 7


def test_truncated_payload():
    with pytest.raises(ParseInpError) as info:
        parse_inp(MAGIC + _u32(100) + b"{}")
    assert info.value.kind == "Io"


def test_invalid_utf8_payload():
    with pytest.raises(ParseInpError) as info:
        parse_inp(_file(payload_bytes=b"\xff\xfe"))
    assert info.value.kind == "Utf8"


def test_invalid_json_payload():
    with pytest.raises(ParseInpError) as info:
        parse_inp(_file(payload_bytes=b"{not json"))
    assert info.value.kind == "JsonParse"


def test_invalid_puppet_payload():
    payload = _payload()
    del payload["meta"]
    with pytest.raises(ParseInpError) as info:
        parse_inp(_file(payload_bytes=json.dumps(payload).encode()))
    assert info.value.kind == "InoxParse"
    assert str(info.value).startswith("Could not parse INP file\n  - ")