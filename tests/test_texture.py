import io

import pytest
from PIL import Image

from inox2d.model import ImageFormat, ModelTexture
from inox2d.texture import ShallowTexture, TextureDecodeError, decode_model_textures, decode_texture


def _image(width=3, height=2, seed=0):
    img = Image.new("RGBA", (width, height))
    img.putdata(
        [((x * 40 + seed) % 256, (y * 90) % 256, (seed * 7) % 256, 200) for y in range(height) for x in range(width)]
    )
    return img


def _encode(img, fmt):
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def test_decode_png_round_trip():
    img = _image()
    tex = decode_texture(ModelTexture(ImageFormat.PNG, _encode(img, "PNG")))
    assert tex.width == 3
    assert tex.height == 2
    assert tex.pixels == img.tobytes()
    assert len(tex.pixels) == tex.width * tex.height * 4


def test_decode_tga_round_trip():
    img = _image(4, 5, seed=11)
    tex = decode_texture(ModelTexture(ImageFormat.TGA, _encode(img, "TGA")))
    assert (tex.width, tex.height) == (4, 5)
    assert tex.pixels == img.tobytes()


def test_decode_rgb_png_becomes_rgba():
    img = Image.new("RGB", (2, 2), (10, 20, 30))
    tex = decode_texture(ModelTexture(ImageFormat.PNG, _encode(img, "PNG")))
    assert tex.pixels == bytes([10, 20, 30, 255]) * 4


def test_decode_garbage_png_raises():
    with pytest.raises(TextureDecodeError, match="Could not decode texture"):
        decode_texture(ModelTexture(ImageFormat.PNG, b"not an image"))


def test_decode_garbage_tga_raises():
    with pytest.raises(TextureDecodeError, match="Could not decode TGA texture"):
        decode_texture(ModelTexture(ImageFormat.TGA, b"\x00"))


def test_decode_model_textures_keeps_order_and_skips_failures():
    images = [_image(w, 1, seed=w) for w in (1, 2, 3, 4)]
    textures = [ModelTexture(ImageFormat.PNG, _encode(img, "PNG")) for img in images]
    textures.insert(2, ModelTexture(ImageFormat.PNG, b"broken"))
    decoded = decode_model_textures(textures)
    assert [t.width for t in decoded] == [1, 2, 3, 4]
    assert [t.pixels for t in decoded] == [img.tobytes() for img in images]


def test_decode_model_textures_empty():
    assert decode_model_textures([]) == []


def test_shallow_texture_fields():
    tex = ShallowTexture(b"\x01\x02\x03\x04", 1, 1)
    assert tex.pixels == b"\x01\x02\x03\x04"
    assert (tex.width, tex.height) == (1, 1)