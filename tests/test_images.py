import pytest

from titusfox.images import (
    Image,
    ImageFormat,
    decode_image,
    fade_alpha,
    load_image,
)
from titusfox.sqz import SqzError

PLANE = 320 * 200 // 8


def planar_data():
    data = bytearray(PLANE * 4)
    data[0] = 0x80  # plane 0 -> pixel 0 gets bit 0
    data[PLANE * 3] = 0x40  # plane 3 -> pixel 1 gets bit 3
    return bytes(data)


def test_grayscale_pixels_from_planes():
    image = decode_image(planar_data(), ImageFormat.PLANAR_GRAYSCALE)
    assert (image.width, image.height) == (320, 200)
    assert image.pixels[0] == 1
    assert image.pixels[1] == 8
    assert sum(image.pixels[2:]) == 0


def test_grayscale_palette_is_a_ramp():
    image = decode_image(planar_data(), 0)
    assert len(image.palette) == 16
    assert image.palette[0] == (0, 0, 0)
    assert all(r == g == b for r, g, b in image.palette)
    assert [c[0] for c in image.palette] == sorted(c[0] for c in image.palette)


def test_palette_image_scales_vga_colours():
    palette = bytearray(768)
    palette[3:6] = bytes([63, 1, 2])
    pixels = bytes([1]) + bytes(320 * 200 - 1)
    image = decode_image(bytes(palette) + pixels, ImageFormat.PALETTE_256)
    assert image.palette[1] == (63 * 4, 4, 8)
    assert image.pixels == pixels
    assert len(image.palette) == 256


def test_palette_image_too_short():
    with pytest.raises(ValueError):
        decode_image(bytes(768 + 100), ImageFormat.PALETTE_256)


def test_planar_image_too_short():
    with pytest.raises(ValueError):
        decode_image(bytes(10), ImageFormat.PLANAR_GRAYSCALE)


def test_planar_colour_format_unsupported():
    with pytest.raises(ValueError):
        decode_image(planar_data(), ImageFormat.PLANAR)


def test_unknown_format_rejected():
    with pytest.raises(ValueError):
        decode_image(planar_data(), 7)


def test_to_rgb_maps_through_palette():
    image = Image(2, 1, bytes([0, 1]), ((1, 2, 3), (4, 5, 6)))
    assert image.to_rgb() == bytes([1, 2, 3, 4, 5, 6])


def test_to_rgb_length_invariant():
    image = decode_image(planar_data(), 0)
    rgb = image.to_rgb()
    assert len(rgb) == 3 * 320 * 200
    assert rgb[:3] == bytes(image.palette[1])


def test_to_rgb_index_outside_palette():
    image = Image(1, 1, bytes([5]), ((0, 0, 0),))
    with pytest.raises(ValueError):
        image.to_rgb()


def test_fade_alpha_bounds():
    assert fade_alpha(0) == 0
    assert fade_alpha(5000) == 255
    assert fade_alpha(0, 1000, 300) == 255


def test_fade_alpha_is_monotonic():
    values = [fade_alpha(t) for t in range(0, 1200, 50)]
    assert values == sorted(values)


def test_fade_alpha_skip_adds():
    assert fade_alpha(100, 1000, 10) == fade_alpha(100) + 10


def test_fade_alpha_rejects_bad_time():
    with pytest.raises(ValueError):
        fade_alpha(10, 0)
    with pytest.raises(ValueError):
        fade_alpha(-1)


def _packed_zero_picture(length):
    # Huffman tree: "0" -> literal 0, "10" -> short run marker, "11" -> run length.
    header = bytes([0x00, 0x00, length & 0xFF, (length >> 8) & 0xFF])
    run = 0x8000 | (length - 1)
    tree = bytes([0x00, 0x80, 0x04, 0x00, 0x00, 0x81, run & 0xFF, run >> 8])
    return header + bytes([len(tree), 0]) + tree + bytes([0x58])


def test_load_image_reads_packed_file(tmp_path):
    path = tmp_path / "logo.sqz"
    path.write_bytes(_packed_zero_picture(PLANE * 4))
    image = load_image(path, ImageFormat.PLANAR_GRAYSCALE)
    assert len(image.pixels) == 320 * 200
    assert set(image.pixels) == {0}


def test_load_image_invalid_file(tmp_path):
    path = tmp_path / "bad.sqz"
    path.write_bytes(b"\x00")
    with pytest.raises(SqzError):
        load_image(path, 0)


def test_load_image_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "none.sqz", 0)