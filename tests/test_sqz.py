import pytest

from titusfox.sqz import (
    SqzError,
    huffman_decode,
    lzw_decode,
    read_sqz,
    unsqz,
)

LEAF = 0x8000


def internal(node):
    return node << 1


def bits_to_bytes(bits):
    bits = bits + "0" * (-len(bits) % 8)
    return int(bits, 2).to_bytes(len(bits) // 8, "big") if bits else b""


def pack_codes(codes, widths=None):
    if widths is None:
        widths = [9] * len(codes)
    return bits_to_bytes("".join(format(c, f"0{w}b") for c, w in zip(codes, widths)))


def huffman_stream(entries, bits):
    tree = b"".join(e.to_bytes(2, "little") for e in entries)
    return len(tree).to_bytes(2, "little") + tree + bits_to_bytes(bits)


def header(out_len, comp_type, high=0):
    return bytes([high | ((out_len >> 16) & 0x0F), comp_type, out_len & 0xFF, (out_len >> 8) & 0xFF])


TREE_AB = [LEAF | 0x41, LEAF | 0x42]
# A: 0, repeat-3: 10, short count marker: 110, long count marker: 111
TREE_RLE = [LEAF | 0x41, internal(2), LEAF | 0x103, internal(4), LEAF | 0x100, LEAF | 0x101]


def test_lzw_dictionary_reference():
    assert lzw_decode(pack_codes([65, 66, 258]), 4) == b"ABAB"


def test_lzw_code_not_yet_in_dictionary():
    assert lzw_decode(pack_codes([65, 258]), 2) == b"AA"


def test_lzw_pending_code_uses_last_entry():
    via_pending = lzw_decode(pack_codes([65, 66, 259]), 4)
    literal = lzw_decode(pack_codes([65, 66, 66, 66]), 4)
    assert via_pending == literal
    assert len(via_pending) == 4


def test_lzw_literals_with_width_growth():
    data = [(i * 7) % 256 for i in range(300)]
    widths = [9] * 255 + [10] * (len(data) - 255)
    result = lzw_decode(pack_codes(data, widths), len(data))
    assert result == bytes(data)


def test_lzw_clear_code_resets_dictionary():
    result = lzw_decode(pack_codes([65, 66, 256, 67, 258]), 4)
    assert result[:2] == bytes([65, 66])
    assert result[2:] == lzw_decode(pack_codes([67, 258]), 2)


def test_lzw_end_code_emits_nothing():
    result = lzw_decode(pack_codes([65, 257, 66]), 2)
    assert result == bytes([65, 66])


def test_lzw_output_is_truncated_to_length():
    full = lzw_decode(pack_codes([65, 66, 258]), 4)
    short = lzw_decode(pack_codes([65, 66, 258]), 3)
    assert len(short) == 3
    assert short == full[:3]


def test_lzw_self_referencing_entry_overflows():
    with pytest.raises(SqzError):
        lzw_decode(pack_codes([65, 259, 260, 259]), 100)


def test_huffman_literals():
    assert huffman_decode(huffman_stream(TREE_AB, "01010101"), 8) == b"ABABABAB"


def test_huffman_truncates_to_length():
    stream = huffman_stream(TREE_AB, "01010101")
    full = huffman_decode(stream, 8)
    short = huffman_decode(stream, 3)
    assert len(short) == 3
    assert short == full[:3]


def test_huffman_inline_repeat():
    assert huffman_decode(huffman_stream(TREE_RLE, "00000010"), 100) == b"A" * 9


def test_huffman_short_count_uses_full_node_value():
    # A, short-count marker, repeat leaf 0x103 as count, then two padding A's
    result = huffman_decode(huffman_stream(TREE_RLE, "011010"), 1000)
    assert result == b"A" * (1 + 0x103 + 2)


def test_huffman_long_count():
    result = huffman_decode(huffman_stream(TREE_RLE, "011100"), 100000)
    assert set(result) == {0x41}
    assert len(result) > 256 * 0x41


def test_huffman_too_short():
    with pytest.raises(SqzError):
        huffman_decode(b"\x01", 10)


def test_huffman_node_out_of_range():
    with pytest.raises(SqzError):
        huffman_decode(huffman_stream([internal(50), LEAF | 0x41], "00"), 10)


def test_unsqz_dispatches_lzw():
    payload = pack_codes([65, 66, 258])
    assert unsqz(header(4, 0x10) + payload) == lzw_decode(payload, 4)


def test_unsqz_dispatches_huffman():
    payload = huffman_stream(TREE_AB, "01010101")
    assert unsqz(header(8, 0x00) + payload) == huffman_decode(payload, 8)


def test_unsqz_ignores_high_nibble_of_first_byte():
    payload = huffman_stream(TREE_AB, "01010101")
    result = unsqz(header(3, 0x00, high=0xF0) + payload)
    assert result == huffman_decode(payload, 8)[:3]


def test_unsqz_too_short():
    with pytest.raises(SqzError):
        unsqz(b"\x00\x10")


def test_unsqz_zero_length():
    with pytest.raises(SqzError):
        unsqz(header(0, 0x10) + b"\x00\x00")


def test_read_sqz_matches_unsqz(tmp_path):
    content = header(4, 0x10) + pack_codes([65, 66, 258])
    path = tmp_path / "image.sqz"
    path.write_bytes(content)
    assert read_sqz(path) == unsqz(content)


def test_read_sqz_reports_path_on_error(tmp_path):
    path = tmp_path / "broken.sqz"
    path.write_bytes(b"\x00")
    with pytest.raises(SqzError, match="broken.sqz"):
        read_sqz(path)


def test_read_sqz_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_sqz(tmp_path / "missing.sqz")