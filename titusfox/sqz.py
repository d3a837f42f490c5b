"""Decompression of SQZ-packed game data (LZW and Huffman/run-length variants).

An SQZ file starts with a four byte header. The low nibble of byte 0 and
bytes 3 and 2 give the unpacked length (20 bits, most significant first);
byte 1 selects the method: ``0x10`` is LZW, anything else is the Huffman
coder with run-length codes.
"""

from __future__ import annotations

import os
from enum import Enum, auto
from typing import List, Union

LZW_CLEAR_CODE = 0x100
LZW_END_CODE = 0x101
LZW_FIRST = 0x102
LZW_MAX_TABLE = 4096

HEADER_SIZE = 4
COMPRESSION_LZW = 0x10

_LZW_START_BITS = 9
_LZW_MAX_BITS = 12
_HUFFMAN_LEAF = 0x8000

BytesLike = Union[bytes, bytearray, memoryview]


class SqzError(ValueError):
    """Raised when SQZ data is truncated, malformed or overflows the dictionary."""


def unsqz(data: BytesLike) -> bytes:
    """Unpack a complete SQZ image (header included) held in memory."""
    data = bytes(data)
    if len(data) < HEADER_SIZE:
        raise SqzError("file too short")
    b1, comp_type, b3, b4 = data[:HEADER_SIZE]
    out_len = ((b1 & 0x0F) << 16) | (b4 << 8) | b3
    if out_len == 0:
        raise SqzError("invalid file: unpacked length is zero")
    payload = data[HEADER_SIZE:]
    if comp_type == COMPRESSION_LZW:
        return lzw_decode(payload, out_len)
    return huffman_decode(payload, out_len)


def read_sqz(path: Union[str, os.PathLike]) -> bytes:
    """Read and unpack an SQZ file from disk."""
    with open(path, "rb") as handle:
        data = handle.read()
    try:
        return unsqz(data)
    except SqzError as exc:
        raise SqzError(f"{os.fspath(path)}: {exc}") from exc


def _read_code(data: bytes, byte_pos: int, bit_offset: int, width: int) -> int:
    """Read ``width`` bits, most significant first, from the given bit position."""
    window = data[byte_pos:byte_pos + 4].ljust(4, b"\x00")
    word = int.from_bytes(window, "big")
    return ((word << bit_offset) & 0xFFFFFFFF) >> (32 - width)


def _expand(code: int, prefixes: List[int], chars: List[int], limit: int) -> List[int]:
    """Return the byte string a dictionary code stands for, first byte first."""
    reversed_string: List[int] = []
    while code >= LZW_FIRST:
        if len(reversed_string) >= limit:
            raise SqzError("dictionary overflow during decompression")
        reversed_string.append(chars[code - LZW_FIRST])
        code = prefixes[code - LZW_FIRST]
    reversed_string.append(code & 0xFF)
    reversed_string.reverse()
    return reversed_string


def lzw_decode(data: BytesLike, out_len: int) -> bytes:
    """Decode an LZW stream of variable width codes (9 to 12 bits)."""
    data = bytes(data)
    in_len = len(data)
    prefixes = [0] * LZW_MAX_TABLE
    chars = [0] * LZW_MAX_TABLE
    dict_length = 0
    width = _LZW_START_BITS
    byte_pos = 0
    bit_offset = 0
    add_to_dict = False
    previous = 0
    out = bytearray()

    while byte_pos < in_len and len(out) < out_len:
        code = _read_code(data, byte_pos, bit_offset, width)
        bit_offset += width
        while bit_offset > 8:
            bit_offset -= 8
            byte_pos += 1

        if code == LZW_CLEAR_CODE:
            width = _LZW_START_BITS
            dict_length = 0
            add_to_dict = False
        elif code != LZW_END_CODE:
            if code > 0xFF and code < LZW_FIRST + dict_length:
                string = _expand(code, prefixes, chars, LZW_MAX_TABLE)
                out.extend(string)
                first = string[0]
            elif code > 0xFF:
                string = _expand(previous, prefixes, chars, LZW_MAX_TABLE - 1)
                tail = chars[dict_length - 1] if dict_length > 0 else previous & 0xFF
                out.extend(string)
                out.append(tail)
                first = string[0]
            else:
                out.append(code)
                first = code

            if add_to_dict and LZW_FIRST + dict_length < LZW_MAX_TABLE:
                chars[dict_length] = first
                prefixes[dict_length] = previous
                dict_length += 1

            previous = code
            add_to_dict = True

        if LZW_FIRST + dict_length == 1 << width and width < _LZW_MAX_BITS:
            width += 1

    return bytes(out[:out_len])


class _HuffmanState(Enum):
    LITERAL = auto()
    SHORT_COUNT = auto()
    LONG_COUNT_HIGH = auto()
    LONG_COUNT_LOW = auto()


def huffman_decode(data: BytesLike, out_len: int) -> bytes:
    """Decode a Huffman stream whose leaves are literals or run-length codes."""
    data = bytes(data)
    if len(data) < 2:
        raise SqzError("Huffman stream too short for its tree size")
    tree_size = data[0] | (data[1] << 8)

    def entry(node: int) -> int:
        index = 2 + node * 2
        if index + 1 >= len(data):
            raise SqzError(f"Huffman tree node {node} out of range")
        return data[index] | (data[index + 1] << 8)

    out = bytearray()
    state = _HuffmanState.LITERAL
    node = 0
    last = 0
    count = 0

    for byte in data[2 + tree_size:]:
        for shift in range(7, -1, -1):
            if (byte >> shift) & 1:
                node += 1
            value = entry(node)
            if value < _HUFFMAN_LEAF:
                node = value >> 1
                continue

            node = value & 0x7FFF
            low = node & 0xFF
            if state is _HuffmanState.LITERAL:
                if node < 0x100:
                    last = low
                    out.append(last)
                elif low == 0:
                    state = _HuffmanState.SHORT_COUNT
                elif low == 1:
                    state = _HuffmanState.LONG_COUNT_HIGH
                else:
                    out.extend(bytes([last]) * low)
            elif state is _HuffmanState.SHORT_COUNT:
                out.extend(bytes([last]) * node)
                state = _HuffmanState.LITERAL
            elif state is _HuffmanState.LONG_COUNT_HIGH:
                count = 256 * low
                state = _HuffmanState.LONG_COUNT_LOW
            else:
                count += low
                out.extend(bytes([last]) * count)
                state = _HuffmanState.LITERAL
            node = 0

    return bytes(out[:out_len])