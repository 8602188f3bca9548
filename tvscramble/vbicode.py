"""Bit helpers and VBI packet encoding shared by the Videocrypt encoders."""

from __future__ import annotations

from collections.abc import Sequence

# Hamming codes for each 4-bit nibble
HAMMING = (
    0x15, 0x02, 0x49, 0x5E, 0x64, 0x73, 0x38, 0x2F,
    0xD0, 0xC7, 0x8C, 0x9B, 0xA1, 0xB6, 0xFD, 0xEA,
)

VBI_FRAME_BYTES = 40

# Start offsets of the six (overlapping) 8-byte interleave blocks
_INTERLEAVE_OFFSETS = (0, 6, 12, 20, 26, 32)


def reverse_byte(b: int) -> int:
    """Reverse the bit order of an 8-bit value."""
    b &= 0xFF
    b = (b & 0xF0) >> 4 | (b & 0x0F) << 4
    b = (b & 0xCC) >> 2 | (b & 0x33) << 2
    b = (b & 0xAA) >> 1 | (b & 0x55) << 1
    return b & 0xFF


def reverse_bits(value: int, width: int) -> int:
    """Reverse the lowest ``width`` bits of ``value``."""
    result = 0
    for _ in range(width):
        result = (result << 1) | (value & 1)
        value >>= 1
    return result


def swap_nibbles(b: int) -> int:
    """Swap the high and low nibbles of a byte."""
    return ((b >> 4) | (b << 4)) & 0xFF


def _transpose(block: Sequence[int]) -> list[int]:
    return [
        sum(1 << j for j, byte in enumerate(block) if byte & mask)
        for mask in (0x80 >> i for i in range(8))
    ]


def interleave(frame: Sequence[int]) -> bytes:
    """Apply the VBI frame interleaving to a 40-byte frame."""
    if len(frame) != VBI_FRAME_BYTES:
        raise ValueError(f"VBI frame must be {VBI_FRAME_BYTES} bytes, got {len(frame)}")
    out = bytearray(frame)
    for offset in _INTERLEAVE_OFFSETS:
        block = out[offset:offset + 8]
        block[0] = reverse_byte(block[0])
        block[7] = reverse_byte(block[7])
        out[offset:offset + 8] = bytes(_transpose(block))
    return bytes(out)


def _field(header: int, payload: Sequence[int]) -> list[int]:
    check = (header + sum(payload)) & 0xFF
    return [header & 0xFF, *payload, check]


def encode_vbi(data: Sequence[int], a: int, b: int) -> bytes:
    """Encode 16 data bytes with headers ``a`` and ``b`` into a 40-byte VBI frame."""
    if len(data) != 16:
        raise ValueError(f"VBI payload must be 16 bytes, got {len(data)}")
    raw = _field(a, data[:8]) + _field(b, data[8:16])
    coded = bytearray()
    for byte in raw:
        coded.append(HAMMING[byte >> 4])
        coded.append(HAMMING[byte & 0x0F])
    return interleave(coded)