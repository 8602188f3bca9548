"""Widescreen signalling (WSS) packet generator for line 23."""

from __future__ import annotations

from fractions import Fraction

WSS_LINE = 23
WSS_BITS = 137
WSS_BYTES = 18

AUTO = 0xFF

_MODES = {
    "4:3": 0x08,
    "16:9": 0x07,
    "14:9-letterbox": 0x01,
    "16:9-letterbox": 0x04,
    "auto": AUTO,
}

# Run-in and start code
_HEADER = bytes([0xF8, 0xE3, 0x8E, 0x38, 0xF1, 0xE0, 0xF8])

_GROUP1_OFFSET = 29 + 24


def _group_bits(vbi: bytearray, code: int, offset: int, length: int) -> int:
    """Biphase-code ``length`` bits of ``code`` (LSB first) into ``vbi``, MSB first."""
    for _ in range(length):
        bit = code & 1
        for value in (bit, bit, bit, bit ^ 1, bit ^ 1, bit ^ 1):
            mask = 1 << (7 - offset % 8)
            if value:
                vbi[offset // 8] |= mask
            else:
                vbi[offset // 8] &= ~mask & 0xFF
            offset += 1
        code >>= 1
    return offset


class Wss:
    """WSS encoder for a fixed or automatically chosen aspect ratio."""

    def __init__(self, mode: str, active_width: int, active_lines: int) -> None:
        code = _MODES.get(mode.lower())
        if code is None:
            raise ValueError(f"wss: Unrecognised mode '{mode}'")
        if active_width <= 0 or active_lines <= 0:
            raise ValueError("active area must be positive")
        self.code = code

        # Pixel aspect ratio above which auto mode signals 16:9
        self.auto_threshold = Fraction(14, 9) / Fraction(active_width, active_lines)

        vbi = bytearray(WSS_BYTES)
        vbi[:len(_HEADER)] = _HEADER
        o = _group_bits(vbi, code, _GROUP1_OFFSET, 4)  # Aspect ratio
        o = _group_bits(vbi, 0x00, o, 4)  # Enhanced services
        o = _group_bits(vbi, 0x00, o, 3)  # Subtitles
        _group_bits(vbi, 0x00, o, 3)  # Reserved
        self.vbi = vbi

    def packet(self, pixel_aspect_ratio: Fraction | float | None = None) -> bytes:
        """Return the 137-bit WSS packet (MSB first) for a frame."""
        if self.code == AUTO:
            if pixel_aspect_ratio is None:
                raise ValueError("auto mode needs the source pixel aspect ratio")
            par = Fraction(pixel_aspect_ratio)
            code = 0x08 if par <= self.auto_threshold else 0x07
            _group_bits(self.vbi, code, _GROUP1_OFFSET, 4)
        return bytes(self.vbi)