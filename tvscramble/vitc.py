"""Vertical interval timecode (VITC) packet generator."""

from __future__ import annotations

from fractions import Fraction

PACKET_BITS = 90
PACKET_BYTES = 12

# VITC lines (first field, second field) and bit-rate multiples of the line rate
_RASTERS = {
    625: ((19, 332), 116),
    525: ((14, 277), 115),
}


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _put_bits(data: bytearray, offset: int, value: int, count: int) -> int:
    """Write ``count`` bits of ``value``, least significant first, at ``offset``."""
    for _ in range(count):
        mask = 1 << (offset & 7)
        if value & 1:
            data[offset >> 3] |= mask
        else:
            data[offset >> 3] &= ~mask & 0xFF
        value >>= 1
        offset += 1
    return offset


class Vitc:
    """VITC timecode encoder for a 625 or 525-line raster."""

    def __init__(self, raster: int, frame_rate: tuple[int, int] | Fraction) -> None:
        if raster not in _RASTERS:
            raise ValueError("vitc: Unsupported video mode")
        self.raster = raster
        self.lines, self.hr = _RASTERS[raster]

        if isinstance(frame_rate, tuple):
            num, den = frame_rate
        else:
            num, den = frame_rate.numerator, frame_rate.denominator

        if 0 < num <= 30 and den == 1:
            self.fps = num
            self.frame_drop = False
        elif num == 30000 and den == 1001:
            # Drop-frame timecode compensates for 29.97 fps
            self.fps = 30
            self.frame_drop = True
        else:
            raise ValueError(f"vitc: Unsupported frame rate {num}/{den}")

    def is_vitc_line(self, line: int) -> bool:
        """Return True if VITC is carried on ``line``."""
        first, second = self.lines
        return line in (first, first + 2, second, second + 2)

    def timecode(self, frame: int, line: int) -> int:
        """Return the 32-bit BCD timecode word for ``frame`` on ``line``."""
        if frame < 0:
            raise ValueError("frame number must not be negative")

        fn = frame
        if self.frame_drop:
            fn += (fn // 17982) * 18
            fn += _trunc_div(fn % 18000 - 2, 1798) * 2

        field = 1 if line >= self.lines[1] else 0
        fps = self.fps

        tc = fn % fps % 10
        tc |= (fn % fps // 10) << 4
        tc |= int(self.frame_drop) << 6

        fn //= fps
        tc |= (fn % 10) << 8
        tc |= (fn // 10 % 6) << 12
        if self.raster != 625:
            tc |= field << 15

        fn //= 60
        tc |= (fn % 10) << 16
        tc |= (fn // 10 % 6) << 20

        fn //= 60
        tc |= (fn % 24 % 10) << 24
        tc |= (fn % 24 // 10) << 28
        if self.raster == 625:
            tc |= field << 31

        return tc

    def packet(self, frame: int, line: int) -> bytes | None:
        """Return the 90-bit VITC packet (LSB first) for ``line``, or None if not a VITC line."""
        if not self.is_vitc_line(line):
            return None

        timecode = self.timecode(frame, line)
        userdata = 0
        data = bytearray(PACKET_BYTES)

        offset = 0
        for i in range(8):
            offset = _put_bits(data, offset, 0x01, 2)
            offset = _put_bits(data, offset, timecode >> (i * 4), 4)
            offset = _put_bits(data, offset, userdata >> (i * 4), 4)

        offset = _put_bits(data, offset, 0x01, 2)
        _put_bits(data, offset, 0, 8)

        crc = 0
        for byte in data[:11]:
            crc ^= byte
        crc = ((crc << 6) | (crc >> 2)) & 0xFF
        offset = _put_bits(data, offset, crc, 8)

        assert offset == PACKET_BITS
        return bytes(data)