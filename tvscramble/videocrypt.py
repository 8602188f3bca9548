"""Videocrypt I/II encoder: VBI data and line cut-and-rotate scrambling."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from tvscramble.vbicode import encode_vbi, reverse_bits, swap_nibbles

VC_SAMPLE_RATE = 14_000_000
VC_WIDTH = VC_SAMPLE_RATE // 25 // 625
VC_VBI_FIELD_1_START = 12
VC_VBI_FIELD_2_START = 325
VC_VBI_LINES_PER_FIELD = 4
VC_VBI_BYTES_PER_LINE = 5

VC_LEFT = 120
VC_RIGHT = VC_LEFT + 710
VC_OVERLAP = 15
VC_FIELD_1_START = 23
VC_FIELD_2_START = 335
VC_LINES_PER_FIELD = 287

VC_PRBS_CW_FA = (1 << 60) - 1
VC_PRBS_CW_MASK = (1 << 60) - 1
VC_PRBS_SR1_MASK = (1 << 31) - 1
VC_PRBS_SR2_MASK = (1 << 29) - 1

VC2_VBI_FIELD_1_START = VC_VBI_FIELD_1_START - 4
VC2_VBI_FIELD_2_START = VC_VBI_FIELD_2_START - 4

# Packet header sequences
SEQUENCE = (0x87, 0x96, 0xA5, 0xB4, 0xC3, 0xD2, 0xE1, 0x87)
SEQUENCE2 = (0x80, 0x91, 0xA2, 0xB3, 0xC4, 0xD5, 0xE6, 0xF7)


@dataclass(frozen=True)
class _Block:
    mode: int
    codeword: int
    messages: tuple[bytes, ...]

    def message(self, index: int) -> bytes:
        """Return message ``index`` as 31 payload bytes, zero padded."""
        if index >= len(self.messages):
            return bytes(31)
        return self.messages[index][:31].ljust(31, b"\x00")


_FA_BLOCKS = (_Block(0x05, VC_PRBS_CW_FA, ()),)

# Conditional-access sample; requires an active subscriber card to decode
_MTV_BLOCKS = (
    _Block(
        0x07,
        0xB2DD55A7BCE178E,
        (
            bytes([0x20]), bytes(1), bytes(1), bytes(1), bytes(1), bytes(1),
            bytes([
                0xF8, 0x19, 0x10, 0x83, 0x20, 0x85, 0x60, 0xAF, 0x8F, 0xF0, 0x49,
                0x34, 0x86, 0xC4, 0x6A, 0xCA, 0xC3, 0x21, 0x4D, 0x44, 0xB3, 0x24,
                0x36, 0x57, 0xEC, 0xA7, 0xCE, 0x12, 0x38, 0x91, 0x3E,
            ]),
        ),
    ),
    _Block(
        0x07,
        0xF9885DA50770B80,
        (
            # Third byte is 0x60 + name length, followed by the channel name.
            bytes([0x20, 0x00, 0x69, 0x20, 0x20, 0x20]) + b"HACKTV",
            bytes(1), bytes(1), bytes(1), bytes(1), bytes(1),
            bytes([
                0xF8, 0x19, 0x10, 0x83, 0x20, 0xD1, 0xB5, 0xA9, 0x1F, 0x82, 0xFE,
                0xB3, 0x6B, 0x0A, 0x82, 0xC3, 0x30, 0x7B, 0x65, 0x9C, 0xF2, 0xBD,
                0x5C, 0xB0, 0x6A, 0x3B, 0x64, 0x0F, 0xA2, 0x66, 0xBB,
            ]),
        ),
    ),
)

_FA2_BLOCKS = (_Block(0x9C, VC_PRBS_CW_FA, ()),)

_VC1_MODES = {"free": _FA_BLOCKS, "conditional": _MTV_BLOCKS}
_VC2_MODES = {"free": _FA2_BLOCKS}


def _round(value: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def generate_iw(cw: int, fcnt: int) -> int:
    """Build the PRBS initialisation word from a codeword and frame counter."""
    fcnt &= 0xFF
    iw = ((fcnt ^ 0xFF) << 8) | fcnt
    iw |= (iw << 16) | (iw << 32) | (iw << 48)
    return (iw ^ cw) & VC_PRBS_CW_MASK


def _checksummed(payload: bytes) -> bytes:
    return payload + bytes([(-sum(payload)) & 0xFF])


class Videocrypt:
    """Videocrypt I and/or II encoder state for one video stream."""

    def __init__(self, width: int, hsync_width: float, mode: str | None, mode2: str | None) -> None:
        if mode is not None and mode not in _VC1_MODES:
            raise ValueError(f"Unrecognised Videocrypt I mode '{mode}'")
        if mode2 is not None and mode2 not in _VC2_MODES:
            raise ValueError(f"Unrecognised Videocrypt II mode '{mode2}'")

        self.blocks = _VC1_MODES[mode] if mode is not None else ()
        self.blocks2 = _VC2_MODES[mode2] if mode2 is not None else ()
        self.block = 0
        self.block2 = 0

        self.counter = 0
        self.cw = VC_PRBS_CW_FA
        self.sr1 = 0
        self.sr2 = 0
        self.c = 0

        self.message = bytes(32)
        self.message2 = bytes(32)
        self.vbi = bytes(40)
        self.vbi2 = bytes(40)

        # Timings are measured from the centre of the hsync pulse
        ratio = width / VC_WIDTH
        offset = VC_SAMPLE_RATE * hsync_width / 2
        self.video_scale = [_round((offset + x) * ratio) for x in range(VC_WIDTH)]

    def start_frame(self) -> None:
        """Generate the VBI data and reset the PRBS for a new frame."""
        counter = self.counter

        if self.blocks:
            block = self.blocks[self.block]
            if counter & 7 == 0:
                # Updated every 8th frame; the last message repeats the first
                self.message = _checksummed(block.message(((counter >> 3) & 7) % 7))
            header = SEQUENCE[(counter >> 4) & 7]
            if counter & 4 == 0:
                self.vbi = encode_vbi(self.message[:16], header, counter)
            else:
                self.vbi = encode_vbi(self.message[16:], swap_nibbles(header), block.mode)

        if self.blocks2:
            block2 = self.blocks2[self.block2]
            header = SEQUENCE2[(counter >> 1) & 7]
            if counter & 1 == 0:
                self.message2 = _checksummed(block2.message((counter >> 1) & 7))
                self.vbi2 = encode_vbi(self.message2[:16], header, counter)
            else:
                mode = 0x00 if counter & 0x08 else block2.mode
                self.vbi2 = encode_vbi(self.message2[16:], swap_nibbles(header), mode)

        iw = generate_iw(self.cw, counter)
        self.sr1 = iw & VC_PRBS_SR1_MASK
        self.sr2 = (iw >> 31) & VC_PRBS_SR2_MASK

        self.counter = (counter + 1) & 0xFF

        if self.counter & 0x3F == 0 and self.blocks:
            self.cw = self.blocks[self.block].codeword
            self.block = (self.block + 1) % len(self.blocks)

        if self.counter & 0x0F == 0 and self.blocks2:
            self.cw = self.blocks2[self.block2].codeword
            self.block2 = (self.block2 + 1) % len(self.blocks2)

    def vbi_line(self, line: int) -> bytes | None:
        """Return the 5 VBI bytes to render on ``line``, or None."""
        ranges = []
        if self.blocks:
            ranges += [
                (VC_VBI_FIELD_1_START, 0, self.vbi),
                (VC_VBI_FIELD_2_START, VC_VBI_LINES_PER_FIELD, self.vbi),
            ]
        if self.blocks2:
            ranges += [
                (VC2_VBI_FIELD_1_START, 0, self.vbi2),
                (VC2_VBI_FIELD_2_START, VC_VBI_LINES_PER_FIELD, self.vbi2),
            ]
        for start, base, data in ranges:
            if start <= line < start + VC_VBI_LINES_PER_FIELD:
                index = (line - start + base) * VC_VBI_BYTES_PER_LINE
                return data[index:index + VC_VBI_BYTES_PER_LINE]
        return None

    def _next_cut(self) -> int:
        x = (self.c >> 8) & 0xFF
        for _ in range(16):
            self.sr1 = (self.sr1 >> 1) ^ (0x7BB88888 if self.sr1 & 1 else 0)
            self.sr2 = (self.sr2 >> 1) ^ (0x17A2C100 if self.sr2 & 1 else 0)
            a = reverse_bits(self.sr2, 29) & 0x1F
            if a == 31:
                a = 30
            bit = (reverse_bits(self.sr1, 31) >> a) & 1
            self.c = ((self.c >> 1) | (bit << 15)) & 0xFFFF
        return x

    def scramble_cut(self, line: int) -> int | None:
        """Advance the PRBS for ``line`` and return its cut point, or None if unscrambled."""
        scrambled = (
            VC_FIELD_1_START <= line < VC_FIELD_1_START + VC_LINES_PER_FIELD
            or VC_FIELD_2_START <= line < VC_FIELD_2_START + VC_LINES_PER_FIELD
        )
        if not scrambled:
            return None
        x = self._next_cut()
        # Line 23 carries WSS and is left intact
        if line == 23:
            return None
        return 105 + (0xFF - x) * 2

    def rotate_line(self, cut: int, output: Sequence[int], delay: Sequence[int]) -> list[int]:
        """Return ``output`` with its active video cut at ``cut`` and rotated from ``delay``."""
        scale = self.video_scale
        result = list(output)
        lshift = 710 - cut

        src = scale[VC_LEFT + lshift]
        for x in range(scale[VC_LEFT], scale[VC_LEFT + cut]):
            result[x] = delay[src]
            src += 1

        src = scale[VC_LEFT]
        for x in range(scale[VC_LEFT + cut], scale[VC_RIGHT + VC_OVERLAP]):
            result[x] = delay[src]
            src += 1

        return result