"""Videocrypt S encoder: VBI data for the line-shuffling system."""

from __future__ import annotations

from dataclasses import dataclass

from tvscramble.vbicode import encode_vbi, swap_nibbles

VCS_SAMPLE_RATE = 17_734_475
VCS_WIDTH = 1135
VCS_VBI_LEFT = 211
VCS_VBI_FIELD_1_START = 24
VCS_VBI_FIELD_2_START = 336
VCS_VBI_LINES_PER_FIELD = 4
VCS_VBI_LINES_PER_FRAME = VCS_VBI_LINES_PER_FIELD * 2
VCS_VBI_SAMPLES_PER_BIT = 22
VCS_VBI_BITS_PER_LINE = 40
VCS_VBI_BYTES_PER_LINE = VCS_VBI_BITS_PER_LINE // 8
VCS_PACKET_LENGTH = 32

# Enough delay for the scrambler to reach any line of the next block
VCS_DELAY_LINES = 125

# First line of each shuffled block
BLOCK_START = (28, 75, 122, 169, 216, 263, 340, 387, 434, 481, 528, 575)

# Header synchronisation sequence
SEQUENCE = (0x81, 0x92, 0xA3, 0xB4, 0xC5, 0xD6, 0xE7, 0xF0)

# Mode byte values: 0x01 clear, 0x11 free access, 0x21 conditional access.
# The least significant bit of the channel byte enables audio inversion.


@dataclass(frozen=True)
class _Block:
    mode: int
    channel: int
    codeword: int
    messages: tuple[bytes, ...]

    def message(self, index: int) -> bytes:
        """Return message ``index`` as 31 payload bytes, zero padded."""
        if index >= len(self.messages):
            return bytes(31)
        return self.messages[index][:31].ljust(31, b"\x00")


def _hex(text: str) -> bytes:
    return bytes.fromhex(text)


_FA_BLOCKS = (_Block(0x11, 0x00, 0, ()),)

# Conditional-access sample
_BBC_BLOCKS = (
    _Block(0x21, 0x05, 0, (
        _hex("E13AA9000100 40CC52DDF7878889 8A8B8D8F90919293 9495969798C18496 CD"),
        _hex("E13A28000100 403103276C3E3F41 4243444547484 94A4B4C4D4E4FD300C4D2".replace(" ", "")),
        _hex("E13AA4000100 40724D83F3515253 5455565859 5A5B5C5D5E5F60616B76AD86"),
        _hex("E13AA5000100 400481FCF1636467 68696A6B6C6D6E6F7071727374 6BC7C136"),
        _hex("F93AA1250720 20024C7A8ECA7D00 00000000000000000000000000 80" "9739DB"),
        _hex("F93AA1250720 20024C7A8ECA7D00 00000000000000000000000000 80" "9739DB"),
        _hex("E13A3F000100 408EED2BA5757677 78797A7B7C7D7E7F8082838586 1574FD97"),
        _hex("21007801182020202020202048414 34B5456202020202020200505050595 37".replace(" ", "")),
    )),
    _Block(0x21, 0x05, 0, (
        _hex("E13AAC000100 4082EE46F0D4D5D7 D8D9DADBDCDDDEE0E1E2E3E4E6 88FFF6C6"),
        _hex("E13AAB000100 4030F90C32999A9B 9C9D9E9FA0A1A2A3A4A5A7A8A9 D98948B2"),
        _hex("E13A33000100 40B67D8AA6AAABAC ADAEAFB0B1B2C2CCCCA8AAABAC 5E95C418"),
        _hex("E13A2A000100 4015AB58B4ADAEAF B0B1B6B7B8B9BABBBCBEBFC0C1 21C4B24F"),
        _hex("F93AA1250720 20024C72B1F35900 00000000000000000000000000 4050D6D2"),
        _hex("F93AA1250720 20024C72B1F35900 00000000000000000000000000 4050D6D2"),
        _hex("E13AB5000100 4023BE75E7C2C3C4 C5C7C8C9CACBCCCDCED0D1D2D3 E366518D"),
        _hex("210018010104 0000000000000000 00000000000000000000000000 0000DD4F"),
    )),
    _Block(0x21, 0x05, 0, (
        _hex("E13AB0000100 4049BA1DE42E2F30 313233353637 38390E2B2C2D2F299F5460"),
        _hex("E13A22000100 40850C99B1E7E8E9 EAEBECEDEEEFF0F1F2F3F4F6F7 610ED50F"),
        _hex("E13AAB000100 4030F90C34F8F9FA FBFCFDFF000102030405070 80AB9E5AB61".replace(" ", "")),
        _hex("E13AA1000100 40BCB21EF30B0D0E 0F10111314151617 18191A1B1C00988 99C".replace(" ", "")),
        _hex("F93AA1250720 20024CC7D31E4900 00000000000000000000000000 F985B115"),
        _hex("F93AA1250720 20024CC7D31E4900 00000000000000000000000000 F985B115"),
        _hex("E13AAB000100 4030F90C371D1E1F 2021222425262728292A2B2C2D 17F593CA"),
        _hex("210000000000 0000000000000000 00000000000000000000000000 0000202F"),
    )),
)

_MODES = {"free": _FA_BLOCKS, "conditional": _BBC_BLOCKS}


def _checksummed(payload: bytes) -> bytes:
    return payload + bytes([(-sum(payload)) & 0xFF])


class VideocryptS:
    """Videocrypt S encoder state: builds the VBI packets for each frame."""

    def __init__(self, mode: str) -> None:
        if mode not in _MODES:
            raise ValueError(f"Unrecognised Videocrypt S mode '{mode}'")
        self.blocks = _MODES[mode]
        self.block_num = 0
        self.counter = 0
        self.message = bytes(32)
        self.vbi = bytes(VCS_VBI_BYTES_PER_LINE * VCS_VBI_LINES_PER_FRAME)

    def start_frame(self) -> None:
        """Generate the VBI data for a new frame and advance the counters."""
        counter = self.counter
        block = self.blocks[self.block_num]
        index = (counter >> 2) & 7

        if counter & 3 == 0:
            # The active message is updated every 4th frame
            self.message = _checksummed(block.message(index))

        header = SEQUENCE[index]
        if counter & 2 == 0:
            self.vbi = encode_vbi(self.message[:16], header, counter)
        else:
            info = block.channel if counter & 0x08 else block.mode
            self.vbi = encode_vbi(self.message[16:], swap_nibbles(header), info)

        self.counter = (counter + 1) & 0xFF

        # After 32 frames, move on to the next block
        if self.counter & 0x1F == 0:
            self.block_num = (self.block_num + 1) % len(self.blocks)

    def vbi_line(self, line: int) -> bytes | None:
        """Return the 5 VBI bytes to render on ``line``, or None."""
        for start, base in (
            (VCS_VBI_FIELD_1_START, 0),
            (VCS_VBI_FIELD_2_START, VCS_VBI_LINES_PER_FIELD),
        ):
            if start <= line < start + VCS_VBI_LINES_PER_FIELD:
                index = (line - start + base) * VCS_VBI_BYTES_PER_LINE
                return self.vbi[index:index + VCS_VBI_BYTES_PER_LINE]
        return None