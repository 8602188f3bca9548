import pytest

from tvscramble.vbicode import (
    encode_vbi,
    interleave,
    reverse_bits,
    reverse_byte,
    swap_nibbles,
)


def _popcount(data):
    return sum(bin(b).count("1") for b in data)


def test_reverse_byte_is_involution():
    assert all(reverse_byte(reverse_byte(b)) == b for b in range(256))


def test_reverse_byte_preserves_bit_count():
    assert all(bin(reverse_byte(b)).count("1") == bin(b).count("1") for b in range(256))


def test_reverse_bits_matches_reverse_byte():
    assert all(reverse_bits(b, 8) == reverse_byte(b) for b in range(256))


@pytest.mark.parametrize("width", [1, 5, 29, 31])
def test_reverse_bits_round_trip(width):
    value = (1 << width) - 3 if width > 2 else 1
    assert reverse_bits(reverse_bits(value, width), width) == value & ((1 << width) - 1)


def test_swap_nibbles_source_sequence():
    assert swap_nibbles(0x87) == 0x78


def test_swap_nibbles_is_involution():
    assert all(swap_nibbles(swap_nibbles(b)) == b for b in range(256))


def test_interleave_zero_frame():
    assert interleave(bytes(40)) == bytes(40)


def test_interleave_preserves_bit_count():
    frame = bytes((i * 37 + 11) & 0xFF for i in range(40))
    out = interleave(frame)
    assert len(out) == 40
    assert _popcount(out) == _popcount(frame)


def test_interleave_rejects_wrong_length():
    with pytest.raises(ValueError):
        interleave(bytes(39))


def test_encode_vbi_zero_payload_bit_count():
    # All bytes are zero, so every nibble codes to HAMMING[0] (three bits set)
    out = encode_vbi(bytes(16), 0, 0)
    assert len(out) == 40
    assert _popcount(out) == 40 * 3


def test_encode_vbi_depends_on_headers():
    base = encode_vbi(bytes(16), 0x87, 0)
    assert encode_vbi(bytes(16), 0x96, 0) != base
    assert encode_vbi(bytes(16), 0x87, 1) != base
    assert encode_vbi(bytes(16), 0x87, 0) == base


def test_encode_vbi_rejects_wrong_length():
    with pytest.raises(ValueError):
        encode_vbi(bytes(15), 0, 0)