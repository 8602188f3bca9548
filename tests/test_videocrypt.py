import pytest

from tvscramble.vbicode import encode_vbi
from tvscramble.videocrypt import (
    VC_LEFT,
    VC_PRBS_CW_FA,
    VC_PRBS_CW_MASK,
    VC_WIDTH,
    Videocrypt,
    generate_iw,
)


def _frame_vbi(vc, lines):
    return b"".join(vc.vbi_line(line) for line in lines)


VC1_LINES = [12, 13, 14, 15, 325, 326, 327, 328]
VC2_LINES = [8, 9, 10, 11, 321, 322, 323, 324]


@pytest.mark.parametrize("fcnt", [0, 1, 0x55, 0xFF])
def test_generate_iw_xor_with_codeword(fcnt):
    cw = 0xB2DD55A7BCE178E
    assert generate_iw(cw, fcnt) ^ generate_iw(0, fcnt) == cw & VC_PRBS_CW_MASK
    assert generate_iw(cw, fcnt) < 1 << 60


def test_invalid_modes():
    with pytest.raises(ValueError):
        Videocrypt(896, 4.7e-6, "bogus", None)
    with pytest.raises(ValueError):
        Videocrypt(896, 4.7e-6, None, "conditional")


def test_video_scale_identity_at_native_rate():
    vc = Videocrypt(VC_WIDTH, 0.0, "free", None)
    assert vc.video_scale == list(range(VC_WIDTH))


def test_video_scale_monotonic():
    vc = Videocrypt(1280, 4.7e-6, "free", None)
    assert len(vc.video_scale) == VC_WIDTH
    assert all(a <= b for a, b in zip(vc.video_scale, vc.video_scale[1:]))


def test_counter_wraps():
    vc = Videocrypt(VC_WIDTH, 0.0, "free", None)
    for _ in range(256):
        vc.start_frame()
    assert vc.counter == 0


def test_no_vbi_without_modes():
    vc = Videocrypt(VC_WIDTH, 0.0, None, None)
    vc.start_frame()
    assert all(vc.vbi_line(line) is None for line in range(1, 626))


def test_free_first_half_vbi():
    vc = Videocrypt(VC_WIDTH, 0.0, "free", None)
    vc.start_frame()
    assert _frame_vbi(vc, VC1_LINES) == encode_vbi(bytes(16), 0x87, 0)
    assert vc.vbi_line(16) is None
    assert vc.vbi_line(8) is None


def test_free_second_half_vbi():
    vc = Videocrypt(VC_WIDTH, 0.0, "free", None)
    for _ in range(5):
        vc.start_frame()
    assert _frame_vbi(vc, VC1_LINES) == encode_vbi(bytes(16), 0x78, 0x05)


def test_vc2_free_vbi_lines():
    vc = Videocrypt(VC_WIDTH, 0.0, None, "free")
    vc.start_frame()
    assert _frame_vbi(vc, VC2_LINES) == encode_vbi(bytes(16), 0x80, 0)
    assert vc.vbi_line(12) is None


def test_conditional_message_checksum():
    vc = Videocrypt(VC_WIDTH, 0.0, "conditional", None)
    for _ in range(64):
        vc.start_frame()
        assert len(vc.message) == 32
        assert sum(vc.message) % 256 == 0


def test_conditional_codeword_applied_after_64_frames():
    vc = Videocrypt(VC_WIDTH, 0.0, "conditional", None)
    for _ in range(63):
        vc.start_frame()
    assert vc.cw == VC_PRBS_CW_FA
    vc.start_frame()
    assert vc.cw == 0xB2DD55A7BCE178E
    assert vc.block == 1


def test_free_codeword_stays():
    vc = Videocrypt(VC_WIDTH, 0.0, "free", "free")
    for _ in range(128):
        vc.start_frame()
    assert vc.cw == VC_PRBS_CW_FA


def test_scramble_cut_ranges():
    vc = Videocrypt(VC_WIDTH, 0.0, "free", None)
    vc.start_frame()
    assert vc.scramble_cut(22) is None
    assert vc.scramble_cut(23) is None
    cuts = [vc.scramble_cut(line) for line in range(24, 310)]
    assert all(105 <= cut <= 615 and cut % 2 == 1 for cut in cuts)
    assert vc.scramble_cut(310) is None


def test_scramble_deterministic():
    a = Videocrypt(VC_WIDTH, 0.0, "free", None)
    b = Videocrypt(VC_WIDTH, 0.0, "free", None)
    a.start_frame()
    b.start_frame()
    seq_a = [a.scramble_cut(line) for line in range(23, 310)]
    seq_b = [b.scramble_cut(line) for line in range(23, 310)]
    assert seq_a == seq_b
    assert len(set(seq_a[2:])) > 1


def test_rotate_line():
    vc = Videocrypt(VC_WIDTH, 0.0, "free", None)
    output = [-1] * VC_WIDTH
    delay = list(range(VC_WIDTH))
    cut = 301
    result = vc.rotate_line(cut, output, delay)
    assert len(result) == VC_WIDTH
    assert result[:VC_LEFT] == output[:VC_LEFT]
    assert result[VC_LEFT] == delay[VC_LEFT + 710 - cut]
    assert result[VC_LEFT + cut] == delay[VC_LEFT]
    assert result[VC_LEFT + 710 + 15:] == output[VC_LEFT + 710 + 15:]
    assert output == [-1] * VC_WIDTH