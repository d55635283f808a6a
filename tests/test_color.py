from tgxforge.codec.color import TRANSPARENT, encode_color, decode_color


def test_encode_packs_top_five_bits():
    assert encode_color(8, 16, 24) == 0x8000 | (1 << 10) | (2 << 5) | 3
    assert encode_color(8, 16, 24, opaque=False) == (1 << 10) | (2 << 5) | 3
    assert encode_color(7, 7, 7) == 0x8000


def test_opaque_white_is_not_the_sentinel():
    assert encode_color(255, 255, 255) == 0xFFFF
    assert encode_color(255, 255, 255) != TRANSPARENT


def test_decode_smoothing():
    assert decode_color(0xFFFF) == (255, 255, 255, 255)
    assert decode_color(0xFFFF, smooth=False) == (248, 248, 248, 255)
    assert decode_color(0x7C00) == (255, 0, 0, 0)
    assert decode_color(0x8000 | (16 << 5)) == (0, 132, 0, 255)


def test_channels_survive_within_quantization():
    for r, g, b in [(0, 0, 0), (255, 128, 1), (17, 200, 99), (250, 3, 64)]:
        dr, dg, db, da = decode_color(encode_color(r, g, b))
        assert abs(dr - r) <= 7
        assert abs(dg - g) <= 7
        assert abs(db - b) <= 7
        assert da == 255
