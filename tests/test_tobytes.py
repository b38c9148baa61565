import pytest

from lang4.tobytes import bytes_to_int, int_to_bytes


def test_length_prefix_is_big_endian():
    assert int_to_bytes(1, 8) == b"\x00" * 7 + b"\x01"


def test_negative_value_uses_twos_complement():
    assert int_to_bytes(-1, 2) == b"\xff\xff"


def test_signed_decode_of_all_ones():
    assert bytes_to_int(b"\xff\xff\xff\xff", signed=True) == -1


@pytest.mark.parametrize(
    "value, width, signed",
    [
        (0, 1, False),
        (255, 1, False),
        (-128, 1, True),
        (127, 1, True),
        (65535, 2, False),
        (-32768, 2, True),
        (2**31 - 1, 4, True),
        (-(2**31), 4, True),
        (2**32 - 1, 4, False),
        (2**63 - 1, 8, True),
        (-(2**63), 8, True),
        (2**64 - 1, 8, False),
        (300, 8, False),
        (123456789, 8, False),
    ],
)
def test_round_trip(value, width, signed):
    encoded = int_to_bytes(value, width)
    assert len(encoded) == width
    assert bytes_to_int(encoded, signed) == value


def test_wrapping_discards_high_bits():
    assert int_to_bytes(2**32 + 5, 4) == int_to_bytes(5, 4)


def test_unsigned_reading_of_negative_encoding():
    assert bytes_to_int(int_to_bytes(-1, 4)) == 2**32 - 1


def test_byte_order_is_most_significant_first():
    encoded = int_to_bytes(258, 2)
    assert encoded[0] < encoded[1]
    assert bytes_to_int(encoded[:1]) * 256 + bytes_to_int(encoded[1:]) == 258


def test_zero_width_rejected():
    with pytest.raises(ValueError):
        int_to_bytes(1, 0)


def test_empty_data_rejected():
    with pytest.raises(ValueError):
        bytes_to_int(b"")