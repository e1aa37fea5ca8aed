import numpy as np
import pytest

from kannolo.codecs import PQDecoder8, PQEncoder8, PQEncoder16, PQEncoderGeneric


def _read_bits(buffer, nbits, count):
    stream = int.from_bytes(bytes(buffer), "little")
    mask = (1 << nbits) - 1
    return [(stream >> (nbits * i)) & mask for i in range(count)]


def test_encoder8_decoder8_round_trip():
    values = [0, 1, 17, 200, 255, 42]
    buffer = bytearray(len(values))
    encoder = PQEncoder8(buffer)
    for v in values:
        encoder.encode(v)
    decoder = PQDecoder8(buffer)
    assert [decoder.decode() for _ in values] == values


def test_encoder8_keeps_low_byte():
    buffer = bytearray(1)
    PQEncoder8(buffer).encode(256 + 5)
    assert buffer[0] == 5


def test_encoder8_overflow_raises():
    buffer = bytearray(2)
    encoder = PQEncoder8(buffer)
    encoder.encode(1)
    encoder.encode(2)
    with pytest.raises(IndexError):
        encoder.encode(3)


def test_encoder8_writes_into_numpy_array():
    codes = np.zeros(3, dtype=np.uint8)
    encoder = PQEncoder8(codes)
    for v in (7, 8, 9):
        encoder.encode(v)
    assert codes.tolist() == [7, 8, 9]


def test_decoder8_exhausted_raises():
    decoder = PQDecoder8(bytes([3]))
    assert decoder.decode() == 3
    with pytest.raises(IndexError):
        decoder.decode()


def test_generic_with_8_bits_matches_encoder8():
    values = [9, 250, 0, 77]
    a = bytearray(4)
    b = bytearray(4)
    generic = PQEncoderGeneric(a, 8)
    plain = PQEncoder8(b)
    for v in values:
        generic.encode(v)
        plain.encode(v)
    assert a == b
    assert generic.position == 4


def test_generic_4_bits_packs_low_nibble_first():
    buffer = bytearray(2)
    encoder = PQEncoderGeneric(buffer, 4)
    for v in (1, 2, 3, 4):
        encoder.encode(v)
    assert buffer[0] & 0xF == 1
    assert buffer[0] >> 4 == 2
    assert _read_bits(buffer, 4, 4) == [1, 2, 3, 4]


@pytest.mark.parametrize("nbits", [2, 4, 6, 12, 16, 24])
def test_generic_round_trip(nbits):
    count = 8
    values = [(37 * i + 5) % (1 << nbits) for i in range(count)]
    buffer = bytearray(nbits * count // 8)
    encoder = PQEncoderGeneric(buffer, nbits)
    for v in values:
        encoder.encode(v)
    assert _read_bits(buffer, nbits, count) == values


def test_generic_drops_bytes_beyond_buffer():
    buffer = bytearray(1)
    encoder = PQEncoderGeneric(buffer, 8)
    encoder.encode(11)
    encoder.encode(12)
    assert buffer[0] == 11
    assert encoder.position == 1


def test_generic_16_bits_matches_encoder16():
    values = [0x1234, 0xFFFF, 1]
    a = bytearray(6)
    b = bytearray(6)
    generic = PQEncoderGeneric(a, 16)
    wide = PQEncoder16(b)
    for v in values:
        generic.encode(v)
        wide.encode(v)
    assert a == b


def test_generic_rejects_more_than_64_bits():
    with pytest.raises(ValueError):
        PQEncoderGeneric(bytearray(16), 65)


def test_encoder16_round_trip_and_overflow():
    values = [513, 65535, 0]
    buffer = bytearray(6)
    encoder = PQEncoder16(buffer)
    for v in values:
        encoder.encode(v)
    decoded = [int.from_bytes(buffer[2 * i : 2 * i + 2], "little") for i in range(3)]
    assert decoded == values
    with pytest.raises(IndexError):
        encoder.encode(1)


def test_encoder_rejects_read_only_buffer():
    with pytest.raises(TypeError):
        PQEncoder8(bytes(4))