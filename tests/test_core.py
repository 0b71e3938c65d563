import io

import numpy as np
import pytest

from voxstruct import (
    ElementType,
    Endianess,
    ReadException,
    TruncatedBufferException,
    UnsupportedElementException,
    read_samples,
    read_samples_from,
)


def test_read_samples():
    buffer = bytes([0x01, 0x00])

    assert read_samples(buffer, 'u16', Endianess.LITTLE_ENDIAN).tolist() == [1]
    assert read_samples(buffer, 'u16', Endianess.BIG_ENDIAN).tolist() == [256]

    rescaled = read_samples(buffer, ElementType.UINT16, Endianess.LITTLE_ENDIAN, slope=2., intercept=1.)
    assert rescaled.tolist() == [3]
    assert rescaled.dtype == np.dtype(np.uint16)


def test_read_samples_without_rescale_is_zero_copy():
    buffer = bytearray(b'\x00\x00\x80\x3f' * 4)

    samples = read_samples(buffer, 16, Endianess.LITTLE_ENDIAN, slope=0., intercept=100.)

    assert samples.tolist() == [1.] * 4
    if Endianess.LITTLE_ENDIAN.is_host:
        assert np.shares_memory(samples, np.frombuffer(buffer, dtype=np.uint8))


def test_read_samples_rescaled_is_a_new_array():
    buffer = bytearray(np.array([1., 2.], dtype='<f8').tobytes())

    samples = read_samples(buffer, 'float64', Endianess.LITTLE_ENDIAN, slope=0.5, intercept=-1.)

    assert samples.tolist() == [-0.5, 0.]
    assert not np.shares_memory(samples, np.frombuffer(buffer, dtype=np.uint8))


def test_read_samples_errors():
    with pytest.raises(TruncatedBufferException):
        read_samples(b'\x00' * 5, 'i32', Endianess.BIG_ENDIAN)

    with pytest.raises(UnsupportedElementException):
        read_samples(b'\x00' * 8, 'complex64')


def test_read_samples_from():
    stream = io.BytesIO(np.array([10, -20, 30], dtype='>i2').tobytes() + b'trailing')

    samples = read_samples_from(stream, 'i16', 3, Endianess.BIG_ENDIAN, slope=-1., intercept=0.)

    assert samples.tolist() == [-10, 20, -30]
    assert stream.read() == b'trailing'

    with pytest.raises(ReadException):
        read_samples_from(io.BytesIO(b'\x00' * 7), 'u64', 1, Endianess.LITTLE_ENDIAN)


def test_read_samples_from_partial_reads(tmp_path):
    class Trickle(io.RawIOBase):
        def __init__(self, data):
            self.data = data
            self.offset = 0

        def readable(self):
            return True

        def readinto(self, b):
            chunk = self.data[self.offset:self.offset + 1]
            b[:len(chunk)] = chunk
            self.offset += len(chunk)
            return len(chunk)

    samples = read_samples_from(Trickle(b'\x01\x00\x02\x00'), np.int16(512), 2, Endianess.LITTLE_ENDIAN)

    assert samples.dtype == np.dtype(np.uint16)
    assert samples.tolist() == [1, 2]

    path = tmp_path / 'voxels'
    path.write_bytes(b'\x00\x03')
    assert read_samples_from(path, 'u16', 1, Endianess.BIG_ENDIAN).tolist() == [3]
