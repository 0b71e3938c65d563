"""
# Data elements

A data element is the primitive numeric type used to represent a voxel value:
unsigned/signed integers of 8, 16, 32 and 64 bits and IEEE floats of 32 and 64 bits.

Each element knows

 1. how to read a single value from a byte source in a given byte order: from_raw()
 2. how to turn a whole buffer into an array of values: from_raw_vec()
 3. how to rescale its values with a slope and an intercept: linear_transform*()

The last one is delegated to the LinearTransform subclass indicated by the
"Transform" attribute, bound to the dtype once when the class is created.

Decoding a buffer reinterprets it in place (no copy) when the bytes on disk are
already laid out as the host wants them, i.e. for one byte elements or when the
byte order is the host's; otherwise the values are byte swapped into a new array.
"""
import logging

import numpy as np

from .enum import ElementType
from .exceptions import (
    ReadException,
    ReinterpretException,
    TruncatedBufferException,
    UnsupportedElementException,
)
from .meta import Endianess, MetaElement
from .streams import Stream
from .transforms import (
    LinearTransformViaF32,
    LinearTransformViaF64,
    LinearTransformViaOriginal,
)


logger = logging.getLogger(__name__)


def _byte_view(buffer) -> memoryview:
    view = memoryview(buffer)
    if not view.c_contiguous:
        raise ReinterpretException(chain=[], msg='the buffer is not contiguous')

    return view.cast('B')


def reinterpret(buffer, dtype) -> np.ndarray:
    '''Read "buffer" as an array of "dtype" without copying it.

    The returned array shares the memory of the buffer (so it's read-only for bytes).
    The length must be a multiple of the item size and the memory must be aligned
    for the type, otherwise ReinterpretException is raised.'''
    dtype = np.dtype(dtype)
    view = _byte_view(buffer)

    if view.nbytes % dtype.itemsize:
        raise ReinterpretException(
            chain=[], msg=f'{view.nbytes} bytes cannot be reinterpreted as {dtype} (itemsize {dtype.itemsize})')

    if view.nbytes == 0:
        return np.empty(0, dtype=dtype)

    array = np.frombuffer(view, dtype=dtype)
    if not array.flags.aligned:
        raise ReinterpretException(chain=[], msg=f'buffer is not aligned for {dtype}')

    return array


class DataElement(metaclass=MetaElement):
    """Base class for the voxel data elements, it's not usable by itself.

    The subclasses must define

     - element_type: the ElementType they represent
     - dtype: the numpy dtype (host order) of the values
     - format: the struct format character used to read a value
     - Transform: the LinearTransform subclass used for rescaling
    """
    element_type = None
    dtype = None
    format = None
    Transform = None

    @classmethod
    def _unpack(cls, stream, endianess):
        return cls.dtype.type(stream.read_primitive(cls.format, endianess))

    @classmethod
    def from_raw(cls, src, endianess=Endianess.NATIVE):
        '''Read a single element from the given byte source (bytes, path,
        file-like object or Stream). The source must provide at least "width" bytes.'''
        if not isinstance(src, Stream):
            with Stream(src) as stream:
                return cls.from_raw(stream, endianess)

        try:
            return cls._unpack(src, endianess)
        except ReadException as e:
            e.chain.append(cls.__name__)
            raise

    @classmethod
    def from_raw_stream(cls, src, endianess=Endianess.NATIVE, n=1) -> np.ndarray:
        '''Read "n" consecutive elements one by one.'''
        if not isinstance(src, Stream):
            with Stream(src) as stream:
                return cls.from_raw_stream(stream, endianess, n)

        return np.array([cls.from_raw(src, endianess) for _ in range(n)], dtype=cls.dtype)

    @classmethod
    def _convert(cls, buffer, endianess) -> np.ndarray:
        view = memoryview(buffer)
        if not view.c_contiguous:
            view = memoryview(view.tobytes())

        if view.nbytes == 0:
            return np.empty(0, dtype=cls.dtype)

        swapped = np.frombuffer(view.cast('B'), dtype=cls.dtype.newbyteorder(endianess.prefix))

        return swapped.astype(cls.dtype)

    @classmethod
    def from_raw_vec(cls, buffer, endianess=Endianess.NATIVE) -> np.ndarray:
        '''Transform the given buffer into an array of data elements.'''
        length = memoryview(buffer).nbytes
        if length % cls.width:
            logger.debug('%s: %d bytes are not a multiple of %d' % (cls.__name__, length, cls.width))
            raise TruncatedBufferException([cls.__name__], length, cls.width)

        if cls.width == 1 or endianess.is_host:
            try:
                return reinterpret(buffer, cls.dtype)
            except ReinterpretException as e:
                logger.debug('%s: zero-copy not possible (%s), converting' % (cls.__name__, e))

        logger.debug('%s: converting %d bytes from %s' % (cls.__name__, length, endianess.resolve().name))

        return cls._convert(buffer, endianess)

    @classmethod
    def linear_transform(cls, value, slope, intercept):
        return cls.transform.linear_transform(value, slope, intercept)

    @classmethod
    def linear_transform_many(cls, values, slope, intercept) -> np.ndarray:
        return cls.transform.linear_transform_many(values, slope, intercept)

    @classmethod
    def linear_transform_many_inline(cls, values, slope, intercept) -> None:
        cls.transform.linear_transform_many_inline(values, slope, intercept)


class FloatElement(DataElement):
    '''Floats are read as the unsigned integer of the same width and then
    reinterpreted, so that NaN payloads survive untouched.'''

    @classmethod
    def _unpack(cls, stream, endianess):
        bits = np.array(stream.read_primitive(cls.format, endianess), dtype=cls.raw_type)
        return bits.view(cls.dtype)[()]


class U8(DataElement):
    element_type = ElementType.UINT8
    dtype = np.dtype(np.uint8)
    format = 'B'
    Transform = LinearTransformViaF32


class I8(DataElement):
    element_type = ElementType.INT8
    dtype = np.dtype(np.int8)
    format = 'b'
    Transform = LinearTransformViaF32


class U16(DataElement):
    element_type = ElementType.UINT16
    dtype = np.dtype(np.uint16)
    format = 'H'
    Transform = LinearTransformViaF32


class I16(DataElement):
    element_type = ElementType.INT16
    dtype = np.dtype(np.int16)
    format = 'h'
    Transform = LinearTransformViaF32


class U32(DataElement):
    element_type = ElementType.UINT32
    dtype = np.dtype(np.uint32)
    format = 'I'
    Transform = LinearTransformViaF32


class I32(DataElement):
    element_type = ElementType.INT32
    dtype = np.dtype(np.int32)
    format = 'i'
    Transform = LinearTransformViaF32


class U64(DataElement):
    element_type = ElementType.UINT64
    dtype = np.dtype(np.uint64)
    format = 'Q'
    Transform = LinearTransformViaF64


class I64(DataElement):
    element_type = ElementType.INT64
    dtype = np.dtype(np.int64)
    format = 'q'
    Transform = LinearTransformViaF64


class F32(FloatElement):
    element_type = ElementType.FLOAT32
    dtype = np.dtype(np.float32)
    format = 'I'
    raw_type = np.uint32
    Transform = LinearTransformViaOriginal


class F64(FloatElement):
    element_type = ElementType.FLOAT64
    dtype = np.dtype(np.float64)
    format = 'Q'
    raw_type = np.uint64
    Transform = LinearTransformViaOriginal


SHORT_NAMES = {
    'u8': U8,
    'i8': I8,
    'u16': U16,
    'i16': I16,
    'u32': U32,
    'i32': I32,
    'u64': U64,
    'i64': I64,
    'f32': F32,
    'f64': F64,
}


def get_element(tag):
    '''Resolve an element type tag to its DataElement subclass.

    The tag can be an ElementType, its NIfTI datatype code, one of the
    short names in SHORT_NAMES or anything numpy.dtype() understands.
    Note that short names win: 'u8' is uint8 here while for numpy it is uint64.'''
    registry = MetaElement.registry()

    if isinstance(tag, type) and tag in registry.values():
        return tag

    if isinstance(tag, ElementType):
        return registry[tag]

    # the NIfTI header stores the code as an int16, often read through numpy
    if isinstance(tag, (int, np.integer)) and not isinstance(tag, (bool, np.bool_)):
        tag = int(tag)
        try:
            return registry[ElementType(tag)]
        except ValueError:
            raise UnsupportedElementException(chain=[], msg=f'datatype code {tag} is not supported') from None

    if isinstance(tag, str) and tag in SHORT_NAMES:
        return SHORT_NAMES[tag]

    if tag is None:
        raise UnsupportedElementException(chain=[], msg='no element type given')

    try:
        dtype = np.dtype(tag).newbyteorder('=')
    except (TypeError, ValueError):
        raise UnsupportedElementException(chain=[], msg=f'{tag!r} is not an element type') from None

    for element in registry.values():
        if element.dtype == dtype:
            return element

    raise UnsupportedElementException(chain=[], msg=f'dtype {dtype} is not supported')
