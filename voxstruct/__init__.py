"""
# Voxstruct, voxel data elements.

A volume stores its voxels as a flat sequence of fixed width numeric values
(uint8 ... uint64, int8 ... int64, float32, float64) in a byte order that is
not necessarily the one of the host, plus a (slope, intercept) couple to
map the stored values to physical units.

Two operations are defined for every element type:

 1. decoding: from_raw() reads a single value from a byte source,
    from_raw_vec() turns a whole buffer into a numpy array, without copying
    when the layout on disk is already the one of the host.

 2. rescaling: linear_transform() and friends compute value * slope + intercept
    with a precision adequate to the type (float32 for narrow integers,
    float64 for 64 bit integers, the type itself for floats). A slope of zero
    means "leave the values alone".

Parsing headers and reading files is left to the caller.
"""
from .core import read_samples, read_samples_from
from .elements import (
    DataElement,
    U8, I8, U16, I16, U32, I32, U64, I64, F32, F64,
    get_element,
    reinterpret,
)
from .enum import ElementType
from .exceptions import (
    VoxstructException,
    TruncatedBufferException,
    ReadException,
    ReinterpretException,
    UnsupportedElementException,
)
from .meta import Endianess
from .streams import Stream
from .transforms import (
    LinearTransform,
    LinearTransformViaF32,
    LinearTransformViaF64,
    LinearTransformViaOriginal,
    Rescale,
    saturating_cast,
)
