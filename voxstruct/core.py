"""
Core module gluing decoding and rescaling of voxel data.

The element type is resolved once, at the boundary, and the resulting
DataElement subclass does the rest of the work.
"""
import logging

import numpy as np

from .elements import get_element
from .meta import Endianess
from .streams import Stream
from .transforms import Rescale


logger = logging.getLogger(__name__)


def read_samples(buffer, element_type, endianess=Endianess.NATIVE, slope=0., intercept=0.) -> np.ndarray:
    '''Decode "buffer" as values of "element_type" and rescale them.

    A zero slope leaves the values as they are; the result never shares
    memory with the buffer when a rescaling happens.'''
    element = get_element(element_type)
    rescale = Rescale(slope, intercept)

    logger.debug('reading %s samples with %r' % (element.__name__, rescale))

    samples = element.from_raw_vec(buffer, endianess)
    if rescale.is_identity:
        return samples

    return rescale.apply(element, samples)


def read_samples_from(src, element_type, n, endianess=Endianess.NATIVE, slope=0., intercept=0.) -> np.ndarray:
    '''Like read_samples() but reading exactly "n" values from a byte source.'''
    element = get_element(element_type)

    if isinstance(src, Stream):
        raw = src.read_exact(n * element.width)
    else:
        with Stream(src) as stream:
            raw = stream.read_exact(n * element.width)

    return read_samples(raw, element, endianess=endianess, slope=slope, intercept=intercept)
