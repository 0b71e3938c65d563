"""
Linear (affine) transformations of voxel values.

The header of a volume carries a slope and an intercept (both 32 bit floats)
used to map the stored values to physical units

    value' = value * slope + intercept

Multiple implementations are needed because the element type may not have
enough precision to obtain an appropriate outcome: transforming a uint8 is
always done through float32, a int64 through float64, while a float64 is
manipulated through its own type by first converting slope and intercept.

A slope of exactly zero means "no rescaling" and the value is returned
untouched, bit for bit.

Going back from the working precision to an integer element saturates: NaN
becomes zero, the value is truncated toward zero and then clamped to the
range of the type (see saturating_cast()).
"""
import logging

import numpy as np


logger = logging.getLogger(__name__)


def saturating_cast(values, dtype) -> np.ndarray:
    '''Convert floating point values to "dtype".

    For integer types NaN maps to zero, everything else is truncated toward
    zero and clamped to [min, max]. Floating types follow IEEE rounding and
    overflow to infinity.
    '''
    dtype = np.dtype(dtype)
    values = np.asarray(values)

    if dtype.kind == 'f':
        with np.errstate(over='ignore', invalid='ignore'):
            return values.astype(dtype)

    info = np.iinfo(dtype)
    # both bounds are powers of two (or zero) so they are exact in float64
    lower = float(info.min)
    upper = 2.0 ** (info.bits if info.min == 0 else info.bits - 1)

    truncated = np.trunc(values.astype(np.float64))
    result = np.zeros(truncated.shape, dtype=dtype)

    with np.errstate(invalid='ignore'):
        above = truncated >= upper
        below = truncated < lower
    in_range = ~(above | below | np.isnan(truncated))

    result[in_range] = truncated[in_range].astype(dtype)
    result[above] = info.max
    result[below] = info.min

    return result


class LinearTransform(object):
    """Interface for linear (affine) transformations of the values of a given dtype.

    Subclasses implement _apply() over arrays; every other operation is
    defined in terms of it so that the scalar and the bulk versions
    can't disagree.
    """

    def __init__(self, dtype):
        self.dtype = np.dtype(dtype)
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.dtype})>'

    def _apply(self, values: np.ndarray, slope: np.float32, intercept: np.float32) -> np.ndarray:
        raise NotImplementedError(f"method {self.__class__.__name__}._apply() not implemented")

    def linear_transform(self, value, slope, intercept):
        '''Linearly transform a value with the given slope and intercept.'''
        value = self.dtype.type(value)
        slope = np.float32(slope)
        if slope == 0:
            return value

        return self._apply(np.array([value], dtype=self.dtype), slope, np.float32(intercept))[0]

    def linear_transform_many(self, values, slope, intercept) -> np.ndarray:
        '''Linearly transform a sequence of values into a new array; "values" is left untouched.'''
        values = np.asarray(values, dtype=self.dtype)
        slope = np.float32(slope)
        if slope == 0:
            return values.copy()

        self.logger.debug('transforming %d values with slope=%r intercept=%r' % (values.size, slope, intercept))

        return self._apply(values, slope, np.float32(intercept))

    def linear_transform_many_inline(self, values, slope, intercept) -> None:
        '''Linearly transform a sequence of values inline.

        "values" is a writable numpy array of this dtype or a mutable sequence.'''
        slope = np.float32(slope)
        if slope == 0:
            return

        intercept = np.float32(intercept)

        if isinstance(values, np.ndarray):
            if values.dtype != self.dtype:
                raise TypeError(f'cannot transform inline an array of {values.dtype} as {self.dtype}')
            values[...] = self._apply(values, slope, intercept)
            return

        values[:] = list(self._apply(np.asarray(values, dtype=self.dtype), slope, intercept))


class LinearTransformViaF32(LinearTransform):
    """A linear transformation in which the value is converted to float32 for the
    affine transformation, then converted back to the original type. Ideal for
    small, low precision types such as uint8 and int16.
    """

    def _apply(self, values, slope, intercept):
        with np.errstate(over='ignore', invalid='ignore'):
            result = values.astype(np.float32) * slope + intercept

        return saturating_cast(result, self.dtype)


class LinearTransformViaF64(LinearTransform):
    """A linear transformation in which the value and parameters are converted to
    float64 for the affine transformation, then converted to the original type.
    Ideal for wide integer types such as int64: float32 has a 24 bit mantissa,
    float64 keeps every value below 2**53 exact.
    """

    def _apply(self, values, slope, intercept):
        slope = np.float64(slope)
        intercept = np.float64(intercept)
        with np.errstate(over='ignore', invalid='ignore'):
            result = values.astype(np.float64) * slope + intercept

        return saturating_cast(result, self.dtype)


class LinearTransformViaOriginal(LinearTransform):
    """A linear transformation in which the slope and intercept parameters are
    converted to the value's type for the affine transformation. Ideal
    for high precision types.
    """

    def _apply(self, values, slope, intercept):
        slope = self.dtype.type(slope)
        intercept = self.dtype.type(intercept)
        with np.errstate(over='ignore', invalid='ignore'):
            return values * slope + intercept


class Rescale(object):
    '''The (slope, intercept) couple of a volume, both stored as float32.'''

    def __init__(self, slope=0., intercept=0.):
        self.slope = np.float32(slope)
        self.intercept = np.float32(intercept)

    def __repr__(self):
        return f'<{self.__class__.__name__}(slope={self.slope!r}, intercept={self.intercept!r})>'

    @property
    def is_identity(self) -> bool:
        return self.slope == 0

    def apply(self, element, values) -> np.ndarray:
        return element.linear_transform_many(values, self.slope, self.intercept)

    def apply_inline(self, element, values) -> None:
        element.linear_transform_many_inline(values, self.slope, self.intercept)
