import logging
import sys
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()
    NETWORK       = auto()
    NATIVE        = auto()

    @classmethod
    def host(cls) -> "Endianess":
        return cls.LITTLE_ENDIAN if sys.byteorder == 'little' else cls.BIG_ENDIAN

    def resolve(self) -> "Endianess":
        '''Reduce the aliases to one of LITTLE_ENDIAN or BIG_ENDIAN.'''
        if self is Endianess.NETWORK:
            return Endianess.BIG_ENDIAN
        if self is Endianess.NATIVE:
            return Endianess.host()

        return self

    @property
    def is_host(self) -> bool:
        return self.resolve() is Endianess.host()

    @property
    def prefix(self) -> str:
        '''The byte order character shared by struct formats and numpy dtypes.'''
        return '<' if self.resolve() is Endianess.LITTLE_ENDIAN else '>'


class Meta(object):
    """Class containing metadata about the registered elements"""

    def __init__(self):
        self.elements = {}


class MetaElement(type):
    '''Registers every concrete data element and binds its rescale strategy
    to its dtype once, at class creation.

    A class is concrete when it defines "element_type".'''

    _meta = Meta()

    def __new__(cls, names, bases, attrs):
        new_cls = super(MetaElement, cls).__new__(cls, names, bases, attrs)

        cls.logger = logging.getLogger(__name__)

        element_type = attrs.get('element_type')
        if element_type is None:
            return new_cls

        if element_type in cls._meta.elements:
            raise AttributeError(f'element {element_type} is already registered by {cls._meta.elements[element_type].__name__}')

        new_cls.width = new_cls.dtype.itemsize
        new_cls.transform = new_cls.Transform(new_cls.dtype)
        cls._meta.elements[element_type] = new_cls
        cls.logger.debug('registered element \'%s\' with transform %s' % (names, new_cls.Transform.__name__))

        return new_cls

    @classmethod
    def registry(cls):
        return dict(cls._meta.elements)
