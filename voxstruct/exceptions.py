class VoxstructException(Exception):
    '''Base class to extend in order to throw exception in voxstruct.

    It takes a single argument that represents the chain of the layer that
    caused the exception (for example the element type name and the operation).
    '''

    def __init__(self, chain, msg=None):
        self.chain = chain
        args = () if msg is None else (msg,)
        super().__init__(*args)


class TruncatedBufferException(VoxstructException):
    '''The length of the buffer is not a multiple of the element width.'''

    def __init__(self, chain, length, width):
        self.length = length
        self.width = width
        super().__init__(chain, f'buffer of {length} bytes is not a multiple of {width} bytes')


class ReadException(VoxstructException):
    '''The byte source ended before a whole element was read or failed
    with an I/O error (chained as __cause__).'''
    pass


class ReinterpretException(VoxstructException):
    '''A zero-copy reinterpretation was requested on a buffer that doesn't
    satisfy the size or alignment of the element type.'''
    pass


class UnsupportedElementException(VoxstructException, ValueError):
    '''This is useful when is not possible to let an unknown element type
    slip through the decoding.'''
    pass
