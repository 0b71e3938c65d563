import io
import logging
import struct

from .exceptions import ReadException
from .meta import Endianess


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/path/file objects to
    uniform its properties: mainly we need a read_exact() that never
    returns less than what was asked.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self._owned = False
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __getattr__(self, name):
        if name == 'obj':
            raise AttributeError(name)
        return getattr(self.obj, name)

    def __del__(self):
        self.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, 'rb')
        self._owned = True

    init_PosixPath = init_str
    init_WindowsPath = init_str

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    init_bytearray = init_bytes
    init_memoryview = init_bytes

    def init_file(self):
        if not hasattr(self.obj, 'read'):
            raise ValueError('\'%s\' is the wrong kind of object to use as a stream' % self._type.__name__)

    def close(self):
        '''Close the underlying object only if we opened it.'''
        if getattr(self, '_owned', False):
            self.obj.close()
            self._owned = False

    def read_exact(self, n: int) -> bytes:
        '''Read exactly "n" bytes, calling read() as many times as needed.

        Unbuffered files, pipes and sockets can return less than asked without
        being at the end; only an empty read means the source is exhausted.'''
        chunks = []
        got = 0

        while got < n:
            try:
                data = self.obj.read(n - got)
            except OSError as e:
                logger.debug('reading %d bytes failed: %s' % (n, e))
                raise ReadException(chain=[], msg=f'reading {n} bytes failed: {e}') from e

            # None comes from a non-blocking source with nothing available
            if not data:
                logger.debug('stream exhausted: wanted %d bytes, got %d' % (n, got))
                raise ReadException(chain=[], msg=f'stream exhausted: wanted {n} bytes, got {got}')

            chunks.append(bytes(data))
            got += len(data)

        return b''.join(chunks)

    def read_primitive(self, format: str, endianess: Endianess = Endianess.NATIVE):
        '''Read a single struct primitive (e.g. 'H', 'q', 'Q') in the given byte order.'''
        fmt = '%s%s' % (endianess.prefix, format)
        raw = self.read_exact(struct.calcsize(fmt))

        return struct.unpack(fmt, raw)[0]
