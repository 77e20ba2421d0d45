import logging
import os

from .exceptions import StructuralFailure


logger = logging.getLogger(__name__)


class Buffer(object):
    '''This is a simple wrapper around bytes/file path to uniform their
    access: the decoding only takes (bounds checked) views into the data,
    it never copies nor mutates it.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a read-only memoryview'''
        if isinstance(obj, os.PathLike):
            obj = os.fspath(obj)

        self.obj = obj
        self.path = None

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of data to decode' % obj.__class__.__name__)

        self.view = init_method()

    def __len__(self):
        return len(self.view)

    def __repr__(self):
        source = self.path if self.path else '%d bytes' % len(self)
        return '<%s(%s)>' % (self.__class__.__name__, source)

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.path = self.obj
        with open(self.obj, 'rb') as f:
            return memoryview(f.read()).toreadonly()

    def init_bytes(self):
        '''We think these are raw bytes'''
        return memoryview(self.obj)

    def init_bytearray(self):
        return memoryview(self.obj).toreadonly()

    def init_memoryview(self):
        return self.obj.cast('B').toreadonly()

    def init_Buffer(self):
        self.path = self.obj.path
        return self.obj.view

    def check(self, offset: int, length: int = 0):
        '''The schema trusts the declared sizes so here is the place where
        we check that we are not going outside the data.'''
        if offset < 0 or length < 0 or offset + length > len(self.view):
            raise StructuralFailure(
                f'reading {length} bytes at offset 0x{offset:x} is outside the buffer of 0x{len(self.view):x} bytes')

    def read(self, offset: int, length: int) -> memoryview:
        '''Return the view of "length" bytes starting at "offset".'''
        self.check(offset, length)

        return self.view[offset:offset + length]
