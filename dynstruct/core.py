"""
Core module: the entry point of the decoding.

This is the only place where the failures of the decoding are caught: the
tree built up to that moment is kept, with the slot that failed (and the ones
that were never reached) left as placeholders, so that who consumes the result
can show a best-effort view of a truncated or malformed input.
"""
import logging
from typing import Dict, Optional, Tuple

from .exceptions import DynstructException
from .expression import Path
from .fields import Field
from .instances import Instance, Placeholder, Slot
from .streams import Buffer


logger = logging.getLogger(__name__)


class Decoding(object):
    '''Result of decoding a buffer with a given format.

    The caller owns the whole tree through "root"; "error" is the failure
    that stopped the decoding, if any.'''

    def __init__(self, type: Field, buffer: Buffer, slot: Slot, error: Optional[DynstructException] = None):
        self.type = type
        self.buffer = buffer
        self._slot = slot
        self.error = error

    def __repr__(self):
        status = 'ok' if self.ok else f'failed: {self.error}'
        return '<%s(%r, %s)>' % (self.__class__.__name__, self.root, status)

    def __str__(self):
        msg = ''
        for path, name, inst in self.root.walk():
            depth = path.count('.') + path.count('[')
            label = name if name is not None else path[path.rfind('['):] if depth else path
            msg += '%08x %6x %s%s: %s\n' % (inst.offset, inst.length, '  ' * depth, label, inst.render())

        return msg

    @property
    def root(self) -> Instance:
        return self._slot.inst

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self):
        if self.error is not None:
            raise self.error

    def lookup(self, expression: str) -> Instance:
        '''Evaluate a path expression against the decoded tree.'''
        return Path(expression).evaluate(self.root)

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for path, _, inst in self.root.walk():
            result[path] = (inst.offset, inst.length)

        return result


def decode(type: Field, data) -> Decoding:
    '''Decode "data" (bytes-like or a path) using the format "type".

    It never raises for errors in the data: check the "error" attribute
    of the result (or call raise_for_error()).'''
    buffer = data if isinstance(data, Buffer) else Buffer(data)
    root = Slot(None, Placeholder(0))

    logger.debug('decoding %r from %r' % (type, buffer))

    try:
        type.unpack(buffer, 0, root, root)
    except DynstructException as e:
        logger.error('decoding failed with %s: %s' % (e.__class__.__name__, e))
        return Decoding(type, buffer, root, error=e)

    return Decoding(type, buffer, root)
