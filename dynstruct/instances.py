"""
The decoded tree.

Each decode produces fresh instances: a container exclusively owns the slots
with its children, there is no back-reference to the father nor sharing
between subtrees. The set of variants is closed and identified by the "kind"
attribute so that who navigates the tree (the path expressions, a viewer)
can dispatch on it.
"""
from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple

from .exceptions import NonNumericValue


class Kind(Enum):
    BLOB        = auto()
    NUMERIC     = auto()
    ENUM        = auto()
    STRUCT      = auto()
    LIST        = auto()
    PLACEHOLDER = auto()


CONTAINERS = (Kind.STRUCT, Kind.LIST)


class Slot(object):
    '''Owned entry of a container: the name can be missing (list elements
    without labels) and the instance is overwritten in place when its
    decoding succeeds.'''
    __slots__ = ('name', 'inst')

    def __init__(self, name: Optional[str], inst: "Instance"):
        self.name = name
        self.inst = inst

    def __repr__(self):
        return '<%s(%s=%r)>' % (self.__class__.__name__, self.name, self.inst)


class Instance(object):
    """Base class for the result of decoding a region of the buffer."""

    kind: Kind
    children: Optional[List[Slot]] = None

    def __init__(self, type, offset: int, length: int):
        self.type = type
        self.offset = offset
        self.length = length

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.render())

    def __str__(self):
        return self.render()

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def is_complete(self) -> bool:
        return True

    def render(self) -> str:
        raise NotImplementedError(f"method {self.__class__.__name__}.render() not implemented")

    def numeric(self) -> int:
        '''Coerce the instance to an integer, only numbers can.'''
        raise NonNumericValue(f'{self.kind.name.lower()} at offset 0x{self.offset:x} has no numeric value')

    def walk(self, path: str = 'root', name: Optional[str] = None) -> Iterator[Tuple[str, Optional[str], "Instance"]]:
        '''Depth first visit of the tree, yields (path, name, instance).'''
        yield path, name, self


class Placeholder(Instance):
    '''Stands in for a slot whose decoding is not completed (yet).'''
    kind = Kind.PLACEHOLDER

    def __init__(self, offset: int = 0):
        super().__init__(None, offset, 0)

    @property
    def is_complete(self) -> bool:
        return False

    def render(self) -> str:
        return '<incomplete>'


def to_hex(n: int, width: int = 2) -> str:
    return '%0*x' % (width, n)


def is_printable(byte: int) -> bool:
    return 0x20 <= byte < 0x7f


class BlobInstance(Instance):
    kind = Kind.BLOB

    # display budget, all the bytes are consumed anyway
    MAX_RENDERED = 10

    def __init__(self, type, offset: int, value: memoryview):
        super().__init__(type, offset, len(value))
        self.value = value

    def _render_byte(self, byte: int) -> str:
        if not self.type.text:
            return to_hex(byte)

        if is_printable(byte):
            return chr(byte)

        return '\\0' if byte == 0 else '\\x' + to_hex(byte)

    def render(self) -> str:
        rendered = ''.join(self._render_byte(_) for _ in self.value[:self.MAX_RENDERED])

        if len(self.value) >= self.MAX_RENDERED:
            rendered += ' [...]'

        return f"'{rendered}'" if self.type.text else rendered


class NumericInstance(Instance):
    kind = Kind.NUMERIC

    def __init__(self, type, offset: int, value: int):
        super().__init__(type, offset, type.width)
        self.value = value

    def render(self) -> str:
        return '0x' + to_hex(self.value, 0)

    def numeric(self) -> int:
        return self.value


class EnumInstance(Instance):
    kind = Kind.ENUM

    def __init__(self, type, num: NumericInstance):
        super().__init__(type, num.offset, num.length)
        self.num = num

    @property
    def value(self) -> int:
        return self.num.value

    @property
    def label(self) -> Optional[str]:
        return self.type.mapping.get(self.num.value)

    def render(self) -> str:
        if self.label:
            return f'{self.label} ({self.num.render()})'

        return self.num.render()

    def numeric(self) -> int:
        return self.num.numeric()


class ContainerInstance(Instance):
    '''Instance with children: it's installed in its slot before its children
    are decoded so the tree has always a complete shape.'''

    def __init__(self, type, offset: int):
        super().__init__(type, offset, 0)
        self.children: List[Slot] = []

    @property
    def is_complete(self) -> bool:
        return all(slot.inst.is_complete for slot in self.children)

    def walk(self, path='root', name=None):
        yield path, name, self
        for idx, slot in enumerate(self.children):
            child_path = f'{path}.{slot.name}' if self.kind == Kind.STRUCT else f'{path}[{idx}]'
            yield from slot.inst.walk(child_path, slot.name)


class StructInstance(ContainerInstance):
    kind = Kind.STRUCT

    def __repr__(self):
        msg = []
        for slot in self.children:
            msg.append('%s=%r' % (slot.name, slot.inst))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def render(self) -> str:
        return ''


class ListInstance(ContainerInstance):
    kind = Kind.LIST

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, [_.inst for _ in self.children])

    def render(self) -> str:
        return f'{len(self.children)} entries'
