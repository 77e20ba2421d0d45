"""
The types a format is defined with.

A Field is a descriptor: it is configured once when the format is defined,
it's never modified after that and it doesn't keep any state about the
data it decodes, so the same format can be used by any number of decodings.

The decoding is a single pass recursive descent: each field receives the
buffer, the absolute offset where to start, the slot where to install its
instance and the slot containing the root of the decoding, that is needed
to resolve the path expressions.
"""
import logging
import struct
from enum import Enum
from typing import Dict, Optional, Sequence, Union

from .exceptions import DynstructException, StructuralFailure
from .expression import Path
from .instances import (
    Slot,
    Placeholder,
    Instance,
    BlobInstance,
    NumericInstance,
    EnumInstance,
    StructInstance,
    ListInstance,
)
from .streams import Buffer


def compile_expression(expression: Union[str, Path]) -> Path:
    return expression if isinstance(expression, Path) else Path(expression)


class Field(object):
    """Base class to subclass from"""

    def __init__(self):
        self.logger = logging.getLogger(f'{self.__module__}.{self.__class__.__name__}')

    def __repr__(self):
        return '<%s()>' % self.__class__.__name__

    def _get_size(self) -> Optional[int]:
        '''The size when it doesn't depend on the data, None otherwise.'''
        return None

    size = property(
        fget=lambda self: self._get_size(),
    )

    def unpack(self, buffer: Buffer, offset: int, slot: Slot, root: Slot) -> Instance:
        raise NotImplementedError(f"method {self.__class__.__name__}.unpack() not implemented")


class Blob(Field):
    """Represent a contiguous chunk of bytes, rendered as hex or as text."""

    def __init__(self, length: int, text: bool = False):
        super().__init__()
        if not isinstance(length, int) or length < 0:
            raise ValueError(f'Blob must have a non negative length, not {length!r}')

        self.length = length
        self.text = text

    def __repr__(self):
        return '<%s(%d%s)>' % (self.__class__.__name__, self.length, ', text' if self.text else '')

    def _get_size(self):
        return self.length

    def unpack(self, buffer, offset, slot, root):
        value = buffer.read(offset, self.length)
        slot.inst = BlobInstance(self, offset, value)

        return slot.inst


class Numeric(Field):
    """Little endian unsigned integer, it's the only type whose instances can be
    used as values in the path expressions."""

    FORMATS = {
        2: '<H',
        4: '<I',
    }

    def __init__(self, width: int):
        super().__init__()
        if not isinstance(width, int) or width not in self.FORMATS:
            raise ValueError(f'Numeric width must be one of {sorted(self.FORMATS)}, not {width!r}')

        self.width = width

    def __repr__(self):
        return '<%s(%d)>' % (self.__class__.__name__, self.width)

    def get_format(self) -> str:
        return self.FORMATS[self.width]

    def _get_size(self):
        return self.width

    def unpack(self, buffer, offset, slot, root):
        raw = buffer.read(offset, self.width)
        value = struct.unpack(self.get_format(), raw)[0]
        slot.inst = NumericInstance(self, offset, value)

        return slot.inst


class U16(Numeric):

    def __init__(self):
        super().__init__(2)


class U32(Numeric):

    def __init__(self):
        super().__init__(4)


class EnumeratedNumeric(Field):
    """
    Numeric with a symbolic name for some of its values: the mapping can be
    a dictionary or a subclass of enum.Enum, in that case the names of the
    members are used as labels.

        Machine = EnumeratedNumeric(U16(), {0x14c: 'IMAGE_FILE_MACHINE_I386'})

    Values without a label are rendered as the plain numeric.
    """

    def __init__(self, base: Numeric, mapping: Union[Dict[int, str], type]):
        super().__init__()
        if isinstance(mapping, type) and issubclass(mapping, Enum):
            mapping = {_.value: _.name for _ in mapping}

        self.base = base
        self.mapping = dict(mapping)

    def __repr__(self):
        return '<%s(%r, %d labels)>' % (self.__class__.__name__, self.base, len(self.mapping))

    def _get_size(self):
        return self.base.size

    def unpack(self, buffer, offset, slot, root):
        num = self.base.unpack(buffer, offset, Slot(None, Placeholder(offset)), root)
        slot.inst = EnumInstance(self, num)

        return slot.inst


class StructField(object):
    '''Named member of a Struct: if "offset" is indicated the member is
    anchored at the address resolved from it (relative to the start of the
    struct), otherwise it follows the previous one.'''

    def __init__(self, name: str, type: Field, offset: Union[str, Path, None] = None):
        self.name = name
        self.type = type
        self.offset = compile_expression(offset) if offset is not None else None

    def __repr__(self):
        anchor = f' @ {self.offset}' if self.offset else ''
        return f'<{self.__class__.__name__}({self.name}: {self.type!r}{anchor})>'

    @property
    def is_anchored(self) -> bool:
        return self.offset is not None


class Struct(Field):
    """
    Ordered collection of named fields.

    The position of a field is the base offset plus the sum of the lengths of
    the fields before it; an anchored field is positioned at the base offset plus
    the value of its path expression instead:

        PEFile = Struct([
            ('dos', IMAGE_DOS_HEADER),
            ('nt', IMAGE_NT_HEADERS32, 'root.dos.e_lfanew'),
        ])

    NOTE: the length of an anchored field is still added to the running length, so
          the length of the struct is the sum of the lengths of all its fields even
          if some of them live somewhere else in the buffer.
    """

    def __init__(self, fields: Sequence[Union[tuple, StructField]]):
        super().__init__()
        self.fields: Sequence[StructField] = [
            _ if isinstance(_, StructField) else StructField(*_) for _ in fields
        ]

        names = [_.name for _ in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f'duplicated field names in {names}')

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, ', '.join(_.name for _ in self.fields))

    def get_fields_name(self) -> Sequence[str]:
        return [_.name for _ in self.fields]

    def _get_size(self):
        sizes = [_.type.size for _ in self.fields]
        if None in sizes:
            return None

        return sum(sizes)

    def unpack(self, buffer, offset, slot, root):
        buffer.check(offset)

        struct_inst = StructInstance(self, offset)
        # the shape is known in advance: a slot for each field
        struct_inst.children = [Slot(_.name, Placeholder(offset)) for _ in self.fields]
        slot.inst = struct_inst

        for field, child in zip(self.fields, struct_inst.children):
            try:
                field_offset = offset + struct_inst.length
                if field.is_anchored:
                    field_offset = offset + field.offset.resolve(root.inst)

                self.logger.debug('unpacking field \'%s\' at offset 0x%x' % (field.name, field_offset))

                inst = field.type.unpack(buffer, field_offset, child, root)
            except DynstructException as e:
                # keep the range covering what has been decoded of the child
                struct_inst.length += child.inst.length
                e.chain.insert(0, field.name)
                raise

            struct_inst.length += inst.length

        return struct_inst


class List(Field):
    '''Un/Pack an array of elements of the same type.

    The number of elements is an integer or a path expression resolved
    against the root of the decoding; "names" are optional labels given
    to the elements by position.
    '''

    def __init__(self, inner: Field, count: Union[int, str, Path], names: Optional[Sequence[str]] = None):
        super().__init__()
        if isinstance(count, int):
            if count < 0:
                raise ValueError(f'count for {self.__class__.__name__} must be non negative, not {count}')
        elif isinstance(count, (str, Path)):
            count = compile_expression(count)
        else:
            raise ValueError('count is \'%s\' must be of the right type' % count.__class__.__name__)

        self.inner = inner
        self.count = count
        self.names = tuple(names) if names else ()

    def __repr__(self):
        return '<%s(%r, %s)>' % (self.__class__.__name__, self.inner, self.count)

    def _get_size(self):
        if not isinstance(self.count, int) or self.inner.size is None:
            return None

        return self.count * self.inner.size

    def get_name(self, index: int) -> Optional[str]:
        return self.names[index] if index < len(self.names) else None

    def resolve_count(self, root: Slot) -> int:
        if isinstance(self.count, int):
            return self.count

        count = self.count.resolve(root.inst)
        if not isinstance(count, int) or count < 0:
            raise StructuralFailure(f'\'{self.count}\' resolved to {count!r} that is not a valid count')

        return count

    def unpack(self, buffer, offset, slot, root):
        buffer.check(offset)

        list_inst = ListInstance(self, offset)
        slot.inst = list_inst

        count = self.resolve_count(root)
        self.logger.debug('unpacking %d elements at offset 0x%x' % (count, offset))

        for idx in range(count):
            # slots are added one at a time, the count can come from garbage data
            child = Slot(self.get_name(idx), Placeholder(offset + list_inst.length))
            list_inst.children.append(child)

            try:
                inst = self.inner.unpack(buffer, offset + list_inst.length, child, root)
            except DynstructException as e:
                list_inst.length += child.inst.length
                e.chain.insert(0, f'[{idx}]')
                raise

            list_inst.length += inst.length

            # elements without bytes never hit the end of the buffer
            if inst.length == 0 and count > max(len(buffer) - offset, 1):
                raise StructuralFailure(
                    f'{count} elements of zero length can\'t be backed by the {len(buffer) - offset} bytes left')

        return list_inst
