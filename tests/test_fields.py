from enum import Enum

import pytest

from dynstruct.core import decode
from dynstruct.exceptions import MalformedPath, NonNumericValue, StructuralFailure
from dynstruct.fields import Blob, Numeric, U16, U32, EnumeratedNumeric, Struct, StructField, List
from dynstruct.instances import Kind


def test_blob_hex():
    blob = decode(Blob(4), b'\xde\xad\xbe\xef').root

    assert blob.kind == Kind.BLOB
    assert blob.offset == 0
    assert blob.length == 4
    assert blob.render() == 'deadbeef'
    assert str(blob) == 'deadbeef'


def test_blob_text():
    blob = decode(Blob(5, text=True), b'MZ\x00\x90\x7f').root

    assert blob.render() == "'MZ\\0\\x90\\x7f'"


def test_blob_display_budget():
    """Only the first bytes are rendered but all of them are consumed"""
    data = bytes(range(0x41, 0x41 + 12))

    blob = decode(Blob(12), data).root
    assert blob.length == 12
    assert blob.render() == '4142434445464748494a [...]'

    text = decode(Blob(12, text=True), data).root
    assert text.render() == "'ABCDEFGHIJ [...]'"

    assert decode(Blob(9, text=True), data).root.render() == "'ABCDEFGHI'"


def test_blob_not_numeric():
    blob = decode(Blob(4), b'\x01\x00\x00\x00').root

    with pytest.raises(NonNumericValue):
        blob.numeric()


def test_blob_wrong_length():
    with pytest.raises(ValueError):
        Blob(-1)


def test_numeric():
    u16 = decode(U16(), b'\x4c\x01').root

    assert u16.kind == Kind.NUMERIC
    assert u16.length == 2
    assert u16.value == 0x14c
    assert u16.numeric() == 0x14c
    assert u16.render() == '0x14c'

    u32 = decode(U32(), b'\x01\x02\x03\x04').root
    assert u32.length == 4
    assert u32.render() == '0x4030201'

    assert decode(U32(), b'\x00' * 4).root.render() == '0x0'


def test_numeric_width():
    assert Numeric(2).size == 2
    assert Numeric(4).size == 4

    with pytest.raises(ValueError):
        Numeric(3)

    with pytest.raises(ValueError):
        Numeric(2.0)


def test_enumerated_numeric():
    field = EnumeratedNumeric(U16(), {0x14c: 'X'})

    labelled = decode(field, b'\x4c\x01').root
    assert labelled.kind == Kind.ENUM
    assert labelled.render() == 'X (0x14c)'
    assert labelled.label == 'X'
    assert labelled.offset == 0
    assert labelled.length == 2

    unknown = decode(field, b'\x99\x99').root
    plain = decode(U16(), b'\x99\x99').root
    assert unknown.label is None
    assert unknown.render() == plain.render() == '0x9999'


def test_enumerated_numeric_from_enum():
    class Color(Enum):
        RED   = 1
        GREEN = 2

    field = EnumeratedNumeric(U32(), Color)

    assert decode(field, b'\x02\x00\x00\x00').root.render() == 'GREEN (0x2)'
    assert field.size == 4


def test_enumerated_numeric_coercion():
    """The value of an enumerated numeric can be used in path expressions"""
    Format = Struct([
        ('kind',  EnumeratedNumeric(U16(), {2: 'PAIR'})),
        ('items', List(U16(), 'root.kind')),
    ])

    decoding = decode(Format, b'\x02\x00\x0a\x00\x0b\x00')

    assert decoding.ok
    assert decoding.root.children[0].inst.numeric() == 2
    assert len(decoding.lookup('root.items').children) == 2


def test_struct_sequential():
    Format = Struct([
        ('a', U32()),
        ('b', Blob(0x10)),
        ('c', U16()),
    ])

    struct = decode(Format, b'\x00' * 0x16).root

    assert struct.kind == Kind.STRUCT
    assert [_.name for _ in struct.children] == ['a', 'b', 'c']
    assert [_.inst.offset for _ in struct.children] == [0x00, 0x04, 0x14]
    assert struct.length == 0x16
    assert struct.render() == ''
    assert Format.size == 0x16
    assert Format.get_fields_name() == ['a', 'b', 'c']


def test_struct_anchored():
    """An anchored field is read at the base plus the resolved offset, but the length
    of the struct is the sum of the lengths of its fields"""
    Format = Struct([
        ('hdr', Struct([('off', U32())])),
        ('s', Struct([
            ('A', Blob(4)),
            ('B', U32(), 'root.hdr.off'),
        ])),
    ])

    data = bytearray(0x48 + 4)
    data[0:4] = b'\x40\x00\x00\x00'
    data[4:8] = b'AAAA'
    data[0x44:0x48] = b'\xef\xbe\xad\xde'

    root = decode(Format, data).root
    s = root.children[1].inst

    assert s.offset == 4
    assert s.children[1].inst.offset == 4 + 0x40
    assert s.children[1].inst.value == 0xdeadbeef
    assert s.length == 4 + 4
    assert root.length == 4 + 8


def test_struct_anchored_then_sequential():
    """The running length includes the anchored field even if its bytes are elsewhere"""
    Format = Struct([
        ('off',   U16()),
        ('far',   U16(), 'root.off'),
        ('after', U16()),
    ])

    root = decode(Format, b'\x08\x00\x01\x00\x02\x00\x03\x00\x04\x00').root

    assert root.children[1].inst.offset == 8
    assert root.children[1].inst.value == 4
    assert root.children[2].inst.offset == 4
    assert root.children[2].inst.value == 2


def test_struct_field_objects():
    Format = Struct([
        StructField('a', U16()),
        StructField('b', U16(), offset='root.a'),
    ])

    assert Format.fields[1].is_anchored
    assert not Format.fields[0].is_anchored
    assert str(Format.fields[1].offset) == 'root.a'


def test_struct_definition_errors():
    with pytest.raises(ValueError):
        Struct([('a', U16()), ('a', U32())])

    with pytest.raises(MalformedPath):
        Struct([('a', U16(), 'root.a[')])


def test_list_literal():
    Format = List(U16(), 3, names=['first', 'second'])

    lst = decode(Format, b'\x01\x00\x02\x00\x03\x00').root

    assert lst.kind == Kind.LIST
    assert lst.length == 6
    assert [_.name for _ in lst.children] == ['first', 'second', None]
    assert [_.inst.value for _ in lst.children] == [1, 2, 3]
    assert [_.inst.offset for _ in lst.children] == [0, 2, 4]
    assert lst.render() == '3 entries'
    assert Format.size == 6


@pytest.mark.parametrize('count', [3, 0])
def test_list_count_from_path(count):
    elem = Struct([('x', U16()), ('y', U16())])
    Format = Struct([
        ('count', U32()),
        ('items', List(elem, 'root.count')),
    ])

    data = count.to_bytes(4, 'little') + b'\xaa' * (4 * count)
    items = decode(Format, data).lookup('root.items')

    assert len(items.children) == count
    assert items.length == count * elem.size
    assert all(_.inst.length == elem.size for _ in items.children)
    assert Format.size is None


def test_list_zero_length_elements():
    """Elements without bytes can't be repeated more than the bytes left"""
    Format = Struct([
        ('count', U16()),
        ('items', List(Blob(0), 'root.count')),
    ])

    decoding = decode(Format, b'\x02\x00\xaa\xbb')
    assert decoding.ok
    assert len(decoding.lookup('root.items').children) == 2

    decoding = decode(Format, b'\x00\x20\xaa\xbb')
    assert isinstance(decoding.error, StructuralFailure)
    assert decoding.error.chain == ['items']
    assert len(decoding.lookup('root.items').children) == 1

    empty = Struct([
        ('count', U32()),
        ('items', List(Struct([]), 'root.count')),
    ])

    assert decode(empty, b'\x01\x00\x00\x00').ok
    assert isinstance(decode(empty, b'\xff\xff\xff\xff').error, StructuralFailure)


def test_list_definition_errors():
    with pytest.raises(ValueError):
        List(U16(), -1)

    with pytest.raises(ValueError):
        List(U16(), 1.5)

    with pytest.raises(MalformedPath):
        List(U16(), 'root.count[')


def test_list_count_not_numeric():
    Format = Struct([
        ('count', Blob(2)),
        ('items', List(U16(), 'root.count')),
    ])

    decoding = decode(Format, b'\x01\x00\x00\x00')

    assert isinstance(decoding.error, NonNumericValue)
    assert decoding.error.chain == ['items']


def test_truncated_read():
    decoding = decode(U32(), b'\x01\x02')

    assert isinstance(decoding.error, StructuralFailure)
    assert decoding.root.kind == Kind.PLACEHOLDER
