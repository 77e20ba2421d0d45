'''
Path expressions make the relation between fields possible: the offset of a
field or the number of elements of a list can be indicated by a reference
to a number decoded earlier, like

    Struct([
        ('dos', DOS_HEADER),
        ('nt', NT_HEADERS, 'root.dos.e_lfanew'),
    ])

The syntax is minimal on purpose, only lookups are possible

    expr    := "root" segment*
    segment := "." name | "[" index "]"

where "root" is the top-level instance of the decoding in progress (not the
enclosing struct), ".name" selects the first child with that name and "[n]"
the n-th child.
'''
import logging
from typing import List, Tuple

from .exceptions import MalformedPath, UnresolvedReference
from .instances import CONTAINERS, Instance


logger = logging.getLogger(__name__)

ROOT = 'root'


class FieldLookup(object):

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f'.{self.name}'

    def __eq__(self, other):
        return isinstance(other, FieldLookup) and other.name == self.name

    def lookup(self, node: Instance) -> Instance:
        if node.kind not in CONTAINERS:
            raise UnresolvedReference(f'looking up \'{self.name}\' but {node.kind.name.lower()} has no children')

        for slot in node.children:
            if slot.name == self.name:
                return slot.inst

        raise UnresolvedReference(f'field \'{self.name}\' not found')


class IndexLookup(object):

    def __init__(self, index: int):
        self.index = index

    def __repr__(self):
        return f'[{self.index}]'

    def __eq__(self, other):
        return isinstance(other, IndexLookup) and other.index == self.index

    def lookup(self, node: Instance) -> Instance:
        if node.kind not in CONTAINERS:
            raise UnresolvedReference(f'looking up [{self.index}] but {node.kind.name.lower()} has no children')

        if not 0 <= self.index < len(node.children):
            raise UnresolvedReference(f'index {self.index} out of bounds (there are {len(node.children)} children)')

        return node.children[self.index].inst


def _scan_name(text: str, pos: int) -> Tuple[str, int]:
    end = pos
    while end < len(text) and text[end] not in '.[':
        end += 1

    return text[pos:end], end


def _scan_index(text: str, pos: int) -> Tuple[str, int]:
    end = pos
    while end < len(text) and text[end] in '0123456789':
        end += 1

    return text[pos:end], end


def tokenize(text: str) -> List[object]:
    '''Consume the text left to right and build the list of lookups to perform.

    Nothing can be skipped: if something is left unconsumed the text is malformed.'''
    if not text.startswith(ROOT):
        raise MalformedPath(f'\'{text}\' must start with \'{ROOT}\'')

    instructions = []
    pos = len(ROOT)

    while pos < len(text):
        if text[pos] == '.':
            name, end = _scan_name(text, pos + 1)
            if not name:
                break
            instructions.append(FieldLookup(name))
        elif text[pos] == '[':
            digits, end = _scan_index(text, pos + 1)
            if not digits or text[end:end + 1] != ']':
                break
            instructions.append(IndexLookup(int(digits)))
            end += 1
        else:
            break

        pos = end

    if pos < len(text):
        raise MalformedPath(f'did not parse full text of \'{text}\', left \'{text[pos:]}\'')

    return instructions


class Path(object):
    '''Compiled path expression, it doesn't hold any reference to the
    instances so it can be shared between decodings.'''

    def __init__(self, text: str):
        self.text = text
        self.instructions = tuple(tokenize(text))

    def __repr__(self):
        return '(%s)' % ' '.join([ROOT] + [repr(_) for _ in self.instructions])

    def __str__(self):
        return self.text

    def __eq__(self, other):
        return isinstance(other, Path) and other.instructions == self.instructions

    def __hash__(self):
        return hash(repr(self))

    def evaluate(self, root: Instance) -> Instance:
        '''Walk the lookups starting from the root passed as argument.'''
        logger.debug('resolving \'%s\'' % self.text)
        node = root
        for instruction in self.instructions:
            node = instruction.lookup(node)
            logger.debug(' resolved %r as %r' % (instruction, node))

        return node

    def resolve(self, root: Instance) -> int:
        '''Evaluate and coerce the result to an integer.'''
        value = self.evaluate(root).numeric()
        logger.debug(' resolved with value %s' % value)

        return value


def parse(text: str) -> Path:
    return Path(text)


def evaluate(text: str, root: Instance) -> Instance:
    return parse(text).evaluate(root)
