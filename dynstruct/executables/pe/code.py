'''
This module helps to decode the machine instructions of an executable

Some examples here: <https://www.capstone-engine.org/lang_python.html>.
'''
import logging
from typing import Iterator, Optional

from capstone import Cs, CsInsn, CS_ARCH_X86, CS_ARCH_ARM, CS_MODE_32, CS_MODE_64, CS_MODE_ARM, CS_MODE_THUMB

from ...core import Decoding
from ...expression import Path
from ...instances import Instance, Kind
from .enum import ImageFileMachine


logger = logging.getLogger(__name__)

# relative to a section header
VIRTUAL_ADDRESS     = Path('root.VirtualAddress')
VIRTUAL_SIZE        = Path('root.VirtualSize')
SIZE_OF_RAW_DATA    = Path('root.SizeOfRawData')
POINTER_TO_RAW_DATA = Path('root.PointerToRawData')

_map = {
    ImageFileMachine.IMAGE_FILE_MACHINE_I386.value:  (CS_ARCH_X86, CS_MODE_32),
    ImageFileMachine.IMAGE_FILE_MACHINE_AMD64.value: (CS_ARCH_X86, CS_MODE_64),
    ImageFileMachine.IMAGE_FILE_MACHINE_ARM.value:   (CS_ARCH_ARM, CS_MODE_ARM),
    ImageFileMachine.IMAGE_FILE_MACHINE_THUMB.value: (CS_ARCH_ARM, CS_MODE_THUMB),
    ImageFileMachine.IMAGE_FILE_MACHINE_ARMNT.value: (CS_ARCH_ARM, CS_MODE_THUMB),
}


def disasm(code: bytes, arch, mode, start: int = 0, detail: bool = False) -> Iterator[CsInsn]:
    md = Cs(arch, mode)
    md.detail = detail

    for _ in md.disasm(code, start):
        yield _


def get_section_by_address(pe: Decoding, rva: int) -> Optional[Instance]:
    '''Return the section header containing the relative virtual address.'''
    sections = pe.lookup('root.nt.Sections')
    if sections.kind != Kind.LIST:
        raise ValueError('the section table has not been decoded')

    for slot in sections.children:
        section = slot.inst
        start = VIRTUAL_ADDRESS.resolve(section)
        size = max(VIRTUAL_SIZE.resolve(section), SIZE_OF_RAW_DATA.resolve(section))

        if start <= rva < start + size:
            return section

    return None


def disasm_entry_point(pe: Decoding, arch=None, mode=None) -> Iterator[CsInsn]:
    '''Disassemble the code of a decoded PEFile starting from its entry point.'''
    machine = pe.lookup('root.nt.FileHeader.Machine').numeric()
    if arch is None or mode is None:
        if machine not in _map:
            raise ValueError(f'machine 0x{machine:x} not supported')
        arch, mode = _map[machine]

    entry = pe.lookup('root.nt.OptionalHeader.AddressOfEntryPoint').numeric()
    image_base = pe.lookup('root.nt.OptionalHeader.ImageBase').numeric()

    section = get_section_by_address(pe, entry)
    if section is None:
        raise ValueError(f'no section contains the entry point 0x{entry:x}')

    virtual_address = VIRTUAL_ADDRESS.resolve(section)
    raw_size = SIZE_OF_RAW_DATA.resolve(section)
    raw_pointer = POINTER_TO_RAW_DATA.resolve(section)

    offset = raw_pointer + entry - virtual_address
    end = min(raw_pointer + raw_size, len(pe.buffer))
    logger.debug(f'entry point 0x{entry:x} is at file offset 0x{offset:x}')

    code = pe.buffer.read(offset, max(end - offset, 0))

    return disasm(bytes(code), arch, mode, start=image_base + entry)
