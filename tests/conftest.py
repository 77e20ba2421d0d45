import struct

import pytest


CODE = b'\x55\x89\xe5\xc3'  # push ebp; mov ebp, esp; ret


def build_pe(lfanew=0x80, number_of_sections=1, number_of_rva_and_sizes=16, machine=0x14c):
    '''Minimal PE32 image with a single .text section containing CODE.'''
    dos = b'MZ' + b'\x00' * 0x3a + struct.pack('<I', lfanew)
    stub = b'This program cannot be run in DOS mode.'.ljust(lfanew - len(dos), b'\x00')

    file_header = struct.pack(
        '<HHIIIHH',
        machine,
        number_of_sections,
        0x5f000000,  # TimeDateStamp
        0,
        0,
        0xe0,        # SizeOfOptionalHeader
        0x0102,
    )
    optional_header = struct.pack(
        '<HH9I6H4IHH6I',
        0x10b,       # Magic
        0x000e,      # LinkerVersion
        0x200,       # SizeOfCode
        0, 0,
        0x1000,      # AddressOfEntryPoint
        0x1000,      # BaseOfCode
        0x2000,      # BaseOfData
        0x400000,    # ImageBase
        0x1000,      # SectionAlignment
        0x200,       # FileAlignment
        6, 0, 0, 0, 6, 0,
        0,           # Win32VersionValue
        0x2000,      # SizeOfImage
        0x200,       # SizeOfHeaders
        0,           # CheckSum
        3,           # Subsystem
        0,
        0x100000, 0x1000, 0x100000, 0x1000,
        0,           # LoaderFlags
        number_of_rva_and_sizes,
    )
    directories = b''.join(
        struct.pack('<II', 0x2000 + 0x10 * idx, idx) for idx in range(number_of_rva_and_sizes))
    sections = b''.join(
        struct.pack('<8sIIIIIIHHI', b'.text', len(CODE), 0x1000, 0x200, 0x200, 0, 0, 0, 0, 0x60000020)
        for _ in range(number_of_sections))

    headers = dos + stub + b'PE\x00\x00' + file_header + optional_header + directories + sections
    headers = headers.ljust(0x200, b'\x00')

    return headers + CODE.ljust(0x200, b'\x00')


@pytest.fixture
def make_pe():
    return build_pe


@pytest.fixture
def pe_bytes():
    return build_pe()
