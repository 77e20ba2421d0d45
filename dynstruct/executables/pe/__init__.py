'''
# PE format

Portable Executable is the format of the executables in the Windows world:
a DOS header (with its stub) is followed, at the offset indicated by its last
field "e_lfanew", by the NT headers, that contain the file header, the optional
header (optional only for object files), the data directories and the table
of the sections.

Only the 32 bits variant of the optional header is described here.

Reference to <https://learn.microsoft.com/en-us/windows/win32/debug/pe-format>.
'''
from ...fields import (
    Blob,
    U16,
    U32,
    EnumeratedNumeric,
    Struct,
    List,
)
from .enum import (
    ImageFileMachine,
    ImageOptionalHeaderMagic,
    ImageSubsystem,
    IMAGE_DIRECTORY_ENTRIES,
)


IMAGE_DOS_HEADER = Struct([
    ('e_magic',    Blob(2, text=True)),
    ('e_cblp',     U16()),
    ('e_cp',       U16()),
    ('e_crlc',     U16()),
    ('e_cparhdr',  U16()),
    ('e_minalloc', U16()),
    ('e_maxalloc', U16()),
    ('e_ss',       U16()),
    ('e_sp',       U16()),
    ('e_csum',     U16()),
    ('e_ip',       U16()),
    ('e_cs',       U16()),
    ('e_lfarlc',   U16()),
    ('e_ovno',     U16()),
    ('e_res',      Blob(8)),
    ('e_oemid',    U16()),
    ('e_oeminfo',  U16()),
    ('e_res2',     Blob(20)),
    ('e_lfanew',   U32()),  # offset of the NT headers
])


IMAGE_FILE_HEADER = Struct([
    ('Machine',              EnumeratedNumeric(U16(), ImageFileMachine)),
    ('NumberOfSections',     U16()),
    ('TimeDateStamp',        U32()),
    ('PointerToSymbolTable', U32()),
    ('NumberOfSymbols',      U32()),
    ('SizeOfOptionalHeader', U16()),
    ('Characteristics',      U16()),
])


IMAGE_OPTIONAL_HEADER32 = Struct([
    ('Magic',                       EnumeratedNumeric(U16(), ImageOptionalHeaderMagic)),
    ('LinkerVersion',               U16()),  # major and minor as a single value
    ('SizeOfCode',                  U32()),
    ('SizeOfInitializedData',       U32()),
    ('SizeOfUninitializedData',     U32()),
    ('AddressOfEntryPoint',         U32()),
    ('BaseOfCode',                  U32()),
    ('BaseOfData',                  U32()),
    ('ImageBase',                   U32()),
    ('SectionAlignment',            U32()),
    ('FileAlignment',               U32()),
    ('MajorOperatingSystemVersion', U16()),
    ('MinorOperatingSystemVersion', U16()),
    ('MajorImageVersion',           U16()),
    ('MinorImageVersion',           U16()),
    ('MajorSubsystemVersion',       U16()),
    ('MinorSubsystemVersion',       U16()),
    ('Win32VersionValue',           U32()),
    ('SizeOfImage',                 U32()),
    ('SizeOfHeaders',               U32()),
    ('CheckSum',                    U32()),
    ('Subsystem',                   EnumeratedNumeric(U16(), ImageSubsystem)),
    ('DllCharacteristics',          U16()),
    ('SizeOfStackReserve',          U32()),
    ('SizeOfStackCommit',           U32()),
    ('SizeOfHeapReserve',           U32()),
    ('SizeOfHeapCommit',            U32()),
    ('LoaderFlags',                 U32()),
    ('NumberOfRvaAndSizes',         U32()),
])


IMAGE_DATA_DIRECTORY = Struct([
    ('VirtualAddress', U32()),
    ('Size',           U32()),
])


IMAGE_SECTION_HEADER = Struct([
    ('Name',                 Blob(8, text=True)),
    ('VirtualSize',          U32()),
    ('VirtualAddress',       U32()),
    ('SizeOfRawData',        U32()),
    ('PointerToRawData',     U32()),
    ('PointerToRelocations', U32()),
    ('PointerToLinenumbers', U32()),
    ('NumberOfRelocations',  U16()),
    ('NumberOfLinenumbers',  U16()),
    ('Characteristics',      U32()),
])


# TODO: the section table actually starts at SizeOfOptionalHeader bytes after
#       the optional header, here we assume it follows the data directories.
IMAGE_NT_HEADERS32 = Struct([
    ('Signature',       Blob(4, text=True)),
    ('FileHeader',      IMAGE_FILE_HEADER),
    ('OptionalHeader',  IMAGE_OPTIONAL_HEADER32),
    ('DataDirectories', List(
        IMAGE_DATA_DIRECTORY,
        'root.nt.OptionalHeader.NumberOfRvaAndSizes',
        names=IMAGE_DIRECTORY_ENTRIES)),
    ('Sections',        List(IMAGE_SECTION_HEADER, 'root.nt.FileHeader.NumberOfSections')),
])


PEFile = Struct([
    ('dos', IMAGE_DOS_HEADER),
    ('nt',  IMAGE_NT_HEADERS32, 'root.dos.e_lfanew'),
])
