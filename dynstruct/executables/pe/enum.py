from enum import Enum


class ImageFileMachine(Enum):
    IMAGE_FILE_MACHINE_UNKNOWN = 0x0
    IMAGE_FILE_MACHINE_I386    = 0x14c
    IMAGE_FILE_MACHINE_R4000   = 0x166
    IMAGE_FILE_MACHINE_ALPHA   = 0x184
    IMAGE_FILE_MACHINE_ARM     = 0x1c0
    IMAGE_FILE_MACHINE_THUMB   = 0x1c2
    IMAGE_FILE_MACHINE_ARMNT   = 0x1c4
    IMAGE_FILE_MACHINE_POWERPC = 0x1f0
    IMAGE_FILE_MACHINE_IA64    = 0x200
    IMAGE_FILE_MACHINE_AMD64   = 0x8664
    IMAGE_FILE_MACHINE_ARM64   = 0xaa64


class ImageOptionalHeaderMagic(Enum):
    IMAGE_NT_OPTIONAL_HDR32_MAGIC = 0x10b
    IMAGE_NT_OPTIONAL_HDR64_MAGIC = 0x20b
    IMAGE_ROM_OPTIONAL_HDR_MAGIC  = 0x107


class ImageSubsystem(Enum):
    IMAGE_SUBSYSTEM_UNKNOWN                  = 0
    IMAGE_SUBSYSTEM_NATIVE                   = 1
    IMAGE_SUBSYSTEM_WINDOWS_GUI              = 2
    IMAGE_SUBSYSTEM_WINDOWS_CUI              = 3
    IMAGE_SUBSYSTEM_OS2_CUI                  = 5
    IMAGE_SUBSYSTEM_POSIX_CUI                = 7
    IMAGE_SUBSYSTEM_WINDOWS_CE_GUI           = 9
    IMAGE_SUBSYSTEM_EFI_APPLICATION          = 10
    IMAGE_SUBSYSTEM_EFI_BOOT_SERVICE_DRIVER  = 11
    IMAGE_SUBSYSTEM_EFI_RUNTIME_DRIVER       = 12
    IMAGE_SUBSYSTEM_EFI_ROM                  = 13
    IMAGE_SUBSYSTEM_XBOX                     = 14


# labels for the entries of the data directory, by position
IMAGE_DIRECTORY_ENTRIES = [
    'IMAGE_DIRECTORY_ENTRY_EXPORT',
    'IMAGE_DIRECTORY_ENTRY_IMPORT',
    'IMAGE_DIRECTORY_ENTRY_RESOURCE',
    'IMAGE_DIRECTORY_ENTRY_EXCEPTION',
    'IMAGE_DIRECTORY_ENTRY_SECURITY',
    'IMAGE_DIRECTORY_ENTRY_BASERELOC',
    'IMAGE_DIRECTORY_ENTRY_DEBUG',
    'IMAGE_DIRECTORY_ENTRY_ARCHITECTURE',
    'IMAGE_DIRECTORY_ENTRY_GLOBALPTR',
    'IMAGE_DIRECTORY_ENTRY_TLS',
    'IMAGE_DIRECTORY_ENTRY_LOAD_CONFIG',
    'IMAGE_DIRECTORY_ENTRY_BOUND_IMPORT',
    'IMAGE_DIRECTORY_ENTRY_IAT',
    'IMAGE_DIRECTORY_ENTRY_DELAY_IMPORT',
    'IMAGE_DIRECTORY_ENTRY_COM_DESCRIPTOR',
    'IMAGE_DIRECTORY_ENTRY_RESERVED',
]
