#!/usr/bin/env python3
import sys
import os
import logging

from dynstruct.core import decode
from dynstruct.executables.pe import PEFile
from dynstruct.executables.pe.code import disasm_entry_point


if 'DEBUG' in os.environ:
    logging.basicConfig()
    logger = logging.getLogger(__name__)
    logger.setLevel(logging.DEBUG)
    logging.getLogger('dynstruct').setLevel(logging.DEBUG)


def usage(progname):
    print('usage: %s [--disasm] <PE file>' % progname)
    sys.exit(1)


def dump_entry_point(pe, n=16):
    print('Entry point:')
    for idx, insn in enumerate(disasm_entry_point(pe)):
        if idx >= n:
            break
        print(f'  0x{insn.address:08x}: {insn.bytes.hex():<20} {insn.mnemonic} {insn.op_str}')


if __name__ == '__main__':
    args = sys.argv[1:]
    with_disasm = '--disasm' in args
    args = [_ for _ in args if _ != '--disasm']

    if len(args) != 1:
        usage(sys.argv[0])

    pe = decode(PEFile, args[0])

    print(pe, end='')

    if not pe.ok:
        print(f'decoding stopped: {pe.error}')
        sys.exit(2)

    if with_disasm:
        dump_entry_point(pe)
