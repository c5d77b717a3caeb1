#
# fenugrec 2025
#
# EDisk block table and block decoding
#
# Each logical block of the disk has one u32 entry in the block table:
#   bits 31..24: storage mode
#   bits 23..0 : storage offset, relative to the data region; two's complement,
#                i.e. block data can be stored *before* the data region.
#
# Modes:
#   0: 512 raw bytes, each one negated. Offset 0 means "all zeroes", nothing stored.
#   1: "unpackbits" style RLE
#   2: 16-byte dictionary, followed by a bitstream of 5-bit dictionary refs / 9-bit literals
#
# Blocks don't depend on each other; decode_block() only reads 'mem'.

import collections
import logging
import struct

from bitstream import BitStream
from edisk_errors import UnsupportedBlockMode, OutOfBounds, BlockOverrun
from edisk_hdr import BLOCK_SIZE, num_blocks

log = logging.getLogger(__name__)

MODE_NEGATE = 0
MODE_UNPACK = 1
MODE_EXPAND = 2
BLOCK_MODES = (MODE_NEGATE, MODE_UNPACK, MODE_EXPAND)

DICT_SIZE = 16

blockent = collections.namedtuple('blockent', 'mode offset')


def sign_extend24(raw: int) -> int:
    raw &= 0xFFFFFF
    if raw < 0x800000:
        return raw
    return raw - 0x1000000


# split a block table entry. 'addr' is only used for error reporting
def parse_entry(entry: int, addr=None):
    mode = entry >> 24
    if mode not in BLOCK_MODES:
        raise UnsupportedBlockMode(f"unexpected block mode {mode}", addr)
    return blockent(mode, sign_extend24(entry))


def read_block_table(mem, hdr):
    nblocks = num_blocks(hdr)
    table = hdr.location + hdr.table_offset
    if table + nblocks * 4 > len(mem):
        raise OutOfBounds(f"block table ({nblocks} entries) extends past end of ROM", table)
    entries = struct.unpack_from(f'>{nblocks}I', mem, table)
    return [parse_entry(e, table + i * 4) for i, e in enumerate(entries)]


#######################################
#   per-mode decoders
#######################################
# These all take an absolute position in 'mem'.

def negate(mem, start: int) -> bytes:
    if start < 0 or start + BLOCK_SIZE > len(mem):
        raise OutOfBounds(f"raw block needs {BLOCK_SIZE} bytes", start)
    return bytes((-x) & 0xFF for x in mem[start:start + BLOCK_SIZE])


# Returns (block data, position after the last command consumed)
# Commands:
#   0x00-0x7F: copy the next cmd + 1 bytes
#   0x80     : no-op
#   0x81-0xFF: repeat the next byte (257 - cmd) times
# A run must end exactly on the block boundary; overshooting is a format error.
def unpackbits(mem, start: int):
    out = bytearray()
    idx = start
    mem_len = len(mem)
    if idx < 0:
        raise OutOfBounds("unpackbits stream starts before ROM", idx)
    while len(out) < BLOCK_SIZE:
        if idx >= mem_len:
            raise OutOfBounds("unpackbits stream ran past end of ROM", idx)
        cmd = mem[idx]
        idx += 1
        if cmd == 0x80:
            continue
        if cmd < 0x80:
            count = cmd + 1
            if len(out) + count > BLOCK_SIZE:
                raise BlockOverrun(f"literal run of {count} at output pos {len(out)}", idx - 1)
            if idx + count > mem_len:
                raise OutOfBounds("unpackbits literal ran past end of ROM", idx)
            out += mem[idx:idx + count]
            idx += count
        else:
            count = 257 - cmd
            if len(out) + count > BLOCK_SIZE:
                raise BlockOverrun(f"repeat run of {count} at output pos {len(out)}", idx - 1)
            if idx >= mem_len:
                raise OutOfBounds("unpackbits repeat ran past end of ROM", idx)
            out += bytes((mem[idx],)) * count
            idx += 1
    return bytes(out), idx


# Returns (block data, position after the last byte touched by the bitstream)
def expand(mem, start: int):
    if start < 0 or start + DICT_SIZE > len(mem):
        raise OutOfBounds("dictionary extends past end of ROM", start)
    lookup = mem[start:start + DICT_SIZE]
    stream = BitStream(mem, start + DICT_SIZE)
    out = bytearray(BLOCK_SIZE)
    for i in range(BLOCK_SIZE):
        if stream.bit():
            out[i] = lookup[stream.bits(4)]
        else:
            out[i] = stream.bits(8)
    return bytes(out), start + DICT_SIZE + stream.byte_idx()


def decode_block(mem, data_base: int, mode: int, offset: int) -> bytes:
    if mode == MODE_NEGATE and offset == 0:
        return bytes(BLOCK_SIZE)

    storage = data_base + offset
    if storage < 0 or storage >= len(mem):
        raise OutOfBounds(f"block storage at data{offset:+#x} is outside ROM", storage)

    if mode == MODE_NEGATE:
        return negate(mem, storage)
    elif mode == MODE_UNPACK:
        data, end = unpackbits(mem, storage)
        log.debug(f"Unpack complete at {end - data_base:#08x}")
        return data
    elif mode == MODE_EXPAND:
        data, end = expand(mem, storage)
        log.debug(f"Expand complete at {end - data_base:#08x}")
        return data
    raise ValueError(f"unexpected block mode {mode}")
