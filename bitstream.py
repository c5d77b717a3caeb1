#
# fenugrec 2025
#
# MSB-first bit reader, used by the EDisk "expand" block mode.

from edisk_errors import OutOfBounds


class BitStream:
    '''
    Read bits from 'data', starting at byte 'start'. Bit 7 of each byte comes out first.
    'data' is never written to; anything with len() and integer indexing will do
    (bytes, bytearray, mmap).
    '''
    __slots__ = ("data", "start", "bit_index")

    def __init__(self, data, start: int = 0):
        self.data = data
        self.start = start
        self.bit_index = 0

    def bit(self) -> int:
        byte_pos = self.start + (self.bit_index >> 3)
        if byte_pos < 0 or byte_pos >= len(self.data):
            raise OutOfBounds("bit stream ran past end of data", byte_pos)
        bit_num = self.bit_index & 7
        self.bit_index += 1
        return (self.data[byte_pos] >> (7 - bit_num)) & 1

    # n-bit unsigned value, first bit read is the MSB
    def bits(self, num_bits: int) -> int:
        res = 0
        for _ in range(num_bits):
            res = (res << 1) | self.bit()
        return res

    # whole bytes touched so far, relative to 'start'. Diagnostics only.
    def byte_idx(self) -> int:
        return (self.bit_index + 7) >> 3
