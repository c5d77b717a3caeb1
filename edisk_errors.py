#
# fenugrec 2025
#
# EDisk extraction errors.
#
# A signature mismatch is not an error (header parsing just returns None);
# everything here is fatal for the container being processed.


class EDiskError(Exception):
    kind = "EDisk error"

    def __init__(self, msg, offset=None):
        super().__init__(msg)
        self.msg = msg
        self.offset = offset

    def __str__(self):
        if self.offset is None:
            return f"{self.kind}: {self.msg}"
        return f"{self.kind} @ {self.offset:#x}: {self.msg}"


# version != 1 or block size != 512
class UnsupportedFormat(EDiskError):
    kind = "unsupported format"


# disk length not in whole blocks
class MalformedLength(EDiskError):
    kind = "malformed length"


# block table entry with a mode other than 0,1,2
class UnsupportedBlockMode(EDiskError):
    kind = "unsupported block mode"


# address or bit cursor past the end (or before the start) of the ROM
class OutOfBounds(EDiskError):
    kind = "out of bounds"


# unpackbits run that would go past the end of the block
class BlockOverrun(OutOfBounds):
    kind = "block overrun"
