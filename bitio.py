from typing import Iterator, Optional


class BitWriter: # packs single bits into bytes, MSB first
    def __init__(self):
        self.buffer = bytearray() # completed bytes
        self.acc = 0 # pending bits of the current byte
        self.acc_bits = 0 # how many bits are pending (0..7)
        self.bits_written = 0 # total bits written, padding excluded

    def write_bit(self, bit: int) -> None:
        self.acc = (self.acc << 1) | (1 if bit else 0)
        self.acc_bits += 1
        self.bits_written += 1
        if self.acc_bits == 8:
            self.buffer.append(self.acc & 0xFF)
            self.acc = 0
            self.acc_bits = 0

    def write_code(self, code: str) -> None: # code: string of '0'/'1'
        for ch in code:
            self.write_bit(1 if ch == '1' else 0)

    @property
    def pad_bits(self) -> int: # zero bits flush() adds to the last byte
        return (8 - self.acc_bits) % 8

    def flush(self) -> bytes:
        """
        Pad any partial final byte with zero bits and return everything written so far
        """
        if self.acc_bits != 0:
            self.buffer.append((self.acc << (8 - self.acc_bits)) & 0xFF)
            self.acc = 0
            self.acc_bits = 0
        return bytes(self.buffer)


class BitReader: # yields the bits of a byte buffer, MSB first
    def __init__(self, data: bytes, offset: int = 0):
        self.data = data
        self.pos = offset # index of the next byte to load
        self.current = 0
        self.remaining = 0 # unread bits left in self.current

    def read_bit(self) -> Optional[int]:
        """
        Return the next bit (0 or 1), or None once the buffer is exhausted
        """
        if self.remaining == 0:
            if self.pos >= len(self.data):
                return None
            self.current = self.data[self.pos]
            self.pos += 1
            self.remaining = 8
        self.remaining -= 1
        return (self.current >> self.remaining) & 1

    def __iter__(self) -> Iterator[int]:
        while True:
            bit = self.read_bit()
            if bit is None:
                return
            yield bit
