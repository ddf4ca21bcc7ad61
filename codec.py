"""
Compressed blob layout (version 1, big-endian):

    u8   version
    u16  entry count n (1..256)
    n x  (u8 symbol, u32 count), ascending symbol
    ...  body: code bits MSB-first, last byte zero-padded

Empty input compresses to an empty blob with no header at all.
The decoder stops after sum(counts) symbols, so padding bits are never
read as data.
"""

import logging
import struct
from typing import Dict, Tuple

from bitio import BitReader, BitWriter
from huffman import Leaf, build_huffman_tree, freq_table, generate_huffman_codes

log = logging.getLogger(__name__)

FORMAT_VERSION = 1
PREAMBLE = struct.Struct(">BH") # version, entry count
ENTRY = struct.Struct(">BI") # symbol, count
MAX_ENTRIES = 256
MAX_COUNT = 0xFFFFFFFF


class HuffmanError(Exception):
    pass


class EncodeError(HuffmanError):
    pass


class DecodeError(HuffmanError):
    pass


class FormatError(DecodeError): # header bytes cannot be parsed
    pass


class CorruptTree(DecodeError): # header parses but describes no usable tree
    pass


def write_header(table: Dict[int, int]) -> bytes:
    out = bytearray(PREAMBLE.pack(FORMAT_VERSION, len(table)))
    for symbol in sorted(table):
        count = table[symbol]
        if count > MAX_COUNT:
            raise EncodeError(f"symbol {symbol} occurs {count} times, header limit is {MAX_COUNT}")
        out += ENTRY.pack(symbol, count)
    return bytes(out)


def read_header(blob: bytes) -> Tuple[Dict[int, int], int]:
    """
    Parse the header at the start of blob.
    Returns (frequency table, offset of the first body byte)
    """
    if len(blob) < PREAMBLE.size:
        raise FormatError(f"truncated header: {len(blob)} bytes, need at least {PREAMBLE.size}")
    version, entries = PREAMBLE.unpack_from(blob, 0)
    if version != FORMAT_VERSION:
        raise FormatError(f"unsupported format version {version}")
    if entries > MAX_ENTRIES:
        raise FormatError(f"entry count {entries} exceeds {MAX_ENTRIES}")
    if entries == 0:
        raise CorruptTree("header lists no symbols")

    end = PREAMBLE.size + entries * ENTRY.size
    if end > len(blob):
        raise FormatError(f"header declares {entries} entries but only {len(blob)} bytes are present")

    table: Dict[int, int] = {}
    for offset in range(PREAMBLE.size, end, ENTRY.size):
        symbol, count = ENTRY.unpack_from(blob, offset)
        if symbol in table:
            raise CorruptTree(f"symbol {symbol} listed twice")
        if count == 0:
            raise CorruptTree(f"symbol {symbol} has a zero count")
        table[symbol] = count
    return table, end


def encode(data: bytes) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise EncodeError(f"expected a bytes-like object, got {type(data).__name__}")
    data = bytes(data)
    if not data:
        return b""

    ft = freq_table(data)
    root = build_huffman_tree(ft)
    code_map = generate_huffman_codes(root)
    header = write_header(ft)

    writer = BitWriter()
    for b in data:
        writer.write_code(code_map[b])
    pad_bits = writer.pad_bits
    body = writer.flush()

    log.debug("encoded %d bytes: %d symbols, header %d bytes, body %d bytes (%d pad bits)",
              len(data), len(ft), len(header), len(body), pad_bits)
    return header + body


def decode(blob: bytes, strict: bool = False) -> bytes:
    """
    Decode a blob produced by encode().

    With strict=True a body that runs out before every symbol counted in the
    header has been decoded raises FormatError; otherwise the partial result
    is returned.
    """
    blob = bytes(blob)
    if not blob:
        return b""

    table, offset = read_header(blob)
    total = sum(table.values())
    root = build_huffman_tree(table)

    decoded = bytearray()
    reader = BitReader(blob, offset)
    if isinstance(root, Leaf):
        # one-symbol input: every code is a single bit
        for _ in reader:
            if len(decoded) == total:
                break
            decoded.append(root.symbol)
    else:
        node = root
        for bit in reader:
            node = node.right if bit == 1 else node.left
            if isinstance(node, Leaf):
                decoded.append(node.symbol)
                if len(decoded) == total:
                    break
                node = root

    if strict and len(decoded) < total:
        raise FormatError(f"body ended after {len(decoded)} of {total} symbols")
    log.debug("decoded %d of %d symbols from %d body bytes", len(decoded), total, len(blob) - offset)
    return bytes(decoded)
