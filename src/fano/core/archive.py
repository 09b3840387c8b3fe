"""Archive codec: code table + bit-packed payload.

Layout (all integers little-endian):

    u8   entry_count            (256 entries are stored as 0)
    repeat entry_count:
        u8 symbol
        u8 bit_len
        ceil(bit_len/8) bytes   code bits, MSB-first, zero padded
    u64  total_bits
    ceil(total_bits/8) bytes    payload bits, MSB-first, zero padded

Entries are written in ascending symbol order. Every entry starts on a byte
boundary.
"""

from __future__ import annotations

import io
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from fano.core.bitpack import BitReader, BitWriter, pack_bits, packed_size, unpack_bits
from fano.core.codes import CodeTable, build_codes
from fano.core.frequency import count_occurrences, read_input, sort_by_count_desc
from fano.errors import EncodingError, FormatError, IoError

MAX_ENTRIES = 256
MAX_CODE_BITS = 0xFF
TOTAL_BITS_SIZE = 8  # u64


def _read_exact(inp: BinaryIO, n: int, what: str) -> bytes:
    b = inp.read(n)
    if len(b) != n:
        raise FormatError(f"archivio troncato ({what}): attesi {n} byte, letti {len(b)}")
    return b


# -------------------
# Code table
# -------------------


def write_code_table(out: BinaryIO, table: Mapping[int, Sequence[int]]) -> None:
    if len(table) > MAX_ENTRIES:
        raise EncodingError(f"tabella troppo grande: {len(table)} voci (max {MAX_ENTRIES})")

    buf = bytearray()
    buf.append(len(table) & 0xFF)
    for sym in sorted(table):
        bits = table[sym]
        if not 0 <= sym <= 0xFF:
            raise EncodingError(f"simbolo fuori range: {sym}")
        if len(bits) > MAX_CODE_BITS:
            raise EncodingError(f"codice troppo lungo per 0x{sym:02x}: {len(bits)} bit (max {MAX_CODE_BITS})")
        buf.append(sym)
        buf.append(len(bits))
        buf += pack_bits(bits)
    out.write(bytes(buf))


def _is_empty_table(inp: BinaryIO) -> bool:
    """entry_count == 0: vuota se restano solo gli 8 byte di total_bits, altrimenti 256 voci."""
    pos = inp.tell()
    rest = inp.read(TOTAL_BITS_SIZE + 1)
    inp.seek(pos)
    return len(rest) <= TOTAL_BITS_SIZE


def read_code_table(inp: BinaryIO) -> CodeTable:
    head = inp.read(1)
    if not head:
        raise FormatError("archivio vuoto (manca entry_count)")

    n = head[0]
    if n == 0 and not _is_empty_table(inp):
        n = MAX_ENTRIES

    table: CodeTable = {}
    for _ in range(n):
        sym, bit_len = _read_exact(inp, 2, "voce tabella")
        raw = _read_exact(inp, packed_size(bit_len), f"codice di 0x{sym:02x}")
        if sym in table:
            raise FormatError(f"simbolo duplicato nella tabella: 0x{sym:02x}")
        table[sym] = unpack_bits(raw, bit_len)
    return table


# -------------------
# Payload
# -------------------


def write_encoded_payload(out: BinaryIO, table: Mapping[int, Sequence[int]], data: bytes) -> int:
    """Scrive total_bits + bitstream. Ritorna total_bits."""
    w = BitWriter()
    for b in data:
        code = table.get(b)
        if code is None:
            raise EncodingError(f"byte 0x{b:02x} senza codice nella tabella")
        w.write_bits(code)

    total_bits = w.total_bits
    out.write(total_bits.to_bytes(TOTAL_BITS_SIZE, "little"))
    out.write(w.finish())
    return total_bits


@dataclass
class DecodeNode:
    symbol: int | None = None  # valorizzato solo sulle foglie
    zero: DecodeNode | None = None
    one: DecodeNode | None = None

    def is_leaf(self) -> bool:
        return self.symbol is not None


def build_decode_tree(table: Mapping[int, Sequence[int]]) -> DecodeNode:
    """Reverse lookup (bits -> symbol) as a binary trie."""
    root = DecodeNode()
    for sym, bits in table.items():
        if not bits:
            raise FormatError(f"codice vuoto per 0x{sym:02x} in una tabella con {len(table)} voci")
        node = root
        for bit in bits:
            if node.is_leaf():
                raise FormatError(f"codice ambiguo: 0x{node.symbol:02x} e' prefisso di 0x{sym:02x}")
            if bit:
                if node.one is None:
                    node.one = DecodeNode()
                node = node.one
            else:
                if node.zero is None:
                    node.zero = DecodeNode()
                node = node.zero
        if node.is_leaf():
            raise FormatError(f"codice duplicato: 0x{node.symbol:02x} e 0x{sym:02x}")
        if node.zero is not None or node.one is not None:
            raise FormatError(f"codice ambiguo: 0x{sym:02x} e' prefisso di un altro codice")
        node.symbol = sym
    return root


def decode_payload(inp: BinaryIO, table: Mapping[int, Sequence[int]], out: BinaryIO) -> int:
    """Legge total_bits + bitstream e scrive i byte decodificati. Ritorna i byte scritti."""
    total_bits = int.from_bytes(_read_exact(inp, TOTAL_BITS_SIZE, "total_bits"), "little")

    if not table:
        if total_bits:
            raise FormatError(f"tabella vuota ma total_bits={total_bits}")
        return 0

    if len(table) == 1:
        ((sym, bits),) = table.items()
        if not bits:
            # Codice a lunghezza zero: ogni bit conta un'occorrenza.
            out.write(bytes([sym]) * total_bits)
            return total_bits

    root = build_decode_tree(table)
    reader = BitReader(inp)
    buf = bytearray()
    node = root
    for _ in range(total_bits):
        node = node.one if reader.read_bit() else node.zero
        if node is None:
            raise FormatError("sequenza di bit non presente nella tabella")
        if node.is_leaf():
            buf.append(node.symbol)
            node = root

    if node is not root:
        raise FormatError("bitstream terminato a meta' di un codice")

    out.write(bytes(buf))
    return len(buf)


# -------------------
# Bytes <-> archive
# -------------------


@dataclass(frozen=True)
class CompressResult:
    archive: bytes
    table: CodeTable
    total_bits: int


def encode_archive(data: bytes) -> CompressResult:
    records, total = count_occurrences(data)
    table = build_codes(sort_by_count_desc(records), total)

    out = io.BytesIO()
    write_code_table(out, table)
    total_bits = write_encoded_payload(out, table, data)
    return CompressResult(archive=out.getvalue(), table=table, total_bits=total_bits)


def decode_archive(blob: bytes) -> bytes:
    inp = io.BytesIO(blob)
    table = read_code_table(inp)
    out = io.BytesIO()
    decode_payload(inp, table, out)
    return out.getvalue()


def _write_output(path: str | Path, blob: bytes) -> None:
    p = Path(path)
    try:
        p.write_bytes(blob)
    except OSError as e:
        raise IoError(f"File: {p} opening error ({e.strerror or e})") from e


def compress(input_path: str | Path, output_path: str | Path) -> CompressResult:
    """
    input file -> archive file.

    L'archivio e' costruito interamente in memoria: l'output viene scritto
    solo a compressione riuscita.
    """
    res = encode_archive(read_input(input_path))
    _write_output(output_path, res.archive)
    return res


def decompress(input_path: str | Path, output_path: str | Path) -> int:
    """archive file -> original file. Ritorna i byte scritti."""
    data = decode_archive(read_input(input_path))
    _write_output(output_path, data)
    return len(data)
