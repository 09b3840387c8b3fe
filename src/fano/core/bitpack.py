"""MSB-first bit packing shared by the code table and the payload."""

from __future__ import annotations

from collections.abc import Iterable
from typing import BinaryIO

from fano.errors import FormatError


def packed_size(n_bits: int) -> int:
    return (n_bits + 7) // 8


class BitWriter:
    def __init__(self) -> None:
        self._buf = bytearray()
        self._cur = 0
        self._nbits = 0  # bits currently in _cur (0..7)
        self.total_bits = 0

    def write_bits(self, bits: Iterable[int]) -> None:
        for bit in bits:
            self._cur = (self._cur << 1) | (bit & 1)
            self._nbits += 1
            if self._nbits == 8:
                self._buf.append(self._cur)
                self._cur = 0
                self._nbits = 0
        self.total_bits = len(self._buf) * 8 + self._nbits

    def finish(self) -> bytes:
        """Pad remaining bits with zeros."""
        if self._nbits > 0:
            self._buf.append(self._cur << (8 - self._nbits))
            self._cur = 0
            self._nbits = 0
        return bytes(self._buf)


class BitReader:
    """Pulls bits one at a time from a binary stream, one byte read at a time."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._byte = 0
        self._bit = 8  # bit index in current byte (0..7); 8 = need a new byte

    def read_bit(self) -> int:
        if self._bit == 8:
            chunk = self._stream.read(1)
            if not chunk:
                raise FormatError("unexpected end of bitstream")
            self._byte = chunk[0]
            self._bit = 0
        b = (self._byte >> (7 - self._bit)) & 1
        self._bit += 1
        return b


def pack_bits(bits: Iterable[int]) -> bytes:
    w = BitWriter()
    w.write_bits(bits)
    return w.finish()


def unpack_bits(data: bytes, n_bits: int) -> tuple[int, ...]:
    """First n_bits of data, MSB-first. Padding bits beyond n_bits are ignored."""
    if n_bits > len(data) * 8:
        raise FormatError(f"bit buffer troncato: attesi {n_bits} bit, disponibili {len(data) * 8}")
    return tuple((data[i >> 3] >> (7 - (i & 7))) & 1 for i in range(n_bits))
