"""Compression report and code table rendering (CLI -s / -p).

The zstd size is a reference point only: it shows how far a single
Shannon-Fano pass is from a general purpose compressor on the same input.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import zstandard as zstd

from fano.core.codes import CodeTable
from fano.core.frequency import count_occurrences
from fano.options import ZSTD_LEVEL_DEFAULT


@dataclass(frozen=True)
class CompressionReport:
    input_size: int
    archive_size: int
    distinct_symbols: int
    total_bits: int
    entropy: float  # bits/byte
    mean_code_length: float  # bits/byte
    zstd_size: int
    zstd_level: int

    @property
    def ratio(self) -> float:
        return self.archive_size / self.input_size if self.input_size else 0.0

    @property
    def zstd_ratio(self) -> float:
        return self.zstd_size / self.input_size if self.input_size else 0.0


def shannon_entropy(data: bytes) -> float:
    records, total = count_occurrences(data)
    ent = 0.0
    for r in records:
        p = r.count / total
        ent -= p * math.log2(p)
    return ent


def zstd_reference_size(data: bytes, level: int = ZSTD_LEVEL_DEFAULT) -> int:
    c = zstd.ZstdCompressor(level=int(level))
    return len(c.compress(data))


def describe_compression(
    data: bytes,
    archive: bytes,
    table: CodeTable,
    *,
    zstd_level: int = ZSTD_LEVEL_DEFAULT,
) -> CompressionReport:
    total_bits = sum(len(table[b]) for b in data)
    return CompressionReport(
        input_size=len(data),
        archive_size=len(archive),
        distinct_symbols=len(table),
        total_bits=total_bits,
        entropy=shannon_entropy(data),
        mean_code_length=total_bits / len(data) if data else 0.0,
        zstd_size=zstd_reference_size(data, zstd_level),
        zstd_level=zstd_level,
    )


def render_report(report: CompressionReport, input_path: str, output_path: str) -> str:
    lines = [
        "=== fano archive ===",
        f"File originale : {input_path} ({report.input_size} byte)",
        f"File compresso : {output_path} ({report.archive_size} byte)",
        f"Rapporto       : {report.ratio:.3f} (1.0 = nessuna compressione)",
        f"Simboli        : {report.distinct_symbols} distinti, {report.total_bits} bit di payload",
        f"Entropia       : {report.entropy:.3f} bit/byte",
        f"Lunghezza media: {report.mean_code_length:.3f} bit/byte",
        f"zstd (liv. {report.zstd_level:>2}) : {report.zstd_size} byte, rapporto {report.zstd_ratio:.3f}",
        "====================",
    ]
    return "\n".join(lines)


def _printable(sym: int) -> str:
    ch = chr(sym)
    return repr(ch)[1:-1] if sym < 0x80 else "."


def format_code_table(table: Mapping[int, Sequence[int]]) -> str:
    lines = []
    for sym in sorted(table):
        bits = "".join(str(b) for b in table[sym])
        lines.append(f"0x{sym:02x} {_printable(sym):>4}: {bits}")
    return "\n".join(lines)
