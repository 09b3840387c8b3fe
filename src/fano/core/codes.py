from __future__ import annotations

from collections.abc import Mapping, Sequence

from fano.core.frequency import Occurrence

CodeTable = dict[int, tuple[int, ...]]


# -------------------
# Shannon-Fano split
# -------------------
def _split_point(records: Sequence[Occurrence], lo: int, hi: int, subset_sum: int) -> tuple[int, int]:
    """
    Prefisso sinistro piu' lungo con somma <= meta' del totale.
    Ritorna (indice di split, somma sinistra), con split in [lo+1, hi-1].
    """
    half = subset_sum // 2
    i = lo
    left_sum = 0
    while i < hi and left_sum + records[i].count <= half:
        left_sum += records[i].count
        i += 1

    # Entrambe le meta' devono restare non vuote.
    if i == lo:
        left_sum += records[i].count
        i += 1
    elif i >= hi:
        i = hi - 1
        left_sum -= records[i].count
    return i, left_sum


def _assign(
    records: Sequence[Occurrence],
    lo: int,
    hi: int,
    subset_sum: int,
    codes: dict[int, list[int]],
) -> None:
    if hi - lo <= 1:
        return

    mid, left_sum = _split_point(records, lo, hi, subset_sum)

    for k in range(lo, mid):
        codes[records[k].symbol].append(0)
    for k in range(mid, hi):
        codes[records[k].symbol].append(1)

    _assign(records, lo, mid, left_sum, codes)
    _assign(records, mid, hi, subset_sum - left_sum, codes)


def build_codes(records: Sequence[Occurrence], total: int) -> CodeTable:
    """
    records (ordinati per count decrescente) -> {symbol: bits}

    Un solo simbolo riceve il codice [0]: cosi' total_bits conta i byte.
    """
    codes: dict[int, list[int]] = {r.symbol: [] for r in records}
    if len(records) == 1:
        codes[records[0].symbol].append(0)
        return {sym: tuple(bits) for sym, bits in codes.items()}

    _assign(records, 0, len(records), total, codes)
    return {sym: tuple(bits) for sym, bits in codes.items()}


def is_prefix_free(table: Mapping[int, Sequence[int]]) -> bool:
    # In ordine lessicografico un prefisso precede immediatamente le sue estensioni.
    ordered = sorted(tuple(bits) for bits in table.values())
    for a, b in zip(ordered, ordered[1:]):
        if b[: len(a)] == a:
            return False
    return True


def code_lengths(table: Mapping[int, Sequence[int]]) -> dict[int, int]:
    return {sym: len(bits) for sym, bits in table.items()}
