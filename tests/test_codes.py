from __future__ import annotations

import os

from fano.core.codes import build_codes, code_lengths, is_prefix_free
from fano.core.frequency import Occurrence, count_occurrences, sort_by_count_desc


def _codes_for(data: bytes):
    records, total = count_occurrences(data)
    return build_codes(sort_by_count_desc(records), total)


def test_aaabc_scenario() -> None:
    records, total = count_occurrences(b"AAABC")
    assert dict(records) == {0x41: 3, 0x42: 1, 0x43: 1}
    assert total == 5

    codes = build_codes(sort_by_count_desc(records), total)
    assert codes == {0x41: (0,), 0x42: (1, 0), 0x43: (1, 1)}


def test_greedy_split_takes_largest_prefix_under_half() -> None:
    # total 10, half 5: [4] fits, [4,3] does not -> left={a}, right={b,c,d}
    records = [Occurrence(ord("a"), 4), Occurrence(ord("b"), 3), Occurrence(ord("c"), 2), Occurrence(ord("d"), 1)]
    codes = build_codes(records, 10)
    assert codes[ord("a")] == (0,)
    # right: total 6, half 3: [3] fits -> b=10, then {c,d} split 1:1
    assert codes[ord("b")] == (1, 0)
    assert codes[ord("c")] == (1, 1, 0)
    assert codes[ord("d")] == (1, 1, 1)


def test_equal_weights_split_evenly() -> None:
    records = [Occurrence(s, 1) for s in range(4)]
    codes = build_codes(records, 4)
    assert codes == {0: (0, 0), 1: (0, 1), 2: (1, 0), 3: (1, 1)}


def test_single_symbol_gets_one_bit_code() -> None:
    assert _codes_for(b"zzzz") == {ord("z"): (0,)}


def test_empty_input_gives_empty_table() -> None:
    assert build_codes([], 0) == {}


def test_all_byte_values_prefix_free_and_bounded() -> None:
    codes = _codes_for(bytes(range(256)) * 3 + os.urandom(2048))
    assert len(codes) == 256
    assert is_prefix_free(codes)
    assert max(code_lengths(codes).values()) <= 255


def test_skewed_distribution_is_prefix_free() -> None:
    # Fibonacci-like weights push the tree to its maximum depth.
    data = bytearray()
    a, b = 1, 1
    for sym in range(20):
        data += bytes([sym]) * a
        a, b = b, a + b
    codes = _codes_for(bytes(data))
    assert is_prefix_free(codes)
    lengths = code_lengths(codes)
    assert lengths[19] == 1
    assert max(lengths.values()) == 19


def test_is_prefix_free_detects_conflicts() -> None:
    assert is_prefix_free({1: (0,), 2: (1, 0), 3: (1, 1)})
    assert not is_prefix_free({1: (1,), 2: (1, 0)})
    assert not is_prefix_free({1: (0, 1), 2: (0, 1)})
    assert is_prefix_free({7: ()})
