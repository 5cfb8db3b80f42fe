#!/usr/bin/env python3
"""
Bracket matching and program loading.
"""

import os
import random
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import pytest

from bfvm import NO_JUMP, UnbalancedBrackets, build_jump_table, load_program


def _random_balanced(rng, depth=0):
    parts = []
    for _ in range(rng.randint(0, 4)):
        if depth < 4 and rng.random() < 0.4:
            parts.append('[' + _random_balanced(rng, depth + 1) + ']')
        else:
            parts.append(rng.choice('+-<>.,x \n'))
    return ''.join(parts)


def test_nested_and_adjacent_pairs():
    table = build_jump_table(b"[[]][]")
    assert table.tolist() == [3, 2, 1, 0, 5, 4]


def test_non_bracket_positions_hold_sentinel():
    table = build_jump_table(b"+[->+<]x")
    assert table[0] == NO_JUMP
    assert table[1] == 6
    assert table[6] == 1
    assert all(table[i] == NO_JUMP for i in (2, 3, 4, 5, 7))


def test_empty_program_builds_empty_table():
    assert len(build_jump_table(b"")) == 0


def test_table_is_symmetric_for_balanced_programs():
    rng = random.Random(1234)
    for _ in range(200):
        code = _random_balanced(rng).encode()
        table = build_jump_table(code)
        assert len(table) == len(code)
        for i, byte in enumerate(code):
            if byte in b"[]":
                assert table[table[i]] == i
            else:
                assert table[i] == NO_JUMP


def test_stray_close_fails_immediately():
    with pytest.raises(UnbalancedBrackets) as info:
        build_jump_table(b"+]")
    err = info.value
    assert err.position == 1
    assert err.bracket == ']'
    assert (err.line, err.column) == (1, 2)


def test_unclosed_open_reports_innermost():
    with pytest.raises(UnbalancedBrackets) as info:
        build_jump_table(b"[[")
    assert info.value.position == 1
    assert info.value.bracket == '['


@pytest.mark.parametrize("code", [b"[", b"]", b"[]]", b"[[]", b"][", b"+[[-]"])
def test_any_unmatched_bracket_fails(code):
    with pytest.raises(UnbalancedBrackets):
        build_jump_table(code)


def test_error_message_points_at_bracket():
    with pytest.raises(UnbalancedBrackets) as info:
        load_program("+\n+[")
    err = info.value
    assert (err.line, err.column) == (2, 2)
    assert "line 2, column 2" in str(err)
    assert ">    2 | +[" in err.context
    assert "^" in err.context
    assert "Hint:" in str(err)


def test_load_program_accepts_text_and_freezes_table():
    program = load_program("[-]")
    assert program.code == b"[-]"
    assert len(program) == 3
    with pytest.raises(ValueError):
        program.jumps[0] = 1


def test_target_and_pairs():
    program = load_program(b"[[]][]")
    assert program.target(0) == 3
    assert program.target(5) == 4
    assert list(program.pairs()) == [(0, 3), (1, 2), (4, 5)]


def test_target_rejects_sentinel():
    program = load_program(b"+[]")
    with pytest.raises(ValueError):
        program.target(0)


def test_jump_table_dtype_is_signed():
    table = build_jump_table(b"[]")
    assert np.issubdtype(table.dtype, np.signedinteger)


def test_memoryview_input_reports_unbalanced():
    with pytest.raises(UnbalancedBrackets) as info:
        build_jump_table(memoryview(b"+]"))
    assert info.value.position == 1
    assert (info.value.line, info.value.column) == (1, 2)


def test_memoryview_and_bytearray_build_same_table():
    code = b"+[>[-]<]"
    expected = build_jump_table(code).tolist()
    assert build_jump_table(memoryview(code)).tolist() == expected
    assert build_jump_table(bytearray(code)).tolist() == expected


def test_text_must_be_encoded_before_matching():
    with pytest.raises(TypeError):
        build_jump_table("[")
    with pytest.raises(UnbalancedBrackets):
        load_program("[")


def test_column_counts_characters_not_bytes():
    with pytest.raises(UnbalancedBrackets) as info:
        load_program("é]")
    err = info.value
    assert err.column == 2
    source_line, caret_line = err.context.splitlines()[:2]
    assert source_line == ">    1 | é]"
    assert caret_line.index("^") == source_line.index("]")
