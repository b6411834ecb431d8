## yafsh — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from yafsh.types import Token, Output
from yafsh.runtime import Runtime
from yafsh.state import LoopCollection, LoopKind, DoCountedLoop
from yafsh.loops import split_while_body
from yafsh.errors import YafshStackError, YafshTypeError, YafshSyntaxError, YafshLoopError


def run(src: str) -> list:
    rt = Runtime()
    rt.run(src)
    return rt.values()


## DO ... LOOP
def test_do_loop_sums_indices():
    assert run("0 1 6 do i + loop") == [15]

def test_do_loop_with_equal_bounds_runs_zero_times():
    assert run("3 3 do 99 loop") == []
    assert run("-4 -4 do 99 loop") == []

def test_do_loop_with_start_above_limit_runs_zero_times():
    assert run("5 2 do 99 loop") == []

def test_do_loop_requires_integers():
    rt = Runtime()
    with pytest.raises(YafshTypeError, match="do: requires integer start and limit"):
        rt.run('1 "x" do i loop')
    assert rt.values() == [1, "x"]

def test_do_loop_underflow():
    with pytest.raises(YafshStackError, match="do: stack underflow"):
        run("5 do i loop")

def test_nested_do_loops_with_j():
    assert run("1 3 do 10 12 do j i loop loop") == [1, 10, 1, 11, 2, 10, 2, 11]

def test_quoted_closer_is_part_of_body():
    assert run('0 2 do "loop" loop') == ["loop", "loop"]


## DO ... +LOOP
def test_plus_loop_steps():
    assert run("0 10 do i 3 +loop") == [0, 3, 6, 9]

def test_plus_loop_descending():
    assert run("10 0 do i -5 +loop") == [10, 5]

def test_plus_loop_requires_integer_step():
    with pytest.raises(YafshTypeError, match=r"\+loop: requires integer step"):
        run('0 10 do "x" +loop')

def test_plus_loop_without_step():
    with pytest.raises(YafshStackError, match=r"\+loop: stack underflow"):
        run("0 10 do +loop")


## BEGIN ... UNTIL
def test_begin_until_counts_up():
    assert run("0 begin 1 + dup 3 = until") == [3]

def test_begin_until_runs_body_at_least_once():
    assert run('begin "ran" 1 until') == ["ran"]

def test_begin_until_requires_condition():
    with pytest.raises(YafshStackError, match="until: stack underflow"):
        run("begin until")

def test_begin_until_requires_integer_condition():
    with pytest.raises(YafshTypeError, match="until: requires integer condition"):
        run('begin "x" until')


## BEGIN ... WHILE ... REPEAT
def test_begin_while_counts_down():
    assert run("5 begin dup 0 > while 1 - repeat") == [0]

def test_begin_while_false_condition_runs_body_zero_times():
    assert run("0 begin 0 while 99 repeat") == [0]

def test_repeat_without_while_stays_in_body():
    rt = Runtime()
    rt.run_line("begin 1 repeat")
    assert rt.state.pending == LoopCollection(LoopKind.BEGIN_UNTIL, [Token('1', False), Token('repeat', False)])

def test_split_while_body_without_while():
    with pytest.raises(YafshSyntaxError, match="repeat: no matching while"):
        split_while_body([Token('1', False), Token('while', True)])

def test_nested_begin_while_loops():
    assert run("2 begin dup 0 > while 3 begin dup 0 > while 1 - repeat drop 1 - repeat") == [0]

def test_split_while_body_skips_nested_while():
    body = [Token(t, False) for t in "begin 1 while 2 repeat 3 while 4".split()]
    cond, rest = split_while_body(body)
    assert [t.text for t in cond] == "begin 1 while 2 repeat 3".split()
    assert [t.text for t in rest] == ["4"]

def test_begin_while_requires_integer_condition():
    with pytest.raises(YafshTypeError, match="while: requires integer condition"):
        run('begin "x" while repeat')

def test_split_while_body_uses_first_unquoted_while():
    body = [Token('a', False), Token('while', True), Token('b', False), Token('while', False), Token('c', False)]
    cond, rest = split_while_body(body)
    assert cond == body[:3]
    assert rest == [Token('c', False)]


## NESTING
def test_begin_inside_do_reads_outer_index_with_j():
    assert run("0 3 do begin j 1 until loop") == [0, 1, 2]

def test_do_inside_begin():
    assert run("0 begin 0 2 do 1 + loop dup 6 = until") == [6]

def test_i_inside_begin_loop_is_an_error():
    with pytest.raises(YafshLoopError, match="i: loop index not available"):
        run("0 2 do begin i 1 until loop")

def test_collection_tracks_depth():
    rt = Runtime()
    rt.run_line("0 2 do 0 3 do")
    assert rt.state.pending == LoopCollection(LoopKind.DO_LOOP, [Token('0', False), Token('3', False), Token('do', False)], 1)
    rt.run_line("i loop")
    assert rt.state.pending.depth == 0
    rt.run_line("loop")
    assert rt.state.pending is None
    assert rt.values() == [0, 1, 2, 0, 1, 2]

def test_while_reclassifies_begin_loop():
    rt = Runtime()
    rt.run_line("begin 1 while")
    assert rt.state.pending.kind is LoopKind.BEGIN_WHILE

def test_loop_frames_are_released_on_error():
    rt = Runtime()
    with pytest.raises(YafshTypeError):
        rt.run('0 3 do i "x" + loop')
    assert rt.state.loop_frames == []
    assert rt.values() == [0, "x"]


## LOOP INDICES
def test_i_outside_loop():
    with pytest.raises(YafshLoopError, match="i: not inside a loop"):
        run("i")

def test_j_needs_two_loops():
    with pytest.raises(YafshLoopError, match="j: not inside a nested loop"):
        run("0 2 do j loop")

def test_j_with_non_counted_outer_loop():
    with pytest.raises(YafshLoopError, match="j: outer loop index not available"):
        run("begin 0 1 do j loop 1 until")

def test_i_reads_innermost_frame():
    rt = Runtime()
    with rt.state.loop_frame(DoCountedLoop(0, 10, 4)):
        rt.run_line("i")
    assert rt.values() == [4]
    assert rt.state.loop_frames == []


## EACH ... THEN
def test_each_pushes_every_line():
    rt = Runtime()
    rt.state.push(Output("one\ntwo\nthree"))
    rt.run_line("each then")
    assert rt.values() == ["one", "two", "three"]

def test_each_with_quoted_multiline_string():
    assert run('"one\ntwo\nthree" >output each then') == ["one", "two", "three"]

def test_each_runs_body_per_line():
    rt = Runtime()
    rt.state.push(Output("a\nb\n"))
    rt.run_line('each "!" concat then')
    assert rt.values() == ["a!", "b!"]

def test_each_strips_carriage_returns():
    rt = Runtime()
    rt.state.push(Output("a\r\nb\r\n"))
    rt.run_line("each then")
    assert rt.values() == ["a", "b"]

def test_each_on_empty_output_runs_zero_times():
    rt = Runtime()
    rt.state.push(Output(""))
    rt.run_line("each 99 then")
    assert rt.values() == []

def test_each_keeps_blank_lines_in_the_middle():
    rt = Runtime()
    rt.state.push(Output("a\n\nb\n"))
    rt.run_line("each then")
    assert rt.values() == ["a", "", "b"]

def test_each_requires_output():
    rt = Runtime()
    with pytest.raises(YafshTypeError, match="each: requires Output on stack"):
        rt.run('"text" each then')
    assert rt.values() == []

def test_each_underflow():
    with pytest.raises(YafshStackError, match="each: stack underflow"):
        run("each")

def test_each_body_with_quoted_then():
    rt = Runtime()
    rt.state.push(Output("x\n"))
    rt.run_line('each "then" concat then')
    assert rt.values() == ["xthen"]

def test_error_in_each_body_stops_remaining_lines():
    rt = Runtime()
    rt.state.push(Output("a\nb\n"))
    with pytest.raises(YafshTypeError):
        rt.run_line("each 1 + then")
    assert rt.values() == ["a", 1]
    assert rt.state.pending is None


def test_stray_closer_before_while_stays_in_condition():
    body = [Token(t, False) for t in "1 loop while 2".split()]
    cond, rest = split_while_body(body)
    assert [t.text for t in cond] == ["1", "loop"]
    assert [t.text for t in rest] == ["2"]

def test_stray_closer_in_while_condition_is_reported_when_run():
    with pytest.raises(YafshSyntaxError, match="loop: no matching do"):
        run("begin 1 loop while repeat")

def test_plus_loop_closes_a_do_collection():
    rt = Runtime()
    rt.run_line("0 4 do i 2")
    assert rt.state.pending.kind is LoopKind.DO_LOOP
    rt.run_line("+loop")
    assert rt.values() == [0, 2]
