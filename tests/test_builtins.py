import pytest

from yafsh.types import Output
from yafsh.runtime import Runtime
from yafsh.errors import YafshError, YafshStackError, YafshTypeError


def run(src: str) -> list:
    rt = Runtime()
    rt.run(src)
    return rt.values()


## STACK
def test_dup_swap_drop():
    assert run("1 dup") == [1, 1]
    assert run("1 2 swap") == [2, 1]
    assert run("1 2 drop") == [1]

def test_over_rot_clear():
    assert run("1 2 over") == [1, 2, 1]
    assert run("1 2 3 rot") == [2, 3, 1]
    assert run("1 2 3 clear") == []

def test_stack_words_accept_any_value():
    assert run('"a" 2 swap') == [2, "a"]

def test_underflow_leaves_stack_alone():
    rt = Runtime()
    with pytest.raises(YafshStackError, match="swap: stack underflow"):
        rt.run("1 swap")
    assert rt.values() == [1]


## ARITHMETIC
def test_arithmetic():
    assert run("2 3 +") == [5]
    assert run("2 3 -") == [-1]
    assert run("4 5 *") == [20]
    assert run("20 6 /") == [3]
    assert run("20 6 mod") == [2]
    assert run("20 6 /mod") == [3, 2]
    assert run("2 3 4 */") == [1]

def test_division_truncates_toward_zero():
    assert run("-7 2 /") == [-3]
    assert run("7 -2 /") == [-3]
    assert run("-7 2 mod") == [-1]
    assert run("-7 2 /mod") == [-3, -1]

def test_division_by_zero_restores_operands():
    rt = Runtime()
    with pytest.raises(YafshError, match="/: division by zero"):
        rt.run("7 0 /")
    assert rt.values() == [7, 0]
    with pytest.raises(YafshError, match="mod: division by zero"):
        rt.run("mod")

def test_integers_wrap_around():
    assert run("9223372036854775807 1 +") == [-9223372036854775808]
    assert run("-9223372036854775808 1 -") == [9223372036854775807]

def test_type_mismatch_restores_operands():
    rt = Runtime()
    with pytest.raises(YafshTypeError, match=r"\+: expects integer at position 1 from top, got string"):
        rt.run('1 "a" +')
    assert rt.values() == [1, "a"]


## COMPARISON & LOGIC
def test_comparisons():
    assert run("1 2 <  2 1 <  1 2 >  2 2 >=  2 3 <=  3 2 <=") == [1, 0, 0, 1, 1, 0]

def test_equality_of_ints_and_strings():
    assert run('3 3 =  3 4 =  3 4 <>') == [1, 0, 1]
    assert run('"a" "a" =  "a" "b" <>') == [1, 1]

def test_equality_of_mixed_kinds_is_an_error():
    with pytest.raises(YafshTypeError):
        run('1 "1" =')

def test_boolean_words_return_flags():
    assert run("5 0 and  5 0 or  0 not  7 not  1 1 xor  1 0 xor") == [0, 1, 1, 0, 0, 1]


## STRINGS & CONVERSIONS
def test_concat():
    assert run('"foo" "bar" concat') == ["foobar"]

def test_concat_rejects_integers():
    with pytest.raises(YafshTypeError):
        run('"foo" 1 concat')

def test_to_output_and_back():
    assert run('"text" >output') == [Output("text")]
    assert run('"text" >output >output') == [Output("text")]
    assert run('"text" >output >string') == ["text"]
    assert run('42 >string') == ["42"]

def test_to_output_rejects_integers():
    with pytest.raises(YafshTypeError):
        run("42 >output")


## PRINTING
def test_dot_prints_and_pops(capsys):
    rt = Runtime()
    rt.run('1 "hi" .')
    assert capsys.readouterr().out == "hi\n"
    assert rt.values() == [1]

def test_type_prints_without_newline(capsys):
    run("42 type")
    assert capsys.readouterr().out == "42"

def test_dot_underflow():
    with pytest.raises(YafshStackError, match=r"\.: stack underflow"):
        run(".")

def test_dot_s_shows_stack_bottom_first(capsys):
    rt = Runtime()
    rt.run('1 "a" .s')
    assert capsys.readouterr().out == '<2> 1 "a" \n'
    assert rt.values() == [1, "a"]

def test_dot_s_marks_outputs(capsys):
    rt = Runtime()
    rt.state.push(Output("line\n"))
    rt.run(".s")
    assert capsys.readouterr().out == '<1> «line» \n'


## INTROSPECTION
def test_words_lists_dictionary(capsys):
    run(": my-word 1 ; words")
    names = capsys.readouterr().out.split()
    assert "dup" in names and "my-word" in names and "+loop" not in names
    assert names == sorted(names)

def test_see_builtin(capsys):
    run('"dup" see')
    assert capsys.readouterr().out == "dup: ( a -- a a ) Duplicate top item\n"

def test_see_defined_word(capsys):
    run(': square dup * ; "square" see')
    assert capsys.readouterr().out == ": square dup * ;\n"

def test_see_unknown_word(capsys):
    run('"nothing-here" see')
    assert capsys.readouterr().out == "nothing-here is not defined\n"

def test_see_shell_command(capsys):
    rt = Runtime()
    rt.register_command("ls-alias", "/bin/ls")
    rt.run('"ls-alias" see')
    assert capsys.readouterr().out == "ls-alias is a shell command: /bin/ls\n"

def test_see_requires_string():
    rt = Runtime()
    with pytest.raises(YafshTypeError, match="see: requires string"):
        rt.run("5 see")
    assert rt.values() == [5]

def test_help_mentions_control_flow(capsys):
    run("help")
    out = capsys.readouterr().out
    assert "if ... else ... then" in out
    assert "begin ... while ... repeat" in out
