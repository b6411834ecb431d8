## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Token, Output, nil
from .state import (State, LoopKind, LoopCollection, EachCollection,
                    BeginUntilLoop, BeginWhileLoop, DoCountedLoop, DoPlusCountedLoop)
from .errors import YafshStackError, YafshTypeError, YafshSyntaxError, YafshLoopError


CLOSERS = ('until', 'repeat', 'loop', '+loop')


def _replay(state: State, body: list[Token]) -> None:
    from .interpreter import replay
    replay(state, body)


def _pop_int(state: State, name: str, what: str) -> int:
    """Pop the integer that drives a loop; the value is consumed even if it has the wrong type."""
    if state.stack is nil:
        raise YafshStackError(f"{name}: stack underflow (needs {what})", token=name)
    state.stack, value = state.stack
    if type(value) is not int:
        raise YafshTypeError(f"{name}: requires integer {what}", token=name)
    return value


def split_while_body(body: list[Token]) -> tuple[list[Token], list[Token]]:
    """Split a `begin ... while ... repeat` body at its own `while` into condition and loop parts,
    passing over any `while` that belongs to a nested loop."""
    depth = 0
    for pos, (text, quoted) in enumerate(body):
        if quoted: continue
        if text in ('begin', 'do'):
            depth += 1
        elif text in CLOSERS and depth > 0:
            depth -= 1
        elif text == 'while' and depth == 0:
            return body[:pos], body[pos+1:]
    raise YafshSyntaxError("repeat: no matching while", token='repeat')


## LOOP EXECUTORS
def execute_begin_until(state: State, body: list[Token]) -> None:
    """Run the body, then pop a condition: zero loops again, anything else exits.
    The body always runs at least once."""
    while True:
        with state.loop_frame(BeginUntilLoop()):
            _replay(state, body)
        if _pop_int(state, 'until', 'condition') != 0:
            return


def execute_begin_while(state: State, condition: list[Token], body: list[Token]) -> None:
    """Run the condition part and pop its flag; non-zero runs the body and repeats, zero exits."""
    while True:
        with state.loop_frame(BeginWhileLoop()):
            _replay(state, condition)
            if _pop_int(state, 'while', 'condition') == 0:
                return
            _replay(state, body)


def execute_do_loop(state: State, start: int, limit: int, body: list[Token]) -> None:
    for idx in range(start, limit):
        with state.loop_frame(DoCountedLoop(start, limit, idx)):
            _replay(state, body)


def execute_do_plus_loop(state: State, start: int, limit: int, body: list[Token]) -> None:
    """Counted loop whose step is popped after every pass.  The direction is fixed by the
    initial bounds: ascending runs while below `limit`, descending while above it."""
    ascending, idx = start < limit, start
    while (idx < limit) if ascending else (idx > limit):
        with state.loop_frame(DoPlusCountedLoop(start, limit, idx)):
            _replay(state, body)
        idx += _pop_int(state, '+loop', 'step')


def _run_counted(state: State, terminator: str, body: list[Token]) -> None:
    if state.stack is nil or state.stack.tail is nil:
        raise YafshStackError("do: stack underflow (needs start and limit)", token='do')
    (base, start), limit = state.stack
    if type(start) is not int or type(limit) is not int:
        raise YafshTypeError("do: requires integer start and limit", token='do')
    state.stack = base

    if terminator == 'loop':
        execute_do_loop(state, start, limit, body)
    else:
        execute_do_plus_loop(state, start, limit, body)


## LOOP COLLECTION
def collect_loop(state: State, collecting: LoopCollection, token: str, quoted: bool) -> None:
    """Buffer a token of an open loop.  Nested openers raise the depth and the closers at depth
    above zero lower it again; a closer at depth zero that fits the loop kind runs the loop."""
    if quoted:
        collecting.body.append(Token(token, True))
        return

    body, depth = collecting.body, collecting.depth
    match (token, collecting.kind, depth):
        case ('until', LoopKind.BEGIN_UNTIL, 0):
            state.pending = None
            execute_begin_until(state, body)
            return
        case ('while', LoopKind.BEGIN_UNTIL, 0):
            collecting.kind = LoopKind.BEGIN_WHILE
        case ('repeat', LoopKind.BEGIN_WHILE, 0):
            state.pending = None
            condition, loop_body = split_while_body(body)
            execute_begin_while(state, condition, loop_body)
            return
        case ('loop' | '+loop', LoopKind.DO_LOOP, 0):
            state.pending = None
            _run_counted(state, token, body)
            return
        case (closer, _, d) if closer in CLOSERS and d > 0:
            collecting.depth -= 1
        case ('begin' | 'do', _, _):
            collecting.depth += 1
    body.append(Token(token, False))


def loop_index(state: State) -> None:
    """`i` ( -- index ) Push the index of the innermost counted loop."""
    if not state.loop_frames:
        raise YafshLoopError("i: not inside a loop", token='i')
    match state.loop_frames[-1]:
        case DoCountedLoop(current=current) | DoPlusCountedLoop(current=current):
            state.push(current)
        case _:
            raise YafshLoopError("i: loop index not available (not a counted loop)", token='i')


def outer_loop_index(state: State) -> None:
    """`j` ( -- index ) Push the index of the loop enclosing the innermost one."""
    if len(state.loop_frames) < 2:
        raise YafshLoopError("j: not inside a nested loop", token='j')
    match state.loop_frames[-2]:
        case DoCountedLoop(current=current) | DoPlusCountedLoop(current=current):
            state.push(current)
        case _:
            raise YafshLoopError("j: outer loop index not available (not a counted loop)", token='j')


## EACH ... THEN
def _output_lines(text: str) -> list[str]:
    lines = text.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line.removesuffix('\r') for line in lines]


def begin_each(state: State) -> None:
    if state.stack is nil:
        raise YafshStackError("each: stack underflow", token='each')
    # Like `if`, the popped value is not restored on a type mismatch.
    state.stack, value = state.stack
    if not isinstance(value, Output):
        raise YafshTypeError("each: requires Output on stack", token='each')
    state.pending = EachCollection(value.text)


def execute_each(state: State, text: str, body: list[Token]) -> None:
    """Push each line of captured output in turn and run the body once per line."""
    for line in _output_lines(text):
        state.push(line)
        _replay(state, body)


def collect_each(state: State, collecting: EachCollection, token: str, quoted: bool) -> None:
    if token == 'then' and not quoted:
        state.pending = None
        execute_each(state, collecting.text, collecting.body)
    else:
        collecting.body.append(Token(token, quoted))
