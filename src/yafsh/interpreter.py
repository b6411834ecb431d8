## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# yafsh — A stack-based, Forth-derived command language that doubles as a shell.
#

from .types import Token, nil
from .state import State, Defining, LoopCollection, EachCollection, Skipping, SkipTarget, LoopKind
from .errors import YafshStackError, YafshTypeError, YafshSyntaxError, YafshRecursionError
from .parser import tokenize, is_int
from .system import find_in_path, has_glob_chars, expand_glob, exec_command
from .formatting import show_trace_step
from . import loops


UNMATCHED_CLOSERS = {
    'until': "until: no matching begin",
    'repeat': "repeat: no matching begin",
    'loop': "loop: no matching do",
    '+loop': "+loop: no matching do",
}


def replay(state: State, tokens: list[Token]) -> None:
    """Evaluate a buffered body token by token, as the body of a word, loop or `each`."""
    if state.depth >= state.max_depth:
        raise YafshRecursionError(f"maximum nesting depth of {state.max_depth} exceeded", token=tokens[0].text if tokens else None)
    state.depth += 1
    try:
        for token in tokens:
            eval_token(state, token.text, token.quoted)
    finally:
        state.depth -= 1


## CONTROL FLOW
def _skip(state: State, skipping: Skipping, token: str, quoted: bool) -> None:
    """Discard tokens of a branch not taken, tracking nested `if`s until the matching `else`/`then`."""
    if quoted: return
    match token:
        case 'if':
            skipping.depth += 1
        case 'then':
            if skipping.depth == 0:
                state.pending = None
            else:
                skipping.depth -= 1
        case 'else':
            if skipping.depth == 0 and skipping.target is SkipTarget.ELSE:
                state.pending = None


def _begin_if(state: State) -> None:
    if state.stack is nil:
        raise YafshStackError("if: stack underflow", token='if')
    # The condition is consumed even when it has the wrong type.
    state.stack, condition = state.stack
    if type(condition) is not int:
        raise YafshTypeError("if: requires integer on stack", token='if')
    if condition == 0:
        state.pending = Skipping(SkipTarget.ELSE)


def _handle_keyword(state: State, token: str) -> bool:
    """Run a construct keyword met during normal execution; returns False for any other token."""
    match token:
        case 'if':
            _begin_if(state)
        case 'else':
            # Reached the end of the branch taken, so skip the other one.
            state.pending = Skipping(SkipTarget.THEN)
        case 'then':
            pass
        case ':':
            state.pending = Defining(None)
        case 'begin':
            state.pending = LoopCollection(LoopKind.BEGIN_UNTIL)
        case 'do':
            state.pending = LoopCollection(LoopKind.DO_LOOP)
        case 'each':
            loops.begin_each(state)
        case 'until' | 'repeat' | 'loop' | '+loop':
            raise YafshSyntaxError(UNMATCHED_CLOSERS[token], token=token)
        case _:
            return False
    return True


## WORD DEFINITION
def _define(state: State, defining: Defining, token: str, quoted: bool) -> None:
    if defining.name is None:
        defining.name = token
    elif token == ';' and not quoted:
        state.library.define(defining.name, defining.body)
        state.pending = None
    else:
        # Only the text is kept; replaying a definition treats every token as unquoted.
        defining.body.append(token)


## EXECUTION
def execute_token(state: State, token: str, quoted: bool) -> None:
    """Run a token that is neither collected nor a keyword: literal, word, command, glob or string."""
    if quoted:
        state.push(token)
    elif is_int(token):
        state.push(int(token))
    elif (word := state.library.get(token)) is not None:
        word.execute(state)
    elif (path := find_in_path(token)) is not None:
        state.push(path)
        exec_command(state)
    elif has_glob_chars(token) and (matches := expand_glob(token)):
        state.push(*matches)
    else:
        state.push(token)


def eval_token(state: State, token: str, quoted: bool = False) -> None:
    """Evaluate a single token: route it to the pending construct if there is one, else run it."""
    match state.pending:
        case EachCollection() as collecting:
            return loops.collect_each(state, collecting, token, quoted)
        case LoopCollection() as collecting:
            return loops.collect_loop(state, collecting, token, quoted)
        case Defining() as defining:
            return _define(state, defining, token, quoted)
        case Skipping() as skipping:
            return _skip(state, skipping, token, quoted)

    before = state.stack
    try:
        if quoted or not _handle_keyword(state, token):
            execute_token(state, token, quoted)
    finally:
        if state.verbosity > 0:
            state.trace_step += 1
            word = None if quoted else state.library.get(token)
            show_trace_step(state.verbosity, state.trace_step, token, quoted, before, state.stack,
                            doc=word.doc if word is not None else None)


def eval_line(state: State, line: str) -> None:
    """Evaluate one line (or several accumulated lines) of input."""
    state.trace_step = 0
    tokens = tokenize(line)

    # A line starting with `: name` names the definition straight away.
    if len(tokens) >= 2 and tokens[0] == Token(':', False) and state.pending is None:
        state.pending = Defining(tokens[1].text)
        tokens = tokens[2:]

    for token in tokens:
        eval_token(state, token.text, token.quoted)
