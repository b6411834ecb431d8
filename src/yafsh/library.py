## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field

from .types import Stack, Token
from .errors import YafshTypeError
from .loader import get_stack_effects
from .validating import check_inputs


class Word:
    """Named dictionary entry; every variant knows how to run itself against the interpreter state."""
    doc: str | None = None

    def execute(self, state) -> None:
        raise NotImplementedError


@dataclass
class Builtin(Word):
    fn: Callable[..., None]
    doc: str | None = None
    meta: dict | None = None

    def execute(self, state) -> None:
        self.fn(state)


@dataclass
class Defined(Word):
    body: list[str]

    @property
    def doc(self) -> str:
        return "(user-defined word)"

    def execute(self, state) -> None:
        from .interpreter import replay
        replay(state, [Token(text, False) for text in self.body])


@dataclass
class ShellCmd(Word):
    path: str

    @property
    def doc(self) -> str:
        return f"(shell command {self.path})"

    def execute(self, state) -> None:
        from .system import exec_command
        state.push(self.path)
        exec_command(state)


@dataclass
class Library:
    words: dict[str, Word] = field(default_factory=dict)

    # Registration helpers
    def add_function(self, name: str, fn: Callable[..., Any], doc: str | None = None) -> None:
        """Register a typed Python function; its annotations determine what it pops and pushes."""
        wrapper, meta = _make_wrapper(fn, name)
        self.words[name] = Builtin(wrapper, doc, meta)

    def add_builtin(self, name: str, fn: Callable[..., None], doc: str | None = None) -> None:
        """Register a function that operates on the whole interpreter state."""
        self.words[name] = Builtin(fn, doc)

    def define(self, name: str, body: list[str]) -> None:
        self.words[name] = Defined(list(body))

    def add_command(self, name: str, path: str) -> None:
        self.words[name] = ShellCmd(path)

    def get(self, name: str) -> Word | None:
        return self.words.get(name)

    def get_signature(self, name: str) -> dict | None:
        word = self.words.get(name)
        return word.meta if isinstance(word, Builtin) else None

    def names(self) -> list[str]:
        return sorted(self.words)

    def ensure_consistent(self) -> None:
        for name, word in self.words.items():
            if not isinstance(word, Word):
                raise YafshTypeError(f"Entry `{name}` in library is not a word.", token=name)


def _make_wrapper(fn: Callable[..., Any], name: str) -> tuple[Callable[..., None], dict]:
    meta = get_stack_effects(fn=fn, name=name)

    match meta['valency']:
        case -1:
            def push(_, res): return res
        case 0:
            def push(base, _): return base
        case 1:
            def push(base, res): return Stack(base, res)
        case _:
            def push(base, res): return base.pushed(*res)

    # The new stack is only assigned once `fn` returned, so errors leave the operands in place.
    match meta['arity']:
        case -2: # pass stack as-is
            def w_s(state):
                state.stack = push(state.stack, fn(state.stack))
            return w_s, meta
        case 0: # no arguments
            def w_0(state):
                state.stack = push(state.stack, fn())
            return w_0, meta
        case 1:
            def w_1(state):
                check_inputs(name, meta, state.stack)
                base, a = state.stack
                state.stack = push(base, fn(a))
            return w_1, meta
        case 2:
            def w_2(state):
                check_inputs(name, meta, state.stack)
                (base, b), a = state.stack
                state.stack = push(base, fn(b, a))
            return w_2, meta
        case _:
            def w_x(state):
                check_inputs(name, meta, state.stack)
                args, base = (), state.stack
                for _ in range(meta['arity']):
                    base, h = base
                    args = (h,) + args
                state.stack = push(base, fn(*args))
            return w_x, meta
