## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Callable, Iterator
from pathlib import Path

from .types import Stack, nil
from .state import State
from .library import Library
from .builtins import load_builtins_library
from .parser import tokenize, is_incomplete
from .formatting import list_to_stack as _list_to_stack, stack_to_list as _stack_to_list
from .interpreter import eval_line


def iter_statements(source: str) -> Iterator[str]:
    """Split source into chunks to evaluate, joining lines while a quote or construct is still open."""
    pending = ""
    for line in source.splitlines():
        pending = f"{pending}\n{line}" if pending else line
        if is_incomplete(pending):
            continue
        if pending.strip():
            yield pending
        pending = ""
    if pending.strip():
        yield pending


class Runtime:
    """Minimal runtime facade focused on embedding and extension."""

    def __init__(self, library: Library | None = None, verbosity: int = 0, max_depth: int = 100):
        self.state = State(library or load_builtins_library(), verbosity=verbosity, max_depth=max_depth)

    @property
    def library(self) -> Library:
        return self.state.library

    @property
    def stack(self) -> Stack:
        return self.state.stack

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run_line(self, line: str) -> Stack:
        eval_line(self.state, line)
        return self.state.stack

    def run(self, source: str) -> Stack:
        for chunk in iter_statements(source):
            eval_line(self.state, chunk)
        return self.state.stack

    def load_rc(self, path: Path | None) -> bool:
        if path is None or not path.is_file():
            return False
        self.run(path.read_text(encoding='utf-8'))
        return True

    def values(self) -> list:
        """Stack contents from bottom to top."""
        return list(reversed(_stack_to_list(self.state.stack)))

    def reset(self) -> None:
        """Drop the stack and any construct left open by an aborted line."""
        self.state.stack, self.state.pending = nil, None

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_operation(self, name: str, func: Callable, doc: str | None = None) -> None:
        self.library.add_function(name, func, doc)

    def register_command(self, name: str, path: str) -> None:
        self.library.add_command(name, path)

    def define(self, name: str, body: str) -> None:
        self.library.define(name, [tok.text for tok in tokenize(body)])

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def get_signature(self, name: str) -> dict | None:
        return self.library.get_signature(name)

    def list_operations(self) -> dict[str, dict]:
        return {n: meta for n in self.library.names() if (meta := self.library.get_signature(n)) is not None}

    def to_stack(self, values: list) -> Stack:
        return _list_to_stack(values)

    def from_stack(self, stack: Stack) -> list:
        return _stack_to_list(stack)
