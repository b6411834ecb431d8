## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import enum
import contextlib
from dataclasses import dataclass, field

from .types import Stack, Token, nil
from .library import Library


class SkipTarget(enum.Enum):
    ELSE = 'else'
    THEN = 'then'


class LoopKind(enum.Enum):
    BEGIN_UNTIL = 'begin-until'
    BEGIN_WHILE = 'begin-while'
    DO_LOOP = 'do-loop'       # closed by `loop` or `+loop`; the terminator picks the step rule


# Pending constructs: while one is set, incoming tokens are routed to it instead of executed.

@dataclass
class Defining:
    name: str | None              # None until the token after `:` arrives
    body: list[str] = field(default_factory=list)

@dataclass
class LoopCollection:
    kind: LoopKind
    body: list[Token] = field(default_factory=list)
    depth: int = 0

@dataclass
class EachCollection:
    text: str
    body: list[Token] = field(default_factory=list)

@dataclass
class Skipping:
    target: SkipTarget
    depth: int = 0

Pending = Defining | LoopCollection | EachCollection | Skipping


# Loop frames: runtime records pushed around each body execution, read by `i` and `j`.

@dataclass(frozen=True)
class BeginUntilLoop:
    pass

@dataclass(frozen=True)
class BeginWhileLoop:
    pass

@dataclass(frozen=True)
class DoCountedLoop:
    start: int
    limit: int
    current: int

@dataclass(frozen=True)
class DoPlusCountedLoop:
    start: int
    limit: int
    current: int

LoopFrame = BeginUntilLoop | BeginWhileLoop | DoCountedLoop | DoPlusCountedLoop


@dataclass
class State:
    """Single mutable context threaded through every evaluation function."""
    library: Library
    stack: Stack = nil
    pending: Pending | None = None
    loop_frames: list[LoopFrame] = field(default_factory=list)
    dir_stack: list[str] = field(default_factory=list)
    last_exit_code: int = 0
    depth: int = 0
    max_depth: int = 100
    verbosity: int = 0
    trace_step: int = 0

    @contextlib.contextmanager
    def loop_frame(self, frame: LoopFrame):
        """Make `frame` the innermost loop for the duration of one body execution."""
        self.loop_frames.append(frame)
        try:
            yield frame
        finally:
            self.loop_frames.pop()

    def push(self, *items) -> None:
        self.stack = self.stack.pushed(*items)
