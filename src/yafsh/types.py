## yafsh — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from collections import namedtuple
from dataclasses import dataclass


class Stack(namedtuple('Stack', ['tail', 'head'])):
    """Persistent linked stack.  Pushing shares the tail, so a stack captured before a word
    ran is still intact if the word fails.  The empty stack is the single `nil` instance."""
    __slots__ = ()

    def __new__(cls, tail, head):
        if tail is None and head is None and 'nil' in globals():
            raise ValueError("The empty stack is `nil`; do not construct another one.")
        return super().__new__(cls, tail, head)

    def __bool__(self):
        raise TypeError("Stack has no truth value; compare against `nil` instead.")

    def __repr__(self):
        if self is nil:
            return "< nil >"
        return "< " + " ".join(repr(v) for v in reversed(list(self.values()))) + " >"

    def values(self):
        """Yield the items from the top of the stack down."""
        current = self
        while current is not nil:
            yield current.head
            current = current.tail

    def pushed(self, *items):
        """Return a new stack with `items` pushed in order, the last one ending on top."""
        stack = self
        for item in items:
            stack = Stack(stack, item)
        return stack

    def depth(self) -> int:
        return sum(1 for _ in self.values())


nil = Stack(None, None)


@dataclass(frozen=True)
class Output:
    """Captured stdout of an external command.  Kept apart from `str` so that the next
    external command receives it on stdin instead of as an argument."""
    text: str

    def __str__(self):
        return self.text


Token = namedtuple('Token', ['text', 'quoted'])

Value = int | str | Output


INT64_MIN, INT64_MAX = -2**63, 2**63 - 1

def wrap_int64(n: int) -> int:
    """Fold an arbitrary Python integer back into the signed 64-bit range."""
    return (n - INT64_MIN) % 2**64 + INT64_MIN
