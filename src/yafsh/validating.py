## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any

from .types import Stack, Output, nil
from .errors import YafshStackError, YafshTypeError


TYPE_NAMES = {int: 'integer', str: 'string', Output: 'output'}


def type_name(tp) -> str:
    args = getattr(tp, '__args__', None) or (tp,)
    return ' or '.join(TYPE_NAMES.get(a, getattr(a, '__name__', str(a))) for a in args)


def check_inputs(name: str, meta: dict, stack: Stack) -> None:
    """Validate that the top of the stack matches the expected input types of an operation,
    raising before anything is popped so a failing word leaves the stack untouched.

    The `inputs` of the signature are stored top-first, matching traversal of the stack.
    """
    inputs, items, current = meta['inputs'], [], stack
    while current is not nil and len(items) < len(inputs):
        current, head = current
        items.append(head)
    if len(items) < len(inputs):
        raise YafshStackError(f"{name}: stack underflow", token=name)

    for i, (actual, expected_type) in enumerate(zip(items, inputs)):
        if expected_type is Any: continue
        if not isinstance(actual, expected_type):
            raise YafshTypeError(f"{name}: expects {type_name(expected_type)} at position {i+1} from top, "
                                 f"got {type_name(type(actual))}", token=name)
