## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# yafsh — A stack-based, Forth-derived command language that doubles as a shell.
#

import inspect
from types import UnionType
from typing import Any, TypeVar, Callable, get_origin, get_args

from .types import Stack
from .errors import YafshTypeError


def get_word_name(py_name: str) -> str:
    """Spell the word for an operator function: `op_env_append` is `env-append`, `op_to_file` is `>file`."""
    if not py_name.startswith("op_"):
        raise YafshTypeError(f"Operator function `{py_name}` requires prefix `op_` by convention.", token=py_name)
    return py_name[3:].replace('to_', '>').replace('_', '-')


def expected_type(annotation) -> Any:
    """Reduce a parameter or return annotation to something `isinstance` can check, or `Any`."""
    if annotation is Any:
        return Any
    if isinstance(annotation, TypeVar):
        return Any if annotation.__bound__ is None else expected_type(annotation.__bound__)
    if isinstance(annotation, (type, UnionType)):
        return annotation
    if isinstance(origin := get_origin(annotation), type):
        return origin
    raise YafshTypeError(f"Annotation `{annotation!r}` cannot be checked against stack values.")


def _is_stack(annotation) -> bool:
    return annotation is Stack or annotation == 'Stack'


def get_stack_effects(*, fn: Callable, name: str = None) -> dict:
    """Read from its annotations how a typed operator function uses the stack.

    `arity` is how many values are popped and passed as arguments, or -2 when the
    function takes the whole stack.  `valency` is how many results are pushed back:
    0 for `None`, n for an n-tuple, 1 otherwise, or -1 when the returned stack
    replaces the current one.  `inputs` and `outputs` list the expected types from
    the top of the stack downwards.
    """
    name = name or getattr(fn, '__name__', '<unnamed>')
    sig = inspect.signature(fn)
    params = [p for p in sig.parameters.values() if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
    returns = sig.return_annotation
    if returns is sig.empty or any(p.annotation is p.empty for p in params):
        raise YafshTypeError(f"Operation `{name}` must annotate its parameters and return value.", token=name)

    if len(params) == 1 and _is_stack(params[0].annotation):
        arity, inputs = -2, []
    else:
        arity, inputs = len(params), [expected_type(p.annotation) for p in reversed(params)]

    if _is_stack(returns):
        valency, outputs = -1, []
    elif returns is None or returns is type(None):
        valency, outputs = 0, []
    elif get_origin(returns) is tuple:
        outputs = [expected_type(t) for t in reversed(get_args(returns))]
        valency = len(outputs)
    else:
        valency, outputs = 1, [expected_type(returns)]

    return {'arity': arity, 'valency': valency, 'inputs': inputs, 'outputs': outputs}
