## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, TypeVar

from .types import Stack, Output, nil, wrap_int64
from .errors import YafshTypeError, YafshError


def _truncdiv(name: str, b: int, a: int) -> int:
    if a == 0:
        raise YafshError(f"{name}: division by zero", token=name)
    q = abs(b) // abs(a)
    return q if (b < 0) == (a < 0) else -q

def _truncmod(name: str, b: int, a: int) -> int:
    return b - a * _truncdiv(name, b, a)

def _same_kind(name: str, b: Any, a: Any) -> None:
    if not ((type(b) is int and type(a) is int) or (type(b) is str and type(a) is str)):
        raise YafshTypeError(f"{name}: requires two values of the same type", token=name)


## ARITHMETIC
def op_add(b: int, a: int) -> int: return wrap_int64(b + a)
def op_sub(b: int, a: int) -> int: return wrap_int64(b - a)
def op_mul(b: int, a: int) -> int: return wrap_int64(b * a)
def op_div(b: int, a: int) -> int: return wrap_int64(_truncdiv('/', b, a))
def op_mod(b: int, a: int) -> int: return _truncmod('mod', b, a)
def op_divmod(b: int, a: int) -> tuple[int, int]:
    return wrap_int64(_truncdiv('/mod', b, a)), _truncmod('/mod', b, a)
def op_muldiv(c: int, b: int, a: int) -> int:
    return wrap_int64(_truncdiv('*/', wrap_int64(c * b), a))
## COMPARISON
def op_eq(b: Any, a: Any) -> int:
    _same_kind('=', b, a)
    return int(b == a)
def op_neq(b: Any, a: Any) -> int:
    _same_kind('<>', b, a)
    return int(b != a)
def op_gt(b: int, a: int) -> int: return int(b > a)
def op_lt(b: int, a: int) -> int: return int(b < a)
def op_gte(b: int, a: int) -> int: return int(b >= a)
def op_lte(b: int, a: int) -> int: return int(b <= a)
## BOOLEAN LOGIC
def op_and(b: int, a: int) -> int: return int(b != 0 and a != 0)
def op_or(b: int, a: int) -> int: return int(b != 0 or a != 0)
def op_not(x: int) -> int: return int(x == 0)
def op_xor(b: int, a: int) -> int: return int((b != 0) != (a != 0))
# STRING MANIPULATION
def op_concat(b: str, a: str) -> str: return b + a
# STACK OPERATIONS
X, Y, Z = (TypeVar(v, bound=Any) for v in ('X', 'Y', 'Z'))
def op_dup(x: X) -> tuple[X, X]: return (x, x)
def op_swap(b: Y, a: X) -> tuple[X, Y]: return (a, b)
def op_drop(_: Any) -> None: return None
def op_over(b: Y, a: X) -> tuple[Y, X, Y]: return (b, a, b)
def op_rot(c: Z, b: Y, a: X) -> tuple[Y, X, Z]: return (b, a, c)
def op_clear(stack: Stack) -> Stack: return nil
# TYPE CONVERSIONS
def op_to_output(x: str | Output) -> Output:
    return x if isinstance(x, Output) else Output(x)
def op_to_string(x: Any) -> str:
    if isinstance(x, str): return x
    return x.text if isinstance(x, Output) else str(x)
