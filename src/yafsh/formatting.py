## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys

from .types import Stack, Output, nil


def stack_to_list(stk: Stack) -> list:
    return list(stk.values())

def list_to_stack(values: list, base=None) -> Stack:
    stack = nil if base is None else base
    for value in reversed(values):
        stack = Stack(stack, value)
    return stack


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the wrapped writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_item(it) -> str:
    if isinstance(it, Output):
        return f'«{it.text.rstrip()}»'
    if isinstance(it, str):
        return '"' + it + '"'
    return str(it)

def show_stack(stack: Stack, file=None) -> None:
    items = reversed(stack_to_list(stack))
    print(f"<{stack.depth()}> " + ''.join(format_item(it) + ' ' for it in items), file=file)


def format_prompt(stack: Stack) -> str:
    """Prompt counts plain inputs (strings, integers) apart from captured outputs."""
    items = stack_to_list(stack)
    outputs = sum(1 for it in items if isinstance(it, Output))
    inputs = len(items) - outputs
    if not items: return "yafsh> "
    if outputs == 0: return f"yafsh[{inputs}]> "
    if inputs == 0: return f"yafsh[:{outputs}]> "
    return f"yafsh[{inputs}:{outputs}]> "


## TRACING
def _trace_item(it, color: bool) -> str:
    if isinstance(it, Output):
        lines = it.text.splitlines()
        if len(lines) <= 1:
            text = it.text.rstrip()
            body = text[:27] + '...' if len(text) > 30 else text
        else:
            body = f"output {len(lines)} lines"
        return f"\033[35m<<\033[0m{body}\033[35m>>\033[0m" if color else f"<<{body}>>"
    if isinstance(it, str):
        return f'\033[33m"{it}"\033[0m' if color else f'"{it}"'
    return f"\033[36m{it}\033[0m" if color else str(it)


def describe_diff(before: Stack, after: Stack) -> str:
    """Summarize what a step popped and pushed, from the common bottom part of both stacks."""
    old, new = list(reversed(stack_to_list(before))), list(reversed(stack_to_list(after)))
    common = 0
    while common < min(len(old), len(new)) and old[common] == new[common]:
        common += 1

    parts = []
    if popped := old[common:]:
        parts.append("\033[31mpop\033[0m " + ', '.join(_trace_item(it, False) for it in reversed(popped)))
    if pushed := new[common:]:
        parts.append("\033[32mpush\033[0m " + ', '.join(_trace_item(it, False) for it in pushed))
    return '; '.join(parts) if parts else "\033[2m(no stack change)\033[0m"


def show_trace_step(level: int, step: int, token: str, quoted: bool, before: Stack, after: Stack,
                    doc: str | None = None, file=None) -> None:
    file = sys.stderr if file is None else file
    shown = f'\033[33m"{token}"' if quoted else f'\033[1m{token}'
    print(f"  \033[2mStep {step}\033[0m {shown:<20}\033[0m → {describe_diff(before, after)}", file=file)
    if level >= 3 and doc:
        print(f"  \033[2m{'':>28} {doc}\033[0m", file=file)
    if level >= 2:
        items = reversed(stack_to_list(after))
        shown_stack = ' '.join(_trace_item(it, True) for it in items) if after is not nil else "\033[2m(empty)\033[0m"
        print(f"  \033[2m{'':>28} Stack:\033[0m {shown_stack}", file=file)
