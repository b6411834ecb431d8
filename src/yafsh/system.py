## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# yafsh — External commands, environment and filesystem words.
#

import os
import glob
import subprocess
from typing import Any

from .types import Stack, Output, nil
from .errors import YafshStackError, YafshTypeError, YafshExecError, YafshError


## PATH LOOKUP & GLOBS
def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def find_in_path(cmd: str) -> str | None:
    """Resolve a command name to an absolute path of an executable file, or None."""
    if os.path.isabs(cmd):
        return cmd if _is_executable(cmd) else None
    if '/' in cmd:
        full = os.path.join(os.getcwd(), cmd)
        return full if _is_executable(full) else None
    for directory in os.environ.get('PATH', '').split(os.pathsep):
        if not directory: continue
        full = os.path.join(directory, cmd)
        if _is_executable(full):
            return full
    return None


def has_glob_chars(text: str) -> bool:
    return any(ch in text for ch in '*?[')


def expand_glob(pattern: str) -> list[str]:
    return sorted(glob.glob(os.path.expanduser(pattern)))


## EXTERNAL EXECUTION
def _collect_arguments(stack: Stack, limit: int | None) -> tuple[list[str], list[str], Stack]:
    """Drain the stack from the top: strings and integers become arguments (until `limit` of them
    were taken), outputs become stdin chunks.  Returns both lists bottom-to-top with the remainder."""
    args, stdin_parts = [], []
    while stack is not nil:
        tail, value = stack
        if isinstance(value, Output):
            stdin_parts.append(value.text)
        else:
            if limit is not None and len(args) >= limit:
                break
            args.append(str(value))
        stack = tail
    return list(reversed(args)), list(reversed(stdin_parts)), stack


def run_process(cmd: str, args: list[str], stdin_data: str | None) -> tuple[str, int]:
    """Run an external command, capturing its stdout while stderr goes to the terminal."""
    # Without piped data the child gets a closed stdin rather than the terminal.
    stdin_kwargs = {'input': stdin_data} if stdin_data else {'stdin': subprocess.DEVNULL}
    result = subprocess.run([cmd, *args], stdout=subprocess.PIPE,
                            encoding='utf-8', errors='replace', **stdin_kwargs)
    code = result.returncode if result.returncode >= 0 else 128
    return result.stdout, code


def exec_command(state) -> None:
    """`exec` ( args... cmd -- output ) Run the command on top of the stack with the items below as
    arguments; an integer right below the command limits how many arguments are taken."""
    if state.stack is nil:
        raise YafshStackError("exec: stack underflow", token='exec')
    base, cmd = state.stack
    if not isinstance(cmd, str):
        raise YafshTypeError("exec: top of stack must be a string (command name)", token='exec')

    limit = None
    if base is not nil and isinstance(base.head, int):
        base, limit = base
    args, stdin_parts, remaining = _collect_arguments(base, max(limit, 0) if limit is not None else None)

    state.stack = remaining
    try:
        stdout, code = run_process(cmd, args, ''.join(stdin_parts))
    except OSError as exc:
        state.last_exit_code = 127
        raise YafshExecError(f"exec: {cmd}: {exc.strerror or exc}", token='exec', command=cmd) from exc
    state.last_exit_code = code
    state.push(Output(stdout))


def exit_code(state) -> None:
    """`?` ( -- code ) Push exit code of last command."""
    state.push(state.last_exit_code)


## FILESYSTEM
def expand_tilde(path: str) -> str:
    if path.startswith('~') and 'HOME' in os.environ:
        return os.environ['HOME'] + path[1:]
    return path


def _write_text(name: str, content: Any, filename: str, mode: str) -> None:
    text = content.text if isinstance(content, Output) else str(content)
    try:
        with open(expand_tilde(filename), mode, encoding='utf-8') as f:
            f.write(text)
    except OSError as exc:
        raise YafshError(f"{name}: {filename}: {exc.strerror or exc}", token=name) from exc

def op_to_file(content: str | Output | int, filename: str) -> None:
    _write_text('>file', content, filename, 'w')

def op_append_file(content: str | Output | int, filename: str) -> None:
    _write_text('>>file', content, filename, 'a')

def op_cd(path: str) -> None:
    expanded = expand_tilde(path)
    try:
        os.chdir(expanded)
    except OSError as exc:
        raise YafshError(f"cd: {expanded}: {exc.strerror or exc}", token='cd') from exc


def pushd(state) -> None:
    """`pushd` ( path -- ) Remember the current directory, then change to path."""
    if state.stack is nil:
        raise YafshStackError("pushd: stack underflow", token='pushd')
    base, path = state.stack
    if not isinstance(path, str):
        raise YafshTypeError("pushd: requires string", token='pushd')
    current = os.getcwd()
    expanded = expand_tilde(path)
    try:
        os.chdir(expanded)
    except OSError as exc:
        raise YafshError(f"pushd: {expanded}: {exc.strerror or exc}", token='pushd') from exc
    state.stack = base
    state.dir_stack.append(current)


def popd(state) -> None:
    """`popd` ( -- ) Return to the most recently pushed directory."""
    if not state.dir_stack:
        raise YafshStackError("popd: directory stack empty", token='popd')
    directory = state.dir_stack.pop()
    try:
        os.chdir(directory)
    except OSError as exc:
        raise YafshError(f"popd: {directory}: {exc.strerror or exc}", token='popd') from exc


## ENVIRONMENT
def op_getenv(key: str) -> str: return os.environ.get(key, '')
def op_setenv(value: str, key: str) -> None: os.environ[key] = value
def op_unsetenv(key: str) -> None: os.environ.pop(key, None)

def op_env_append(value: str, key: str) -> None:
    existing = os.environ.get(key)
    os.environ[key] = value if existing is None else f"{existing}:{value}"

def op_env_prepend(value: str, key: str) -> None:
    existing = os.environ.get(key)
    os.environ[key] = value if existing is None else f"{value}:{existing}"

def op_env(stack: Stack) -> Stack:
    return stack.pushed(*sorted(f"{k}={v}" for k, v in os.environ.items()))
