## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators
from . import system
from . import loops
from .types import nil
from .loader import get_word_name
from .library import Library, Builtin, Defined, ShellCmd
from .formatting import show_stack
from .errors import YafshStackError, YafshTypeError


# Operators whose Python name cannot spell the word.
ALIASES = {
    'add': '+', 'sub': '-', 'mul': '*', 'div': '/', 'divmod': '/mod', 'muldiv': '*/',
    'eq': '=', 'neq': '<>', 'gt': '>', 'lt': '<', 'gte': '>=', 'lte': '<=',
    'append-file': '>>file',
}

DOCS = {
    'dup': "( a -- a a ) Duplicate top item",
    'swap': "( a b -- b a ) Swap top two items",
    'drop': "( a -- ) Remove top item",
    'clear': "( ... -- ) Clear entire stack",
    'over': "( a b -- a b a ) Copy second item to top",
    'rot': "( a b c -- b c a ) Rotate top three items",
    '.': "( a -- ) Print and remove top item with newline",
    'type': "( a -- ) Print and remove top item without newline",
    '.s': "( -- ) Display entire stack without modifying it",
    '>output': "( string -- output ) Convert string to output for piping",
    '>string': "( output/int -- string ) Convert output or integer to string",
    '>file': "( content filename -- ) Write output to file",
    '>>file': "( content filename -- ) Append output to file",
    'exec': "( args... cmd -- output ) Execute shell command",
    '?': "( -- code ) Push exit code of last command",
    'cd': "( path -- ) Change directory",
    'getenv': "( key -- value ) Get environment variable",
    'setenv': "( value key -- ) Set environment variable",
    'unsetenv': "( key -- ) Unset environment variable",
    'env-append': "( value key -- ) Append to colon-separated env var",
    'env-prepend': "( value key -- ) Prepend to colon-separated env var",
    'env': "( -- vars... ) Push all environment variables",
    'pushd': "( path -- ) Push current dir and change to path",
    'popd': "( -- ) Pop and change to directory from stack",
    '+': "( a b -- a+b ) Add two numbers",
    '-': "( a b -- a-b ) Subtract b from a",
    '*': "( a b -- a*b ) Multiply two numbers",
    '/': "( a b -- a/b ) Divide a by b",
    'mod': "( a b -- a%b ) Modulo (remainder of a/b)",
    '/mod': "( a b -- quot rem ) Quotient and remainder",
    '*/': "( a b c -- (a*b)/c ) Multiply then divide",
    '=': "( a b -- flag ) Test equality (1 if equal, 0 if not)",
    '<>': "( a b -- flag ) Test not equal",
    '>': "( a b -- flag ) Test greater than",
    '<': "( a b -- flag ) Test less than",
    '>=': "( a b -- flag ) Test greater or equal",
    '<=': "( a b -- flag ) Test less or equal",
    'and': "( a b -- flag ) Boolean AND",
    'or': "( a b -- flag ) Boolean OR",
    'not': "( a -- flag ) Boolean NOT",
    'xor': "( a b -- flag ) Boolean XOR",
    'concat': "( a b -- a+b ) Concatenate two strings",
    'i': "( -- index ) Push current loop index",
    'j': "( -- index ) Push outer loop index (nested loops)",
    'words': "List all available words",
    'help': "Show comprehensive help information",
    'see': "( name -- ) Show word definition or documentation",
}

HELP_TEXT = """\
yafsh - Available Commands

Stack Operations:
  dup swap drop over rot    - manipulate stack
  clear                     - empty the stack
  .s                        - show stack contents

Printing:
  .                         - print top of stack
  type                      - print without newline

Arithmetic:
  + - * / mod /mod */       - math operations
  = < > <= >= <>            - comparisons

Boolean Logic:
  and or not xor            - boolean operations

String Operations:
  concat                    - concatenate two strings

Control Flow:
  if ... then               - conditional
  if ... else ... then      - conditional with else
  begin ... until           - loop until condition is true
  begin ... while ... repeat - loop while condition is true
  do ... loop               - counted loop, index with i and j
  do ... +loop              - counted loop with a step
  each ... then             - run body for each line of output

Word Definition:
  : name ... ;              - define new word

Type Conversions:
  >output >string           - convert between types

Shell:
  exec ?                    - run command, push exit code

File I/O:
  >file >>file              - write/append output to file

Environment:
  getenv setenv unsetenv    - environment variables
  env env-append env-prepend

Directory:
  cd pushd popd             - directory navigation

Help System:
  words                     - list all words
  "word" see                - show word definition
  help                      - show this help

Type 'words' to see all available commands"""


def _pop_any(state, name):
    if state.stack is nil:
        raise YafshStackError(f"{name}: stack underflow", token=name)
    state.stack, value = state.stack
    return value


def dot(state) -> None:
    print(_pop_any(state, '.'))

def type_word(state) -> None:
    print(_pop_any(state, 'type'), end='', flush=True)

def dot_s(state) -> None:
    show_stack(state.stack)

def words(state) -> None:
    print(' '.join(state.library.names()))

def help_word(state) -> None:
    print(HELP_TEXT)


def see(state) -> None:
    if state.stack is nil:
        raise YafshStackError("see: stack underflow", token='see')
    base, name = state.stack
    if not isinstance(name, str):
        raise YafshTypeError("see: requires string (word name)", token='see')
    state.stack = base

    match state.library.get(name):
        case Defined(body=body):
            print(f": {name} " + ''.join(t + ' ' for t in body) + ";")
        case ShellCmd(path=path):
            print(f"{name} is a shell command: {path}")
        case Builtin(doc=doc) if doc:
            print(f"{name}: {doc}")
        case Builtin():
            print(f"{name} is a builtin function")
        case _:
            print(f"{name} is not defined")


def load_builtins_library() -> Library:
    lib = Library()

    # Typed operators, wrapped via Library helper.
    for module in (operators, system):
        for k in dir(module):
            if not k.startswith('op_'): continue
            name = get_word_name(k)
            name = ALIASES.get(name, name)
            lib.add_function(name, getattr(module, k), DOCS.get(name))

    # Words that need the whole interpreter state.
    state_words = {
        'exec': system.exec_command,
        '?': system.exit_code,
        'pushd': system.pushd,
        'popd': system.popd,
        'i': loops.loop_index,
        'j': loops.outer_loop_index,
        '.': dot,
        'type': type_word,
        '.s': dot_s,
        'words': words,
        'help': help_word,
        'see': see,
    }
    for name, fn in state_words.items():
        lib.add_builtin(name, fn, DOCS.get(name))

    lib.ensure_consistent()
    return lib
