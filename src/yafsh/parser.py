## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

import lark
from .types import Token, INT64_MIN, INT64_MAX


GRAMMAR = r"""start: (STRING | WORD)*

// A quote runs to the next quote, or to the end of input when left open.
STRING: /"[^"]*(?:"|\Z)/
WORD: /[^\s"]+/

// WHITESPACE
WS: /\s+/
%ignore WS
"""

_INTEGER_RE = re.compile(r'[+-]?[0-9]+')
_PARSER = None


def _get_parser() -> lark.Lark:
    global _PARSER
    if _PARSER is None:
        _PARSER = lark.Lark(GRAMMAR, start='start', parser="lalr", lexer="basic")
    return _PARSER


def tokenize(line: str) -> list[Token]:
    """Split one line of input into tokens, marking those that came from double quotes.

    Quotes are not escapable; an unterminated quote extends to the end of the input and
    still produces a quoted token (unless empty).
    """
    tree = _get_parser().parse(line)
    tokens = []
    for tok in tree.children:
        if tok.type == 'WORD':
            tokens.append(Token(tok.value, False))
            continue
        text = tok.value
        if len(text) >= 2 and text.endswith('"'):
            tokens.append(Token(text[1:-1], True))
        elif len(text) > 1:
            tokens.append(Token(text[1:], True))
    return tokens


def is_int(text: str) -> bool:
    if not _INTEGER_RE.fullmatch(text):
        return False
    return INT64_MIN <= int(text) <= INT64_MAX


def is_incomplete(text: str) -> bool:
    """Check whether accumulated input still has an open quote or construct, so the front end
    should ask for another line before evaluating it."""
    if text.count('"') % 2 != 0:
        return True

    depths = {'define': 0, 'begin': 0, 'do': 0, 'condition': 0}
    for token in tokenize(text):
        if token.quoted: continue
        match token.text:
            case ':': depths['define'] += 1
            case ';': depths['define'] -= 1
            case 'begin': depths['begin'] += 1
            case 'until' | 'repeat': depths['begin'] -= 1
            case 'do': depths['do'] += 1
            case 'loop' | '+loop': depths['do'] -= 1
            case 'if' | 'each': depths['condition'] += 1
            case 'then': depths['condition'] -= 1
    return any(d > 0 for d in depths.values())
