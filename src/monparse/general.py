"""
The lexical layer: whitespace and comment skipping, tokens, identifiers and numbers.

Also the driver functions that run a grammar over a whole input.
"""

from __future__ import annotations
from typing import TypeVar

from collections.abc import Collection
import logging
import operator

import monparse.const as const
from monparse.main import (
    Parser,
    Results,
    Accepted,
    ParseFailure,
    succeed,
    fail,
    bind,
    fmap,
    replace,
    satisfy,
    char,
    string,
    digit,
    lower,
    det_or,
    greedy,
    take_while,
    chainl1,
)

_T = TypeVar("_T")

log = logging.getLogger("monparse")


# whitespace and comments

def is_space(c: str) -> bool:
    return c in const.WHITESPACES

spaces: Parser[None] = replace(bind(satisfy(is_space), lambda _: take_while(is_space)), None)
"""One or more whitespace characters."""

def comment_line(start: str) -> Parser[None]:
    """A comment that starts with `start` and runs to the end of the line. The newline itself is not consumed."""
    if not start:
        raise ValueError("The comment marker can't be empty.")
    body = take_while(lambda c: c != const.NEWLINE)
    return replace(bind(string(start), lambda _: body), None)

line_comment: Parser[None] = comment_line(const.COMMENT_START)

junk: Parser[None] = replace(greedy(det_or(spaces, line_comment)), None)
"""Any amount of whitespace and comments, including none. Always consumes as much as it can."""


# lexemes

def token(parser: Parser[_T]) -> Parser[_T]:
    """Runs `parser`, then skips the junk after it."""
    return bind(parser, lambda v: replace(junk, v))

def symbol(text: str) -> Parser[str]:
    return token(string(text))

ident: Parser[str] = bind(lower, lambda x: fmap(take_while(lambda c: c in const.ALNUM), lambda xs: x + xs))
"""A lowercase letter followed by as many letters and digits as possible."""

def identifier(keywords: Collection[str]) -> Parser[str]:
    """
    An `ident` token that isn't one of `keywords`.

    The whole word is read before the check, so `letter` is an identifier even when `let` is a keyword.
    """
    reserved = frozenset(keywords)
    return token(bind(ident, lambda word: fail if word in reserved else succeed(word)))

nat: Parser[int] = chainl1(fmap(digit, int), succeed(lambda m, n: 10*m + n))
int_: Parser[int] = det_or(bind(char("-"), lambda _: fmap(nat, operator.neg)), nat)

natural: Parser[int] = token(nat)
integer: Parser[int] = token(int_)


# driving

def parse(parser: Parser[_T]) -> Parser[_T]:
    """Skips leading junk, then runs `parser`."""
    return bind(junk, lambda _: parser)

def attempt(parser: Parser[_T], text: str) -> Accepted[_T] | ParseFailure:
    """
    Parses the whole of `text` with `parser`, after skipping leading junk.

    The first outcome that leaves nothing behind is accepted.
    If there is none, the failure points at the furthest position any outcome reached.
    """
    log.debug("parsing %d characters with %r", len(text), parser)
    results: Results[_T] = parse(parser)(text)
    complete = [value for value, rest in results if not rest]
    if complete:
        if len(complete) > 1:
            log.debug("ambiguous input, %d complete parses, taking the first", len(complete))
        return Accepted(complete[0], len(complete))
    if results:
        remaining = min(len(rest) for _, rest in results)
    else:
        remaining = len(junk(text)[0][1])
    pos = len(text) - remaining
    if pos < len(text):
        msg = f"Unexpected character {text[pos]!r}."
    else:
        msg = "Unexpected end of input."
    log.debug("parse failed at position %d: %s", pos, msg)
    return ParseFailure(text, pos, msg)

def run(parser: Parser[_T], text: str) -> _T:
    """Like `attempt()`, but returns the value directly and raises a `ParseError` on failure."""
    r = attempt(parser, text)
    if not r:
        raise r.error()
    return r.value

def parse_all(parser: Parser[_T], text: str) -> list[_T]:
    """The values of every parse of `text` that consumes it completely, in order of preference."""
    return [value for value, rest in parse(parser)(text) if not rest]
