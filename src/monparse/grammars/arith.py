"""
Integer arithmetic with `+`, `-`, `*`, `^` and parentheses.

`^` binds tightest and groups to the right, `*` comes next, `+` and `-` bind loosest. Everything except `^` groups to the left.
"""

from __future__ import annotations

import operator

from monparse import Parser, chainl1, chainr1, defer, det_or, middle, natural, ops, run, symbol


def exponent(x: int, y: int) -> int:
    """`x` to the power of `y`, truncated towards zero for negative `y`."""
    return int(x ** y)


addop = ops([(symbol("+"), operator.add), (symbol("-"), operator.sub)])
mulop = ops([(symbol("*"), operator.mul)])
expop = ops([(symbol("^"), exponent)])

factor: Parser[int] = det_or(natural, middle(symbol("("), defer(lambda: expression), symbol(")")))
power: Parser[int] = chainr1(factor, expop)
term: Parser[int] = chainl1(power, mulop)
expression: Parser[int] = chainl1(term, addop)


def evaluate(text: str) -> int:
    """Evaluates `text`. Raises `ParseError` if it isn't a complete expression."""
    return run(expression, text)
