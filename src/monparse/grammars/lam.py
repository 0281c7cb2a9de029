"""
Lambda calculus terms.

```
e ::= \\x -> e
    | let x = e in e
    | x
    | ( e )
    | e e           -- application, groups to the left
```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from monparse import Forward, Parser, bind, chainl1, det_or, fmap, identifier, middle, run, succeed, symbol


class Expr:
    pass

@dataclass(frozen=True)
class Var(Expr):
    name: str

@dataclass(frozen=True)
class Lam(Expr):
    param: str
    body: Expr

@dataclass(frozen=True)
class Let(Expr):
    name: str
    value: Expr
    body: Expr

@dataclass(frozen=True)
class App(Expr):
    fn: Expr
    arg: Expr


KEYWORDS: Final[frozenset[str]] = frozenset({"let", "in"})

expr: Forward[Expr] = Forward("expr")

variable: Parser[str] = identifier(KEYWORDS)

var: Parser[Expr] = fmap(variable, Var)

paren: Parser[Expr] = middle(symbol("("), expr, symbol(")"))

lam: Parser[Expr] = bind(symbol("\\"), lambda _:
    bind(variable, lambda x:
        bind(symbol("->"), lambda _:
            fmap(expr, lambda e: Lam(x, e)))))

# `let` isn't required to end at a word boundary, so `letx = y in x` binds `x`.
# `letter` still falls through to `var`, since `ter` isn't followed by `=`.
local: Parser[Expr] = bind(symbol("let"), lambda _:
    bind(variable, lambda x:
        bind(symbol("="), lambda _:
            bind(expr, lambda e1:
                bind(symbol("in"), lambda _:
                    fmap(expr, lambda e2: Let(x, e1, e2)))))))

atom: Parser[Expr] = det_or(lam, local, var, paren)

expr.define(chainl1(atom, succeed(App)))


def parse_expr(text: str) -> Expr:
    """Parses a complete term. Raises `ParseError` if `text` isn't one."""
    return run(expr, text)
