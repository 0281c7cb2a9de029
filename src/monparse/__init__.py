"""
Monadic parser combinators over strings.

A parser is any function from an input string to a list of `(value, remainder)` pairs.
An empty list means the parser failed, more than one pair means the input was ambiguous.

See the `monparse.general` module for the lexical helpers, and `monparse.grammars` for complete grammars you can use as examples.

Defining parsers:
```
addop = ops([(symbol("+"), operator.add), (symbol("-"), operator.sub)])
expression = chainl1(natural, addop)

def pair(inp: str) -> list[tuple[tuple[int, int], str]]:
    return middle(symbol("("), bind(natural, lambda a: fmap(natural, lambda b: (a, b))), symbol(")"))(inp)
```

Using parsers:
```
expression("1 + 2")         # [(3, "")]

r = attempt(expression, "1 + 2")
if r:
    ... # `r` is an `Accepted` object, `r.value == 3`
else:
    ... # `r` is a `ParseFailure` object

run(expression, "1 +")      # raises ParseError
```
"""

import monparse.const as const
import monparse.main
from monparse.main import (
    Parser,
    Results,
    BinaryOp,
    ParseFailure,
    ParseError,
    Accepted,
    succeed,
    fail,
    bind,
    fmap,
    replace,
    defer,
    Forward,
    item,
    satisfy,
    char,
    string,
    eof,
    digit,
    lower,
    upper,
    letter,
    alphanumeric,
    or_,
    first,
    det_or,
    many,
    many1,
    greedy,
    take_while,
    word,
    middle,
    sep_by1,
    sep_by,
    chainl1,
    chainr1,
    ops,
)
import monparse.general as general
from monparse.general import (
    is_space,
    spaces,
    comment_line,
    line_comment,
    junk,
    token,
    symbol,
    ident,
    identifier,
    nat,
    int_,
    natural,
    integer,
    parse,
    attempt,
    run,
    parse_all,
)
