"""
The parser type and the combinators everything else is built from.
"""

from __future__ import annotations
from typing import Any, Generic, Literal, Protocol, Self, TypeVar, Callable, Sequence, TypeAlias

from functools import reduce

import monparse.const as const


_T = TypeVar("_T")
_U = TypeVar("_U")
_CT = TypeVar("_CT", covariant=True)
_DataCovT = TypeVar("_DataCovT", covariant=True)

Results: TypeAlias = list[tuple[_T, str]]
"""An ordered list of `(value, remainder)` pairs. Empty means failure, more than one means ambiguity."""

BinaryOp: TypeAlias = Callable[[_T, _T], _T]



class Parser(Protocol[_CT]):
    """
    Anything that maps an input string to a list of `(value, remainder)` pairs.

    Every remainder is a suffix of the input. Parsers hold no state, so one definition can be reused for any number of inputs.

    ```
    results = parser("input")
    if results:
        value, rest = results[0]    # the preferred outcome
    else:
        ... # failed
    ```
    """
    def __call__(self, inp: str, /) -> Results[_CT]: ...



class ParseFailure:
    """
    Returned from `attempt()` when no candidate consumed the whole input. Can be converted into a `ParseError`.

    ```
    r = attempt(parser, text)
    if r:
        ... # `r` is an `Accepted` object
    else:
        ... # `r` is a `ParseFailure` object
    ```
    """

    def __init__(self, src: str, pos: int, msg: str | None = None) -> None:
        """
        `src`: The string that was being parsed.
        `pos`: The furthest position reached by any candidate.
        `msg`: The reason for the failure.
        """
        self.src: str = src
        self.pos: int = pos
        self.msg: str | None = msg

    def error(self) -> ParseError:
        """Converts this to a ParseError."""
        return ParseError(self.src, self.pos, self.msg)

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> str:
        return f"<ParseFailure at {self.pos}: {self.msg}>"

class ParseError(Exception):
    """
    Raised by `run()` when the input could not be parsed completely.

    The position is rendered into a note, with the offending line and a caret under the column.
    """

    def __init__(self, src: str, pos: int, msg: str | None = None) -> None:
        if msg is None:
            super().__init__()
        else:
            super().__init__(msg)
        self.src: str = src
        self.pos: int = pos
        self.append_pos_note(pos)

    def append_pos_note(self, pos: int, msg: str | None = None) -> Self:
        note: list[str] = [] if msg is None else [msg]

        pos = min(pos, len(self.src))
        line = self.src.count("\n", 0, pos) + 1
        column = pos - self.src.rfind("\n", 0, pos) # rfind gives -1 on the first line
        note.append(f"At position {pos} (line {line}, column {column})")

        lines = self.src.splitlines()
        if len(lines) > line-1:
            line_str = lines[line-1]
            if len(line_str) >= column-1:
                if column <= 20:
                    note.append(f"{line_str[:40]}\n{' '*(column-1)}^")
                else:
                    note.append(f"{line_str[(column-20):(column+20)]}\n{' '*19}^")
        self.add_note("\n".join(note))
        return self

class Accepted(Generic[_DataCovT]):
    """
    Returned from `attempt()` when at least one candidate consumed the whole input.

    `value` is the first complete parse. `alternatives` counts all complete parses, so anything above 1 means the grammar was ambiguous for this input.
    """
    def __init__(self, value: _DataCovT, alternatives: int = 1) -> None:
        self.value: _DataCovT = value
        self.alternatives: int = alternatives

    def is_ambiguous(self) -> bool:
        return self.alternatives > 1

    def __bool__(self) -> Literal[True]:
        return True

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Accepted):
            return self.value == other.value and self.alternatives == other.alternatives
        return NotImplemented

    # values are often lists or dicts
    __hash__ = None # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<Accepted {self.value!r}" + (f" (1 of {self.alternatives})>" if self.is_ambiguous() else ">")



# monad

def succeed(value: _T) -> Parser[_T]:
    """Succeeds with `value` without consuming anything."""
    return lambda inp: [(value, inp)]

def fail(inp: str) -> Results[Any]:
    """Never succeeds."""
    return []

def bind(parser: Parser[_T], f: Callable[[_T], Parser[_U]]) -> Parser[_U]:
    """
    Sequences `parser` with a parser chosen from its value.

    Every outcome of `parser` is continued with `f(value)` on its remainder, and the results are concatenated in order.
    """
    return lambda inp: [pair for value, rest in parser(inp) for pair in f(value)(rest)]

def fmap(parser: Parser[_T], f: Callable[[_T], _U]) -> Parser[_U]:
    """Applies `f` to every value produced by `parser`."""
    return lambda inp: [(f(value), rest) for value, rest in parser(inp)]

def replace(parser: Parser[Any], value: _T) -> Parser[_T]:
    """Discards the values produced by `parser` and yields `value` instead."""
    return lambda inp: [(value, rest) for _, rest in parser(inp)]

def defer(thunk: Callable[[], Parser[_T]]) -> Parser[_T]:
    """
    Looks up the real parser only when parsing.

    For rules that refer to themselves or to rules defined further down:
    ```
    factor = det_or(natural, middle(symbol("("), defer(lambda: expression), symbol(")")))
    ```
    """
    return lambda inp: thunk()(inp)


class Forward(Generic[_T]):
    """
    A parser that can be used before it is defined.

    ```
    expr: Forward[Expr] = Forward("expr")
    paren = middle(symbol("("), expr, symbol(")"))
    ...
    expr.define(chainl1(atom, succeed(App)))
    ```
    """
    def __init__(self, name: str | None = None) -> None:
        self.name: str | None = name
        self.parser: Parser[_T] | None = None

    def define(self, parser: Parser[_T]) -> None:
        self.parser = parser

    def __call__(self, inp: str) -> Results[_T]:
        if self.parser is None:
            raise ValueError(f"Forward parser {self.name or '<anonymous>'} was used before being defined.")
        return self.parser(inp)

    def __repr__(self) -> str:
        return f"<Forward {self.name or '<anonymous>'}{'' if self.parser is not None else ' (undefined)'}>"



# elementary parsers

def item(inp: str) -> Results[str]:
    """Consumes any single character."""
    if not inp:
        return []
    return [(inp[0], inp[1:])]

def satisfy(predicate: Callable[[str], bool]) -> Parser[str]:
    """Consumes a single character if `predicate` accepts it."""
    return bind(item, lambda c: succeed(c) if predicate(c) else fail)

def char(value: str) -> Parser[str]:
    """Matches the given character. Case sensitive."""
    if len(value) != 1:
        raise ValueError(f"Expected a single character, got {value!r}.")
    return satisfy(lambda c: c == value)

def string(value: str) -> Parser[str]:
    """
    Matches the given string. Case sensitive.

    The empty string always matches without consuming.
    """
    def inner(inp: str) -> Results[str]:
        if inp.startswith(value):
            return [(value, inp[len(value):])]
        return []
    return inner

def eof(inp: str) -> Results[None]:
    """Succeeds only at the end of the input."""
    if inp:
        return []
    return [(None, inp)]

digit: Parser[str] = satisfy(lambda c: c in const.DECIMAL)
lower: Parser[str] = satisfy(lambda c: c in const.LOWERCASE)
upper: Parser[str] = satisfy(lambda c: c in const.UPPERCASE)



# choice

def or_(*parsers: Parser[_T]) -> Parser[_T]:
    """
    Nondeterministic choice.

    Runs every parser on the same input and concatenates their results, so all of them can contribute outcomes.
    """
    if len(parsers) < 2:
        raise ValueError("At least two parsers required.")
    return lambda inp: [pair for parser in parsers for pair in parser(inp)]

def first(parser: Parser[_T]) -> Parser[_T]:
    """Keeps only the preferred outcome of `parser`, if any."""
    return lambda inp: parser(inp)[:1]

def det_or(*parsers: Parser[_T]) -> Parser[_T]:
    """
    Deterministic choice. Same as `first(or_(*parsers))`.

    Tries the parsers in order and commits to the first outcome of the first one that succeeds. Later alternatives are not run at all, even if the committed outcome makes an enclosing parser fail.
    """
    if len(parsers) < 2:
        raise ValueError("At least two parsers required.")
    def inner(inp: str) -> Results[_T]:
        for parser in parsers:
            if results := parser(inp):
                return results[:1]
        return []
    return inner

letter: Parser[str] = or_(lower, upper)
alphanumeric: Parser[str] = or_(letter, digit)

def _run_length(inp: str, predicate: Callable[[str], bool]) -> int:
    end = 0
    while end < len(inp) and predicate(inp[end]):
        end += 1
    return end

def take_while(predicate: Callable[[str], bool]) -> Parser[str]:
    """
    The longest run of characters accepted by `predicate`, possibly empty.

    Same result as `first(many(satisfy(predicate)))` joined into a string, but scans the input once instead of slicing it per character.
    """
    def inner(inp: str) -> Results[str]:
        end = _run_length(inp, predicate)
        return [(inp[:end], inp[end:])]
    return inner

def word(inp: str) -> Results[str]:
    """
    A run of letters, possibly empty. Produces every way of stopping, longest first.

    ```
    word("ab1")     # [("ab", "1"), ("a", "b1"), ("", "ab1")]
    ```
    """
    end = _run_length(inp, lambda c: c in const.ALPHABETIC)
    return [(inp[:n], inp[n:]) for n in range(end, -1, -1)]



# repetition

def many(parser: Parser[_T]) -> Parser[list[_T]]:
    """
    Zero or more repetitions of `parser`.

    Produces every way of stopping, longest first. When `parser` is itself ambiguous, its alternatives are explored depth first, in order.

    A repetition that consumes nothing stops there, so `many()` always terminates.
    """
    def inner(inp: str) -> Results[list[_T]]:
        results: Results[list[_T]] = []
        # (values so far, remainder, outcomes of `parser` on that remainder not yet explored)
        stack = [([], inp, iter(parser(inp)))]
        while stack:
            values, rest, pending = stack[-1]
            for value, next_rest in pending:
                if len(next_rest) < len(rest):
                    stack.append(([*values, value], next_rest, iter(parser(next_rest))))
                    break
            else:
                stack.pop()
                results.append((values, rest))
        return results
    return inner

def many1(parser: Parser[_T]) -> Parser[list[_T]]:
    """One or more repetitions of `parser`."""
    rest = many(parser)
    return bind(parser, lambda x: fmap(rest, lambda xs: [x, *xs]))

def greedy(parser: Parser[_T]) -> Parser[list[_T]]:
    """
    The longest repetition of `parser` only. Same result as `first(many(parser))`.

    Each step commits to the first outcome of `parser` that consumes something, so the alternatives `many()` would also produce are never built.
    """
    def inner(inp: str) -> Results[list[_T]]:
        values: list[_T] = []
        rest = inp
        while True:
            for value, next_rest in parser(rest):
                if len(next_rest) < len(rest):
                    values.append(value)
                    rest = next_rest
                    break
            else:
                return [(values, rest)]
    return inner



# structure

def middle(left: Parser[Any], mid: Parser[_T], right: Parser[Any]) -> Parser[_T]:
    """Parses all three in sequence and keeps the value of the middle one."""
    return bind(left, lambda _: bind(mid, lambda x: replace(right, x)))

def sep_by1(parser: Parser[_T], sep: Parser[Any]) -> Parser[list[_T]]:
    """One or more of `parser`, separated by `sep`. The separator values are dropped."""
    rest = many(bind(sep, lambda _: parser))
    return bind(parser, lambda x: fmap(rest, lambda xs: [x, *xs]))

def sep_by(parser: Parser[_T], sep: Parser[Any]) -> Parser[list[_T]]:
    """Like `sep_by1()`, but also succeeds with an empty list."""
    return or_(sep_by1(parser, sep), succeed([]))

def _operator_step(parser: Parser[_T], op: Parser[BinaryOp[_T]]) -> Parser[tuple[BinaryOp[_T], _T]]:
    return first(bind(op, lambda f: fmap(parser, lambda y: (f, y))))

def chainl1(parser: Parser[_T], op: Parser[BinaryOp[_T]]) -> Parser[_T]:
    """
    One or more of `parser` separated by `op`, folded left.

    `1-2-3` becomes `(1-2)-3`. The chain stops as soon as an operator or its right operand fails to parse.
    """
    step = _operator_step(parser, op)
    def inner(inp: str) -> Results[_T]:
        results: Results[_T] = []
        for acc, rest in parser(inp):
            while pairs := step(rest):
                (f, y), next_rest = pairs[0]
                if len(next_rest) >= len(rest):
                    break
                acc = f(acc, y)
                rest = next_rest
            results.append((acc, rest))
        return results
    return inner

def chainr1(parser: Parser[_T], op: Parser[BinaryOp[_T]]) -> Parser[_T]:
    """
    One or more of `parser` separated by `op`, folded right.

    `2^3^2` becomes `2^(3^2)`. If no operator follows the first operand, that operand is the result.
    """
    step = _operator_step(parser, op)
    def inner(inp: str) -> Results[_T]:
        results: Results[_T] = []
        for value, rest in parser(inp):
            operands = [value]
            operators: list[BinaryOp[_T]] = []
            while pairs := step(rest):
                (f, y), next_rest = pairs[0]
                if len(next_rest) >= len(rest):
                    break
                operators.append(f)
                operands.append(y)
                rest = next_rest
            acc = operands.pop()
            while operators:
                acc = operators.pop()(operands.pop(), acc)
            results.append((acc, rest))
        return results
    return inner

def ops(pairs: Sequence[tuple[Parser[Any], _T]]) -> Parser[_T]:
    """
    An operator table. Matches any of the token parsers and yields the action paired with it.

    The alternatives are combined with `or_()`, so tokens that can match the same prefix give an ambiguous result. Give it disjoint tokens.
    """
    if len(pairs) <= 0:
        raise ValueError("At least one operator required.")
    return reduce(or_, [replace(token, action) for token, action in pairs])
