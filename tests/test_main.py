"""Tests for the monparse.main module.

Monad laws and the result invariants are property tests. The combinators are
checked against hand-computed result lists, including their order.
"""

from __future__ import annotations

import operator

import pytest
from hypothesis import given
from hypothesis import strategies as st

from monparse.general import nat
from monparse.main import (
    Accepted,
    Forward,
    alphanumeric,
    bind,
    chainl1,
    chainr1,
    char,
    defer,
    det_or,
    digit,
    eof,
    fail,
    first,
    fmap,
    greedy,
    item,
    letter,
    lower,
    many,
    many1,
    middle,
    ops,
    or_,
    replace,
    satisfy,
    sep_by,
    sep_by1,
    string,
    succeed,
    take_while,
    upper,
    word,
)

SAMPLE_PARSERS = [
    item,
    digit,
    fail,
    string("ab"),
    many(digit),
    many1(letter),
    or_(digit, letter),
    or_(string("a"), string("ab")),
    sep_by(digit, char(",")),
]

_parsers = st.sampled_from(SAMPLE_PARSERS)
_inputs = st.text(alphabet="ab1,2 ", max_size=12)


def _pair_with_next(v: object):
    return bind(item, lambda c: succeed((v, c)))


def _many_letters(v: object):
    return fmap(many(letter), lambda xs: (v, xs))


# ============================================================================
# TestMonadLaws
# ============================================================================


class TestMonadLaws:
    """`succeed` and `bind` form a monad, on any input."""

    @given(v=st.integers(), inp=_inputs)
    def test_left_identity(self, v: int, inp: str) -> None:
        for f in (_pair_with_next, _many_letters):
            assert bind(succeed(v), f)(inp) == f(v)(inp)

    @given(p=_parsers, inp=_inputs)
    def test_right_identity(self, p, inp: str) -> None:
        assert bind(p, succeed)(inp) == p(inp)

    @given(p=_parsers, inp=_inputs)
    def test_associativity(self, p, inp: str) -> None:
        left = bind(bind(p, _pair_with_next), _many_letters)
        right = bind(p, lambda v: bind(_pair_with_next(v), _many_letters))
        assert left(inp) == right(inp)

    @given(p=_parsers, inp=_inputs)
    def test_fail_absorbs_sequencing(self, p, inp: str) -> None:
        assert bind(fail, lambda _: p)(inp) == []
        assert bind(p, lambda _: fail)(inp) == []

    @given(p=_parsers, inp=_inputs)
    def test_remainders_are_suffixes(self, p, inp: str) -> None:
        for _, rest in p(inp):
            assert len(rest) <= len(inp)
            assert inp.endswith(rest)


# ============================================================================
# TestElementary
# ============================================================================


class TestElementary:

    @given(inp=st.text(max_size=20))
    def test_item_consumes_exactly_one(self, inp: str) -> None:
        if inp:
            assert item(inp) == [(inp[0], inp[1:])]
        else:
            assert item(inp) == []

    def test_succeed_does_not_consume(self) -> None:
        assert succeed(1)("abc") == [(1, "abc")]

    def test_satisfy(self) -> None:
        assert satisfy(str.isupper)("Ab") == [("A", "b")]
        assert satisfy(str.isupper)("ab") == []
        assert satisfy(str.isupper)("") == []

    def test_char(self) -> None:
        assert char("x")("xy") == [("x", "y")]
        assert char("x")("yx") == []

    def test_char_needs_a_single_character(self) -> None:
        with pytest.raises(ValueError):
            char("xy")

    def test_character_classes(self) -> None:
        assert digit("7a") == [("7", "a")]
        assert digit("a7") == []
        assert lower("aB") == [("a", "B")]
        assert lower("Ba") == []
        assert upper("Ba") == [("B", "a")]
        assert letter("Q1") == [("Q", "1")]
        assert letter("1Q") == []
        assert alphanumeric("1Q") == [("1", "Q")]
        assert alphanumeric("_") == []

    def test_string(self) -> None:
        assert string("let")("let x") == [("let", " x")]
        assert string("let")("le") == []
        assert string("")("abc") == [("", "abc")]

    def test_eof(self) -> None:
        assert eof("") == [(None, "")]
        assert eof("a") == []

    def test_word_lists_every_stopping_point(self) -> None:
        assert word("ab1") == [("ab", "1"), ("a", "b1"), ("", "ab1")]
        assert word("1") == [("", "1")]
        assert word("") == [("", "")]

    @given(inp=st.text(alphabet="ab1 ", max_size=12))
    def test_take_while_is_the_longest_run(self, inp: str) -> None:
        values, rest = first(many(satisfy(str.isalpha)))(inp)[0]
        assert take_while(str.isalpha)(inp) == [("".join(values), rest)]

    def test_accepted_is_not_hashable(self) -> None:
        assert Accepted([1]) == Accepted([1])
        with pytest.raises(TypeError):
            hash(Accepted(1))


# ============================================================================
# TestChoice
# ============================================================================


class TestChoice:

    def test_or_keeps_every_outcome_in_order(self) -> None:
        assert or_(string("a"), string("ab"))("abc") == [("a", "bc"), ("ab", "c")]

    def test_or_with_one_failing_branch(self) -> None:
        assert or_(digit, letter)("x") == [("x", "")]

    def test_or_needs_two_parsers(self) -> None:
        with pytest.raises(ValueError):
            or_(digit)

    def test_first(self) -> None:
        assert first(or_(string("a"), string("ab")))("abc") == [("a", "bc")]
        assert first(fail)("abc") == []

    def test_det_or_takes_first_success(self) -> None:
        assert det_or(string("ab"), string("a"))("abc") == [("ab", "c")]
        assert det_or(digit, string("a"))("abc") == [("a", "bc")]
        assert det_or(digit, upper)("abc") == []

    def test_det_or_truncates_the_winning_branch(self) -> None:
        assert det_or(many(digit), succeed([]))("12") == [(["1", "2"], "")]

    def test_det_or_commits_even_when_the_rest_fails(self) -> None:
        short, full = string("a"), string("ab")
        assert bind(det_or(short, full), lambda v: replace(eof, v))("ab") == []
        assert bind(or_(short, full), lambda v: replace(eof, v))("ab") == [("ab", "")]

    def test_det_or_does_not_run_later_alternatives(self) -> None:
        calls: list[str] = []
        def spy(inp: str) -> list[tuple[str, str]]:
            calls.append(inp)
            return []
        assert det_or(digit, spy)("1") == [("1", "")]
        assert calls == []


# ============================================================================
# TestRepetition
# ============================================================================


class TestRepetition:

    def test_many_lists_every_stopping_point_longest_first(self) -> None:
        assert many(digit)("12a") == [(["1", "2"], "a"), (["1"], "2a"), ([], "12a")]

    def test_many_zero_matches(self) -> None:
        assert many(digit)("abc") == [([], "abc")]
        assert many(digit)("") == [([], "")]

    @given(inp=st.text(alphabet="0123456789ab", max_size=20))
    def test_many_first_result_is_the_maximal_run(self, inp: str) -> None:
        run = 0
        while run < len(inp) and inp[run].isdigit():
            run += 1
        results = many(digit)(inp)
        assert len(results) == run + 1
        values, rest = results[0]
        assert len(values) == run
        assert rest == inp[run:]

    def test_many_explores_ambiguous_steps_depth_first(self) -> None:
        p = or_(string("a"), string("aa"))
        assert many(p)("aa") == [
            (["a", "a"], ""),
            (["a"], "a"),
            (["aa"], ""),
            ([], "aa"),
        ]

    def test_many_stops_on_steps_that_consume_nothing(self) -> None:
        assert many(succeed(1))("abc") == [([], "abc")]

    def test_many_on_long_input(self) -> None:
        values, rest = first(many(digit))("1" * 2000 + "x")[0]
        assert len(values) == 2000
        assert rest == "x"

    def test_many1(self) -> None:
        assert many1(digit)("12a")[0] == (["1", "2"], "a")
        assert many1(digit)("1a") == [(["1"], "a")]
        assert many1(digit)("abc") == []

    @given(p=_parsers, inp=_inputs)
    def test_greedy_is_the_first_result_of_many(self, p, inp: str) -> None:
        assert greedy(p)(inp) == first(many(p))(inp)

    def test_greedy_commits_to_each_step(self) -> None:
        p = or_(string("a"), string("aa"))
        assert greedy(p)("aaa") == [(["a", "a", "a"], "")]
        assert greedy(succeed(1))("abc") == [([], "abc")]


# ============================================================================
# TestStructure
# ============================================================================


addop = ops([(char("+"), operator.add), (char("-"), operator.sub)])
expop = ops([(char("^"), operator.pow)])


class TestStructure:

    def test_middle(self) -> None:
        p = middle(char("("), digit, char(")"))
        assert p("(1)x") == [("1", "x")]
        assert p("(1") == []
        assert p("1)") == []

    def test_sep_by1(self) -> None:
        p = sep_by1(digit, char(","))
        assert p("1,2,3")[0] == (["1", "2", "3"], "")
        assert p("1,2,")[0] == (["1", "2"], ",")
        assert p("x") == []

    def test_sep_by(self) -> None:
        p = sep_by(digit, char(","))
        assert p("x") == [([], "x")]
        assert p("1,2")[0] == (["1", "2"], "")
        assert p("1,2")[-1] == ([], "1,2")

    def test_chainl1_folds_left(self) -> None:
        assert chainl1(nat, addop)("1+2+3") == [(6, "")]
        assert chainl1(nat, addop)("8-3-2") == [(3, "")]

    def test_chainl1_stops_before_a_dangling_operator(self) -> None:
        assert chainl1(nat, addop)("1+") == [(1, "+")]
        assert chainl1(nat, addop)("7") == [(7, "")]
        assert chainl1(nat, addop)("+1") == []

    def test_chainl1_on_long_input(self) -> None:
        assert chainl1(nat, addop)("+".join(["1"] * 3000)) == [(3000, "")]

    def test_chainr1_folds_right(self) -> None:
        assert chainr1(nat, expop)("2^3^2") == [(512, "")]
        assert chainr1(nat, ops([(char("-"), operator.sub)]))("8-3-2") == [(7, "")]

    def test_chainr1_stops_before_a_dangling_operator(self) -> None:
        assert chainr1(nat, expop)("2^") == [(2, "^")]
        assert chainr1(nat, expop)("2") == [(2, "")]
        assert chainr1(nat, expop)("^2") == []

    def test_chainr1_on_long_input(self) -> None:
        sub = ops([(char("-"), operator.sub)])
        # 1-(1-(1-...)) alternates between 1 and 0
        assert chainr1(nat, sub)("-".join(["1"] * 3001)) == [(1, "")]

    def test_ops_yields_the_action(self) -> None:
        assert addop("-1") == [(operator.sub, "1")]
        assert addop("*1") == []

    def test_ops_with_overlapping_tokens_is_ambiguous(self) -> None:
        p = ops([(string("a"), 1), (string("ab"), 2)])
        assert p("abc") == [(1, "bc"), (2, "c")]

    def test_ops_needs_an_operator(self) -> None:
        with pytest.raises(ValueError):
            ops([])


# ============================================================================
# TestForwardReferences
# ============================================================================


class TestForwardReferences:

    def test_forward(self) -> None:
        nested: Forward[int] = Forward("nested")
        nested.define(det_or(replace(char("x"), 0), middle(char("("), fmap(nested, lambda n: n + 1), char(")"))))
        assert nested("((x))") == [(2, "")]

    def test_undefined_forward(self) -> None:
        with pytest.raises(ValueError):
            Forward("undefined")("abc")

    def test_defer_resolves_at_parse_time(self) -> None:
        table = {"rule": fail}
        p = defer(lambda: table["rule"])
        assert p("1") == []
        table["rule"] = digit
        assert p("1") == [("1", "")]
