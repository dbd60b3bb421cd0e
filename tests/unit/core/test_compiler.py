"""Tests for the filter compiler and its backend dialects."""

from __future__ import annotations

import pytest

from unsearch.adapters.base.exceptions import ConfigurationError
from unsearch.core.filters import ALGOLIA, MEILISEARCH, TYPESENSE, compile_filter
from unsearch.models.filters import (
    Between,
    In,
    and_,
    between,
    eq,
    gt,
    gte,
    in_,
    lt,
    lte,
    neq,
    not_,
    or_,
)

# ── Algolia ───────────────────────────────────────────────────────────────────


class TestAlgoliaDialect:
    @pytest.mark.parametrize(
        ("filter", "expected"),
        [
            (eq("category", "clothing"), "category:clothing"),
            (neq("category", "clothing"), "NOT category:clothing"),
            (gt("price", 10), "price > 10"),
            (gte("price", 10), "price >= 10"),
            (lt("price", 10), "price < 10"),
            (lte("price", 10), "price <= 10"),
            (between("price", 10, 20), "price:10 TO 20"),
            (in_("tags", ["fall", "summer"]), "tags:fall OR tags:summer"),
            (eq("draft", True), "draft:true"),
            (eq("rating", 4.5), "rating:4.5"),
        ],
    )
    def test_leaf_filters(self, filter, expected: str) -> None:
        assert compile_filter(filter, ALGOLIA) == expected

    def test_quotes_values_with_spaces(self) -> None:
        assert compile_filter(eq("author", "josh smith"), ALGOLIA) == 'author:"josh smith"'

    def test_escapes_embedded_quotes(self) -> None:
        assert compile_filter(eq("title", 'say "hi"'), ALGOLIA) == 'title:"say \\"hi\\""'

    def test_and(self) -> None:
        tree = and_(eq("category", "clothing"), gte("price", 10))
        assert compile_filter(tree, ALGOLIA) == "(category:clothing) AND (price >= 10)"

    def test_not_wraps_whole_expression(self) -> None:
        tree = not_(or_(eq("a", 1), eq("b", 2)))
        assert compile_filter(tree, ALGOLIA) == "NOT ((a:1) OR (b:2))"


# ── MeiliSearch ───────────────────────────────────────────────────────────────


class TestMeiliSearchDialect:
    @pytest.mark.parametrize(
        ("filter", "expected"),
        [
            (eq("category", "clothing"), "category = 'clothing'"),
            (neq("category", "clothing"), "category != 'clothing'"),
            (gt("price", 10), "price > 10"),
            (lt("price", 10), "price < 10"),
            (lte("price", 10), "price <= 10"),
            (between("price", 10, 20), "price >= 10 AND price <= 20"),
            (in_("tags", ["fall", "summer"]), "tags IN ['fall', 'summer']"),
            (not_(eq("price", 40)), "NOT (price = 40)"),
            (eq("draft", False), "draft = false"),
        ],
    )
    def test_leaf_filters(self, filter, expected: str) -> None:
        assert compile_filter(filter, MEILISEARCH) == expected

    def test_escapes_single_quotes(self) -> None:
        assert compile_filter(eq("author", "O'Brien"), MEILISEARCH) == "author = 'O\\'Brien'"

    def test_nested(self) -> None:
        tree = and_(eq("category", "clothing"), or_(lt("price", 10), gt("price", 100)))
        assert compile_filter(tree, MEILISEARCH) == (
            "(category = 'clothing') AND ((price < 10) OR (price > 100))"
        )


# ── Typesense ─────────────────────────────────────────────────────────────────


class TestTypesenseDialect:
    @pytest.mark.parametrize(
        ("filter", "expected"),
        [
            (eq("category", "clothing"), "category:=clothing"),
            (neq("category", "clothing"), "category:!=clothing"),
            (gt("price", 10), "price:>10"),
            (gte("price", 10), "price:>=10"),
            (lt("price", 10), "price:<10"),
            (lte("price", 10), "price:<=10"),
            (between("price", 10, 20), "price:[10..20]"),
            (in_("tags", ["fall", "summer"]), "tags:=[fall, summer]"),
            (not_(eq("a", 1)), "!(a:=1)"),
        ],
    )
    def test_leaf_filters(self, filter, expected: str) -> None:
        assert compile_filter(filter, TYPESENSE) == expected

    def test_backtick_quotes_values_with_spaces(self) -> None:
        assert compile_filter(eq("title", "Getting started"), TYPESENSE) == "title:=`Getting started`"

    def test_rejects_backticks_in_values(self) -> None:
        with pytest.raises(ConfigurationError, match="backticks"):
            compile_filter(eq("title", "a `b`"), TYPESENSE)

    def test_and_or(self) -> None:
        tree = or_(and_(eq("category", "clothing"), gte("price", 10)), eq("id", "socks"))
        assert compile_filter(tree, TYPESENSE) == "((category:=clothing) && (price:>=10)) || (id:=socks)"


# ── Constant folding ──────────────────────────────────────────────────────────


@pytest.mark.parametrize("dialect", [ALGOLIA, MEILISEARCH, TYPESENSE], ids=lambda d: d.name)
class TestConstantFolding:
    def test_empty_and_is_true(self, dialect) -> None:
        assert compile_filter(and_(), dialect) is True

    def test_empty_or_is_false(self, dialect) -> None:
        assert compile_filter(or_(), dialect) is False

    def test_not_of_constant(self, dialect) -> None:
        assert compile_filter(not_(and_()), dialect) is False
        assert compile_filter(not_(or_()), dialect) is True

    def test_identity_branches_dropped(self, dialect) -> None:
        single = compile_filter(and_(eq("a", 1)), dialect)
        assert compile_filter(and_(eq("a", 1), and_()), dialect) == single
        assert compile_filter(or_(or_(), eq("a", 1)), dialect) == compile_filter(or_(eq("a", 1)), dialect)

    def test_absorbing_branches_short_circuit(self, dialect) -> None:
        assert compile_filter(and_(eq("a", 1), or_()), dialect) is False
        assert compile_filter(or_(eq("a", 1), and_()), dialect) is True


# ── Malformed trees ───────────────────────────────────────────────────────────


@pytest.mark.parametrize("dialect", [ALGOLIA, MEILISEARCH, TYPESENSE], ids=lambda d: d.name)
class TestMalformed:
    def test_missing_value(self, dialect) -> None:
        with pytest.raises(ConfigurationError, match="missing a value"):
            compile_filter(eq("a", None), dialect)

    def test_between_needs_two_bounds(self, dialect) -> None:
        with pytest.raises(ConfigurationError, match="two bounds"):
            compile_filter(Between(field="price", values=[10]), dialect)
        with pytest.raises(ConfigurationError, match="two bounds"):
            compile_filter(between("price", 10, None), dialect)

    def test_in_needs_values(self, dialect) -> None:
        with pytest.raises(ConfigurationError, match="at least one value"):
            compile_filter(In(field="tags", values=[]), dialect)

    def test_reported_even_when_folded_away(self, dialect) -> None:
        with pytest.raises(ConfigurationError):
            compile_filter(or_(and_(), eq("a", None)), dialect)
