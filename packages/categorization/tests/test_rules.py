"""Tests for keyword-based category matching."""

import pytest

from packages.categorization.rules import (
    Category,
    CategoryMatch,
    KeywordMatcher,
    classify_transaction,
)


def test_first_matching_category_wins():
    categories = [
        Category(id="1", name="Luz", type="despesa", keywords="luz,energia"),
        Category(id="2", name="Energia", type="despesa", keywords="energia"),
    ]
    match = classify_transaction("Conta de Energia Elétrica", categories)
    assert match == CategoryMatch(category_id="1", category_name="Luz")


def test_no_match_returns_both_none():
    categories = [
        Category(id="1", name="Água", type="despesa", keywords="água"),
        Category(id="2", name="Luz", type="despesa", keywords="luz"),
    ]
    match = classify_transaction("Aluguel", categories)
    assert match.category_id is None
    assert match.category_name is None
    assert not match.matched


def test_case_insensitive_and_trimmed_keywords():
    categories = [Category(id="1", name="Limpeza", type="despesa", keywords="  PRODUTOS de LIMPEZA , vassoura")]
    assert classify_transaction("Compra produtos de limpeza", categories).category_id == "1"
    assert classify_transaction("VASSOURA NOVA", categories).category_id == "1"


@pytest.mark.parametrize("keywords", [None, "", " , ,"])
def test_category_without_keywords_never_matches(keywords):
    categories = [
        Category(id="1", name="Vazia", type="despesa", keywords=keywords),
        Category(id="2", name="Manutenção", type="despesa", keywords="elevador"),
    ]
    match = classify_transaction("Manutenção elevador", categories)
    assert match.category_id == "2"


def test_empty_description_never_matches():
    categories = [Category(id="1", name="Tudo", type="despesa", keywords="a")]
    assert classify_transaction("", categories) == CategoryMatch()


def test_no_categories():
    assert classify_transaction("Qualquer coisa", []) == CategoryMatch()


def test_substring_not_word_match():
    categories = [Category(id="1", name="Gás", type="despesa", keywords="gas")]
    assert classify_transaction("Gasolina gerador", categories).category_id == "1"


def test_type_is_passed_through_not_interpreted():
    categories = [Category(id="1", name="Aluguel", type="receita", keywords="aluguel")]
    assert classify_transaction("Aluguel salão de festas", categories).category_name == "Aluguel"


def test_mappings_accepted():
    rows = [{"id": 7, "name": "Portaria", "type": "despesa", "keywords": "portaria"}]
    match = classify_transaction("Serviço de portaria", rows)
    assert match == CategoryMatch(category_id="7", category_name="Portaria")


def test_inputs_not_mutated():
    rows = [{"id": "1", "name": "Luz", "type": "despesa", "keywords": "LUZ"}]
    snapshot = [dict(r) for r in rows]
    classify_transaction("conta de luz", rows)
    assert rows == snapshot


def test_keyword_list_preserves_order():
    category = Category(id="1", name="x", type="y", keywords="b, A ,,c")
    assert category.keyword_list() == ["b", "a", "c"]


def test_matcher_reusable_and_equivalent():
    categories = [
        Category(id="1", name="Luz", type="despesa", keywords="luz"),
        Category(id="2", name="Água", type="despesa", keywords="água,agua"),
    ]
    matcher = KeywordMatcher(categories)
    for text in ["Conta de luz", "Agua mineral", "Aluguel"]:
        assert matcher.predict(text) == classify_transaction(text, categories)
