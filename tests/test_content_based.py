import pytest

from recsys.data import Document
from recsys.recommendation.content_based import (
    ContentBasedRecommender,
    InvalidInputError,
    recommend,
)


def test_query_shares_term_with_first_document(small_corpus):
    results = recommend(small_corpus, "cat", top_n=2)

    assert [doc.id for doc, _ in results] == ["a", "b"]
    assert results[0][1] > 0
    assert results[1][1] == 0.0


@pytest.mark.parametrize("top_n", [0, 1, 3, 5, 10])
def test_top_n_truncation(pets_corpus, top_n):
    results = recommend(pets_corpus, "lazy fox", top_n=top_n)

    assert len(results) == min(top_n, len(pets_corpus))
    scores = [score for _, score in results]
    assert scores == sorted(scores, reverse=True)


def test_scores_within_unit_interval(pets_corpus):
    for _, score in recommend(pets_corpus, "the lazy cat", top_n=10):
        assert 0.0 <= score <= 1.0


def test_ties_keep_corpus_order():
    docs = [
        Document(id="x", content="apple"),
        Document(id="y", content="banana"),
        Document(id="z", content="cherry"),
    ]

    results = recommend(docs, "kiwi", top_n=3)

    assert [doc.id for doc, _ in results] == ["x", "y", "z"]
    assert all(score == 0.0 for _, score in results)


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
def test_empty_query_is_invalid_input(small_corpus, query):
    with pytest.raises(InvalidInputError):
        recommend(small_corpus, query, top_n=2)


def test_invalid_input_is_a_value_error():
    assert issubclass(InvalidInputError, ValueError)


def test_negative_top_n_rejected(small_corpus):
    with pytest.raises(ValueError):
        recommend(small_corpus, "cat", top_n=-1)


def test_empty_corpus_returns_nothing():
    assert recommend([], "cat", top_n=5) == []


def test_recommender_uses_default_top_n(pets_corpus):
    recommender = ContentBasedRecommender(pets_corpus, top_n=2)

    assert len(recommender.recommend("fox")) == 2
    assert len(recommender.recommend("fox", top_n=4)) == 4


def test_find_similar_documents_excludes_reference(pets_corpus):
    recommender = ContentBasedRecommender(pets_corpus)

    results = recommender.find_similar_documents("2", top_n=10)

    assert "2" not in [doc.id for doc, _ in results]
    assert len(results) == len(pets_corpus) - 1
    # only documents sharing "lazy" or "cat" score above zero
    assert {doc.id for doc, _ in results[:2]} == {"1", "5"}
    assert all(score == 0.0 for _, score in results[2:])


def test_find_similar_documents_unknown_id(pets_corpus):
    with pytest.raises(KeyError):
        ContentBasedRecommender(pets_corpus).find_similar_documents("missing")
