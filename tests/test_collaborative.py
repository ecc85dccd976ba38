import numpy as np
import pytest
from scipy import sparse

from recsys.recommendation.collaborative import (
    ItemBasedRecommender,
    compute_item_item_similarity,
    compute_item_similarity,
    highest_rated_items,
    k_nearest,
    most_frequently_rated_items,
)


def test_diagonal_is_one_for_rated_items(rating_matrix):
    similarity = compute_item_item_similarity(rating_matrix)

    for i in range(similarity.shape[0]):
        assert abs(similarity[i, i] - 1.0) < 1e-6


def test_similarity_is_symmetric(rating_matrix):
    similarity = compute_item_similarity(rating_matrix)

    assert similarity.shape == (4, 4)
    assert (similarity == similarity.T).all()


def test_similarity_values(rating_matrix):
    similarity = compute_item_similarity(rating_matrix)

    # items 0 and 1: [4, 3, 0] . [5, 5, 0] / (5 * sqrt(50))
    assert similarity[0, 1] == pytest.approx(35 / (5 * np.sqrt(50)))
    assert np.all((similarity >= 0) & (similarity <= 1.0))


def test_unrated_item_has_zero_similarity():
    matrix = np.array([[1.0, 0.0], [2.0, 0.0]])

    similarity = compute_item_similarity(matrix)

    assert similarity[1, 1] == 0.0
    assert similarity[0, 1] == 0.0
    assert similarity[0, 0] == pytest.approx(1.0)


def test_vectorized_matches_pairwise(rating_matrix):
    pairwise = compute_item_similarity(rating_matrix, method="pairwise")
    vectorized = compute_item_similarity(rating_matrix, method="vectorized")

    np.testing.assert_allclose(pairwise, vectorized, atol=1e-9)


def test_single_worker_matches_pool(rating_matrix):
    np.testing.assert_array_equal(
        compute_item_similarity(rating_matrix, max_workers=1),
        compute_item_similarity(rating_matrix, max_workers=4),
    )


def test_accepts_sparse_input(rating_matrix):
    np.testing.assert_allclose(
        compute_item_similarity(sparse.csr_matrix(rating_matrix)),
        compute_item_similarity(rating_matrix),
    )


@pytest.mark.parametrize("method", ["pairwise", "vectorized"])
def test_similarity_never_exceeds_unit_interval(method):
    rng = np.random.default_rng(0)

    for _ in range(200):
        matrix = rng.uniform(0.0, 5.0, size=(7, 9)) * (rng.random((7, 9)) < 0.6)
        similarity = compute_item_similarity(matrix, max_workers=1, method=method)

        assert similarity.max() <= 1.0
        assert similarity.min() >= -1.0
        assert np.all(np.diag(similarity) <= 1.0)


@pytest.mark.parametrize("method", ["pairwise", "vectorized"])
def test_nan_counts_as_unrated(method):
    with_nan = compute_item_similarity(np.array([[4.0, np.nan], [3.0, 2.0]]), method=method)
    with_zero = compute_item_similarity(np.array([[4.0, 0.0], [3.0, 2.0]]), method=method)

    assert not np.isnan(with_nan).any()
    np.testing.assert_array_equal(with_nan, with_zero)


def test_rejects_non_2d_input():
    with pytest.raises(ValueError):
        compute_item_similarity(np.array([1.0, 2.0, 3.0]))


def test_rejects_unknown_method(rating_matrix):
    with pytest.raises(ValueError):
        compute_item_similarity(rating_matrix, method="pearson")


@pytest.fixture
def similarity():
    return np.array([
        [1.0, 0.5, 0.5, 0.2],
        [0.5, 1.0, 0.9, 0.1],
        [0.5, 0.9, 1.0, 0.3],
        [0.2, 0.1, 0.3, 1.0],
    ])


def test_k_nearest_sorted_with_index_tie_break(similarity):
    neighbors = k_nearest(similarity, 2)

    assert neighbors[0] == [(1, 0.5), (2, 0.5)]
    assert neighbors[1] == [(2, 0.9), (0, 0.5)]
    assert neighbors[3] == [(2, 0.3), (0, 0.2)]


def test_k_nearest_never_contains_self(similarity):
    for item, items in k_nearest(similarity, 10).items():
        assert item not in [neighbor for neighbor, _ in items]
        assert len(items) == 3


def test_k_zero_gives_empty_lists(similarity):
    assert k_nearest(similarity, 0) == {0: [], 1: [], 2: [], 3: []}


def test_k_nearest_validation(similarity):
    with pytest.raises(ValueError):
        k_nearest(similarity, -1)
    with pytest.raises(ValueError):
        k_nearest(similarity[:3], 2)


def test_most_frequently_rated_items(rating_matrix):
    assert most_frequently_rated_items(rating_matrix, 2) == [(3, 3), (0, 2)]


def test_highest_rated_items_ignores_unrated(rating_matrix):
    result = highest_rated_items(rating_matrix, 10)

    assert result[0] == (1, 5.0)
    assert [item for item, _ in result] == [1, 0, 2, 3]
    assert result[1][1] == pytest.approx(3.5)


def test_highest_rated_items_skips_items_without_ratings():
    matrix = np.array([[0.0, 2.0], [0.0, 4.0]])
    assert highest_rated_items(matrix, 5) == [(1, 3.0)]


def test_item_based_recommender(rating_matrix):
    recommender = ItemBasedRecommender(k_neighbors=2, exclude_rated=True).fit(rating_matrix)

    assert len(recommender.similar_items(0)) == 2

    # user 2 rated items 2 and 3 only
    recommendations = recommender.recommend_for_user(2, top_n=5)
    assert recommendations
    assert {item for item, _ in recommendations} <= {0, 1}


def test_item_based_recommender_requires_fit():
    with pytest.raises(ValueError):
        ItemBasedRecommender().similar_items(0)
