import numpy as np
import pytest

from recsys.recommendation.factorization import MatrixFactorization, compute_rmse, factorize


@pytest.fixture
def single_rating_matrix():
    # one rated cell per user
    return np.array([
        [5.0, 0.0, 0.0],
        [0.0, 3.0, 0.0],
        [0.0, 0.0, 4.0],
        [2.0, 0.0, 0.0],
    ])


def test_compute_rmse_all_cells_and_observed():
    ratings = np.array([[1.0, 0.0], [0.0, 3.0]])
    predictions = np.zeros((2, 2))

    assert compute_rmse(ratings, predictions) == pytest.approx(np.sqrt(10 / 4))
    assert compute_rmse(ratings, predictions, observed_only=True) == pytest.approx(np.sqrt(5))


def test_compute_rmse_shape_mismatch():
    with pytest.raises(ValueError):
        compute_rmse(np.zeros((2, 2)), np.zeros((2, 3)))


def test_factor_shapes(rating_matrix):
    user_factors, item_factors = factorize(rating_matrix, latent_dim=3, epochs=5, random_state=1)

    assert user_factors.shape == (3, 3)
    assert item_factors.shape == (3, 4)


def test_training_is_reproducible(rating_matrix):
    first = factorize(rating_matrix, latent_dim=2, epochs=20, random_state=7)
    second = factorize(rating_matrix, latent_dim=2, epochs=20, random_state=7)

    np.testing.assert_array_equal(first[0], second[0])
    np.testing.assert_array_equal(first[1], second[1])


def test_rmse_trend_decreases_on_observed_cells(single_rating_matrix):
    model = MatrixFactorization(
        latent_dim=2, epochs=300, report_every=25, rmse_on_observed=True, random_state=0
    ).fit(single_rating_matrix)

    rmses = [rmse for _, rmse in model.history]
    assert [epoch for epoch, _ in model.history][:3] == [0, 25, 50]

    # compare epoch windows, not individual steps
    assert np.mean(rmses[-3:]) < np.mean(rmses[:3])
    assert model.rmse < rmses[0]


def test_predictions_approach_observed_ratings(single_rating_matrix):
    model = MatrixFactorization(
        latent_dim=2, epochs=500, rmse_on_observed=True, random_state=3
    ).fit(single_rating_matrix)

    predicted = model.predict()
    observed = single_rating_matrix > 0
    np.testing.assert_allclose(predicted[observed], single_rating_matrix[observed], atol=1.0)


def test_all_zero_matrix_returns_initial_factors():
    matrix = np.zeros((3, 4))

    user_factors, item_factors = factorize(matrix, latent_dim=2, epochs=10, random_state=0)

    rng = np.random.default_rng(0)
    np.testing.assert_array_equal(user_factors, rng.uniform(0.0, 1.0, size=(3, 2)))
    np.testing.assert_array_equal(item_factors, rng.uniform(0.0, 1.0, size=(2, 4)))


def test_state_transitions(rating_matrix):
    model = MatrixFactorization(latent_dim=2, epochs=3, random_state=0)
    assert model.state == MatrixFactorization.INITIALIZED

    model.fit(rating_matrix)

    assert model.state == MatrixFactorization.CONVERGED
    assert model.history == [(0, model.history[0][1])]


def test_predict_before_fit():
    with pytest.raises(ValueError):
        MatrixFactorization().predict()


@pytest.mark.parametrize("kwargs", [
    {"latent_dim": 0},
    {"learning_rate": 0.0},
    {"regularization": -0.1},
    {"epochs": -1},
    {"report_every": 0},
])
def test_invalid_hyperparameters(kwargs):
    with pytest.raises(ValueError):
        MatrixFactorization(**kwargs)


def test_recommend_skips_rated_items(rating_matrix):
    model = MatrixFactorization(latent_dim=2, epochs=10, random_state=0).fit(rating_matrix)

    # user 1 has not rated item 2
    assert [item for item, _ in model.recommend(rating_matrix, 1, top_n=5)] == [2]


def test_recommend_rejects_matrix_of_other_shape(rating_matrix):
    model = MatrixFactorization(latent_dim=2, epochs=5, random_state=0).fit(rating_matrix)
    wider = np.hstack([rating_matrix, np.zeros((3, 2))])

    with pytest.raises(ValueError):
        model.recommend(wider, 0)


def test_nan_cells_are_treated_as_unrated():
    with_nan = np.array([[5.0, np.nan], [np.nan, 3.0]])
    with_zero = np.array([[5.0, 0.0], [0.0, 3.0]])

    model = MatrixFactorization(latent_dim=2, epochs=30, random_state=3).fit(with_nan)
    reference = MatrixFactorization(latent_dim=2, epochs=30, random_state=3).fit(with_zero)

    assert np.isfinite(model.rmse)
    assert np.isfinite(model.predict()).all()
    np.testing.assert_array_equal(model.predict(), reference.predict())
    assert [item for item, _ in model.recommend(with_nan, 0)] == [1]
